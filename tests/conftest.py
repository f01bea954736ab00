from __future__ import annotations

from functools import partial

import pytest

from tandem_bot.database import Database
from tandem_bot.editing.rendering import Labels
from tandem_bot.editing.store import MemorySessionStore
from tandem_bot.services.localization import Localizer


class ManualClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(clock: ManualClock) -> MemorySessionStore:
    return MemorySessionStore(clock=clock)


@pytest.fixture
def database(tmp_path) -> Database:
    return Database(tmp_path / "tandem.sqlite")


@pytest.fixture
def user_id(database: Database) -> int:
    return database.upsert_user(telegram_id=1001, username="alice", first_name="Alice")


@pytest.fixture
def localizer() -> Localizer:
    return Localizer()


@pytest.fixture
def labels(localizer: Localizer) -> Labels:
    return Labels(partial(localizer.get, "en"))
