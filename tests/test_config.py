from pathlib import Path

import pytest

from tandem_bot.config import BotConfig
from tandem_bot.editing.store import SESSION_TTL_SECONDS

ENV_VARS = (
    "BOT_TOKEN",
    "BOT_ADMIN_IDS",
    "BOT_DATABASE",
    "REDIS_URL",
    "EDIT_SESSION_TTL",
    "DEFAULT_LANGUAGE",
    "LOCALES_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_token_is_an_error():
    with pytest.raises(RuntimeError):
        BotConfig.load(env_path=None)


def test_defaults(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")

    config = BotConfig.load(env_path=None)

    assert config.admin_ids == []
    assert config.database_path == Path("data/tandem.sqlite")
    assert config.redis_url is None
    assert config.session_ttl == SESSION_TTL_SECONDS
    assert config.default_language == "en"
    assert config.locales_dir is None


def test_values_are_read_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("BOT_ADMIN_IDS", "1, 2,oops,3")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("EDIT_SESSION_TTL", "600")
    monkeypatch.setenv("LOCALES_DIR", str(tmp_path))

    config = BotConfig.load(env_path=None)

    assert config.admin_ids == [1, 2, 3]
    assert config.redis_url == "redis://localhost:6379/0"
    assert config.session_ttl == 600
    assert config.locales_dir == tmp_path


@pytest.mark.parametrize("ttl", ["soon", "0", "-5"])
def test_invalid_ttl_is_an_error(monkeypatch, ttl):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("EDIT_SESSION_TTL", ttl)

    with pytest.raises(RuntimeError):
        BotConfig.load(env_path=None)
