import json
from datetime import datetime, timezone

import pytest

from tandem_bot.editing.session import (
    Change,
    EditSession,
    SESSION_FORMAT_VERSION,
    dumps,
    loads,
    session_to_dict,
)
from tandem_bot.errors import SessionCorruptedError
from tandem_bot.workflows.availability import AVAILABILITY_SCHEMA, DEFAULT_VALUES

STARTED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_session() -> EditSession:
    session = EditSession.begin(42, AVAILABILITY_SCHEMA, DEFAULT_VALUES, now=STARTED)
    session.current["day_type"] = "specific"
    session.current["time_slots"] = ["morning", "evening"]
    session.changes.append(
        Change(
            field="day_type",
            old_value="any",
            new_value="specific",
            timestamp=STARTED,
            side_effects={"specific_days": ["monday"]},
        )
    )
    session.current_step = "specific_days"
    return session


def test_round_trip_preserves_every_field():
    session = make_session()

    restored = loads(dumps(session), AVAILABILITY_SCHEMA)

    assert restored == session
    assert restored.current["specific_days"] == []
    assert restored.session_start.tzinfo is not None


def test_begin_copies_values_instead_of_sharing_them():
    values = {**DEFAULT_VALUES, "communication_styles": ["text"]}
    session = EditSession.begin(1, AVAILABILITY_SCHEMA, values, now=STARTED)

    session.current["communication_styles"].append("voice_msg")

    assert session.original["communication_styles"] == ["text"]
    assert values["communication_styles"] == ["text"]


def test_serialized_form_is_versioned():
    payload = json.loads(dumps(make_session()))

    assert payload["version"] == SESSION_FORMAT_VERSION
    assert payload["workflow"] == "availability"
    assert payload["changes"][0]["side_effects"] == {"specific_days": ["monday"]}


def _corrupt(**overrides):
    payload = session_to_dict(make_session())
    payload.update(overrides)
    return json.dumps(payload)


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "[]",
        _corrupt(version=2),
        _corrupt(workflow="languages"),
        _corrupt(user_id="42"),
        _corrupt(current_step="nowhere"),
        _corrupt(changes={}),
        _corrupt(changes=[{"field": "day_type"}]),
        _corrupt(changes=[{"field": "unknown", "old_value": "", "new_value": "", "timestamp": STARTED.isoformat()}]),
        _corrupt(session_start="yesterday"),
        _corrupt(current={"day_type": "any"}),
        _corrupt(current={**DEFAULT_VALUES, "time_slots": "morning"}),
    ],
)
def test_corrupted_payloads_are_rejected(raw):
    with pytest.raises(SessionCorruptedError):
        loads(raw, AVAILABILITY_SCHEMA)


def test_selected_normalises_single_values():
    session = make_session()

    assert session.selected("time_slots") == ["morning", "evening"]
    assert session.selected("day_type") == ["specific"]
