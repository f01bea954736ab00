from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from tandem_bot.editing.schema import MENU_STEP, EditSchema, FieldValue
from tandem_bot.errors import SessionCorruptedError

SESSION_FORMAT_VERSION = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Change:
    field: str
    old_value: FieldValue
    new_value: FieldValue
    timestamp: datetime
    # fields touched by a cascade -> their value before this change
    side_effects: dict[str, FieldValue] = field(default_factory=dict)


@dataclass(slots=True)
class EditSession:
    """In-progress edit for one user and one workflow."""

    user_id: int
    workflow: str
    original: dict[str, FieldValue]
    current: dict[str, FieldValue]
    session_start: datetime
    last_activity: datetime
    changes: list[Change] = field(default_factory=list)
    current_step: str = MENU_STEP
    focus: Optional[str] = None

    @classmethod
    def begin(
        cls,
        user_id: int,
        schema: EditSchema,
        values: dict[str, FieldValue],
        *,
        now: Optional[datetime] = None,
    ) -> "EditSession":
        started = now or utcnow()
        return cls(
            user_id=user_id,
            workflow=schema.workflow,
            original=schema.copy_values(values),
            current=schema.copy_values(values),
            session_start=started,
            last_activity=started,
        )

    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity = now or utcnow()

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def selected(self, field_name: str) -> list[str]:
        value = self.current.get(field_name, [])
        return list(value) if isinstance(value, list) else ([value] if value else [])


def _change_to_dict(change: Change) -> dict[str, Any]:
    return {
        "field": change.field,
        "old_value": change.old_value,
        "new_value": change.new_value,
        "timestamp": change.timestamp.isoformat(),
        "side_effects": change.side_effects,
    }


def session_to_dict(session: EditSession) -> dict[str, Any]:
    return {
        "version": SESSION_FORMAT_VERSION,
        "user_id": session.user_id,
        "workflow": session.workflow,
        "original": session.original,
        "current": session.current,
        "changes": [_change_to_dict(change) for change in session.changes],
        "current_step": session.current_step,
        "focus": session.focus,
        "session_start": session.session_start.isoformat(),
        "last_activity": session.last_activity.isoformat(),
    }


def _parse_timestamp(raw: Any, name: str) -> datetime:
    if not isinstance(raw, str):
        raise SessionCorruptedError(f"{name} must be an ISO timestamp")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise SessionCorruptedError(f"{name} is not a valid timestamp: {raw!r}") from exc


def _change_from_dict(raw: Any, schema: EditSchema) -> Change:
    if not isinstance(raw, dict):
        raise SessionCorruptedError("Change entries must be objects")
    name = raw.get("field")
    if not isinstance(name, str):
        raise SessionCorruptedError("Change entry without a field name")
    side_effects = raw.get("side_effects", {})
    if not isinstance(side_effects, dict):
        raise SessionCorruptedError("Change side effects must be an object")
    return Change(
        field=name,
        old_value=schema.coerce_field_value(name, raw.get("old_value")),
        new_value=schema.coerce_field_value(name, raw.get("new_value")),
        timestamp=_parse_timestamp(raw.get("timestamp"), "timestamp"),
        side_effects={
            key: schema.coerce_field_value(key, value) for key, value in side_effects.items()
        },
    )


def session_from_dict(payload: Any, schema: EditSchema) -> EditSession:
    if not isinstance(payload, dict):
        raise SessionCorruptedError("Session payload must be an object")
    version = payload.get("version")
    if version != SESSION_FORMAT_VERSION:
        raise SessionCorruptedError(f"Unsupported session format version: {version!r}")
    if payload.get("workflow") != schema.workflow:
        raise SessionCorruptedError(
            f"Session belongs to {payload.get('workflow')!r}, expected {schema.workflow!r}"
        )

    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise SessionCorruptedError("user_id must be an integer")

    changes = payload.get("changes")
    if not isinstance(changes, list):
        raise SessionCorruptedError("changes must be a list")

    current_step = payload.get("current_step")
    if not isinstance(current_step, str) or not schema.has_step(current_step):
        raise SessionCorruptedError(f"Unknown step: {current_step!r}")

    focus = payload.get("focus")
    if focus is not None and not isinstance(focus, str):
        raise SessionCorruptedError("focus must be a string or null")

    return EditSession(
        user_id=user_id,
        workflow=schema.workflow,
        original=schema.coerce_values(payload.get("original")),
        current=schema.coerce_values(payload.get("current")),
        changes=[_change_from_dict(entry, schema) for entry in changes],
        current_step=current_step,
        focus=focus,
        session_start=_parse_timestamp(payload.get("session_start"), "session_start"),
        last_activity=_parse_timestamp(payload.get("last_activity"), "last_activity"),
    )


def dumps(session: EditSession) -> str:
    return json.dumps(session_to_dict(session), ensure_ascii=False)


def loads(raw: str, schema: EditSchema) -> EditSession:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise SessionCorruptedError(f"Session payload is not valid JSON: {exc}") from exc
    return session_from_dict(payload, schema)


__all__ = [
    "Change",
    "EditSession",
    "SESSION_FORMAT_VERSION",
    "dumps",
    "loads",
    "session_from_dict",
    "session_to_dict",
    "utcnow",
]
