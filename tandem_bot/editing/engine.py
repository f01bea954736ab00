"""Staged editing of profile sections.

Every editor in the bot works the same way: the permanent values are copied
into an :class:`~tandem_bot.editing.session.EditSession`, the user mutates the
working copy one field at a time, and nothing reaches the database until the
user presses *save*.  :class:`StagedEditor` implements that cycle once; an
:class:`EditWorkflow` supplies the schema, the commit rules and the database
adapter for one section of the profile.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence

from tandem_bot.editing.schema import MENU_STEP, EditSchema, FieldSpec, FieldValue, Rule
from tandem_bot.editing.session import Change, EditSession, dumps, loads, utcnow
from tandem_bot.editing.store import SESSION_TTL_SECONDS, SessionStore, make_session_key
from tandem_bot.errors import (
    InvalidChoiceError,
    NothingToUndoError,
    PersistenceError,
    SessionCorruptedError,
    SessionNotFoundError,
    ValidationFailedError,
)

LOGGER = logging.getLogger(__name__)


def toggled(selected: Sequence[str], value: str) -> list[str]:
    """Remove ``value`` when present, append it otherwise."""
    if value in selected:
        return [item for item in selected if item != value]
    return [*selected, value]


def first_failure(rules: Sequence[Rule], values: Mapping[str, FieldValue]) -> Optional[Rule]:
    for rule in rules:
        if not rule.check(values):
            return rule
    return None


class EditWorkflow:
    """Per-section configuration for :class:`StagedEditor`.

    Subclasses set :attr:`schema` and :attr:`rules` and implement the two
    storage hooks.  ``before_toggle`` and ``cascade`` are optional.
    """

    schema: EditSchema
    rules: Sequence[Rule] = ()

    @property
    def name(self) -> str:
        return self.schema.workflow

    def load_values(self, user_id: int) -> dict[str, FieldValue]:
        raise NotImplementedError

    def write_values(self, user_id: int, values: Mapping[str, FieldValue]) -> None:
        raise NotImplementedError

    def after_commit(self, user_id: int) -> None:
        return None

    def before_toggle(self, session: EditSession, field: str, value: str) -> None:
        """Raise an :class:`~tandem_bot.errors.EditError` to reject a toggle."""
        return None

    def cascade(self, session: EditSession, field: str, value: str) -> dict[str, FieldValue]:
        """Adjust dependent fields after ``field`` changed.

        Returns the previous value of every field it touched.
        """
        return {}


class StagedEditor:
    def __init__(
        self,
        workflow: EditWorkflow,
        store: SessionStore,
        *,
        ttl: int = SESSION_TTL_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.workflow = workflow
        self.store = store
        self.ttl = ttl
        self._clock = clock

    @property
    def schema(self) -> EditSchema:
        return self.workflow.schema

    def session_key(self, user_id: int) -> str:
        return make_session_key(self.schema.workflow, user_id)

    # Storage -------------------------------------------------------------
    async def find(self, user_id: int) -> Optional[EditSession]:
        raw = await self.store.get(self.session_key(user_id))
        if raw is None:
            return None
        return loads(raw, self.schema)

    async def load(self, user_id: int) -> EditSession:
        session = await self.find(user_id)
        if session is None:
            raise SessionNotFoundError(user_id, self.schema.workflow)
        return session

    async def save(self, session: EditSession) -> None:
        await self.store.set(self.session_key(session.user_id), dumps(session), self.ttl)

    async def delete(self, user_id: int) -> None:
        await self.store.delete(self.session_key(user_id))

    # Navigation ----------------------------------------------------------
    async def start(self, user_id: int) -> EditSession:
        values = self.workflow.load_values(user_id)
        session = EditSession.begin(user_id, self.schema, values, now=self._clock())
        await self.save(session)
        LOGGER.info("Started %s edit session for user %s", self.schema.workflow, user_id)
        return session

    async def open_step(self, user_id: int, step: str, focus: Optional[str] = None) -> EditSession:
        self.schema.step(step)
        session = await self.load(user_id)
        session.current_step = step
        session.focus = focus
        session.touch(self._clock())
        await self.save(session)
        return session

    # Mutations -----------------------------------------------------------
    def _field_for(self, name: str, *, multi: bool) -> FieldSpec:
        spec = self.schema.field(name)
        if spec.multi is not multi:
            kind = "multi-select" if multi else "single-select"
            raise InvalidChoiceError(f"{name!r} is not a {kind} field")
        return spec

    def _record(
        self,
        session: EditSession,
        field: str,
        old_value: FieldValue,
        new_value: FieldValue,
        side_effects: dict[str, FieldValue],
    ) -> None:
        now = self._clock()
        session.changes.append(
            Change(
                field=field,
                old_value=old_value,
                new_value=new_value,
                timestamp=now,
                side_effects=side_effects,
            )
        )
        session.touch(now)
        LOGGER.info(
            "User %s changed %s.%s: %r -> %r",
            session.user_id,
            session.workflow,
            field,
            old_value,
            new_value,
        )

    async def toggle(self, user_id: int, field: str, value: str) -> EditSession:
        spec = self._field_for(field, multi=True)
        if value not in spec.choices:
            raise InvalidChoiceError(f"{value!r} is not a valid {field}")

        session = await self.load(user_id)
        self.workflow.before_toggle(session, field, value)

        old_value = session.selected(field)
        new_value = toggled(old_value, value)
        session.current[field] = new_value
        side_effects = self.workflow.cascade(session, field, value)
        self._record(session, field, old_value, list(new_value), side_effects)
        await self.save(session)
        return session

    async def select(self, user_id: int, field: str, value: str) -> EditSession:
        spec = self._field_for(field, multi=False)
        if value not in spec.choices:
            raise InvalidChoiceError(f"{value!r} is not a valid {field}")

        session = await self.load(user_id)
        old_value = session.current[field]
        session.current[field] = value

        side_effects: dict[str, FieldValue] = {}
        for reset_name in spec.resets.get(value, ()):
            reset_spec = self.schema.field(reset_name)
            side_effects[reset_name] = reset_spec.copy_value(session.current[reset_name])
            session.current[reset_name] = reset_spec.empty_value()
        for name, previous in self.workflow.cascade(session, field, value).items():
            side_effects.setdefault(name, previous)

        self._record(session, field, old_value, value, side_effects)

        step = self.schema.step(session.current_step)
        if step.field == field:
            session.current_step = step.branches.get(value, step.back_step)
            session.focus = None
        await self.save(session)
        return session

    async def undo(self, user_id: int) -> EditSession:
        session = await self.load(user_id)
        if not session.changes:
            raise NothingToUndoError("No changes to undo")

        change = session.changes.pop()
        session.current[change.field] = self.schema.field(change.field).copy_value(change.old_value)
        for name, previous in change.side_effects.items():
            session.current[name] = self.schema.field(name).copy_value(previous)
        session.current_step = MENU_STEP
        session.focus = None
        session.touch(self._clock())
        await self.save(session)
        LOGGER.info(
            "User %s undid %s.%s", user_id, session.workflow, change.field
        )
        return session

    # Commit / abort --------------------------------------------------------
    def validate(self, values: Mapping[str, FieldValue]) -> None:
        failure = first_failure(self.workflow.rules, values)
        if failure is not None:
            raise ValidationFailedError(failure.error_key, **failure.params)

    async def commit(self, user_id: int) -> EditSession:
        session = await self.load(user_id)
        self.validate(session.current)

        try:
            self.workflow.write_values(user_id, session.current)
        except Exception as exc:
            LOGGER.error(
                "Failed to save %s for user %s: %s", session.workflow, user_id, exc
            )
            raise PersistenceError(f"Could not save {session.workflow} for user {user_id}") from exc

        try:
            self.workflow.after_commit(user_id)
        except Exception:
            LOGGER.exception(
                "Post-commit update failed for %s of user %s", session.workflow, user_id
            )

        await self.delete(user_id)
        LOGGER.info(
            "User %s committed %s with %d change(s)",
            user_id,
            session.workflow,
            len(session.changes),
        )
        return session

    async def abort(self, user_id: int) -> Optional[EditSession]:
        key = self.session_key(user_id)
        raw = await self.store.get(key)
        await self.store.delete(key)
        if raw is None:
            return None
        LOGGER.info("User %s cancelled %s edit", user_id, self.schema.workflow)
        try:
            return loads(raw, self.schema)
        except SessionCorruptedError:
            LOGGER.warning(
                "Discarded an unreadable %s session for user %s", self.schema.workflow, user_id
            )
            return None


__all__ = ["EditWorkflow", "StagedEditor", "first_failure", "toggled"]
