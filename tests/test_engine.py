import sqlite3
from datetime import datetime, timezone

import pytest

from tandem_bot.editing.engine import EditWorkflow, StagedEditor, toggled
from tandem_bot.editing.schema import EditSchema, FieldKind, FieldSpec, Rule, StepSpec
from tandem_bot.errors import (
    InvalidChoiceError,
    NothingToUndoError,
    PersistenceError,
    SessionNotFoundError,
    UnknownStepError,
    ValidationFailedError,
)

SCHEMA = EditSchema(
    workflow="colors",
    tag="col",
    title_key="colors_title",
    fields=(
        FieldSpec("mode", FieldKind.SINGLE, ("plain", "fancy"), "field_mode", resets={"fancy": ("tags",)}),
        FieldSpec("tags", FieldKind.MULTI, ("a", "b", "c"), "field_tags"),
    ),
    steps=(
        StepSpec("menu", "colors_title"),
        StepSpec("mode", "pick_mode", field="mode", branches={"fancy": "tags"}),
        StepSpec("tags", "pick_tags", field="tags", back_step="mode"),
    ),
    summary_fields=("mode", "tags"),
)


class RecordingWorkflow(EditWorkflow):
    schema = SCHEMA
    rules = (Rule("need_tags", lambda values: bool(values["tags"])),)

    def __init__(self) -> None:
        self.stored = {"mode": "plain", "tags": ["a"]}
        self.writes = []
        self.fail_write = False
        self.fail_after_commit = False
        self.after_commit_calls = 0

    def load_values(self, user_id):
        return {"mode": self.stored["mode"], "tags": list(self.stored["tags"])}

    def write_values(self, user_id, values):
        if self.fail_write:
            raise sqlite3.OperationalError("disk I/O error")
        self.writes.append((user_id, dict(values)))

    def after_commit(self, user_id):
        self.after_commit_calls += 1
        if self.fail_after_commit:
            raise RuntimeError("status update failed")


def fixed_clock():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def workflow():
    return RecordingWorkflow()


@pytest.fixture
def editor(workflow, store):
    return StagedEditor(workflow, store, ttl=60, clock=fixed_clock)


def test_toggled_adds_and_removes_keeping_order():
    assert toggled(["a"], "b") == ["a", "b"]
    assert toggled(["a", "b", "c"], "b") == ["a", "c"]


@pytest.mark.asyncio
async def test_start_copies_permanent_values(editor, workflow):
    session = await editor.start(5)

    assert session.current_step == "menu"
    assert session.original == {"mode": "plain", "tags": ["a"]}
    assert session.current == session.original
    assert session.current is not session.original
    assert (await editor.load(5)) == session


@pytest.mark.asyncio
async def test_starting_again_replaces_the_session(editor):
    await editor.start(5)
    await editor.toggle(5, "tags", "b")

    session = await editor.start(5)

    assert session.changes == []
    assert session.current["tags"] == ["a"]


@pytest.mark.asyncio
async def test_toggle_twice_restores_the_set_and_logs_both(editor):
    await editor.start(5)
    await editor.toggle(5, "tags", "b")
    session = await editor.toggle(5, "tags", "b")

    assert session.current["tags"] == ["a"]
    assert len(session.changes) == 2
    assert session.changes[0].old_value == ["a"]
    assert session.changes[0].new_value == ["a", "b"]


@pytest.mark.asyncio
async def test_invalid_choice_leaves_session_untouched(editor):
    await editor.start(5)

    with pytest.raises(InvalidChoiceError):
        await editor.toggle(5, "tags", "z")
    with pytest.raises(InvalidChoiceError):
        await editor.toggle(5, "mode", "plain")
    with pytest.raises(InvalidChoiceError):
        await editor.select(5, "mode", "neon")

    session = await editor.load(5)
    assert session.changes == []


@pytest.mark.asyncio
async def test_select_applies_resets_and_branches(editor):
    await editor.start(5)
    await editor.open_step(5, "mode")

    session = await editor.select(5, "mode", "fancy")

    assert session.current == {"mode": "fancy", "tags": []}
    assert session.current_step == "tags"
    assert session.changes[-1].side_effects == {"tags": ["a"]}


@pytest.mark.asyncio
async def test_select_without_branch_returns_to_back_step(editor):
    await editor.start(5)
    await editor.open_step(5, "mode")

    session = await editor.select(5, "mode", "plain")

    assert session.current_step == "menu"
    assert len(session.changes) == 1


@pytest.mark.asyncio
async def test_undo_restores_value_and_cascaded_reset(editor):
    await editor.start(5)
    await editor.open_step(5, "mode")
    await editor.select(5, "mode", "fancy")

    session = await editor.undo(5)

    assert session.current == {"mode": "plain", "tags": ["a"]}
    assert session.changes == []
    assert session.current_step == "menu"


@pytest.mark.asyncio
async def test_undo_without_changes_raises(editor):
    await editor.start(5)

    with pytest.raises(NothingToUndoError):
        await editor.undo(5)


@pytest.mark.asyncio
async def test_unknown_step_is_rejected(editor):
    await editor.start(5)

    with pytest.raises(UnknownStepError):
        await editor.open_step(5, "nowhere")


@pytest.mark.asyncio
async def test_missing_session_raises_not_found(editor):
    with pytest.raises(SessionNotFoundError):
        await editor.toggle(5, "tags", "b")


@pytest.mark.asyncio
async def test_session_expires_after_ttl(editor, clock):
    await editor.start(5)
    clock.advance(61)

    with pytest.raises(SessionNotFoundError):
        await editor.load(5)


@pytest.mark.asyncio
async def test_failed_validation_never_writes(editor, workflow):
    await editor.start(5)
    await editor.toggle(5, "tags", "a")
    before = await editor.load(5)

    with pytest.raises(ValidationFailedError) as excinfo:
        await editor.commit(5)

    assert excinfo.value.key == "need_tags"
    assert workflow.writes == []
    assert (await editor.load(5)) == before


@pytest.mark.asyncio
async def test_commit_writes_current_values_and_deletes_session(editor, workflow):
    await editor.start(5)
    await editor.toggle(5, "tags", "c")

    session = await editor.commit(5)

    assert workflow.writes == [(5, {"mode": "plain", "tags": ["a", "c"]})]
    assert workflow.after_commit_calls == 1
    assert len(session.changes) == 1
    assert await editor.find(5) is None


@pytest.mark.asyncio
async def test_write_failure_is_wrapped_and_session_kept(editor, workflow):
    await editor.start(5)
    workflow.fail_write = True

    with pytest.raises(PersistenceError) as excinfo:
        await editor.commit(5)

    assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)
    assert await editor.find(5) is not None
    assert workflow.after_commit_calls == 0


@pytest.mark.asyncio
async def test_post_commit_failure_is_only_logged(editor, workflow, caplog):
    await editor.start(5)
    workflow.fail_after_commit = True

    session = await editor.commit(5)

    assert session.user_id == 5
    assert workflow.writes
    assert await editor.find(5) is None
    assert "Post-commit update failed" in caplog.text


@pytest.mark.asyncio
async def test_abort_discards_session_without_writing(editor, workflow):
    await editor.start(5)
    await editor.toggle(5, "tags", "b")
    await editor.toggle(5, "tags", "c")
    await editor.toggle(5, "tags", "a")

    discarded = await editor.abort(5)

    assert discarded is not None
    assert len(discarded.changes) == 3
    assert workflow.writes == []
    assert await editor.find(5) is None
    assert await editor.abort(5) is None


@pytest.mark.asyncio
async def test_sessions_are_isolated_per_user(editor):
    await editor.start(5)
    await editor.start(6)
    await editor.toggle(5, "tags", "b")

    assert (await editor.load(6)).current["tags"] == ["a"]
