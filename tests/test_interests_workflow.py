import pytest

from tandem_bot.editing.engine import StagedEditor
from tandem_bot.errors import InvalidChoiceError, LimitReachedError, ValidationFailedError
from tandem_bot.workflows.interests import MAX_PRIMARY_INTERESTS, InterestsWorkflow, build_interests_schema


@pytest.fixture
def workflow(database):
    return InterestsWorkflow(database)


@pytest.fixture
def editor(workflow, store):
    return StagedEditor(workflow, store)


def test_schema_is_built_from_the_catalog(workflow):
    schema = workflow.schema

    assert schema.workflow == "interests"
    assert "volunteering" in schema.field("interests").choices
    assert schema.step("category").back_step == "categories"


def test_category_step_offers_only_the_focused_category():
    schema = build_interests_schema({"active": ["sports", "travel"], "social": ["politics"]})
    step = schema.step("category")

    class Focused:
        focus = "active"

    assert list(step.options(Focused())) == ["sports", "travel"]


@pytest.mark.asyncio
async def test_primary_must_be_selected_first(editor, user_id):
    await editor.start(user_id)

    with pytest.raises(InvalidChoiceError):
        await editor.toggle(user_id, "primary", "music")


@pytest.mark.asyncio
async def test_primary_limit_is_enforced(editor, user_id):
    await editor.start(user_id)
    keys = ["music", "games", "books", "science", "travel", "art"]
    for key in keys:
        await editor.toggle(user_id, "interests", key)
    for key in keys[:MAX_PRIMARY_INTERESTS]:
        await editor.toggle(user_id, "primary", key)

    with pytest.raises(LimitReachedError) as excinfo:
        await editor.toggle(user_id, "primary", "art")

    assert excinfo.value.key == "primary_limit_reached"
    assert excinfo.value.limit == MAX_PRIMARY_INTERESTS
    session = await editor.load(user_id)
    assert len(session.current["primary"]) == MAX_PRIMARY_INTERESTS


@pytest.mark.asyncio
async def test_deselecting_an_interest_drops_it_from_primary(editor, user_id):
    await editor.start(user_id)
    await editor.toggle(user_id, "interests", "music")
    await editor.toggle(user_id, "primary", "music")

    session = await editor.toggle(user_id, "interests", "music")

    assert session.current == {"interests": [], "primary": []}
    assert session.changes[-1].side_effects == {"primary": ["music"]}

    session = await editor.undo(user_id)
    assert session.current == {"interests": ["music"], "primary": ["music"]}


@pytest.mark.asyncio
async def test_commit_stores_selection_and_primary_flags(editor, database, user_id):
    await editor.start(user_id)
    for key in ("cooking", "anime", "history"):
        await editor.toggle(user_id, "interests", key)
    await editor.toggle(user_id, "primary", "anime")

    await editor.commit(user_id)

    stored = database.get_user_interests(user_id)
    assert [interest.key for interest in stored] == ["cooking", "anime", "history"]
    assert [interest.key for interest in stored if interest.is_primary] == ["anime"]

    session = await editor.start(user_id)
    assert session.current == {"interests": ["cooking", "anime", "history"], "primary": ["anime"]}


@pytest.mark.asyncio
async def test_committing_an_empty_selection_clears_interests(editor, database, user_id):
    await editor.start(user_id)
    await editor.toggle(user_id, "interests", "music")
    await editor.commit(user_id)

    await editor.start(user_id)
    await editor.toggle(user_id, "interests", "music")
    await editor.commit(user_id)

    assert database.get_user_interests(user_id) == []


def test_primary_subset_rule(workflow):
    rule = workflow.rules[0]

    assert rule.check({"interests": ["music"], "primary": ["music"]})
    assert not rule.check({"interests": [], "primary": ["music"]})


@pytest.mark.asyncio
async def test_validation_rejects_too_many_primary_from_storage(editor, database, user_id, workflow):
    keys = ["music", "games", "books", "science", "travel", "art"]
    ids = [workflow._ids[key] for key in keys]
    database.save_user_interests(user_id, ids, ids)
    await editor.start(user_id)

    with pytest.raises(ValidationFailedError) as excinfo:
        await editor.commit(user_id)

    assert excinfo.value.key == "primary_limit_reached"
    assert excinfo.value.params == {"limit": MAX_PRIMARY_INTERESTS}
