import pytest

from tandem_bot.editing.engine import StagedEditor
from tandem_bot.errors import ValidationFailedError
from tandem_bot.workflows.languages import LanguagesWorkflow


@pytest.fixture
def editor(database, store):
    return StagedEditor(LanguagesWorkflow(database), store)


@pytest.mark.asyncio
async def test_unset_languages_load_as_empty(editor, user_id):
    session = await editor.start(user_id)

    assert session.current == {"native_language": "", "target_language": "", "target_level": ""}


@pytest.mark.asyncio
async def test_choosing_the_same_language_clears_the_counterpart(editor, database, user_id):
    database.update_languages(user_id, native_language="ru", target_language="en", target_level="advanced")
    await editor.start(user_id)

    session = await editor.select(user_id, "target_language", "ru")

    assert session.current["native_language"] == ""
    assert session.changes[-1].side_effects == {"native_language": "ru"}

    session = await editor.undo(user_id)
    assert session.current["native_language"] == "ru"
    assert session.current["target_language"] == "en"


@pytest.mark.asyncio
async def test_both_languages_are_required(editor, user_id):
    await editor.start(user_id)
    await editor.select(user_id, "native_language", "en")
    await editor.select(user_id, "target_level", "beginner")

    with pytest.raises(ValidationFailedError) as excinfo:
        await editor.commit(user_id)

    assert excinfo.value.key == "languages_required"


@pytest.mark.asyncio
async def test_level_is_required(editor, user_id):
    await editor.start(user_id)
    await editor.select(user_id, "native_language", "en")
    await editor.select(user_id, "target_language", "es")

    with pytest.raises(ValidationFailedError) as excinfo:
        await editor.commit(user_id)

    assert excinfo.value.key == "invalid_level"


@pytest.mark.asyncio
async def test_commit_writes_languages(editor, database, user_id):
    await editor.start(user_id)
    await editor.open_step(user_id, "native")
    session = await editor.select(user_id, "native_language", "zh")
    assert session.current_step == "menu"
    await editor.select(user_id, "target_language", "en")
    await editor.select(user_id, "target_level", "intermediate")

    await editor.commit(user_id)

    user = database.get_user(user_id)
    assert (user.native_language, user.target_language, user.target_level) == ("zh", "en", "intermediate")
