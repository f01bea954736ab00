from __future__ import annotations

from typing import Mapping, Optional

from tandem_bot.database import Database
from tandem_bot.editing.engine import EditWorkflow
from tandem_bot.editing.schema import (
    EditSchema,
    FieldKind,
    FieldSpec,
    FieldValue,
    Rule,
    StepLink,
    StepSpec,
    static_links,
)
from tandem_bot.editing.session import EditSession

LANGUAGES = ("en", "ru", "es", "zh")
LEVELS = ("beginner", "elementary", "intermediate", "upper_intermediate", "advanced")

# field -> the field that must hold a different language
_COUNTERPART = {"native_language": "target_language", "target_language": "native_language"}

LANGUAGES_SCHEMA = EditSchema(
    workflow="languages",
    tag="lang",
    title_key="languages_edit_title",
    fields=(
        FieldSpec("native_language", FieldKind.SINGLE, LANGUAGES, "field_native_language", option_prefix="language_", icon="🏠"),
        FieldSpec("target_language", FieldKind.SINGLE, LANGUAGES, "field_target_language", option_prefix="language_", icon="📚"),
        FieldSpec("target_level", FieldKind.SINGLE, LEVELS, "field_target_level", option_prefix="level_", icon="📊"),
    ),
    steps=(
        StepSpec(
            "menu",
            "languages_edit_title",
            links=static_links(
                StepLink("native", "edit_native_language_button", icon="🏠"),
                StepLink("target", "edit_target_language_button", icon="📚"),
                StepLink("level", "edit_level_button", icon="📊"),
            ),
        ),
        StepSpec("native", "select_native_language", field="native_language", columns=2),
        StepSpec("target", "select_target_language", field="target_language", columns=2),
        StepSpec("level", "select_level", field="target_level"),
    ),
    summary_fields=("native_language", "target_language", "target_level"),
)

LANGUAGE_RULES = (
    Rule(
        "languages_required",
        lambda values: bool(values["native_language"]) and bool(values["target_language"]),
    ),
    Rule("languages_must_differ", lambda values: values["native_language"] != values["target_language"]),
    Rule("invalid_level", lambda values: values["target_level"] in LEVELS),
)


def _text(value: Optional[str]) -> str:
    return value or ""


class LanguagesWorkflow(EditWorkflow):
    schema = LANGUAGES_SCHEMA
    rules = LANGUAGE_RULES

    def __init__(self, database: Database) -> None:
        self.database = database

    def cascade(self, session: EditSession, field: str, value: str) -> dict[str, FieldValue]:
        other = _COUNTERPART.get(field)
        if other is None or session.current[other] != value:
            return {}
        previous = session.current[other]
        session.current[other] = ""
        return {other: previous}

    def load_values(self, user_id: int) -> dict[str, FieldValue]:
        user = self.database.get_user(user_id)
        if user is None:
            return self.schema.empty_values()
        return {
            "native_language": _text(user.native_language),
            "target_language": _text(user.target_language),
            "target_level": _text(user.target_level),
        }

    def write_values(self, user_id: int, values: Mapping[str, FieldValue]) -> None:
        self.database.update_languages(
            user_id,
            native_language=str(values["native_language"]) or None,
            target_language=str(values["target_language"]) or None,
            target_level=str(values["target_level"]) or None,
        )


__all__ = ["LANGUAGES", "LANGUAGE_RULES", "LANGUAGES_SCHEMA", "LEVELS", "LanguagesWorkflow"]
