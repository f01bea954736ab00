from __future__ import annotations

import logging
from typing import Mapping, Sequence

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
from tandem_bot.errors import InvalidChoiceError, LimitReachedError

LOGGER = logging.getLogger(__name__)

MAX_PRIMARY_INTERESTS = 5


def build_interests_schema(catalog: Mapping[str, Sequence[str]]) -> EditSchema:
    """Build the editor schema for a category -> interest keys catalog."""
    keys = tuple(key for interests in catalog.values() for key in interests)
    categories = tuple(catalog)
    by_category = {category: tuple(interests) for category, interests in catalog.items()}

    def category_links(_session: EditSession) -> Sequence[StepLink]:
        return [StepLink("category", f"category_{category}", focus=category) for category in categories]

    def category_options(session: EditSession) -> Sequence[str]:
        return by_category.get(session.focus or "", ())

    def primary_options(session: EditSession) -> Sequence[str]:
        return session.selected("interests")

    return EditSchema(
        workflow="interests",
        tag="intr",
        title_key="interests_edit_title",
        fields=(
            FieldSpec("interests", FieldKind.MULTI, keys, "field_interests", option_prefix="interest_", icon="🎯"),
            FieldSpec("primary", FieldKind.MULTI, keys, "field_primary_interests", option_prefix="interest_", icon="⭐"),
        ),
        steps=(
            StepSpec(
                "menu",
                "interests_edit_title",
                links=static_links(
                    StepLink("categories", "edit_interests_button", icon="🎯"),
                    StepLink("primary", "edit_primary_interests_button", icon="⭐"),
                ),
            ),
            StepSpec("categories", "select_interest_category", columns=2, links=category_links),
            StepSpec(
                "category",
                "select_interests",
                field="interests",
                columns=2,
                back_step="categories",
                focus_prefix="category_",
                options=category_options,
            ),
            StepSpec("primary", "select_primary_interests", field="primary", columns=2, options=primary_options),
        ),
        summary_fields=("interests", "primary"),
    )


INTEREST_RULES = (
    Rule(
        "primary_not_selected",
        lambda values: set(values["primary"]) <= set(values["interests"]),
    ),
    Rule(
        "primary_limit_reached",
        lambda values: len(values["primary"]) <= MAX_PRIMARY_INTERESTS,
        params={"limit": MAX_PRIMARY_INTERESTS},
    ),
)


class InterestsWorkflow(EditWorkflow):
    rules = INTEREST_RULES

    def __init__(self, database: Database) -> None:
        self.database = database
        catalog: dict[str, list[str]] = {category: [] for category in database.list_interest_categories()}
        self._ids: dict[str, int] = {}
        for interest in database.list_interests():
            catalog.setdefault(interest.category_key, []).append(interest.key)
            self._ids[interest.key] = interest.interest_id
        self.schema = build_interests_schema(catalog)

    def before_toggle(self, session: EditSession, field: str, value: str) -> None:
        if field != "primary":
            return
        primary = session.selected("primary")
        if value in primary:
            return
        if value not in session.selected("interests"):
            raise InvalidChoiceError(f"{value!r} must be selected before it can be primary")
        if len(primary) >= MAX_PRIMARY_INTERESTS:
            raise LimitReachedError("primary_limit_reached", MAX_PRIMARY_INTERESTS)

    def cascade(self, session: EditSession, field: str, value: str) -> dict[str, FieldValue]:
        if field != "interests" or value in session.selected("interests"):
            return {}
        primary = session.selected("primary")
        if value not in primary:
            return {}
        session.current["primary"] = [item for item in primary if item != value]
        return {"primary": primary}

    def load_values(self, user_id: int) -> dict[str, FieldValue]:
        selected = self.database.get_user_interests(user_id)
        return {
            "interests": [interest.key for interest in selected],
            "primary": [interest.key for interest in selected if interest.is_primary],
        }

    def write_values(self, user_id: int, values: Mapping[str, FieldValue]) -> None:
        interest_ids = [self._ids[key] for key in values["interests"]]
        primary_ids = [self._ids[key] for key in values["primary"]]
        self.database.save_user_interests(user_id, interest_ids, primary_ids)


__all__ = [
    "INTEREST_RULES",
    "InterestsWorkflow",
    "MAX_PRIMARY_INTERESTS",
    "build_interests_schema",
]
