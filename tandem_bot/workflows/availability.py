"""Time availability and friendship preferences editor.

Both profile sections are edited on one screen.  They live in two tables, so
saving issues two independent writes: availability first, then preferences.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from tandem_bot.database import Database, FriendshipPreferences, TimeAvailability
from tandem_bot.editing.engine import EditWorkflow
from tandem_bot.editing.schema import (
    EditSchema,
    FieldKind,
    FieldSpec,
    FieldValue,
    Rule,
    StepLink,
    StepSpec,
)
from tandem_bot.editing.session import EditSession

LOGGER = logging.getLogger(__name__)

DAY_TYPES = ("weekdays", "weekends", "any", "specific")
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
TIME_SLOTS = ("morning", "day", "evening", "late")
ACTIVITY_TYPES = ("movies", "games", "casual_chat", "creative", "active", "educational")
COMMUNICATION_STYLES = ("text", "voice_msg", "audio_call", "video_call", "meet_person")
FREQUENCIES = ("multiple_weekly", "weekly", "multiple_monthly", "flexible")

DEFAULT_VALUES: dict[str, FieldValue] = {
    "day_type": "any",
    "specific_days": [],
    "time_slots": [],
    "activity_type": "casual_chat",
    "communication_styles": ["text"],
    "frequency": "weekly",
}


def _menu_links(session: EditSession) -> Sequence[StepLink]:
    links = [StepLink("days", "edit_days_button", icon="📅")]
    if session.current.get("day_type") == "specific":
        links.append(StepLink("specific_days", "select_specific_days_button", icon="🗓"))
    links.extend(
        [
            StepLink("time", "edit_time_button", icon="⏰"),
            StepLink("activity", "edit_activity_button", icon="🎭"),
            StepLink("communication", "edit_communication_button", icon="💬"),
            StepLink("frequency", "edit_frequency_button", icon="🔁"),
        ]
    )
    return links


AVAILABILITY_SCHEMA = EditSchema(
    workflow="availability",
    tag="avail",
    title_key="availability_edit_title",
    fields=(
        FieldSpec(
            "day_type",
            FieldKind.SINGLE,
            DAY_TYPES,
            "field_day_type",
            option_prefix="day_type_",
            icon="📅",
            resets={"specific": ("specific_days",)},
        ),
        FieldSpec(
            "specific_days",
            FieldKind.MULTI,
            WEEKDAYS,
            "field_specific_days",
            option_prefix="day_",
            icon="🗓",
            empty_key="no_days_selected",
        ),
        FieldSpec("time_slots", FieldKind.MULTI, TIME_SLOTS, "field_time_slots", option_prefix="time_slot_", icon="⏰"),
        FieldSpec("activity_type", FieldKind.SINGLE, ACTIVITY_TYPES, "field_activity_type", option_prefix="activity_", icon="🎭"),
        FieldSpec(
            "communication_styles",
            FieldKind.MULTI,
            COMMUNICATION_STYLES,
            "field_communication_styles",
            option_prefix="communication_",
            icon="💬",
        ),
        FieldSpec("frequency", FieldKind.SINGLE, FREQUENCIES, "field_frequency", option_prefix="frequency_", icon="🔁"),
    ),
    steps=(
        StepSpec("menu", "availability_edit_title", columns=2, links=_menu_links),
        StepSpec("days", "select_day_type", field="day_type", branches={"specific": "specific_days"}),
        StepSpec("specific_days", "select_specific_days", field="specific_days", columns=2, back_step="days"),
        StepSpec("time", "select_time_slots", field="time_slots", columns=2),
        StepSpec("activity", "select_activity_type", field="activity_type", columns=2),
        StepSpec("communication", "select_communication_styles", field="communication_styles"),
        StepSpec("frequency", "select_frequency", field="frequency"),
    ),
    summary_fields=(
        "day_type",
        "specific_days",
        "time_slots",
        "activity_type",
        "communication_styles",
        "frequency",
    ),
)

AVAILABILITY_RULES = (
    Rule("invalid_day_type", lambda values: values["day_type"] in DAY_TYPES),
    Rule(
        "no_days_selected",
        lambda values: values["day_type"] != "specific" or bool(values["specific_days"]),
    ),
    Rule("no_time_slot_selected", lambda values: bool(values["time_slots"])),
)

PREFERENCE_RULES = (
    Rule("no_communication_style_selected", lambda values: bool(values["communication_styles"])),
    Rule("invalid_activity_type", lambda values: values["activity_type"] in ACTIVITY_TYPES),
    Rule("invalid_frequency", lambda values: values["frequency"] in FREQUENCIES),
)


class AvailabilityWorkflow(EditWorkflow):
    schema = AVAILABILITY_SCHEMA
    rules = AVAILABILITY_RULES + PREFERENCE_RULES

    def __init__(self, database: Database) -> None:
        self.database = database

    def load_values(self, user_id: int) -> dict[str, FieldValue]:
        values = dict(DEFAULT_VALUES)
        availability = self.database.get_time_availability(user_id)
        if availability is not None:
            values.update(
                day_type=availability.day_type,
                specific_days=list(availability.specific_days),
                time_slots=list(availability.time_slots),
            )
        preferences = self.database.get_preferences(user_id)
        if preferences is not None:
            values.update(
                activity_type=preferences.activity_type,
                communication_styles=list(preferences.communication_styles),
                frequency=preferences.communication_frequency,
            )
        return self.schema.copy_values(values)

    def write_values(self, user_id: int, values: Mapping[str, FieldValue]) -> None:
        day_type = str(values["day_type"])
        # specific days only mean something for the "specific" day type
        specific_days = list(values["specific_days"]) if day_type == "specific" else []
        self.database.save_time_availability(
            user_id,
            TimeAvailability(
                day_type=day_type,
                specific_days=specific_days,
                time_slots=list(values["time_slots"]),
            ),
        )
        self.database.save_preferences(
            user_id,
            FriendshipPreferences(
                activity_type=str(values["activity_type"]),
                communication_styles=list(values["communication_styles"]),
                communication_frequency=str(values["frequency"]),
            ),
        )

    def after_commit(self, user_id: int) -> None:
        self.database.update_user_state(user_id, "active")
        self.database.set_user_status(user_id, "active")


__all__ = [
    "AVAILABILITY_RULES",
    "AVAILABILITY_SCHEMA",
    "AvailabilityWorkflow",
    "DEFAULT_VALUES",
    "PREFERENCE_RULES",
]
