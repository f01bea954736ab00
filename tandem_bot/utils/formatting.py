from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from tandem_bot.database import (
    Feedback,
    FeedbackCounts,
    FriendshipPreferences,
    TimeAvailability,
    UserInterest,
    UserRecord,
)
from tandem_bot.services.feedback import FeedbackPage

Translate = Callable[..., str]


def _join(t: Translate, prefix: str, values: Iterable[str]) -> str:
    labels = [t(f"{prefix}{value}") for value in values]
    return ", ".join(labels) if labels else t("profile_not_filled")


def _option(t: Translate, prefix: str, value: Optional[str]) -> str:
    return t(f"{prefix}{value}") if value else t("profile_not_filled")


def format_profile(
    t: Translate,
    user: UserRecord,
    availability: Optional[TimeAvailability],
    preferences: Optional[FriendshipPreferences],
    interests: Sequence[UserInterest],
) -> str:
    lines = [t("profile_title"), ""]
    lines.append(
        t(
            "profile_languages",
            native=_option(t, "language_", user.native_language),
            target=_option(t, "language_", user.target_language),
            level=_option(t, "level_", user.target_level),
        )
    )
    lines.append(t("profile_interests", interests=_join(t, "interest_", (i.key for i in interests))))
    primary = [interest.key for interest in interests if interest.is_primary]
    if primary:
        lines.append(t("profile_primary", primary=_join(t, "interest_", primary)))

    if availability is not None:
        if availability.day_type == "specific":
            days = _join(t, "day_", availability.specific_days)
        else:
            days = t(f"day_type_{availability.day_type}")
        lines.append(
            t("profile_availability", days=days, slots=_join(t, "time_slot_", availability.time_slots))
        )
    if preferences is not None:
        lines.append(
            t(
                "profile_preferences",
                activity=_option(t, "activity_", preferences.activity_type),
                styles=_join(t, "communication_", preferences.communication_styles),
                frequency=_option(t, "frequency_", preferences.communication_frequency),
            )
        )
    return "\n".join(lines)


def feedback_author(feedback: Feedback) -> str:
    if feedback.username:
        return f"@{feedback.username}"
    return feedback.first_name or str(feedback.telegram_id)


def format_feedback_stats(t: Translate, counts: FeedbackCounts) -> str:
    return t("feedback_stats", total=counts.total, active=counts.active, archived=counts.archived)


def format_feedback_page(t: Translate, page: FeedbackPage) -> str:
    item = page.item
    lines = [
        t(
            "feedback_item_header",
            feedback_id=item.feedback_id,
            position=page.index + 1,
            total=page.total,
        ),
        t("feedback_status_processed" if item.is_processed else "feedback_status_active"),
        t("feedback_author", name=item.first_name or "—", telegram_id=item.telegram_id),
        t("feedback_username", username=item.username) if item.username else t("feedback_no_username"),
        t("feedback_date", date=item.created_at.strftime("%d.%m.%Y %H:%M")),
        "",
        item.feedback_text,
    ]
    if item.contact_info:
        lines.extend(["", t("feedback_contact", contact=item.contact_info)])
    return "\n".join(lines)


__all__ = [
    "feedback_author",
    "format_feedback_page",
    "format_feedback_stats",
    "format_profile",
]
