from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tandem_bot.database import Database, Feedback, FeedbackCounts
from tandem_bot.errors import FeedbackValidationError

LOGGER = logging.getLogger(__name__)

MIN_FEEDBACK_LENGTH = 10
MAX_FEEDBACK_LENGTH = 1000
MAX_CONTACT_LENGTH = 64

FEEDBACK_LISTS = ("active", "archive", "all")


@dataclass(slots=True)
class PendingFeedback:
    user_id: int
    text: Optional[str] = None


@dataclass(slots=True)
class FeedbackPage:
    list_kind: str
    index: int
    total: int
    item: Feedback

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < self.total - 1


def clamp_index(index: int, total: int) -> int:
    if total <= 0:
        return 0
    return min(max(index, 0), total - 1)


class FeedbackService:
    def __init__(self, database: Database) -> None:
        self.database = database

    def validate_text(self, text: str) -> str:
        cleaned = text.strip()
        if len(cleaned) < MIN_FEEDBACK_LENGTH:
            raise FeedbackValidationError("feedback_too_short")
        if len(cleaned) > MAX_FEEDBACK_LENGTH:
            raise FeedbackValidationError("feedback_too_long")
        return cleaned

    def validate_contact(self, contact: str) -> str:
        cleaned = contact.strip()
        if not cleaned:
            raise FeedbackValidationError("feedback_contact_empty")
        if len(cleaned) > MAX_CONTACT_LENGTH:
            raise FeedbackValidationError("feedback_contact_too_long")
        return cleaned

    def submit(self, user_id: int, text: str, contact_info: Optional[str] = None) -> Feedback:
        cleaned = self.validate_text(text)
        contact = self.validate_contact(contact_info) if contact_info else None
        feedback_id = self.database.create_feedback(user_id, cleaned, contact)
        LOGGER.info("Stored feedback %s from user %s", feedback_id, user_id)
        stored = self.database.get_feedback(feedback_id)
        if stored is None:
            raise LookupError(f"Feedback {feedback_id} was not stored")
        return stored

    # Admin helpers --------------------------------------------------------
    def stats(self) -> FeedbackCounts:
        return self.database.feedback_counts()

    def items(self, list_kind: str) -> list[Feedback]:
        if list_kind == "active":
            return self.database.list_feedback(processed=False)
        if list_kind == "archive":
            return self.database.list_feedback(processed=True)
        if list_kind == "all":
            return self.database.list_feedback()
        raise ValueError(f"Unknown feedback list: {list_kind}")

    def page(self, list_kind: str, index: int) -> Optional[FeedbackPage]:
        items = self.items(list_kind)
        if not items:
            return None
        position = clamp_index(index, len(items))
        return FeedbackPage(list_kind=list_kind, index=position, total=len(items), item=items[position])

    def set_processed(self, feedback_id: int, processed: bool) -> bool:
        updated = self.database.set_feedback_processed(feedback_id, processed)
        if updated:
            LOGGER.info("Feedback %s marked %s", feedback_id, "processed" if processed else "active")
        return updated

    def delete(self, feedback_id: int) -> bool:
        deleted = self.database.delete_feedback(feedback_id)
        if deleted:
            LOGGER.info("Feedback %s deleted", feedback_id)
        return deleted

    def purge_archive(self) -> int:
        removed = self.database.delete_processed_feedback()
        LOGGER.info("Deleted %d archived feedback item(s)", removed)
        return removed


__all__ = [
    "FEEDBACK_LISTS",
    "FeedbackPage",
    "FeedbackService",
    "MAX_CONTACT_LENGTH",
    "MAX_FEEDBACK_LENGTH",
    "MIN_FEEDBACK_LENGTH",
    "PendingFeedback",
    "clamp_index",
]
