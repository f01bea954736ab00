from __future__ import annotations

from typing import Any


class TandemBotError(Exception):
    """Base class for errors raised by the bot's own code."""


class SessionError(TandemBotError):
    pass


class SessionNotFoundError(SessionError):
    def __init__(self, user_id: int, workflow: str) -> None:
        super().__init__(f"No active {workflow} edit session for user {user_id}")
        self.user_id = user_id
        self.workflow = workflow


class SessionCorruptedError(SessionError):
    """The cached session payload could not be decoded."""


class EditError(TandemBotError):
    """A mutation was rejected before it touched the session."""

    key = "error_generic"


class UnknownFieldError(EditError):
    key = "error_invalid_choice"


class UnknownStepError(EditError):
    key = "error_invalid_choice"


class InvalidChoiceError(EditError):
    key = "error_invalid_choice"


class NothingToUndoError(EditError):
    key = "no_changes_to_undo"


class LimitReachedError(EditError):
    def __init__(self, key: str, limit: int) -> None:
        super().__init__(f"{key} (limit {limit})")
        self.key = key
        self.limit = limit


class ValidationFailedError(TandemBotError):
    """Commit-time validation failed; ``key`` names the translated message."""

    def __init__(self, key: str, **params: Any) -> None:
        super().__init__(key)
        self.key = key
        self.params = params


class PersistenceError(TandemBotError):
    """Writing committed values to permanent storage failed."""


class FeedbackValidationError(TandemBotError):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key


__all__ = [
    "EditError",
    "FeedbackValidationError",
    "InvalidChoiceError",
    "LimitReachedError",
    "NothingToUndoError",
    "PersistenceError",
    "SessionCorruptedError",
    "SessionError",
    "SessionNotFoundError",
    "TandemBotError",
    "UnknownFieldError",
    "UnknownStepError",
    "ValidationFailedError",
]
