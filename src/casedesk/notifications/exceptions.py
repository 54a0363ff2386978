"""Errors raised by the reminder engine.

A duplicate reminder and an offline recipient are not errors: the engine
returns ``None`` and skips the push respectively.
"""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for reminder engine failures."""


class NotFoundError(NotificationError):
    """A record the reminder refers to no longer exists."""


class CaseNotFoundError(NotFoundError):
    def __init__(self, case_id: int) -> None:
        super().__init__(f"Case {case_id} not found")
        self.case_id = case_id


class RecipientNotFoundError(NotFoundError):
    def __init__(self, user_id: int | None, case_id: int) -> None:
        super().__init__(f"Recipient {user_id} for case {case_id} not found")
        self.user_id = user_id
        self.case_id = case_id


class PersistenceError(NotificationError):
    """Writing the reminder or the case flag failed and was rolled back."""
