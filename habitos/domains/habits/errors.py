"""Habit domain exceptions.

Each error carries a stable ``code`` (also its ``str()``) and the HTTP status
the API answers with, so controllers and the app-level error handler can map
them without string matching.
"""

from __future__ import annotations

from typing import List, Optional


class HabitError(Exception):
    code = "habit_error"
    status = 400

    def __init__(self, code: Optional[str] = None, errors: Optional[List[dict]] = None) -> None:
        self.code = code or self.code
        self.errors = list(errors or [])
        super().__init__(self.code)

    def to_payload(self) -> dict:
        payload = {"ok": False, "error": self.code}
        if self.errors:
            payload["details"] = self.errors
        return payload


class HabitValidationError(HabitError, ValueError):
    """Malformed input or a failed completion precondition; nothing was mutated."""

    code = "validation_error"
    status = 400


class HabitNotFoundError(HabitError, LookupError):
    """Habit does not exist or belongs to another user."""

    code = "not_found"
    status = 404


class PersistenceError(HabitError):
    """Storage failed; the session was rolled back and nothing is retried."""

    code = "persistence_error"
    status = 503


class ConcurrentUpdateError(PersistenceError):
    code = "concurrent_update"
    status = 409


GOAL_ALREADY_MET = "goal_already_met"
NO_COMPLETION_TODAY = "no_completion_today"

__all__ = [
    "HabitError",
    "HabitValidationError",
    "HabitNotFoundError",
    "PersistenceError",
    "ConcurrentUpdateError",
    "GOAL_ALREADY_MET",
    "NO_COMPLETION_TODAY",
]
