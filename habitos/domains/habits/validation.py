"""Field rules for habits, shared by the pydantic schemas and the services."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

HABIT_CATEGORIES = (
    "Health",
    "Fitness",
    "Learning",
    "Productivity",
    "Mindfulness",
    "Social",
    "Other",
)
NAME_MAX_LENGTH = 100
DAILY_GOAL_MIN = 1
DAILY_GOAL_MAX = 100
DEFAULT_COLOR = "#3b82f6"
COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

REQUIRED_FIELDS = ("name", "category", "daily_goal")


def check_name(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Habit name must be a string")
    name = value.strip()
    if not name:
        raise ValueError("Habit name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"Habit name cannot exceed {NAME_MAX_LENGTH} characters")
    return name


def check_category(value: Any) -> str:
    if value not in HABIT_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(HABIT_CATEGORIES)}")
    return value


def check_daily_goal(value: Any) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Daily goal must be an integer")
    if value < DAILY_GOAL_MIN:
        raise ValueError(f"Daily goal must be at least {DAILY_GOAL_MIN}")
    if value > DAILY_GOAL_MAX:
        raise ValueError(f"Daily goal cannot exceed {DAILY_GOAL_MAX}")
    return value


def check_color(value: Any) -> str:
    if not isinstance(value, str) or not COLOR_PATTERN.match(value):
        raise ValueError("Please enter a valid hex color")
    return value


def check_is_active(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("is_active must be a boolean")
    return value


CHECKS = {
    "name": check_name,
    "category": check_category,
    "daily_goal": check_daily_goal,
    "color": check_color,
    "is_active": check_is_active,
}


def validate_habit_fields(fields: Mapping[str, Any], partial: bool = False) -> List[Dict[str, str]]:
    """Return a list of ``{"field", "message"}`` errors; empty when valid.

    With ``partial`` only the keys present in ``fields`` are checked, which is
    what an update needs. Unknown keys are ignored.
    """
    errors: List[Dict[str, str]] = []
    if not partial:
        for key in REQUIRED_FIELDS:
            if fields.get(key) is None:
                errors.append({"field": key, "message": "Field required"})
    for key, check in CHECKS.items():
        if key not in fields or fields[key] is None:
            continue
        try:
            check(fields[key])
        except ValueError as exc:
            errors.append({"field": key, "message": str(exc)})
    return errors


def clean_habit_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalized copy of the known, non-null fields (names trimmed)."""
    return {key: check(fields[key]) for key, check in CHECKS.items() if fields.get(key) is not None}
