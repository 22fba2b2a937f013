"""Habit DTOs and schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator

from habitos.domains.habits import engine
from habitos.domains.habits.validation import (
    DAILY_GOAL_MAX,
    DAILY_GOAL_MIN,
    DEFAULT_COLOR,
    check_category,
    check_color,
    check_name,
)

if TYPE_CHECKING:
    from habitos.domains.habits.models.habit_models import Habit


class HabitCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    category: str
    # Strict: JSON true or "7" must not coerce into a goal.
    daily_goal: StrictInt = Field(ge=DAILY_GOAL_MIN, le=DAILY_GOAL_MAX)
    color: str = DEFAULT_COLOR

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return check_name(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return check_category(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return check_color(v)


class HabitUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    daily_goal: Optional[StrictInt] = Field(default=None, ge=DAILY_GOAL_MIN, le=DAILY_GOAL_MAX)
    color: Optional[str] = None
    is_active: Optional[StrictBool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_name(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_category(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_color(v)


# Alias keeps the `date` field name from shadowing its own annotation.
CalendarDay = date


class CompletionEntryResponse(BaseModel):
    date: CalendarDay
    count: int


class HabitResponse(BaseModel):
    id: int
    name: str
    category: str
    daily_goal: int
    color: str
    is_active: bool
    completed_dates: List[CompletionEntryResponse]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    current_streak: int
    is_completed_today: bool
    today_count: int


def serialize_habit(habit: "Habit", today: date, require_goal_met: bool = False) -> HabitResponse:
    """Habit fields plus the derived streak/today values for ``today``."""
    snapshot = habit.snapshot()
    return HabitResponse(
        id=habit.id,
        name=habit.name,
        category=habit.category,
        daily_goal=habit.daily_goal,
        color=habit.color,
        is_active=habit.is_active,
        completed_dates=[
            CompletionEntryResponse(date=entry.completed_on, count=entry.count)
            for entry in habit.completions
        ],
        created_at=habit.created_at,
        updated_at=habit.updated_at,
        current_streak=engine.current_streak(snapshot, today, require_goal_met),
        is_completed_today=engine.is_completed_today(snapshot, today),
        today_count=engine.today_count(snapshot, today),
    )
