"""Habit statistics engine: streaks, today lookups, completion transitions, aggregates.

Everything here is pure. Callers pass the current day explicitly; nothing in
this module reads the clock or touches the database. A ``now`` argument may be
a ``date`` or a ``datetime``; datetimes are truncated to their calendar day.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Union

from habitos.domains.habits.errors import (
    GOAL_ALREADY_MET,
    NO_COMPLETION_TODAY,
    HabitValidationError,
)

DayLike = Union[date, datetime]

WEEK_WINDOW_DAYS = 7


@dataclass(frozen=True)
class HabitSnapshot:
    """In-memory view of one habit: its goal, category and per-day counts."""

    daily_goal: int
    category: str
    completions: Mapping[date, int] = field(default_factory=dict)
    is_active: bool = True

    def count_on(self, day: DayLike) -> int:
        return self.completions.get(as_day(day), 0)


@dataclass(frozen=True)
class DayProgress:
    date: date
    completed: int
    total: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "completed": self.completed,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class HabitStats:
    total_habits: int
    completed_today: int
    average_streak: int
    category_breakdown: Dict[str, int]
    weekly_progress: List[DayProgress]

    def to_dict(self) -> dict:
        return {
            "total_habits": self.total_habits,
            "completed_today": self.completed_today,
            "average_streak": self.average_streak,
            "category_breakdown": dict(self.category_breakdown),
            "weekly_progress": [day.to_dict() for day in self.weekly_progress],
        }


def as_day(value: DayLike) -> date:
    # datetime is a date subclass, so test it first.
    if isinstance(value, datetime):
        return value.date()
    return value


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _completed_days(habit: HabitSnapshot, require_goal_met: bool) -> List[date]:
    threshold = habit.daily_goal if require_goal_met else 1
    return sorted((day for day, count in habit.completions.items() if count >= threshold), reverse=True)


def current_streak(habit: HabitSnapshot, now: DayLike, require_goal_met: bool = False) -> int:
    """Consecutive days with an entry, ending today or yesterday.

    By default a day counts when it has any entry, whether or not the daily
    goal was reached; ``require_goal_met`` counts only days that hit the goal.
    An unfinished today does not break a streak earned through yesterday; a
    latest counted day two or more days back yields zero.
    """
    today = as_day(now)
    # Entries dated after today never extend a streak.
    days = [day for day in _completed_days(habit, require_goal_met) if day <= today]
    if not days:
        return 0
    latest = days[0]
    if latest != today and latest != today - timedelta(days=1):
        return 0

    streak = 0
    expected = latest
    for day in days:
        if day != expected:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def is_completed_today(habit: HabitSnapshot, now: DayLike) -> bool:
    """True when today has an entry at all, regardless of the daily goal."""
    return today_count(habit, now) > 0


def today_count(habit: HabitSnapshot, now: DayLike) -> int:
    return habit.count_on(now)


def is_goal_met(habit: HabitSnapshot, day: DayLike) -> bool:
    return habit.count_on(day) >= habit.daily_goal


def apply_completion(habit: HabitSnapshot, now: DayLike) -> HabitSnapshot:
    """Add one completion to today's entry, creating it if needed.

    Raises ``HabitValidationError(goal_already_met)`` once the count has
    reached the daily goal. The input snapshot is left untouched.
    """
    today = as_day(now)
    count = habit.count_on(today)
    if count >= habit.daily_goal:
        raise HabitValidationError(
            GOAL_ALREADY_MET,
            [{"field": "count", "message": "Daily goal already achieved for this habit"}],
        )
    completions = dict(habit.completions)
    completions[today] = count + 1
    return replace(habit, completions=completions)


def apply_uncompletion(habit: HabitSnapshot, now: DayLike) -> HabitSnapshot:
    """Remove one completion from today's entry, dropping the entry at zero.

    Raises ``HabitValidationError(no_completion_today)`` when today has no entry.
    """
    today = as_day(now)
    count = habit.count_on(today)
    if count <= 0:
        raise HabitValidationError(
            NO_COMPLETION_TODAY,
            [{"field": "count", "message": "No completion found for today"}],
        )
    completions = dict(habit.completions)
    if count > 1:
        completions[today] = count - 1
    else:
        del completions[today]
    return replace(habit, completions=completions)


def weekly_progress(habits: Iterable[HabitSnapshot], now: DayLike) -> List[DayProgress]:
    """Goal-met counts for the last seven days, oldest first, ending today."""
    habits = list(habits)
    today = as_day(now)
    total = len(habits)
    progress = []
    for offset in range(WEEK_WINDOW_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        completed = sum(1 for habit in habits if is_goal_met(habit, day))
        percentage = round_half_up(completed / total * 100) if total else 0
        progress.append(DayProgress(date=day, completed=completed, total=total, percentage=percentage))
    return progress


def aggregate_stats(
    habits: Iterable[HabitSnapshot], now: DayLike, require_goal_met: bool = False
) -> HabitStats:
    """Dashboard numbers across a user's active habits."""
    habits = list(habits)
    total = len(habits)
    streak_sum = sum(current_streak(habit, now, require_goal_met) for habit in habits)
    return HabitStats(
        total_habits=total,
        completed_today=sum(1 for habit in habits if is_completed_today(habit, now)),
        average_streak=round_half_up(streak_sum / total) if total else 0,
        category_breakdown=dict(Counter(habit.category for habit in habits)),
        weekly_progress=weekly_progress(habits, now),
    )


__all__ = [
    "HabitSnapshot",
    "HabitStats",
    "DayProgress",
    "as_day",
    "current_streak",
    "is_completed_today",
    "today_count",
    "is_goal_met",
    "apply_completion",
    "apply_uncompletion",
    "weekly_progress",
    "aggregate_stats",
]
