"""Habit services: owner-scoped CRUD, completion transitions, and stats with outbox events."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from habitos.domains.habits import engine
from habitos.domains.habits.errors import (
    ConcurrentUpdateError,
    HabitNotFoundError,
    HabitValidationError,
    PersistenceError,
)
from habitos.domains.habits.events import (
    HABITS_HABIT_COMPLETED,
    HABITS_HABIT_CREATED,
    HABITS_HABIT_DELETED,
    HABITS_HABIT_UNCOMPLETED,
    HABITS_HABIT_UPDATED,
)
from habitos.domains.habits.models.habit_models import Habit, HabitCompletion
from habitos.domains.habits.validation import clean_habit_fields, validate_habit_fields
from habitos.extensions import db
from habitos.habitos_platform.outbox import enqueue as enqueue_outbox

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "category", "daily_goal", "color", "is_active")


@contextmanager
def _storage() -> Iterator[None]:
    """Translate SQLAlchemy failures into domain errors after rolling back."""
    try:
        yield
    except StaleDataError as exc:
        db.session.rollback()
        logger.warning("Rejected concurrent habit write: %s", exc)
        raise ConcurrentUpdateError() from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Habit storage failure")
        raise PersistenceError() from exc


def _owned_query(user_id: int):
    return Habit.query.options(selectinload(Habit.completions)).filter(Habit.user_id == user_id)


def list_habits(user_id: int) -> List[Habit]:
    """All of a user's habits, newest first."""
    with _storage():
        return _owned_query(user_id).order_by(Habit.created_at.desc(), Habit.id.desc()).all()


def list_active_habits(user_id: int) -> List[Habit]:
    with _storage():
        return _owned_query(user_id).filter(Habit.is_active.is_(True)).order_by(Habit.id).all()


def get_habit(user_id: int, habit_id: int) -> Habit:
    with _storage():
        habit = _owned_query(user_id).filter(Habit.id == habit_id).first()
    if not habit:
        raise HabitNotFoundError()
    return habit


def create_habit(user_id: int, **fields) -> Habit:
    errors = validate_habit_fields(fields)
    if errors:
        raise HabitValidationError(errors=errors)
    values = clean_habit_fields(fields)

    habit = Habit(user_id=user_id, **values)
    with _storage():
        db.session.add(habit)
        db.session.flush()
        enqueue_outbox(
            HABITS_HABIT_CREATED,
            {
                "habit_id": habit.id,
                "user_id": user_id,
                "name": habit.name,
                "category": habit.category,
                "daily_goal": habit.daily_goal,
                "created_at": habit.created_at.isoformat(),
            },
            user_id=user_id,
        )
        db.session.commit()
    logger.info("Created habit %s for user %s", habit.id, user_id)
    return habit


def update_habit(user_id: int, habit_id: int, **fields) -> Habit:
    """Apply a partial update; unknown keys are ignored."""
    fields = {key: fields[key] for key in UPDATABLE_FIELDS if key in fields}
    errors = validate_habit_fields(fields, partial=True)
    if errors:
        raise HabitValidationError(errors=errors)
    habit = get_habit(user_id, habit_id)

    changed = {}
    for key, value in clean_habit_fields(fields).items():
        if getattr(habit, key) != value:
            setattr(habit, key, value)
            changed[key] = value
    if not changed:
        return habit

    with _storage():
        db.session.flush()
        enqueue_outbox(
            HABITS_HABIT_UPDATED,
            {
                "habit_id": habit.id,
                "user_id": user_id,
                "fields": changed,
                "updated_at": habit.updated_at.isoformat(),
            },
            user_id=user_id,
        )
        db.session.commit()
    return habit


def delete_habit(user_id: int, habit_id: int) -> None:
    habit = get_habit(user_id, habit_id)
    with _storage():
        db.session.delete(habit)
        enqueue_outbox(
            HABITS_HABIT_DELETED,
            {
                "habit_id": habit_id,
                "user_id": user_id,
                "deleted_at": datetime.utcnow().isoformat(),
            },
            user_id=user_id,
        )
        db.session.commit()
    logger.info("Deleted habit %s for user %s", habit_id, user_id)


def complete_habit(user_id: int, habit_id: int, today: date) -> Habit:
    """Record one more completion for ``today``; fails once the goal is met."""
    habit = get_habit(user_id, habit_id)
    today = engine.as_day(today)
    updated = engine.apply_completion(habit.snapshot(), today)
    count = updated.count_on(today)
    _write_day(habit, today, count)
    with _storage():
        enqueue_outbox(
            HABITS_HABIT_COMPLETED,
            {
                "habit_id": habit.id,
                "user_id": user_id,
                "date": today.isoformat(),
                "count": count,
                "goal_met": engine.is_goal_met(updated, today),
            },
            user_id=user_id,
        )
        db.session.commit()
    logger.debug("Habit %s completed %s/%s on %s", habit.id, count, habit.daily_goal, today)
    return habit


def uncomplete_habit(user_id: int, habit_id: int, today: date) -> Habit:
    """Undo one completion for ``today``; the entry is removed when it reaches zero."""
    habit = get_habit(user_id, habit_id)
    today = engine.as_day(today)
    updated = engine.apply_uncompletion(habit.snapshot(), today)
    count = updated.count_on(today)
    _write_day(habit, today, count)
    with _storage():
        enqueue_outbox(
            HABITS_HABIT_UNCOMPLETED,
            {
                "habit_id": habit.id,
                "user_id": user_id,
                "date": today.isoformat(),
                "count": count,
            },
            user_id=user_id,
        )
        db.session.commit()
    logger.debug("Habit %s uncompleted to %s on %s", habit.id, count, today)
    return habit


def compute_user_stats(user_id: int, today: date, require_goal_met: bool = False) -> engine.HabitStats:
    habits = list_active_habits(user_id)
    return engine.aggregate_stats([habit.snapshot() for habit in habits], today, require_goal_met)


def _write_day(habit: Habit, day: date, count: int) -> None:
    entry = habit.completion_on(day)
    if count <= 0:
        if entry is not None:
            habit.completions.remove(entry)
    elif entry is None:
        habit.completions.append(HabitCompletion(completed_on=day, count=count))
    else:
        entry.count = count
    # Touch the row so the version check guards the whole document.
    habit.updated_at = datetime.utcnow()
