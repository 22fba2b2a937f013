"""Habits models with prefixed tables."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column, relationship

from habitos.domains.habits.engine import HabitSnapshot
from habitos.domains.habits.validation import DEFAULT_COLOR
from habitos.extensions import db


class Habit(db.Model):
    __tablename__ = "habits_habit"
    __table_args__ = (
        db.Index("ix_habits_habit_user_active", "user_id", "is_active"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(db.String(100), nullable=False)
    category: Mapped[str] = mapped_column(db.String(32), nullable=False)
    daily_goal: Mapped[int] = mapped_column(nullable=False, default=1)
    color: Mapped[str] = mapped_column(db.String(7), nullable=False, default=DEFAULT_COLOR)
    is_active: Mapped[bool] = mapped_column(default=True)
    version_id: Mapped[int] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    completions: Mapped[list["HabitCompletion"]] = relationship(
        "HabitCompletion",
        back_populates="habit",
        cascade="all, delete-orphan",
        order_by="HabitCompletion.id",
    )

    __mapper_args__ = {"version_id_col": version_id}

    def completion_on(self, day: date) -> Optional["HabitCompletion"]:
        for entry in self.completions:
            if entry.completed_on == day:
                return entry
        return None

    def snapshot(self) -> HabitSnapshot:
        return HabitSnapshot(
            daily_goal=self.daily_goal,
            category=self.category,
            completions={entry.completed_on: entry.count for entry in self.completions},
            is_active=self.is_active,
        )


class HabitCompletion(db.Model):
    __tablename__ = "habits_completion"
    __table_args__ = (
        db.UniqueConstraint("habit_id", "completed_on", name="uq_habits_completion_habit_day"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    habit_id: Mapped[int] = mapped_column(
        db.ForeignKey("habits_habit.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    completed_on: Mapped[date] = mapped_column(nullable=False)
    count: Mapped[int] = mapped_column(nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    habit: Mapped[Habit] = relationship("Habit", back_populates="completions")
