"""CLI command that seeds sample habits with completion history.

Usage:
    flask seed-habits --email demo@habitos.test
    flask seed-habits --email demo@habitos.test --keep   # add without clearing
"""

from __future__ import annotations

from datetime import date, timedelta

import click
from flask.cli import with_appcontext

SAMPLE_HABITS = (
    # name, category, daily goal, color, counts for [yesterday, 2 days ago, ...]
    ("Drink 8 glasses of water", "Health", 8, "#3b82f6", (8, 8, 5)),
    ("30 minutes exercise", "Fitness", 1, "#ef4444", (1, 1, 1, 1)),
    ("Read 20 pages", "Learning", 1, "#10b981", (1, 0, 1)),
    ("Meditate", "Mindfulness", 2, "#8b5cf6", (2, 1)),
    ("Plan tomorrow", "Productivity", 1, "#f59e0b", ()),
)


def seed_habits_for_user(user_id: int, today: date, clear: bool = True) -> int:
    """Create the sample habits for ``user_id``; returns how many were created."""
    from habitos.domains.habits.models.habit_models import Habit, HabitCompletion
    from habitos.extensions import db

    if clear:
        for habit in Habit.query.filter_by(user_id=user_id).all():
            db.session.delete(habit)
        db.session.flush()

    for name, category, goal, color, counts in SAMPLE_HABITS:
        habit = Habit(user_id=user_id, name=name, category=category, daily_goal=goal, color=color)
        for offset, count in enumerate(counts, start=1):
            if count:
                habit.completions.append(
                    HabitCompletion(completed_on=today - timedelta(days=offset), count=count)
                )
        db.session.add(habit)
    db.session.commit()
    return len(SAMPLE_HABITS)


@click.command("seed-habits")
@click.option("--email", "-e", required=True, help="Owner of the sample habits")
@click.option("--keep", is_flag=True, help="Keep the user's existing habits")
@with_appcontext
def seed_habits_command(email: str, keep: bool):
    """Replace a user's habits with sample data."""
    from habitos.core.users.models import User
    from habitos.core.users.services import local_today

    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user:
        raise click.ClickException(f"No user with email {email}; register first.")
    created = seed_habits_for_user(user.id, local_today(user), clear=not keep)
    click.echo(f"Seeded {created} habits for {user.email}")


def register_commands(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(seed_habits_command)
