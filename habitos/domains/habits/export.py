"""CSV dump of a user's habits and their completion history."""

from __future__ import annotations

import csv
import io
from typing import Iterable

from habitos.domains.habits.models.habit_models import Habit

CSV_HEADERS = ["Habit", "Category", "Daily Goal", "Date", "Count", "Goal Met"]


def build_habits_csv(habits: Iterable[Habit]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADERS)
    for habit in habits:
        entries = sorted(habit.completions, key=lambda entry: entry.completed_on)
        if not entries:
            writer.writerow([habit.name, habit.category, habit.daily_goal, "", "", ""])
            continue
        for entry in entries:
            writer.writerow(
                [
                    habit.name,
                    habit.category,
                    habit.daily_goal,
                    entry.completed_on.isoformat(),
                    entry.count,
                    "yes" if entry.count >= habit.daily_goal else "no",
                ]
            )
    csv_data = output.getvalue()
    output.close()
    return csv_data
