"""Tests for the pure habit statistics engine."""

from datetime import date, datetime, timedelta

import pytest

pytestmark = pytest.mark.unit

from habitos.domains.habits.engine import (
    HabitSnapshot,
    aggregate_stats,
    apply_completion,
    apply_uncompletion,
    current_streak,
    is_completed_today,
    today_count,
)
from habitos.domains.habits.errors import HabitValidationError

TODAY = date(2024, 3, 15)


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def snapshot(goal=1, category="Health", completions=None, is_active=True) -> HabitSnapshot:
    return HabitSnapshot(
        daily_goal=goal, category=category, completions=dict(completions or {}), is_active=is_active
    )


# ============== Streaks ==============


class TestCurrentStreak:
    def test_empty_history_is_zero(self):
        assert current_streak(snapshot(), TODAY) == 0

    def test_consecutive_days_ending_today(self):
        h = snapshot(completions={days_ago(i): 1 for i in range(5)})
        assert current_streak(h, TODAY) == 5

    def test_streak_through_yesterday_survives_unfinished_today(self):
        h = snapshot(completions={days_ago(i): 1 for i in range(1, 4)})
        assert current_streak(h, TODAY) == 3

    def test_same_run_evaluated_on_last_day_and_the_day_after(self):
        last_day = days_ago(1)
        h = snapshot(completions={last_day - timedelta(days=i): 1 for i in range(4)})
        assert current_streak(h, last_day) == 4
        assert current_streak(h, last_day + timedelta(days=1)) == 4

    @pytest.mark.parametrize("gap", [2, 3, 10])
    def test_latest_entry_two_or_more_days_back_is_zero(self, gap):
        h = snapshot(completions={days_ago(gap + i): 1 for i in range(7)})
        assert current_streak(h, TODAY) == 0

    def test_gap_stops_the_walk(self):
        h = snapshot(completions={days_ago(0): 1, days_ago(1): 1, days_ago(3): 1, days_ago(4): 1})
        assert current_streak(h, TODAY) == 2

    def test_partial_days_still_count_by_default(self):
        h = snapshot(goal=5, completions={days_ago(0): 1, days_ago(1): 2, days_ago(2): 5})
        assert current_streak(h, TODAY) == 3

    def test_goal_met_rule_is_opt_in(self):
        h = snapshot(goal=5, completions={days_ago(0): 5, days_ago(1): 2, days_ago(2): 5})
        assert current_streak(h, TODAY, require_goal_met=True) == 1

    def test_insertion_order_does_not_matter(self):
        ordered = {days_ago(2): 1, days_ago(0): 1, days_ago(1): 1}
        assert current_streak(snapshot(completions=ordered), TODAY) == 3

    def test_future_entries_are_ignored(self):
        h = snapshot(completions={TODAY + timedelta(days=1): 1, days_ago(0): 1, days_ago(1): 1})
        assert current_streak(h, TODAY) == 2

    def test_datetime_now_is_truncated_to_its_day(self):
        h = snapshot(completions={days_ago(0): 1, days_ago(1): 1})
        assert current_streak(h, datetime(2024, 3, 15, 23, 59, 59)) == 2


# ============== Today lookups ==============


class TestTodayLookups:
    def test_no_entry_today(self):
        h = snapshot(goal=3, completions={days_ago(1): 3})
        assert is_completed_today(h, TODAY) is False
        assert today_count(h, TODAY) == 0

    def test_partial_entry_counts_as_completed_today(self):
        h = snapshot(goal=3, completions={TODAY: 1})
        assert is_completed_today(h, TODAY) is True
        assert today_count(h, TODAY) == 1

    def test_uses_calendar_day_equality(self):
        h = snapshot(goal=3, completions={TODAY: 2})
        assert today_count(h, datetime(2024, 3, 15, 0, 0, 1)) == 2
        assert today_count(h, datetime(2024, 3, 16, 0, 0, 0)) == 0


# ============== Completion transitions ==============


class TestCompletionTransitions:
    def test_first_completion_creates_entry(self):
        result = apply_completion(snapshot(goal=3), TODAY)
        assert result.completions == {TODAY: 1}

    def test_completion_increments_partial_entry(self):
        result = apply_completion(snapshot(goal=3, completions={TODAY: 1}), TODAY)
        assert result.completions[TODAY] == 2

    def test_completion_leaves_input_untouched(self):
        original = snapshot(goal=3, completions={days_ago(1): 2})
        apply_completion(original, TODAY)
        assert original.completions == {days_ago(1): 2}

    def test_repeat_up_to_goal_then_fail(self):
        h = snapshot(goal=4)
        for _ in range(4):
            h = apply_completion(h, TODAY)
        assert h.completions == {TODAY: 4}
        with pytest.raises(HabitValidationError) as excinfo:
            apply_completion(h, TODAY)
        assert excinfo.value.code == "goal_already_met"
        assert h.completions == {TODAY: 4}

    def test_uncompletion_without_entry_fails(self):
        with pytest.raises(HabitValidationError) as excinfo:
            apply_uncompletion(snapshot(goal=2, completions={days_ago(1): 1}), TODAY)
        assert excinfo.value.code == "no_completion_today"

    def test_uncompletion_decrements(self):
        result = apply_uncompletion(snapshot(goal=3, completions={TODAY: 3}), TODAY)
        assert result.completions == {TODAY: 2}

    def test_uncompletion_at_one_removes_entry(self):
        result = apply_uncompletion(snapshot(goal=3, completions={TODAY: 1, days_ago(1): 3}), TODAY)
        assert result.completions == {days_ago(1): 3}

    def test_complete_then_uncomplete_restores_history(self):
        before = {days_ago(1): 2, days_ago(3): 1}
        h = snapshot(goal=2, completions=before)
        assert apply_uncompletion(apply_completion(h, TODAY), TODAY).completions == before


# ============== Aggregation ==============


class TestAggregateStats:
    def test_no_habits(self):
        stats = aggregate_stats([], TODAY).to_dict()
        assert stats["total_habits"] == 0
        assert stats["completed_today"] == 0
        assert stats["average_streak"] == 0
        assert stats["category_breakdown"] == {}
        assert len(stats["weekly_progress"]) == 7
        assert all(day["percentage"] == 0 for day in stats["weekly_progress"])
        assert all(day["total"] == 0 for day in stats["weekly_progress"])

    def test_weekly_window_runs_oldest_to_today(self):
        dates = [day["date"] for day in aggregate_stats([], TODAY).to_dict()["weekly_progress"]]
        assert dates[0] == "2024-03-09"
        assert dates[-1] == "2024-03-15"
        assert dates == sorted(dates)

    def test_two_categories_one_done_today(self):
        health = snapshot(goal=1, category="Health", completions={TODAY: 1})
        fitness = snapshot(goal=1, category="Fitness")
        stats = aggregate_stats([health, fitness], TODAY)
        assert stats.completed_today == 1
        assert stats.category_breakdown == {"Health": 1, "Fitness": 1}
        assert stats.weekly_progress[-1].completed == 1
        assert stats.weekly_progress[-1].percentage == 50

    def test_weekly_progress_requires_goal(self):
        water = snapshot(goal=8, completions={days_ago(1): 8, days_ago(2): 8, days_ago(3): 5})
        progress = {day.date: day for day in aggregate_stats([water], TODAY).weekly_progress}
        assert progress[days_ago(1)].completed == 1
        assert progress[days_ago(2)].completed == 1
        assert progress[days_ago(3)].completed == 0
        assert progress[days_ago(3)].percentage == 0
        assert progress[days_ago(1)].percentage == 100

    def test_category_breakdown_counts_repeats(self):
        habits = [snapshot(category="Health"), snapshot(category="Health"), snapshot(category="Social")]
        assert aggregate_stats(habits, TODAY).category_breakdown == {"Health": 2, "Social": 1}

    def test_average_streak_rounds_half_up(self):
        # streaks 1 and 2 -> 1.5 -> 2
        one = snapshot(completions={TODAY: 1})
        two = snapshot(completions={TODAY: 1, days_ago(1): 1})
        assert aggregate_stats([one, two], TODAY).average_streak == 2

    def test_percentage_rounds_half_up(self):
        # 1 of 8 habits met today -> 12.5% -> 13
        habits = [snapshot(completions={TODAY: 1})] + [snapshot() for _ in range(7)]
        assert aggregate_stats(habits, TODAY).weekly_progress[-1].percentage == 13

    def test_is_deterministic(self):
        habits = [snapshot(goal=2, completions={TODAY: 1, days_ago(1): 2})]
        assert aggregate_stats(habits, TODAY) == aggregate_stats(habits, TODAY)


# ============== Seeded water habit ==============


class TestSeededWaterHabit:
    """Goal 8; counts 8, 8, 5 on the three days before today; nothing today."""

    @pytest.fixture
    def water(self):
        return snapshot(goal=8, completions={days_ago(1): 8, days_ago(2): 8, days_ago(3): 5})

    def test_today_lookups(self, water):
        assert is_completed_today(water, TODAY) is False
        assert today_count(water, TODAY) == 0

    def test_streak_counts_every_day_with_an_entry(self, water):
        assert current_streak(water, TODAY) == 3

    def test_streak_counting_only_goal_met_days(self, water):
        assert current_streak(water, TODAY, require_goal_met=True) == 2
