import pytest

pytestmark = pytest.mark.unit

from pydantic import ValidationError

from habitos.domains.habits.schemas.habit_schemas import HabitCreate, HabitUpdate
from habitos.domains.habits.validation import (
    DEFAULT_COLOR,
    HABIT_CATEGORIES,
    clean_habit_fields,
    validate_habit_fields,
)


def _fields(errors):
    return {error["field"] for error in errors}


def test_valid_fields_have_no_errors():
    assert validate_habit_fields({"name": "Read", "category": "Learning", "daily_goal": 1}) == []


def test_missing_required_fields():
    assert _fields(validate_habit_fields({})) == {"name", "category", "daily_goal"}


def test_partial_skips_required_check():
    assert validate_habit_fields({"color": "#fff"}, partial=True) == []


@pytest.mark.parametrize(
    "fields, bad_field",
    [
        ({"name": "   "}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"category": "Chores"}, "category"),
        ({"category": "health"}, "category"),
        ({"daily_goal": 0}, "daily_goal"),
        ({"daily_goal": 101}, "daily_goal"),
        ({"daily_goal": "3"}, "daily_goal"),
        ({"daily_goal": True}, "daily_goal"),
        ({"color": "blue"}, "color"),
        ({"color": "#12345"}, "color"),
        ({"is_active": "yes"}, "is_active"),
    ],
)
def test_rejects_bad_values(fields, bad_field):
    assert _fields(validate_habit_fields(fields, partial=True)) == {bad_field}


def test_blank_name_message():
    errors = validate_habit_fields({"name": "  "}, partial=True)
    assert errors == [{"field": "name", "message": "Habit name is required"}]


def test_boundaries_are_inclusive():
    fields = {"name": "x" * 100, "category": "Other", "daily_goal": 100, "color": "#ABCDEF"}
    assert validate_habit_fields(fields) == []
    assert validate_habit_fields({**fields, "daily_goal": 1, "color": "#abc"}) == []


def test_clean_trims_name_and_drops_nulls():
    cleaned = clean_habit_fields({"name": "  Walk  ", "color": None, "daily_goal": 2, "extra": 1})
    assert cleaned == {"name": "Walk", "daily_goal": 2}


def test_every_category_is_accepted():
    for category in HABIT_CATEGORIES:
        assert validate_habit_fields({"category": category}, partial=True) == []


class TestHabitSchemas:
    def test_create_defaults_color(self):
        data = HabitCreate.model_validate({"name": "Walk", "category": "Fitness", "daily_goal": 1})
        assert data.color == DEFAULT_COLOR

    def test_create_trims_name_and_ignores_unknown_keys(self):
        data = HabitCreate.model_validate(
            {"name": " Walk ", "category": "Fitness", "daily_goal": 2, "streak": 99}
        )
        assert data.model_dump() == {
            "name": "Walk",
            "category": "Fitness",
            "daily_goal": 2,
            "color": DEFAULT_COLOR,
        }

    @pytest.mark.parametrize(
        "payload",
        [
            {"category": "Fitness", "daily_goal": 1},
            {"name": "Walk", "category": "Gaming", "daily_goal": 1},
            {"name": "Walk", "category": "Fitness", "daily_goal": 0},
            {"name": "Walk", "category": "Fitness", "daily_goal": 1, "color": "red"},
        ],
    )
    def test_create_rejects(self, payload):
        with pytest.raises(ValidationError):
            HabitCreate.model_validate(payload)

    def test_update_is_partial(self):
        data = HabitUpdate.model_validate({"daily_goal": 5})
        assert data.model_dump(exclude_none=True) == {"daily_goal": 5}

    def test_update_validates_present_fields(self):
        with pytest.raises(ValidationError):
            HabitUpdate.model_validate({"name": ""})

    @pytest.mark.parametrize("daily_goal", [True, "7"])
    def test_create_does_not_coerce_goal(self, daily_goal):
        with pytest.raises(ValidationError):
            HabitCreate.model_validate({"name": "Walk", "category": "Fitness", "daily_goal": daily_goal})

    @pytest.mark.parametrize("is_active", ["yes", 1, "false"])
    def test_update_does_not_coerce_is_active(self, is_active):
        with pytest.raises(ValidationError):
            HabitUpdate.model_validate({"is_active": is_active})
