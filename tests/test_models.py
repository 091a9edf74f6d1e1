"""Tests for identity classification, coercion and payload parsing."""

from datetime import datetime

import pytest

from liftbook.errors import ValidationRejected
from liftbook.models import (
    NEW,
    DurationUnit,
    Existing,
    ExerciseSet,
    Program,
    ProgramExercise,
    ProgramUpdate,
    Workout,
    classify,
)
from liftbook.models.active_program import ActiveProgram, add_months, compute_end_date
from liftbook.utils.coercion import coerce_float, coerce_int, first_present


class TestClassify:
    """Tests for classifying client-supplied ids."""

    @pytest.mark.parametrize("value", [1, 42, "7", "105", 5.0])
    def test_positive_whole_numbers_are_existing(self, value):
        """Positive ints, whole floats and digit strings refer to existing rows."""
        assert classify(value) == Existing(int(value))

    def test_whole_float_keeps_int_id(self):
        assert classify(12.0).id == 12
        assert isinstance(classify(12.0).id, int)

    @pytest.mark.parametrize(
        "value",
        [
            None, 0, -3, "0", "-1", "", "abc", "12a",
            1.5, 0.0, -2.0, float("nan"), float("inf"),
            True, False, [], {},
        ],
    )
    def test_everything_else_is_new(self, value):
        """Missing, non-positive or non-numeric ids mean a new row."""
        assert classify(value) is NEW

    def test_new_is_a_singleton(self):
        """There is only one NEW marker."""
        assert type(NEW)() is NEW


class TestCoerceInt:
    """Tests for lenient integer coercion."""

    def test_int_passes_through(self):
        assert coerce_int(12) == 12

    def test_float_is_truncated(self):
        assert coerce_int(7.9) == 7

    def test_string_uses_leading_integer(self):
        assert coerce_int("105") == 105
        assert coerce_int("12kg") == 12

    def test_unparseable_falls_back_to_default(self):
        assert coerce_int("abc") == 0
        assert coerce_int(None) == 0
        assert coerce_int(True) == 0
        assert coerce_int(float("nan")) == 0
        assert coerce_int("abc", default=None) is None

    def test_first_present_prefers_earlier_keys(self):
        assert first_present({"a": 1, "b": 2}, "a", "b") == 1
        assert first_present({"b": 2}, "a", "b") == 2
        assert first_present({}, "a", default="x") == "x"


class TestCoerceFloat:
    def test_numbers_and_numeric_strings(self):
        assert coerce_float(62.5) == 62.5
        assert coerce_float(60) == 60.0
        assert coerce_float("72.5") == 72.5

    @pytest.mark.parametrize("value", ["heavy", None, True, float("nan"), float("inf"), "1e999"])
    def test_unusable_values_fall_back_to_default(self, value):
        assert coerce_float(value) == 0.0


class TestProgramUpdate:
    """Tests for parsing a program payload."""

    def test_parses_nested_tree(self):
        """Identities are classified at every level."""
        update = ProgramUpdate.from_dict({
            "name": "P",
            "workouts": [
                {
                    "id": 5,
                    "name": "A",
                    "exercises": [
                        {
                            "catalog_exercise_id": 1,
                            "sets": [{"id": "9", "reps": "10", "weight": 100}, {"reps": 5}],
                        }
                    ],
                }
            ],
        })

        workout = update.workouts[0]
        assert workout.identity == Existing(5)
        exercise = workout.exercises[0]
        assert exercise.identity is NEW
        assert exercise.sets[0].identity == Existing(9)
        assert exercise.sets[0].reps == 10
        assert exercise.sets[1].weight == 0
        assert update.count_new() == 2

    def test_accepts_camel_case_aliases(self):
        """camelCase field names are understood."""
        update = ProgramUpdate.from_dict({
            "userId": "3",
            "name": "P",
            "programDuration": 6,
            "durationUnit": "weeks",
            "daysPerWeek": 4,
            "mainGoal": "hypertrophy",
            "workouts": [{"exercises": [{"catalogExerciseId": 2}]}],
        })

        assert update.user_id == 3
        assert update.fields.duration == 6
        assert update.fields.duration_unit == "weeks"
        assert update.fields.days_per_week == 4
        assert update.fields.main_goal == "hypertrophy"
        assert update.workouts[0].exercises[0].catalog_exercise_id == 2

    def test_missing_lists_are_empty(self):
        update = ProgramUpdate.from_dict({"name": "P", "workouts": [{"name": "A"}]})
        assert update.workouts[0].exercises == []

    def test_lenient_set_values(self):
        """Unparseable reps and weight become zero."""
        update = ProgramUpdate.from_dict({
            "workouts": [{"exercises": [{"sets": [{"reps": "lots", "weight": None}]}]}]
        })
        s = update.workouts[0].exercises[0].sets[0]
        assert (s.reps, s.weight, s.order) == (0, 0, None)

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "program",
            {"workouts": "none"},
            {"workouts": [{"exercises": {"id": 1}}]},
            {"workouts": [{"exercises": [{"sets": 3}]}]},
            {"workouts": [1, 2]},
            {"workouts": [{"exercises": ["bench"]}]},
        ],
    )
    def test_rejects_malformed_structure(self, payload):
        """Non-object payloads and non-list children are rejected."""
        with pytest.raises(ValidationRejected):
            ProgramUpdate.from_dict(payload)


class TestDurations:
    """Tests for active-program end dates."""

    START = datetime(2024, 1, 31, 9, 30)

    def test_days(self):
        assert compute_end_date(self.START, 10, "days") == datetime(2024, 2, 10, 9, 30)

    def test_weeks(self):
        assert compute_end_date(self.START, 2, "weeks") == datetime(2024, 2, 14, 9, 30)

    def test_months_clamp_to_month_end(self):
        assert compute_end_date(self.START, 1, "months") == datetime(2024, 2, 29, 9, 30)
        assert add_months(datetime(2023, 12, 15), 14) == datetime(2025, 2, 15)

    def test_unknown_unit_counts_as_days(self):
        assert DurationUnit.parse("fortnights") is DurationUnit.DAYS
        assert compute_end_date(self.START, 3, "fortnights") == datetime(2024, 2, 3, 9, 30)

    def test_missing_duration_ends_at_start(self):
        assert compute_end_date(self.START, None, "weeks") == self.START

    @pytest.mark.parametrize("unit", ["days", "weeks", "months"])
    def test_duration_past_calendar_range_is_open_ended(self, unit):
        """A duration beyond the last representable date gives no end date."""
        assert compute_end_date(self.START, 10**15, unit) is None
        assert ActiveProgram.start(1, 2, 10**15, unit, now=self.START).end_date is None

    def test_active_program_start(self):
        active = ActiveProgram.start(1, 2, 4, "weeks", now=self.START)
        assert active.end_date == datetime(2024, 2, 28, 9, 30)
        assert active.to_dict()["start_date"] == "2024-01-31T09:30:00"


class TestProgram:
    """Tests for the stored program model."""

    def _program(self):
        return Program(
            id=1,
            user_id=1,
            name="Push",
            duration=4,
            duration_unit="weeks",
            days_per_week=3,
            main_goal="strength",
            workouts=[
                Workout(
                    id=1,
                    program_id=1,
                    name="Day 1",
                    exercises=[
                        ProgramExercise(
                            id=1,
                            workout_id=1,
                            catalog_exercise_id=1,
                            name="Bench Press",
                            sets=[
                                ExerciseSet(id=1, exercise_id=1, reps=5, weight=100),
                                ExerciseSet(id=2, exercise_id=1, reps=5, weight=105),
                            ],
                        )
                    ],
                )
            ],
        )

    def test_total_sets(self):
        assert self._program().total_sets == 2

    def test_summary(self):
        summary = self._program().get_summary()
        assert "Program: Push" in summary
        assert "Duration: 4 weeks, 3 days/week" in summary
        assert "Bench Press: 5x100, 5x105" in summary

    def test_to_dict_nests_children(self):
        data = self._program().to_dict()
        assert data["workouts"][0]["exercises"][0]["sets"][1]["weight"] == 105
        assert data["created_at"] is None
