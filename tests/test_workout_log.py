"""Tests for workout logging, personal records and progress summaries."""

from datetime import date

import pytest

from liftbook.errors import NotFound, ReconciliationFailed, ReferenceViolation, ValidationRejected
from liftbook.models.workout_log import (
    ProgressSummary,
    WorkoutLog,
    estimated_one_rep_max,
)
from liftbook.services.programs import ProgramService
from liftbook.services.workout_log import WorkoutLogService, month_bounds

from helpers import BENCH_PRESS, MISSING_CATALOG_ID, SQUAT

# A Wednesday; its week starts on Monday 2024-03-11
TODAY = date(2024, 3, 13)


def log_payload(user_id, /, **overrides) -> dict:
    payload = {
        "user_id": user_id,
        "name": "Push",
        "duration": 45,
        "exercises": [
            {
                "catalog_exercise_id": BENCH_PRESS,
                "sets": [{"reps": 10, "weight": 100}, {"reps": 5, "weight": "120.5"}],
            },
            {"catalog_exercise_id": SQUAT, "sets": [{"reps": 5, "weight": 140}]},
        ],
    }
    payload.update(overrides)
    return payload


async def count_rows(db, table: str) -> int:
    async with db.session() as session:
        row = await session.query_one(f"SELECT COUNT(*) AS total FROM {table}")
    return row["total"]


class TestWorkoutLogModel:
    """Tests for parsing a finished workout."""

    def test_epley_estimate(self):
        assert estimated_one_rep_max(100, 10) == 133.33
        assert estimated_one_rep_max(120.5, 5) == 140.58
        assert estimated_one_rep_max(80, 0) == 80.0

    def test_parses_camel_case_keys(self):
        log = WorkoutLog.from_dict({
            "userId": 3,
            "programId": "7",
            "name": "Legs",
            "duration": "50",
            "exercises": [{"catalogExerciseId": SQUAT, "sets": [{"reps": "5", "weight": "142.5"}]}],
        })
        assert log.user_id == 3
        assert log.program_id == 7
        assert log.duration == 50
        assert log.exercises[0].catalog_exercise_id == SQUAT
        assert log.exercises[0].sets[0].weight == 142.5

    def test_best_set_by_estimate(self):
        log = WorkoutLog.from_dict(log_payload(1))
        best = log.exercises[0].best_set()
        assert (best.reps, best.weight) == (5, 120.5)

    def test_exercise_without_sets_has_no_best_set(self):
        log = WorkoutLog.from_dict(log_payload(1, exercises=[{"catalog_exercise_id": 1}]))
        assert log.exercises[0].best_set() is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"user_id": None},
            {"user_id": "abc"},
            {"name": ""},
            {"duration": 0},
            {"duration": "soon"},
            {"exercises": None},
            {"exercises": ["bench"]},
            {"exercises": [{"sets": []}]},
            {"exercises": [{"catalog_exercise_id": 1, "sets": [5]}]},
        ],
    )
    def test_rejects_malformed_log(self, overrides):
        with pytest.raises(ValidationRejected):
            WorkoutLog.from_dict(log_payload(1, **overrides))

    def test_rejects_non_object(self):
        with pytest.raises(ValidationRejected):
            WorkoutLog.from_dict([1, 2])

    def test_summary_lists_every_weekday(self):
        body = ProgressSummary(monthly_count=2, weekly_count=1, daily_minutes={"Wed": 40}).to_dict()
        assert [d["day_name"] for d in body["weekly_workouts"]] == [
            "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun",
        ]
        assert body["weekly_workouts"][2]["minutes"] == 40
        assert body["weekly_workouts"][0]["minutes"] == 0


class TestMonthBounds:
    def test_december_rolls_over(self):
        assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2024, 1, 1))

    @pytest.mark.parametrize("year,month", [(2024, 0), (2024, 13), (9999, 12), (0, 5)])
    def test_out_of_range(self, year, month):
        with pytest.raises(ValidationRejected):
            month_bounds(year, month)


class TestCompleteWorkout:
    """Tests for storing a finished workout."""

    async def test_stores_whole_log(self, db, user_id):
        service = WorkoutLogService(db)
        workout_id = await service.complete(log_payload(user_id), today=TODAY)

        workout = await service.get(workout_id)
        assert workout.user_id == user_id
        assert workout.date == TODAY
        assert workout.program_id is None
        assert [ex.name for ex in workout.exercises] == ["Bench Press", "Squat"]
        assert [ex.order for ex in workout.exercises] == [1, 2]
        bench_sets = workout.exercises[0].sets
        assert [(s.reps, s.weight, s.order) for s in bench_sets] == [(10, 100, 1), (5, 120.5, 2)]

    async def test_links_program(self, db, program):
        service = WorkoutLogService(db)
        workout_id = await service.complete(
            log_payload(program.user_id, program_id=program.id), today=TODAY
        )
        assert (await service.get(workout_id)).program_id == program.id

    async def test_program_delete_keeps_log(self, db, program):
        service = WorkoutLogService(db)
        workout_id = await service.complete(
            log_payload(program.user_id, program_id=program.id), today=TODAY
        )

        await ProgramService(db).delete(program.id)

        workout = await service.get(workout_id)
        assert workout.program_id is None
        assert len(workout.exercises) == 2

    async def test_first_log_sets_records(self, db, user_id):
        service = WorkoutLogService(db)
        await service.complete(log_payload(user_id), today=TODAY)

        records = await service.records(user_id, today=TODAY)
        assert [(r.name, r.weight, r.reps, r.estimated_1rm) for r in records] == [
            ("Squat", 140, 5, 163.33),
            ("Bench Press", 120.5, 5, 140.58),
        ]

    async def test_record_replaced_only_when_beaten(self, db, user_id):
        service = WorkoutLogService(db)
        await service.complete(log_payload(user_id), today=TODAY)
        weaker = [{"catalog_exercise_id": BENCH_PRESS, "sets": [{"reps": 5, "weight": 100}]}]
        await service.complete(log_payload(user_id, exercises=weaker), today=TODAY)
        stronger = [{"catalog_exercise_id": BENCH_PRESS, "sets": [{"reps": 3, "weight": 135}]}]
        await service.complete(log_payload(user_id, exercises=stronger), today=TODAY)

        records = await service.records(user_id, today=TODAY)
        bench = [r for r in records if r.catalog_exercise_id == BENCH_PRESS]
        assert [(r.weight, r.reps) for r in bench] == [(135, 3)]
        # The superseded record is kept, no longer current
        assert await count_rows(db, "exercise_records") == 3

    async def test_weightless_sets_set_no_record(self, db, user_id):
        service = WorkoutLogService(db)
        exercises = [{"catalog_exercise_id": BENCH_PRESS, "sets": [{"reps": 12, "weight": 0}]}]
        await service.complete(log_payload(user_id, exercises=exercises), today=TODAY)
        assert await service.records(user_id, today=TODAY) == []

    async def test_malformed_log_writes_nothing(self, db, user_id):
        with pytest.raises(ValidationRejected):
            await WorkoutLogService(db).complete(log_payload(user_id, duration=-5))
        assert await count_rows(db, "completed_workouts") == 0

    async def test_unknown_catalog_exercise_rolls_back(self, db, user_id):
        """Sets written for earlier exercises are rolled back with the log."""
        exercises = [
            {"catalog_exercise_id": BENCH_PRESS, "sets": [{"reps": 5, "weight": 100}]},
            {"catalog_exercise_id": MISSING_CATALOG_ID, "sets": [{"reps": 5, "weight": 100}]},
        ]
        with pytest.raises(ReferenceViolation):
            await WorkoutLogService(db).complete(log_payload(user_id, exercises=exercises))

        for table in ("completed_workouts", "completed_exercises", "completed_sets", "exercise_records"):
            assert await count_rows(db, table) == 0

    async def test_unknown_user(self, db):
        with pytest.raises(ReferenceViolation):
            await WorkoutLogService(db).complete(log_payload(424242))

    async def test_reps_too_large_for_storage(self, db, user_id):
        exercises = [{"catalog_exercise_id": BENCH_PRESS, "sets": [{"reps": "9" * 25, "weight": 1}]}]
        with pytest.raises(ReconciliationFailed):
            await WorkoutLogService(db).complete(log_payload(user_id, exercises=exercises))
        assert await count_rows(db, "completed_workouts") == 0

    async def test_get_unknown(self, db):
        with pytest.raises(NotFound):
            await WorkoutLogService(db).get(999)


class TestHistoryAndProgress:
    """Tests for reading logged workouts back by month and week."""

    @pytest.fixture
    async def logged(self, db, user_id):
        service = WorkoutLogService(db)
        for day, minutes in (
            (date(2024, 2, 20), 90),
            (date(2024, 3, 4), 20),
            (date(2024, 3, 11), 60),
            (date(2024, 3, 13), 45),
            (date(2024, 3, 13), 30),
        ):
            await service.complete(log_payload(user_id, duration=minutes), today=day)
        return service

    async def test_history_for_month(self, logged, user_id):
        workouts = await logged.history(user_id, 2024, 3)
        assert [w.date for w in workouts] == [
            date(2024, 3, 13), date(2024, 3, 13), date(2024, 3, 11), date(2024, 3, 4),
        ]
        assert workouts[0].exercises[0].sets

    async def test_history_empty_month(self, logged, user_id):
        with pytest.raises(NotFound):
            await logged.history(user_id, 2024, 1)

    async def test_history_bad_month(self, logged, user_id):
        with pytest.raises(ValidationRejected):
            await logged.history(user_id, 2024, 13)

    async def test_summary(self, logged, user_id):
        summary = await logged.summary(user_id, today=TODAY)
        assert summary.monthly_count == 4
        assert summary.weekly_count == 3
        assert summary.daily_minutes == {"Mon": 60, "Wed": 75}

    async def test_summary_for_other_user_is_empty(self, logged):
        summary = await logged.summary(424242, today=TODAY)
        assert (summary.monthly_count, summary.weekly_count, summary.daily_minutes) == (0, 0, {})

    async def test_records_only_this_month(self, logged, user_id):
        """Records set in February drop out of March's list."""
        assert await logged.records(user_id, today=TODAY) == []
        assert len(await logged.records(user_id, today=date(2024, 2, 25))) == 2


class TestProgramWorkout:
    async def test_get_workout_with_tree(self, db, program):
        push = program.workouts[0]
        workout = await ProgramService(db).get_workout(push.id)
        assert workout.name == "Push"
        assert [ex.name for ex in workout.exercises] == ["Bench Press", "Overhead Press"]
        assert [s.reps for s in workout.exercises[0].sets] == [10, 8]

    async def test_get_unknown_workout(self, db):
        with pytest.raises(NotFound):
            await ProgramService(db).get_workout(999)
