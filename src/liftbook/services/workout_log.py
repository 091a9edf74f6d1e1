"""Logging finished workouts and summarizing a user's progress."""

from datetime import date, timedelta
from typing import Any

from loguru import logger

from ..db.engine import Database
from ..db.repositories import CompletedWorkoutRepository, ExerciseRecordRepository
from ..errors import NotFound, ValidationRejected
from ..models.workout_log import (
    DAY_NAMES,
    CompletedWorkout,
    ExerciseRecord,
    ProgressSummary,
    WorkoutLog,
)
from .programs import storage_errors


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the next one.

    Raises:
        ValidationRejected: If the month or year is out of range
    """
    try:
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    except (ValueError, OverflowError):
        raise ValidationRejected(f"Invalid month: {year}-{month}") from None
    return start, end


class WorkoutLogService:
    """Records completed workouts and derives records and summaries from them."""

    def __init__(self, db: Database):
        self.db = db

    async def complete(self, payload: Any, today: date | None = None) -> int:
        """Store a finished workout with its exercises and sets.

        The log and any new personal records are written in one transaction.
        A record is kept per exercise: the best set of the session by
        estimated one-rep max replaces the current record only if it beats it.

        Returns:
            The id of the stored workout log

        Raises:
            ValidationRejected: If the payload is malformed
            ReferenceViolation: If the user, program or a catalog exercise does not exist
            ReconciliationFailed: On any other storage error
        """
        log = WorkoutLog.from_dict(payload)
        day = today or date.today()
        new_records = 0

        with storage_errors(user_id=log.user_id, program_id=log.program_id):
            async with self.db.transaction() as session:
                workouts = CompletedWorkoutRepository(session)
                workout_id = await workouts.create(
                    log.user_id, log.program_id, log.name, log.duration, day
                )
                for position, exercise in enumerate(log.exercises, start=1):
                    exercise_id = await workouts.add_exercise(
                        workout_id, exercise.catalog_exercise_id, position
                    )
                    for order, logged in enumerate(exercise.sets, start=1):
                        await workouts.add_set(exercise_id, logged.reps, logged.weight, order)

                records = ExerciseRecordRepository(session)
                for exercise in log.exercises:
                    best = exercise.best_set()
                    if best is None or best.estimated_1rm <= 0:
                        continue
                    current = await records.get_current(log.user_id, exercise.catalog_exercise_id)
                    if current is not None and current.estimated_1rm >= best.estimated_1rm:
                        continue
                    await records.retire(log.user_id, exercise.catalog_exercise_id)
                    await records.create(
                        ExerciseRecord(
                            user_id=log.user_id,
                            catalog_exercise_id=exercise.catalog_exercise_id,
                            date=day,
                            weight=best.weight,
                            reps=best.reps,
                            estimated_1rm=best.estimated_1rm,
                        )
                    )
                    new_records += 1

        logger.info(
            f"Logged workout {workout_id} for user {log.user_id}",
            exercises=len(log.exercises),
            new_records=new_records,
        )
        return workout_id

    async def get(self, workout_id: int) -> CompletedWorkout:
        """Get a logged workout.

        Raises:
            NotFound: If it does not exist
        """
        async with self.db.session() as session:
            workout = await CompletedWorkoutRepository(session).get(workout_id)
        if workout is None:
            raise NotFound(f"Completed workout {workout_id} not found")
        return workout

    async def history(self, user_id: int, year: int, month: int) -> list[CompletedWorkout]:
        """A user's logged workouts for one calendar month, newest first.

        Raises:
            ValidationRejected: If the month is out of range
            NotFound: If nothing was logged that month
        """
        start, end = month_bounds(year, month)
        async with self.db.session() as session:
            workouts = await CompletedWorkoutRepository(session).list_between(user_id, start, end)
        if not workouts:
            raise NotFound(f"No workouts logged for user {user_id} in {start:%Y-%m}")
        return workouts

    async def summary(self, user_id: int, today: date | None = None) -> ProgressSummary:
        """Workout counts for this month and this week, and minutes per weekday."""
        today = today or date.today()
        month_start, month_end = month_bounds(today.year, today.month)
        week_start = today - timedelta(days=today.weekday())
        week_end = week_start + timedelta(days=7)

        async with self.db.session() as session:
            workouts = CompletedWorkoutRepository(session)
            monthly = await workouts.count_between(user_id, month_start, month_end)
            weekly = await workouts.count_between(user_id, week_start, week_end)
            minutes = await workouts.minutes_by_date(user_id, week_start, week_end)

        return ProgressSummary(
            monthly_count=monthly,
            weekly_count=weekly,
            daily_minutes={DAY_NAMES[day.weekday()]: total for day, total in minutes.items()},
        )

    async def records(self, user_id: int, today: date | None = None) -> list[ExerciseRecord]:
        """Current personal records set this month, strongest first."""
        today = today or date.today()
        month_start, _ = month_bounds(today.year, today.month)
        async with self.db.session() as session:
            return await ExerciseRecordRepository(session).list_current_since(
                user_id, month_start
            )
