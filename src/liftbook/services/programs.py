"""Program aggregate service: create, read, update and delete whole program trees."""

from contextlib import contextmanager
from typing import Any, Iterator

import aiosqlite
from loguru import logger

from ..db.engine import Database, Session
from ..db.repositories import (
    ActiveProgramRepository,
    ProgramExerciseRepository,
    ProgramRepository,
    SetRepository,
    WorkoutRepository,
)
from ..errors import NotFound, ReconciliationFailed, ReferenceViolation, ValidationRejected
from ..models.program import Program, ProgramUpdate, Workout
from .reconcile import ReconcileStats, WorkoutReconciler


@contextmanager
def storage_errors(**context: Any) -> Iterator[None]:
    """Translate storage errors raised inside the block into the error taxonomy.

    Keyword arguments are bound to the log record of the failure.
    """
    try:
        yield
    except aiosqlite.IntegrityError as e:
        logger.bind(**context).error(f"Transaction rolled back: {e}")
        if "FOREIGN KEY" in str(e).upper():
            raise ReferenceViolation(str(e)) from e
        raise ReconciliationFailed(str(e)) from e
    except (aiosqlite.Error, OverflowError) as e:
        # OverflowError: an integer too large for a SQLite INTEGER column
        logger.bind(**context).error(f"Transaction rolled back: {e}")
        raise ReconciliationFailed(str(e)) from e


async def load_tree(session: Session, program: Program) -> Program:
    """Attach workouts, exercises and sets to a program, ordered by sort key."""
    workouts = WorkoutRepository(session)
    exercises = ProgramExerciseRepository(session)
    sets = SetRepository(session)

    program.workouts = await workouts.list_for_program(program.id)
    for workout in program.workouts:
        workout.exercises = await exercises.list_for_workout(workout.id)
        for exercise in workout.exercises:
            exercise.sets = await sets.list_for_exercise(exercise.id)
    return program


class ProgramService:
    """Operations on a program and everything it owns."""

    def __init__(self, db: Database, reconciler: WorkoutReconciler | None = None):
        self.db = db
        self.reconciler = reconciler or WorkoutReconciler()

    async def get(self, program_id: int) -> Program:
        """Get a program with its full tree.

        Raises:
            NotFound: If the program does not exist
        """
        async with self.db.session() as session:
            program = await ProgramRepository(session).get(program_id)
            if program is None:
                raise NotFound(f"Program {program_id} not found")
            return await load_tree(session, program)

    async def get_workout(self, workout_id: int) -> Workout:
        """Get one workout of a program with its exercises and sets.

        Raises:
            NotFound: If the workout does not exist
        """
        async with self.db.session() as session:
            workout = await WorkoutRepository(session).get(workout_id)
            if workout is None:
                raise NotFound(f"Workout {workout_id} not found")
            workout.exercises = await ProgramExerciseRepository(session).list_for_workout(
                workout.id
            )
            sets = SetRepository(session)
            for exercise in workout.exercises:
                exercise.sets = await sets.list_for_exercise(exercise.id)
            return workout

    async def list_for_user(self, user_id: int) -> list[Program]:
        """List a user's programs, each with its full tree."""
        async with self.db.session() as session:
            programs = await ProgramRepository(session).list_for_user(user_id)
            return [await load_tree(session, program) for program in programs]

    async def list_all(self) -> list[Program]:
        """List every program without its tree."""
        async with self.db.session() as session:
            return await ProgramRepository(session).list_all()

    async def create(self, payload: Any) -> int:
        """Create a program and its whole tree in one transaction.

        Every workout, exercise and set is inserted as new; client ids are
        ignored because nothing can be owned yet.

        Raises:
            ValidationRejected: If the payload is malformed or has no user
            ReferenceViolation: If the user or a catalog exercise does not exist
            ReconciliationFailed: On any other storage error
        """
        update = ProgramUpdate.from_dict(payload)
        if update.user_id is None:
            raise ValidationRejected("'user_id' is required")
        if not update.fields.name:
            raise ValidationRejected("'name' is required")

        with storage_errors(user_id=update.user_id):
            async with self.db.transaction() as session:
                program_id = await ProgramRepository(session).create(
                    update.user_id, update.fields
                )
                stats = ReconcileStats()
                await self.reconciler.reconcile(session, program_id, update.workouts, stats)

        logger.info(
            f"Created program {program_id}",
            user_id=update.user_id,
            rows=stats.inserted,
        )
        return program_id

    async def update(self, program_id: int, payload: Any) -> ReconcileStats:
        """Replace a program's fields and reconcile its tree with ``payload``.

        Runs as a single transaction: either the program row and every
        child insert, update and delete are committed, or nothing is.

        Raises:
            ValidationRejected: If the payload is malformed (nothing is written)
            NotFound: If the program does not exist
            ReferenceViolation: If a catalog exercise does not exist
            ReconciliationFailed: On any other storage error
        """
        update = ProgramUpdate.from_dict(payload)

        with storage_errors(program_id=program_id):
            async with self.db.transaction() as session:
                programs = ProgramRepository(session)
                if not await programs.exists(program_id):
                    raise NotFound(f"Program {program_id} not found")

                await programs.update(program_id, update.fields)
                stats = ReconcileStats()
                await self.reconciler.reconcile(session, program_id, update.workouts, stats)

        logger.info(
            f"Updated program {program_id}",
            inserted=stats.inserted,
            updated=stats.updated,
            deleted=stats.deleted,
            new_in_payload=update.count_new(),
        )
        return stats

    async def delete(self, program_id: int) -> None:
        """Delete a program, its tree and any active-program references.

        Raises:
            NotFound: If the program does not exist
            ReconciliationFailed: On a storage error
        """
        with storage_errors(program_id=program_id):
            async with self.db.transaction() as session:
                programs = ProgramRepository(session)
                if not await programs.exists(program_id):
                    raise NotFound(f"Program {program_id} not found")

                await ActiveProgramRepository(session).delete_for_program(program_id)
                await programs.delete_tree(program_id)

        logger.info(f"Deleted program {program_id}")
