"""Data access layer for liftbook.

Every repository works on a ``Session`` handed to it by the caller, so a
service can run statements from several repositories inside one transaction.
"""

from datetime import date, datetime

import aiosqlite

from ..models.active_program import ActiveProgram
from ..models.catalog import CatalogExercise, Equipment, Muscle
from ..models.program import ExerciseSet, Program, ProgramExercise, ProgramFields, Workout
from ..models.user import User
from ..models.workout_log import (
    CompletedExercise,
    CompletedSet,
    CompletedWorkout,
    ExerciseRecord,
)
from .engine import Session


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class UserRepository:
    """Repository for users."""

    def __init__(self, session: Session):
        self.session = session

    async def create(self, user: User) -> int:
        """Create a new user."""
        cursor = await self.session.execute(
            "INSERT INTO users (email, name) VALUES (?, ?)",
            (user.email, user.name),
        )
        return cursor.lastrowid

    async def get(self, user_id: int) -> User | None:
        """Get a user by ID."""
        row = await self.session.query_one("SELECT * FROM users WHERE id = ?", (user_id,))
        if row is None:
            return None
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            created_at=_parse_timestamp(row["created_at"]),
        )


class ProgramRepository:
    """Repository for program rows (scalar fields only)."""

    def __init__(self, session: Session):
        self.session = session

    async def create(self, user_id: int, fields: ProgramFields) -> int:
        """Create a new program."""
        cursor = await self.session.execute(
            """
            INSERT INTO programs
            (user_id, name, duration, duration_unit, days_per_week, main_goal)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                fields.name,
                fields.duration,
                fields.duration_unit,
                fields.days_per_week,
                fields.main_goal,
            ),
        )
        return cursor.lastrowid

    async def get(self, program_id: int) -> Program | None:
        """Get a program by ID, without its workouts."""
        row = await self.session.query_one(
            "SELECT * FROM programs WHERE id = ?", (program_id,)
        )
        if row is None:
            return None
        return self._row_to_program(row)

    async def exists(self, program_id: int) -> bool:
        row = await self.session.query_one(
            "SELECT id FROM programs WHERE id = ?", (program_id,)
        )
        return row is not None

    async def list_for_user(self, user_id: int) -> list[Program]:
        """List a user's programs, without their workouts."""
        rows = await self.session.query(
            "SELECT * FROM programs WHERE user_id = ? ORDER BY id", (user_id,)
        )
        return [self._row_to_program(row) for row in rows]

    async def list_all(self) -> list[Program]:
        rows = await self.session.query("SELECT * FROM programs ORDER BY id")
        return [self._row_to_program(row) for row in rows]

    async def update(self, program_id: int, fields: ProgramFields) -> int:
        """Overwrite the scalar fields of a program."""
        cursor = await self.session.execute(
            """
            UPDATE programs SET
                name = ?, duration = ?, duration_unit = ?,
                days_per_week = ?, main_goal = ?
            WHERE id = ?
            """,
            (
                fields.name,
                fields.duration,
                fields.duration_unit,
                fields.days_per_week,
                fields.main_goal,
                program_id,
            ),
        )
        return cursor.rowcount

    async def delete_tree(self, program_id: int) -> None:
        """Delete a program and everything beneath it, children first."""
        await self.session.execute(
            """
            DELETE FROM sets WHERE exercise_id IN (
                SELECT e.id FROM exercises e
                JOIN workouts w ON e.workout_id = w.id
                WHERE w.program_id = ?
            )
            """,
            (program_id,),
        )
        await self.session.execute(
            """
            DELETE FROM exercises WHERE workout_id IN (
                SELECT id FROM workouts WHERE program_id = ?
            )
            """,
            (program_id,),
        )
        await self.session.execute("DELETE FROM workouts WHERE program_id = ?", (program_id,))
        # Logged sessions outlive the program they were run from
        await self.session.execute(
            "UPDATE completed_workouts SET program_id = NULL WHERE program_id = ?",
            (program_id,),
        )
        await self.session.execute("DELETE FROM programs WHERE id = ?", (program_id,))

    def _row_to_program(self, row: aiosqlite.Row) -> Program:
        """Convert a database row to a Program."""
        return Program(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            duration=row["duration"],
            duration_unit=row["duration_unit"],
            days_per_week=row["days_per_week"],
            main_goal=row["main_goal"],
            created_at=_parse_timestamp(row["created_at"]),
        )


class WorkoutRepository:
    """Repository for workouts within a program."""

    def __init__(self, session: Session):
        self.session = session

    async def ids_for_program(self, program_id: int) -> list[int]:
        rows = await self.session.query(
            "SELECT id FROM workouts WHERE program_id = ? ORDER BY id", (program_id,)
        )
        return [row["id"] for row in rows]

    async def get(self, workout_id: int) -> Workout | None:
        """Get a workout by ID, without its exercises."""
        row = await self.session.query_one(
            "SELECT * FROM workouts WHERE id = ?", (workout_id,)
        )
        if row is None:
            return None
        return self._row_to_workout(row)

    async def list_for_program(self, program_id: int) -> list[Workout]:
        rows = await self.session.query(
            'SELECT * FROM workouts WHERE program_id = ? ORDER BY "order", id',
            (program_id,),
        )
        return [self._row_to_workout(row) for row in rows]

    def _row_to_workout(self, row: aiosqlite.Row) -> Workout:
        return Workout(
            id=row["id"],
            program_id=row["program_id"],
            name=row["name"],
            order=row["order"],
        )

    async def insert(self, program_id: int, name: str | None, order: int | None) -> int:
        cursor = await self.session.execute(
            'INSERT INTO workouts (program_id, name, "order") VALUES (?, ?, ?)',
            (program_id, name, order),
        )
        return cursor.lastrowid

    async def update(
        self, workout_id: int, program_id: int, name: str | None, order: int | None
    ) -> int:
        """Update a workout, only if it belongs to the given program."""
        cursor = await self.session.execute(
            'UPDATE workouts SET name = ?, "order" = ? WHERE id = ? AND program_id = ?',
            (name, order, workout_id, program_id),
        )
        return cursor.rowcount

    async def delete(self, workout_id: int) -> None:
        await self.session.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))


class ProgramExerciseRepository:
    """Repository for exercises placed within a workout."""

    def __init__(self, session: Session):
        self.session = session

    async def ids_for_workout(self, workout_id: int) -> list[int]:
        rows = await self.session.query(
            "SELECT id FROM exercises WHERE workout_id = ? ORDER BY id", (workout_id,)
        )
        return [row["id"] for row in rows]

    async def list_for_workout(self, workout_id: int) -> list[ProgramExercise]:
        """List a workout's exercises joined with their catalog details."""
        rows = await self.session.query(
            """
            SELECT e.*, ec.name AS name, mg.muscle, mg.muscle_group, mg.subcategory,
                   eq.name AS equipment
            FROM exercises e
            LEFT JOIN exercise_catalog ec ON e.catalog_exercise_id = ec.id
            LEFT JOIN muscle_groups mg ON ec.muscle_group_id = mg.id
            LEFT JOIN equipment_catalog eq ON ec.equipment_id = eq.id
            WHERE e.workout_id = ?
            ORDER BY e."order", e.id
            """,
            (workout_id,),
        )
        return [
            ProgramExercise(
                id=row["id"],
                workout_id=row["workout_id"],
                catalog_exercise_id=row["catalog_exercise_id"],
                order=row["order"],
                name=row["name"],
                muscle=row["muscle"],
                muscle_group=row["muscle_group"],
                subcategory=row["subcategory"],
                equipment=row["equipment"],
            )
            for row in rows
        ]

    async def insert(self, workout_id: int, catalog_exercise_id, order: int | None) -> int:
        cursor = await self.session.execute(
            'INSERT INTO exercises (workout_id, catalog_exercise_id, "order") VALUES (?, ?, ?)',
            (workout_id, catalog_exercise_id, order),
        )
        return cursor.lastrowid

    async def update(
        self, exercise_id: int, workout_id: int, catalog_exercise_id, order: int | None
    ) -> int:
        """Update an exercise, only if it belongs to the given workout."""
        cursor = await self.session.execute(
            """
            UPDATE exercises SET catalog_exercise_id = ?, "order" = ?
            WHERE id = ? AND workout_id = ?
            """,
            (catalog_exercise_id, order, exercise_id, workout_id),
        )
        return cursor.rowcount

    async def delete(self, exercise_id: int) -> None:
        await self.session.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))

    async def delete_for_workout(self, workout_id: int) -> None:
        await self.session.execute("DELETE FROM exercises WHERE workout_id = ?", (workout_id,))


class SetRepository:
    """Repository for sets within an exercise."""

    def __init__(self, session: Session):
        self.session = session

    async def ids_for_exercise(self, exercise_id: int) -> list[int]:
        rows = await self.session.query(
            "SELECT id FROM sets WHERE exercise_id = ? ORDER BY id", (exercise_id,)
        )
        return [row["id"] for row in rows]

    async def list_for_exercise(self, exercise_id: int) -> list[ExerciseSet]:
        rows = await self.session.query(
            'SELECT * FROM sets WHERE exercise_id = ? ORDER BY "order", id',
            (exercise_id,),
        )
        return [
            ExerciseSet(
                id=row["id"],
                exercise_id=row["exercise_id"],
                reps=row["reps"],
                weight=row["weight"],
                order=row["order"],
            )
            for row in rows
        ]

    async def insert(self, exercise_id: int, reps: int, weight: int, order: int | None) -> int:
        cursor = await self.session.execute(
            'INSERT INTO sets (exercise_id, reps, weight, "order") VALUES (?, ?, ?, ?)',
            (exercise_id, reps, weight, order),
        )
        return cursor.lastrowid

    async def update(
        self, set_id: int, exercise_id: int, reps: int, weight: int, order: int | None
    ) -> int:
        """Update a set, only if it belongs to the given exercise."""
        cursor = await self.session.execute(
            """
            UPDATE sets SET reps = ?, weight = ?, "order" = ?
            WHERE id = ? AND exercise_id = ?
            """,
            (reps, weight, order, set_id, exercise_id),
        )
        return cursor.rowcount

    async def delete(self, set_id: int) -> None:
        await self.session.execute("DELETE FROM sets WHERE id = ?", (set_id,))

    async def delete_for_exercise(self, exercise_id: int) -> None:
        await self.session.execute("DELETE FROM sets WHERE exercise_id = ?", (exercise_id,))

    async def delete_for_workout(self, workout_id: int) -> None:
        await self.session.execute(
            """
            DELETE FROM sets WHERE exercise_id IN (
                SELECT id FROM exercises WHERE workout_id = ?
            )
            """,
            (workout_id,),
        )


class CatalogRepository:
    """Read-only access to the exercise, equipment and muscle catalogs."""

    def __init__(self, session: Session):
        self.session = session

    async def search_exercises(
        self,
        page: int = 1,
        limit: int = 20,
        name: str | None = None,
        muscles: list[str] | None = None,
        equipment: list[str] | None = None,
    ) -> tuple[list[CatalogExercise], int]:
        """Search the exercise catalog.

        Args:
            page: 1-based page number
            limit: Page size
            name: Case-insensitive substring of the exercise name
            muscles: Muscle names to match exactly (case-insensitive)
            equipment: Equipment names to match exactly (case-insensitive)

        Returns:
            The page of exercises and the total number of matches
        """
        conditions = []
        params: list = []

        if name:
            conditions.append("LOWER(ec.name) LIKE ?")
            params.append(f"%{name.lower()}%")
        if muscles:
            placeholders = ", ".join("?" for _ in muscles)
            conditions.append(f"LOWER(mg.muscle) IN ({placeholders})")
            params.extend(m.lower() for m in muscles)
        if equipment:
            placeholders = ", ".join("?" for _ in equipment)
            conditions.append(f"LOWER(eq.name) IN ({placeholders})")
            params.extend(e.lower() for e in equipment)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        joins = """
            FROM exercise_catalog ec
            JOIN muscle_groups mg ON ec.muscle_group_id = mg.id
            JOIN equipment_catalog eq ON ec.equipment_id = eq.id
        """

        count_row = await self.session.query_one(
            f"SELECT COUNT(*) AS total {joins} {where}", params
        )
        rows = await self.session.query(
            f"""
            SELECT ec.id, ec.name, ec.image_path, mg.muscle, mg.muscle_group,
                   mg.subcategory, eq.name AS equipment
            {joins} {where}
            ORDER BY ec.id
            LIMIT ? OFFSET ?
            """,
            [*params, limit, (page - 1) * limit],
        )
        return [self._row_to_exercise(row) for row in rows], count_row["total"]

    async def get_exercise(self, exercise_id: int) -> CatalogExercise | None:
        row = await self.session.query_one(
            """
            SELECT ec.id, ec.name, ec.image_path, mg.muscle, mg.muscle_group,
                   mg.subcategory, eq.name AS equipment
            FROM exercise_catalog ec
            JOIN muscle_groups mg ON ec.muscle_group_id = mg.id
            JOIN equipment_catalog eq ON ec.equipment_id = eq.id
            WHERE ec.id = ?
            """,
            (exercise_id,),
        )
        if row is None:
            return None
        return self._row_to_exercise(row)

    async def list_equipment(self) -> list[Equipment]:
        rows = await self.session.query("SELECT * FROM equipment_catalog ORDER BY name")
        return [Equipment(id=row["id"], name=row["name"]) for row in rows]

    async def list_muscles(self) -> list[Muscle]:
        rows = await self.session.query("SELECT * FROM muscle_groups ORDER BY muscle")
        return [self._row_to_muscle(row) for row in rows]

    async def get_muscle(self, muscle_id: int) -> Muscle | None:
        row = await self.session.query_one(
            "SELECT * FROM muscle_groups WHERE id = ?", (muscle_id,)
        )
        if row is None:
            return None
        return self._row_to_muscle(row)

    def _row_to_muscle(self, row: aiosqlite.Row) -> Muscle:
        return Muscle(
            id=row["id"],
            muscle=row["muscle"],
            muscle_group=row["muscle_group"],
            subcategory=row["subcategory"],
        )

    def _row_to_exercise(self, row: aiosqlite.Row) -> CatalogExercise:
        return CatalogExercise(
            id=row["id"],
            name=row["name"],
            muscle=row["muscle"],
            muscle_group=row["muscle_group"],
            subcategory=row["subcategory"],
            equipment=row["equipment"],
            image_path=row["image_path"],
        )


class ActiveProgramRepository:
    """Repository for the per-user active program pointer."""

    def __init__(self, session: Session):
        self.session = session

    async def create(self, active: ActiveProgram) -> int:
        cursor = await self.session.execute(
            """
            INSERT INTO active_programs
            (user_id, program_id, start_date, end_date, is_active)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                active.user_id,
                active.program_id,
                active.start_date.isoformat(),
                active.end_date.isoformat() if active.end_date else None,
                1 if active.is_active else 0,
            ),
        )
        return cursor.lastrowid

    async def get_active(self, user_id: int) -> ActiveProgram | None:
        """Get the user's most recently started active program."""
        row = await self.session.query_one(
            """
            SELECT * FROM active_programs
            WHERE user_id = ? AND is_active = 1
            ORDER BY start_date DESC, id DESC
            LIMIT 1
            """,
            (user_id,),
        )
        if row is None:
            return None
        return self._row_to_active(row)

    async def deactivate_all(self, user_id: int) -> int:
        cursor = await self.session.execute(
            "UPDATE active_programs SET is_active = 0 WHERE user_id = ? AND is_active = 1",
            (user_id,),
        )
        return cursor.rowcount

    async def delete_active(self, user_id: int) -> list[ActiveProgram]:
        """Delete the user's active rows and return what was removed."""
        rows = await self.session.query(
            "SELECT * FROM active_programs WHERE user_id = ? AND is_active = 1",
            (user_id,),
        )
        await self.session.execute(
            "DELETE FROM active_programs WHERE user_id = ? AND is_active = 1",
            (user_id,),
        )
        return [self._row_to_active(row) for row in rows]

    async def delete_for_program(self, program_id: int) -> None:
        await self.session.execute(
            "DELETE FROM active_programs WHERE program_id = ?", (program_id,)
        )

    def _row_to_active(self, row: aiosqlite.Row) -> ActiveProgram:
        return ActiveProgram(
            id=row["id"],
            user_id=row["user_id"],
            program_id=row["program_id"],
            start_date=datetime.fromisoformat(row["start_date"]),
            end_date=_parse_timestamp(row["end_date"]),
            is_active=bool(row["is_active"]),
        )


class CompletedWorkoutRepository:
    """Repository for logged workouts and the exercises and sets beneath them."""

    def __init__(self, session: Session):
        self.session = session

    async def create(
        self, user_id: int, program_id: int | None, name: str, duration: int, day: date
    ) -> int:
        cursor = await self.session.execute(
            """
            INSERT INTO completed_workouts (user_id, program_id, name, duration, date)
            VALUES (?, ?, ?, ?, ?)
            """,
            (user_id, program_id, name, duration, day.isoformat()),
        )
        return cursor.lastrowid

    async def add_exercise(self, workout_id: int, catalog_exercise_id, order: int) -> int:
        cursor = await self.session.execute(
            """
            INSERT INTO completed_exercises (workout_id, catalog_exercise_id, "order")
            VALUES (?, ?, ?)
            """,
            (workout_id, catalog_exercise_id, order),
        )
        return cursor.lastrowid

    async def add_set(self, exercise_id: int, reps: int, weight: float, order: int) -> int:
        cursor = await self.session.execute(
            'INSERT INTO completed_sets (exercise_id, reps, weight, "order") VALUES (?, ?, ?, ?)',
            (exercise_id, reps, weight, order),
        )
        return cursor.lastrowid

    async def get(self, workout_id: int) -> CompletedWorkout | None:
        """Get a logged workout with its exercises and sets."""
        row = await self.session.query_one(
            "SELECT * FROM completed_workouts WHERE id = ?", (workout_id,)
        )
        if row is None:
            return None
        workout = self._row_to_workout(row)
        workout.exercises = await self.exercises_for(workout.id)
        return workout

    async def list_between(self, user_id: int, start: date, end: date) -> list[CompletedWorkout]:
        """A user's logged workouts with ``start <= date < end``, newest first."""
        rows = await self.session.query(
            """
            SELECT * FROM completed_workouts
            WHERE user_id = ? AND date >= ? AND date < ?
            ORDER BY date DESC, id DESC
            """,
            (user_id, start.isoformat(), end.isoformat()),
        )
        workouts = [self._row_to_workout(row) for row in rows]
        for workout in workouts:
            workout.exercises = await self.exercises_for(workout.id)
        return workouts

    async def exercises_for(self, workout_id: int) -> list[CompletedExercise]:
        rows = await self.session.query(
            """
            SELECT ce.*, ec.name AS name
            FROM completed_exercises ce
            LEFT JOIN exercise_catalog ec ON ce.catalog_exercise_id = ec.id
            WHERE ce.workout_id = ?
            ORDER BY ce."order", ce.id
            """,
            (workout_id,),
        )
        exercises = []
        for row in rows:
            set_rows = await self.session.query(
                'SELECT * FROM completed_sets WHERE exercise_id = ? ORDER BY "order", id',
                (row["id"],),
            )
            exercises.append(
                CompletedExercise(
                    id=row["id"],
                    workout_id=row["workout_id"],
                    catalog_exercise_id=row["catalog_exercise_id"],
                    order=row["order"],
                    name=row["name"],
                    sets=[
                        CompletedSet(
                            id=s["id"],
                            exercise_id=s["exercise_id"],
                            reps=s["reps"],
                            weight=s["weight"],
                            order=s["order"],
                        )
                        for s in set_rows
                    ],
                )
            )
        return exercises

    async def count_between(self, user_id: int, start: date, end: date) -> int:
        row = await self.session.query_one(
            """
            SELECT COUNT(*) AS total FROM completed_workouts
            WHERE user_id = ? AND date >= ? AND date < ?
            """,
            (user_id, start.isoformat(), end.isoformat()),
        )
        return row["total"]

    async def minutes_by_date(self, user_id: int, start: date, end: date) -> dict[date, int]:
        """Total logged minutes per day in ``[start, end)``."""
        rows = await self.session.query(
            """
            SELECT date, SUM(duration) AS minutes FROM completed_workouts
            WHERE user_id = ? AND date >= ? AND date < ?
            GROUP BY date
            """,
            (user_id, start.isoformat(), end.isoformat()),
        )
        return {date.fromisoformat(row["date"]): row["minutes"] for row in rows}

    def _row_to_workout(self, row: aiosqlite.Row) -> CompletedWorkout:
        return CompletedWorkout(
            id=row["id"],
            user_id=row["user_id"],
            program_id=row["program_id"],
            name=row["name"],
            duration=row["duration"],
            date=date.fromisoformat(row["date"]),
        )


class ExerciseRecordRepository:
    """Repository for per-exercise personal records."""

    def __init__(self, session: Session):
        self.session = session

    async def get_current(self, user_id: int, catalog_exercise_id) -> ExerciseRecord | None:
        row = await self.session.query_one(
            """
            SELECT * FROM exercise_records
            WHERE user_id = ? AND catalog_exercise_id = ? AND is_current_record = 1
            ORDER BY estimated_1rm DESC, id DESC
            LIMIT 1
            """,
            (user_id, catalog_exercise_id),
        )
        if row is None:
            return None
        return self._row_to_record(row)

    async def retire(self, user_id: int, catalog_exercise_id) -> int:
        """Mark the user's current record for an exercise as superseded."""
        cursor = await self.session.execute(
            """
            UPDATE exercise_records SET is_current_record = 0
            WHERE user_id = ? AND catalog_exercise_id = ? AND is_current_record = 1
            """,
            (user_id, catalog_exercise_id),
        )
        return cursor.rowcount

    async def create(self, record: ExerciseRecord) -> int:
        cursor = await self.session.execute(
            """
            INSERT INTO exercise_records
            (user_id, catalog_exercise_id, date, weight, reps, estimated_1rm, is_current_record)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.user_id,
                record.catalog_exercise_id,
                record.date.isoformat(),
                record.weight,
                record.reps,
                record.estimated_1rm,
                1 if record.is_current_record else 0,
            ),
        )
        return cursor.lastrowid

    async def list_current_since(self, user_id: int, since: date) -> list[ExerciseRecord]:
        """Current records set on or after ``since``, strongest first."""
        rows = await self.session.query(
            """
            SELECT er.*, ec.name AS name
            FROM exercise_records er
            JOIN exercise_catalog ec ON er.catalog_exercise_id = ec.id
            WHERE er.user_id = ? AND er.is_current_record = 1 AND er.date >= ?
            ORDER BY er.estimated_1rm DESC, er.id
            """,
            (user_id, since.isoformat()),
        )
        return [self._row_to_record(row) for row in rows]

    def _row_to_record(self, row: aiosqlite.Row) -> ExerciseRecord:
        return ExerciseRecord(
            id=row["id"],
            user_id=row["user_id"],
            catalog_exercise_id=row["catalog_exercise_id"],
            date=date.fromisoformat(row["date"]),
            weight=row["weight"],
            reps=row["reps"],
            estimated_1rm=row["estimated_1rm"],
            is_current_record=bool(row["is_current_record"]),
            name=row["name"] if "name" in row.keys() else None,
        )
