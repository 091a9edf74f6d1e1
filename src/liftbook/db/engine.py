"""Database engine setup, connection handling and schema initialization."""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterable

import aiosqlite
from loguru import logger

from ..config import Settings
from ..errors import DatabaseUnavailable


class Session:
    """A single checked-out connection.

    All statements are parameterized. The connection runs with
    ``isolation_level=None`` so transactions are opened and closed only by
    explicit ``begin``/``commit``/``rollback`` calls.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn

    async def query(self, sql: str, params: Iterable[Any] = ()) -> list[aiosqlite.Row]:
        """Run a SELECT and return every row."""
        cursor = await self.conn.execute(sql, tuple(params))
        rows = await cursor.fetchall()
        await cursor.close()
        return list(rows)

    async def query_one(self, sql: str, params: Iterable[Any] = ()) -> aiosqlite.Row | None:
        """Run a SELECT and return the first row, if any."""
        cursor = await self.conn.execute(sql, tuple(params))
        row = await cursor.fetchone()
        await cursor.close()
        return row

    async def execute(self, sql: str, params: Iterable[Any] = ()) -> aiosqlite.Cursor:
        """Run a write statement; the cursor carries ``lastrowid``/``rowcount``."""
        return await self.conn.execute(sql, tuple(params))

    @property
    def in_transaction(self) -> bool:
        return self.conn.in_transaction

    async def begin(self) -> None:
        # IMMEDIATE takes the write lock up front so concurrent writers queue
        await self.conn.execute("BEGIN IMMEDIATE")
        logger.debug("BEGIN")

    async def commit(self) -> None:
        await self.conn.execute("COMMIT")
        logger.debug("COMMIT")

    async def rollback(self) -> None:
        if not self.conn.in_transaction:
            return
        await self.conn.execute("ROLLBACK")
        logger.debug("ROLLBACK")


class Database:
    """Persistence gateway: hands out sessions within a bounded connection budget.

    Constructed once per process (app lifespan or CLI command) and passed
    to whatever needs storage.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 10,
        acquire_timeout: float = 2.0,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.acquire_timeout = acquire_timeout
        self._slots = asyncio.Semaphore(pool_size)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a database handle from application settings."""
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return cls(
            settings.db_path,
            pool_size=settings.pool_size,
            acquire_timeout=settings.acquire_timeout,
        )

    @property
    def exists(self) -> bool:
        return Path(self.db_path).exists()

    async def _acquire(self) -> None:
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            logger.error(
                "Timed out acquiring a database connection",
                timeout=self.acquire_timeout,
                pool_size=self.pool_size,
            )
            raise DatabaseUnavailable(
                f"No database connection available within {self.acquire_timeout}s"
            ) from None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Session]:
        """Check out a connection in autocommit mode."""
        await self._acquire()
        try:
            async with aiosqlite.connect(self.db_path, isolation_level=None) as conn:
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA foreign_keys = ON")
                yield Session(conn)
        finally:
            self._slots.release()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Session]:
        """Check out a connection and run the block inside one transaction.

        Commits when the block exits normally. On any exception, including
        cancellation, the transaction is rolled back before the connection
        is released.
        """
        async with self.session() as session:
            await session.begin()
            try:
                yield session
                await session.commit()
            except BaseException:
                await asyncio.shield(session.rollback())
                raise


async def init_db(db: Database) -> None:
    """Initialize the database schema."""
    async with db.session() as session:
        # Users
        await session.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT UNIQUE NOT NULL,
                name TEXT NOT NULL DEFAULT '',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Read-only catalogs
        await session.execute("""
            CREATE TABLE IF NOT EXISTS muscle_groups (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                muscle TEXT UNIQUE NOT NULL,
                muscle_group TEXT NOT NULL,
                subcategory TEXT DEFAULT ''
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS equipment_catalog (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS exercise_catalog (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL,
                muscle_group_id INTEGER NOT NULL,
                equipment_id INTEGER NOT NULL,
                image_path TEXT,
                FOREIGN KEY (muscle_group_id) REFERENCES muscle_groups(id),
                FOREIGN KEY (equipment_id) REFERENCES equipment_catalog(id)
            )
        """)

        # Program aggregate. No ON DELETE CASCADE: children are removed
        # explicitly, sets before exercises before workouts.
        await session.execute("""
            CREATE TABLE IF NOT EXISTS programs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                duration INTEGER,
                duration_unit TEXT DEFAULT 'weeks',
                days_per_week INTEGER,
                main_goal TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id)
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                program_id INTEGER NOT NULL,
                name TEXT NOT NULL DEFAULT '',
                "order" INTEGER,
                FOREIGN KEY (program_id) REFERENCES programs(id)
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                workout_id INTEGER NOT NULL,
                catalog_exercise_id INTEGER NOT NULL,
                "order" INTEGER,
                FOREIGN KEY (workout_id) REFERENCES workouts(id),
                FOREIGN KEY (catalog_exercise_id) REFERENCES exercise_catalog(id)
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS sets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                exercise_id INTEGER NOT NULL,
                reps INTEGER NOT NULL DEFAULT 0,
                weight INTEGER NOT NULL DEFAULT 0,
                "order" INTEGER,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id)
            )
        """)

        await session.execute("""
            CREATE TABLE IF NOT EXISTS active_programs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                program_id INTEGER NOT NULL,
                start_date TIMESTAMP NOT NULL,
                end_date TIMESTAMP,
                is_active INTEGER DEFAULT 1,
                FOREIGN KEY (user_id) REFERENCES users(id),
                FOREIGN KEY (program_id) REFERENCES programs(id)
            )
        """)

        # Workout logs. Written once when a session is finished; program_id
        # is cleared if the program is later deleted.
        await session.execute("""
            CREATE TABLE IF NOT EXISTS completed_workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                program_id INTEGER,
                name TEXT NOT NULL,
                duration INTEGER NOT NULL,
                date TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id),
                FOREIGN KEY (program_id) REFERENCES programs(id)
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS completed_exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                workout_id INTEGER NOT NULL,
                catalog_exercise_id INTEGER NOT NULL,
                "order" INTEGER,
                FOREIGN KEY (workout_id) REFERENCES completed_workouts(id),
                FOREIGN KEY (catalog_exercise_id) REFERENCES exercise_catalog(id)
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS completed_sets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                exercise_id INTEGER NOT NULL,
                reps INTEGER NOT NULL DEFAULT 0,
                weight REAL NOT NULL DEFAULT 0,
                "order" INTEGER,
                FOREIGN KEY (exercise_id) REFERENCES completed_exercises(id)
            )
        """)
        await session.execute("""
            CREATE TABLE IF NOT EXISTS exercise_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                catalog_exercise_id INTEGER NOT NULL,
                date TEXT NOT NULL,
                weight REAL NOT NULL,
                reps INTEGER NOT NULL,
                estimated_1rm REAL NOT NULL,
                is_current_record INTEGER DEFAULT 1,
                FOREIGN KEY (user_id) REFERENCES users(id),
                FOREIGN KEY (catalog_exercise_id) REFERENCES exercise_catalog(id)
            )
        """)

        # Create indexes for common queries
        for table, column in (
            ("programs", "user_id"),
            ("workouts", "program_id"),
            ("exercises", "workout_id"),
            ("sets", "exercise_id"),
            ("active_programs", "user_id"),
            ("completed_workouts", "user_id"),
            ("completed_exercises", "workout_id"),
            ("completed_sets", "exercise_id"),
            ("exercise_records", "user_id"),
            ("exercise_catalog", "muscle_group_id"),
            ("exercise_catalog", "equipment_id"),
        ):
            await session.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{table}_{column} ON {table}({column})"
            )

    logger.info("Database schema initialized", path=str(db.db_path))


async def seed_catalog(db: Database, catalog=None) -> int:
    """Seed the catalog tables; returns the number of exercises written.

    Uses the built-in catalog when none is given. Existing rows are kept.
    """
    from ..models.catalog import BUILTIN_CATALOG

    if catalog is None:
        catalog = BUILTIN_CATALOG

    count = 0
    async with db.transaction() as session:
        for muscle in catalog.muscles:
            await session.execute(
                """
                INSERT OR IGNORE INTO muscle_groups (muscle, muscle_group, subcategory)
                VALUES (?, ?, ?)
                """,
                (muscle.muscle, muscle.muscle_group, muscle.subcategory),
            )
        for name in catalog.equipment:
            await session.execute(
                "INSERT OR IGNORE INTO equipment_catalog (name) VALUES (?)", (name,)
            )

        for exercise in catalog.exercises:
            muscle_row = await session.query_one(
                "SELECT id FROM muscle_groups WHERE muscle = ?", (exercise.muscle,)
            )
            equipment_row = await session.query_one(
                "SELECT id FROM equipment_catalog WHERE name = ?", (exercise.equipment,)
            )
            if muscle_row is None or equipment_row is None:
                logger.bind(muscle=exercise.muscle, equipment=exercise.equipment).warning(
                    f"Skipping catalog exercise {exercise.name}: unknown muscle or equipment"
                )
                continue

            cursor = await session.execute(
                """
                INSERT OR IGNORE INTO exercise_catalog
                (name, muscle_group_id, equipment_id, image_path)
                VALUES (?, ?, ?, ?)
                """,
                (exercise.name, muscle_row["id"], equipment_row["id"], exercise.image_path),
            )
            count += cursor.rowcount

    logger.info(f"Seeded {count} catalog exercises")
    return count
