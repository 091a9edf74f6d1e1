"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from liftbook.db import Database, init_db, seed_catalog
from liftbook.db.repositories import UserRepository
from liftbook.models.user import User
from liftbook.services.programs import ProgramService

from helpers import BENCH_PRESS, OVERHEAD_PRESS, SQUAT


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def db(temp_db_path):
    """An initialized database with the built-in catalog."""
    database = Database(temp_db_path, pool_size=4, acquire_timeout=1.0)
    await init_db(database)
    await seed_catalog(database)
    return database


@pytest.fixture
async def user_id(db):
    """A stored user."""
    async with db.transaction() as session:
        return await UserRepository(session).create(User(email="lifter@example.com", name="Lifter"))


@pytest.fixture
def sample_program_payload(user_id):
    """A two-workout program as a client would create it."""
    return {
        "user_id": user_id,
        "name": "Push Pull",
        "duration": 8,
        "duration_unit": "weeks",
        "days_per_week": 2,
        "main_goal": "strength",
        "workouts": [
            {
                "name": "Push",
                "order": 1,
                "exercises": [
                    {
                        "catalog_exercise_id": BENCH_PRESS,
                        "order": 1,
                        "sets": [
                            {"reps": 10, "weight": 100, "order": 1},
                            {"reps": 8, "weight": 110, "order": 2},
                        ],
                    },
                    {
                        "catalog_exercise_id": OVERHEAD_PRESS,
                        "order": 2,
                        "sets": [{"reps": 10, "weight": 50, "order": 1}],
                    },
                ],
            },
            {
                "name": "Legs",
                "order": 2,
                "exercises": [
                    {
                        "catalog_exercise_id": SQUAT,
                        "order": 1,
                        "sets": [{"reps": 5, "weight": 140, "order": 1}],
                    },
                ],
            },
        ],
    }


@pytest.fixture
async def program(db, sample_program_payload):
    """A stored program, read back with its full tree."""
    service = ProgramService(db)
    program_id = await service.create(sample_program_payload)
    return await service.get(program_id)
