"""Database layer for liftbook."""

from .engine import Database, Session, init_db, seed_catalog
from .repositories import (
    ActiveProgramRepository,
    CatalogRepository,
    CompletedWorkoutRepository,
    ExerciseRecordRepository,
    ProgramExerciseRepository,
    ProgramRepository,
    SetRepository,
    UserRepository,
    WorkoutRepository,
)

__all__ = [
    "ActiveProgramRepository",
    "CatalogRepository",
    "CompletedWorkoutRepository",
    "Database",
    "ExerciseRecordRepository",
    "init_db",
    "ProgramExerciseRepository",
    "ProgramRepository",
    "seed_catalog",
    "Session",
    "SetRepository",
    "UserRepository",
    "WorkoutRepository",
]
