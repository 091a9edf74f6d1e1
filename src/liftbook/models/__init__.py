"""Data models for liftbook."""

from .active_program import ActiveProgram
from .catalog import Catalog, CatalogExercise, Equipment, Muscle
from .identity import NEW, Existing, New, classify
from .program import (
    DurationUnit,
    ExerciseSet,
    IncomingExercise,
    IncomingSet,
    IncomingWorkout,
    Program,
    ProgramExercise,
    ProgramFields,
    ProgramUpdate,
    Workout,
)
from .user import User
from .workout_log import (
    CompletedExercise,
    CompletedSet,
    CompletedWorkout,
    ExerciseRecord,
    ProgressSummary,
    WorkoutLog,
)

__all__ = [
    "ActiveProgram",
    "Catalog",
    "CatalogExercise",
    "classify",
    "CompletedExercise",
    "CompletedSet",
    "CompletedWorkout",
    "DurationUnit",
    "Equipment",
    "ExerciseRecord",
    "ExerciseSet",
    "Existing",
    "IncomingExercise",
    "IncomingSet",
    "IncomingWorkout",
    "Muscle",
    "NEW",
    "New",
    "Program",
    "ProgramExercise",
    "ProgramFields",
    "ProgramUpdate",
    "ProgressSummary",
    "User",
    "Workout",
    "WorkoutLog",
]
