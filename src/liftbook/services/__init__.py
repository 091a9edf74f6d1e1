"""Services for liftbook."""

from .active_program import ActiveProgramService
from .programs import ProgramService
from .reconcile import (
    ChildReconciler,
    ExerciseReconciler,
    ReconcileStats,
    SetReconciler,
    WorkoutReconciler,
)
from .users import UserService
from .workout_log import WorkoutLogService

__all__ = [
    "ActiveProgramService",
    "ChildReconciler",
    "ExerciseReconciler",
    "ProgramService",
    "ReconcileStats",
    "SetReconciler",
    "UserService",
    "WorkoutLogService",
    "WorkoutReconciler",
]
