"""Completed workout logs, personal records and progress summaries.

A log is written once, when the user finishes a session, and is never
reconciled afterwards. It copies the exercises and sets that were actually
performed, so later edits to the program do not rewrite history.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..errors import ValidationRejected
from ..utils.coercion import coerce_float, coerce_int, first_present
from .identity import Existing, classify

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def estimated_one_rep_max(weight: float, reps: int) -> float:
    """Estimate a one-rep max with the Epley formula.

    Examples:
        >>> estimated_one_rep_max(100, 10)
        133.33
        >>> estimated_one_rep_max(100, 0)
        100.0
    """
    return round(weight * (1 + reps / 30.0), 2)


@dataclass
class LoggedSet:
    """A performed set as sent by the client."""

    reps: int
    weight: float

    @property
    def estimated_1rm(self) -> float:
        return estimated_one_rep_max(self.weight, self.reps)


@dataclass
class LoggedExercise:
    """A performed exercise as sent by the client."""

    catalog_exercise_id: int
    sets: list[LoggedSet] = field(default_factory=list)

    def best_set(self) -> LoggedSet | None:
        """The set with the highest estimated one-rep max, earliest on ties."""
        best = None
        for s in self.sets:
            if best is None or s.estimated_1rm > best.estimated_1rm:
                best = s
        return best


@dataclass
class WorkoutLog:
    """A finished session as sent by the client."""

    user_id: int
    name: str
    duration: int
    program_id: int | None = None
    exercises: list[LoggedExercise] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "WorkoutLog":
        """Parse a request body.

        ``user_id``, ``name``, a positive ``duration`` in minutes and an
        ``exercises`` list are required. ``program_id`` is optional.

        Raises:
            ValidationRejected: If a required field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValidationRejected("Workout log must be an object")

        user = classify(first_present(data, "user_id", "userId"))
        name = data.get("name")
        duration = coerce_int(data.get("duration"))
        exercises = data.get("exercises")
        if not isinstance(user, Existing) or not name or duration <= 0:
            raise ValidationRejected("'user_id', 'name' and a positive 'duration' are required")
        if not isinstance(exercises, list):
            raise ValidationRejected("'exercises' must be a list")

        program = classify(first_present(data, "program_id", "programId"))
        return cls(
            user_id=user.id,
            name=str(name),
            duration=duration,
            program_id=program.id if isinstance(program, Existing) else None,
            exercises=[_parse_exercise(ex) for ex in exercises],
        )


def _parse_exercise(data: Any) -> LoggedExercise:
    if not isinstance(data, dict):
        raise ValidationRejected("Each entry in 'exercises' must be an object")
    sets = data.get("sets") or []
    if not isinstance(sets, list) or not all(isinstance(s, dict) for s in sets):
        raise ValidationRejected("'sets' must be a list of objects")
    catalog = classify(first_present(data, "catalog_exercise_id", "catalogExerciseId"))
    if not isinstance(catalog, Existing):
        raise ValidationRejected("Each exercise needs a 'catalog_exercise_id'")
    return LoggedExercise(
        catalog_exercise_id=catalog.id,
        sets=[
            LoggedSet(reps=coerce_int(s.get("reps")), weight=coerce_float(s.get("weight")))
            for s in sets
        ],
    )


@dataclass
class CompletedSet:
    id: int
    exercise_id: int
    reps: int
    weight: float
    order: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "reps": self.reps,
            "weight": self.weight,
            "order": self.order,
        }


@dataclass
class CompletedExercise:
    id: int
    workout_id: int
    catalog_exercise_id: int
    order: int
    name: str | None = None
    sets: list[CompletedSet] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "catalog_exercise_id": self.catalog_exercise_id,
            "order": self.order,
            "name": self.name,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class CompletedWorkout:
    """A stored workout log."""

    id: int
    user_id: int
    name: str
    duration: int
    date: date
    program_id: int | None = None
    exercises: list[CompletedExercise] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "program_id": self.program_id,
            "name": self.name,
            "duration": self.duration,
            "date": self.date.isoformat(),
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class ExerciseRecord:
    """A user's best estimated one-rep max for one catalog exercise."""

    user_id: int
    catalog_exercise_id: int
    date: date
    weight: float
    reps: int
    estimated_1rm: float
    is_current_record: bool = True
    name: str | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "catalog_exercise_id": self.catalog_exercise_id,
            "name": self.name,
            "date": self.date.isoformat(),
            "weight": self.weight,
            "reps": self.reps,
            "estimated_1rm": self.estimated_1rm,
        }


@dataclass
class ProgressSummary:
    """Workout counts for the current month and minutes per day this week."""

    monthly_count: int
    weekly_count: int
    daily_minutes: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "monthly_count": self.monthly_count,
            "weekly_count": self.weekly_count,
            "weekly_workouts": [
                {"day_name": day, "minutes": self.daily_minutes.get(day, 0)}
                for day in DAY_NAMES
            ],
        }
