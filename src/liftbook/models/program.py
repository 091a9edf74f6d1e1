"""Training program data models.

Two families live here: the stored shape of a program tree (``Program`` down
to ``ExerciseSet``), and the incoming payloads a client sends to create or
update one (``ProgramUpdate`` down to ``IncomingSet``).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..errors import ValidationRejected
from ..utils.coercion import coerce_int, first_present
from .identity import NEW, Identity, classify


class DurationUnit(str, Enum):
    """Units a program duration can be expressed in."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def parse(cls, value: str | None) -> "DurationUnit":
        """Parse a unit, falling back to days for anything unrecognized."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.DAYS


@dataclass
class ExerciseSet:
    """A stored set."""

    id: int
    exercise_id: int
    reps: int
    weight: int
    order: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "reps": self.reps,
            "weight": self.weight,
            "order": self.order,
        }


@dataclass
class ProgramExercise:
    """A stored exercise within a workout, joined with its catalog entry."""

    id: int
    workout_id: int
    catalog_exercise_id: int
    order: int | None = None
    name: str | None = None
    muscle: str | None = None
    muscle_group: str | None = None
    subcategory: str | None = None
    equipment: str | None = None
    sets: list[ExerciseSet] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "catalog_exercise_id": self.catalog_exercise_id,
            "order": self.order,
            "name": self.name,
            "muscle": self.muscle,
            "muscle_group": self.muscle_group,
            "subcategory": self.subcategory,
            "equipment": self.equipment,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class Workout:
    """A stored workout."""

    id: int
    program_id: int
    name: str
    order: int | None = None
    exercises: list[ProgramExercise] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "program_id": self.program_id,
            "name": self.name,
            "order": self.order,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class Program:
    """A stored training program and its workouts."""

    id: int
    user_id: int
    name: str
    duration: int | None = None
    duration_unit: str | None = None
    days_per_week: int | None = None
    main_goal: str | None = None
    created_at: datetime | None = None
    workouts: list[Workout] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "duration": self.duration,
            "duration_unit": self.duration_unit,
            "days_per_week": self.days_per_week,
            "main_goal": self.main_goal,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "workouts": [w.to_dict() for w in self.workouts],
        }

    @property
    def total_sets(self) -> int:
        return sum(len(ex.sets) for w in self.workouts for ex in w.exercises)

    def get_summary(self) -> str:
        """Generate a plain-text summary of the program."""
        summary = f"Program: {self.name}\n"
        if self.main_goal:
            summary += f"Goal: {self.main_goal}\n"
        if self.duration:
            summary += f"Duration: {self.duration} {self.duration_unit or 'days'}"
            if self.days_per_week:
                summary += f", {self.days_per_week} days/week"
            summary += "\n"
        summary += "\n"

        for workout in self.workouts:
            summary += f"{workout.name}:\n"
            for ex in workout.exercises:
                label = ex.name or f"catalog #{ex.catalog_exercise_id}"
                sets = ", ".join(f"{s.reps}x{s.weight}" for s in ex.sets) or "no sets"
                summary += f"  - {label}: {sets}\n"

        return summary


def _as_list(data: dict, *keys: str, what: str) -> list:
    value = first_present(data, *keys, default=None)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationRejected(f"'{what}' must be a list, got {type(value).__name__}")
    return value


def _as_object(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ValidationRejected(f"Each entry in '{what}' must be an object")
    return value


@dataclass
class IncomingSet:
    """A set as sent by the client."""

    identity: Identity
    reps: int
    weight: int
    order: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "IncomingSet":
        # Unparseable reps/weight become 0 rather than rejecting the request
        return cls(
            identity=classify(data.get("id")),
            reps=coerce_int(data.get("reps")),
            weight=coerce_int(data.get("weight")),
            order=coerce_int(data.get("order"), default=None),
        )


@dataclass
class IncomingExercise:
    """An exercise as sent by the client."""

    identity: Identity
    catalog_exercise_id: Any
    order: int | None = None
    sets: list[IncomingSet] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "IncomingExercise":
        return cls(
            identity=classify(data.get("id")),
            catalog_exercise_id=first_present(data, "catalog_exercise_id", "catalogExerciseId"),
            order=coerce_int(data.get("order"), default=None),
            sets=[
                IncomingSet.from_dict(_as_object(s, "sets"))
                for s in _as_list(data, "sets", what="sets")
            ],
        )


@dataclass
class IncomingWorkout:
    """A workout as sent by the client."""

    identity: Identity
    name: str
    order: int | None = None
    exercises: list[IncomingExercise] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "IncomingWorkout":
        return cls(
            identity=classify(data.get("id")),
            name=data.get("name") or "",
            order=coerce_int(data.get("order"), default=None),
            exercises=[
                IncomingExercise.from_dict(_as_object(ex, "exercises"))
                for ex in _as_list(data, "exercises", what="exercises")
            ],
        )


@dataclass
class ProgramFields:
    """Scalar program columns."""

    name: str | None
    duration: int | None = None
    duration_unit: str | None = None
    days_per_week: int | None = None
    main_goal: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ProgramFields":
        return cls(
            name=data.get("name"),
            duration=coerce_int(
                first_present(data, "duration", "program_duration", "programDuration"),
                default=None,
            ),
            duration_unit=first_present(data, "duration_unit", "durationUnit"),
            days_per_week=coerce_int(
                first_present(data, "days_per_week", "daysPerWeek"), default=None
            ),
            main_goal=first_present(data, "main_goal", "mainGoal"),
        )


@dataclass
class ProgramUpdate:
    """A full program tree as sent by the client.

    Parsing happens once, here: every child's identity is classified and
    every structural problem is rejected before any storage is touched.
    """

    fields: ProgramFields
    workouts: list[IncomingWorkout] = field(default_factory=list)
    user_id: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "ProgramUpdate":
        """Parse a request body.

        Raises:
            ValidationRejected: If the payload or any nested list is malformed
        """
        if not isinstance(data, dict):
            raise ValidationRejected("Program payload must be an object")

        return cls(
            fields=ProgramFields.from_dict(data),
            workouts=[
                IncomingWorkout.from_dict(_as_object(w, "workouts"))
                for w in _as_list(data, "workouts", what="workouts")
            ],
            user_id=coerce_int(first_present(data, "user_id", "userId"), default=None),
        )

    def count_new(self) -> int:
        """Number of entities in the tree that will get fresh rows if unmatched."""
        total = 0
        for w in self.workouts:
            total += w.identity is NEW
            for ex in w.exercises:
                total += ex.identity is NEW
                total += sum(s.identity is NEW for s in ex.sets)
        return total
