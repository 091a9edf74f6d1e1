"""Reconciliation of a program's nested children against stored rows.

A client sends the complete desired tree (workouts -> exercises -> sets).
Each level is brought in line with one algorithm:

1. Fetch the ids the parent currently owns.
2. Delete owned ids the client no longer mentions, descendants first.
3. Update children whose id the parent owns; insert everything else.
4. Recurse into each child's own list.

``ChildReconciler`` implements that loop once; the three subclasses only
supply the SQL for their level. Everything runs on the caller's session, so
the whole tree commits or rolls back together.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from loguru import logger

from ..db.engine import Session
from ..db.repositories import ProgramExerciseRepository, SetRepository, WorkoutRepository
from ..models.identity import Existing
from ..models.program import IncomingExercise, IncomingSet, IncomingWorkout

Item = TypeVar("Item", IncomingWorkout, IncomingExercise, IncomingSet)


@dataclass
class LevelStats:
    """Row counts touched at one level of the tree."""

    inserted: int = 0
    updated: int = 0
    deleted: int = 0


@dataclass
class ReconcileStats:
    """Row counts touched across a whole reconciliation."""

    levels: dict[str, LevelStats] = field(default_factory=dict)

    def level(self, name: str) -> LevelStats:
        return self.levels.setdefault(name, LevelStats())

    @property
    def inserted(self) -> int:
        return sum(s.inserted for s in self.levels.values())

    @property
    def updated(self) -> int:
        return sum(s.updated for s in self.levels.values())

    @property
    def deleted(self) -> int:
        return sum(s.deleted for s in self.levels.values())


class ChildReconciler(ABC, Generic[Item]):
    """Makes the children of one parent match an incoming list."""

    name: str = "child"

    def __init__(self, child: "ChildReconciler | None" = None):
        self.child = child

    @abstractmethod
    async def fetch_ids(self, session: Session, parent_id: int) -> list[int]:
        """Ids currently owned by the parent."""

    @abstractmethod
    async def delete_descendants(self, session: Session, child_id: int) -> None:
        """Remove everything beneath a child that is about to be deleted."""

    @abstractmethod
    async def delete(self, session: Session, child_id: int) -> None:
        """Remove one child row."""

    @abstractmethod
    async def insert(self, session: Session, parent_id: int, item: Item) -> int:
        """Insert a new child row and return its id."""

    @abstractmethod
    async def update(self, session: Session, parent_id: int, child_id: int, item: Item) -> None:
        """Update an owned child row."""

    def children_of(self, item: Item) -> list[Any]:
        """The item's own incoming children, handed to ``self.child``."""
        return []

    async def reconcile(
        self,
        session: Session,
        parent_id: int,
        incoming: list[Item],
        stats: ReconcileStats | None = None,
    ) -> list[int]:
        """Reconcile the parent's children; returns the surviving ids in input order.

        An ``Existing`` id the parent does not own, or one already claimed by
        an earlier item in the list, gets a fresh row instead.
        """
        stats = stats if stats is not None else ReconcileStats()
        counts = LevelStats()

        persisted = set(await self.fetch_ids(session, parent_id))
        claimed: set[int] = set()
        matches: list[int | None] = []
        for item in incoming:
            identity = item.identity
            if (
                isinstance(identity, Existing)
                and identity.id in persisted
                and identity.id not in claimed
            ):
                claimed.add(identity.id)
                matches.append(identity.id)
            else:
                matches.append(None)

        for child_id in sorted(persisted - claimed):
            await self.delete_descendants(session, child_id)
            await self.delete(session, child_id)
            counts.deleted += 1

        surviving = []
        for item, match in zip(incoming, matches):
            if match is not None:
                await self.update(session, parent_id, match, item)
                child_id = match
                counts.updated += 1
            else:
                child_id = await self.insert(session, parent_id, item)
                counts.inserted += 1

            if self.child is not None:
                await self.child.reconcile(session, child_id, self.children_of(item), stats)
            surviving.append(child_id)

        level = stats.level(self.name)
        level.inserted += counts.inserted
        level.updated += counts.updated
        level.deleted += counts.deleted
        logger.debug(
            f"Reconciled {self.name}s of parent {parent_id}",
            inserted=counts.inserted,
            updated=counts.updated,
            deleted=counts.deleted,
        )
        return surviving


class SetReconciler(ChildReconciler[IncomingSet]):
    """Sets of one exercise."""

    name = "set"

    async def fetch_ids(self, session: Session, parent_id: int) -> list[int]:
        return await SetRepository(session).ids_for_exercise(parent_id)

    async def delete_descendants(self, session: Session, child_id: int) -> None:
        pass

    async def delete(self, session: Session, child_id: int) -> None:
        await SetRepository(session).delete(child_id)

    async def insert(self, session: Session, parent_id: int, item: IncomingSet) -> int:
        return await SetRepository(session).insert(parent_id, item.reps, item.weight, item.order)

    async def update(
        self, session: Session, parent_id: int, child_id: int, item: IncomingSet
    ) -> None:
        await SetRepository(session).update(
            child_id, parent_id, item.reps, item.weight, item.order
        )


class ExerciseReconciler(ChildReconciler[IncomingExercise]):
    """Exercises of one workout, and their sets."""

    name = "exercise"

    def __init__(self, child: ChildReconciler | None = None):
        super().__init__(child or SetReconciler())

    async def fetch_ids(self, session: Session, parent_id: int) -> list[int]:
        return await ProgramExerciseRepository(session).ids_for_workout(parent_id)

    async def delete_descendants(self, session: Session, child_id: int) -> None:
        await SetRepository(session).delete_for_exercise(child_id)

    async def delete(self, session: Session, child_id: int) -> None:
        await ProgramExerciseRepository(session).delete(child_id)

    async def insert(self, session: Session, parent_id: int, item: IncomingExercise) -> int:
        return await ProgramExerciseRepository(session).insert(
            parent_id, item.catalog_exercise_id, item.order
        )

    async def update(
        self, session: Session, parent_id: int, child_id: int, item: IncomingExercise
    ) -> None:
        await ProgramExerciseRepository(session).update(
            child_id, parent_id, item.catalog_exercise_id, item.order
        )

    def children_of(self, item: IncomingExercise) -> list[IncomingSet]:
        return item.sets


class WorkoutReconciler(ChildReconciler[IncomingWorkout]):
    """Workouts of one program, and everything beneath them."""

    name = "workout"

    def __init__(self, child: ChildReconciler | None = None):
        super().__init__(child or ExerciseReconciler())

    async def fetch_ids(self, session: Session, parent_id: int) -> list[int]:
        return await WorkoutRepository(session).ids_for_program(parent_id)

    async def delete_descendants(self, session: Session, child_id: int) -> None:
        await SetRepository(session).delete_for_workout(child_id)
        await ProgramExerciseRepository(session).delete_for_workout(child_id)

    async def delete(self, session: Session, child_id: int) -> None:
        await WorkoutRepository(session).delete(child_id)

    async def insert(self, session: Session, parent_id: int, item: IncomingWorkout) -> int:
        return await WorkoutRepository(session).insert(parent_id, item.name, item.order)

    async def update(
        self, session: Session, parent_id: int, child_id: int, item: IncomingWorkout
    ) -> None:
        await WorkoutRepository(session).update(child_id, parent_id, item.name, item.order)

    def children_of(self, item: IncomingWorkout) -> list[IncomingExercise]:
        return item.exercises
