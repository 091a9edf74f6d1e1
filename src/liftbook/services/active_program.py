"""Tracks which program each user is currently running."""

from datetime import datetime

from loguru import logger

from ..db.engine import Database
from ..db.repositories import ActiveProgramRepository, ProgramRepository
from ..errors import NotFound, ValidationRejected
from ..models.active_program import ActiveProgram
from ..models.identity import Existing, classify
from .programs import load_tree, storage_errors


class ActiveProgramService:
    """Activate, look up and clear a user's active program."""

    def __init__(self, db: Database):
        self.db = db

    async def activate(
        self, user_id, program_id, now: datetime | None = None
    ) -> ActiveProgram:
        """Make ``program_id`` the user's only active program.

        Any currently active program is deactivated in the same transaction.
        The end date follows from the program's duration and unit.

        Raises:
            ValidationRejected: If either id is missing or not a whole number
            NotFound: If the program does not exist
        """
        user = classify(user_id)
        program = classify(program_id)
        if not isinstance(user, Existing) or not isinstance(program, Existing):
            raise ValidationRejected("Both user_id and program_id are required")

        with storage_errors(program_id=program.id, user_id=user.id):
            async with self.db.transaction() as session:
                stored = await ProgramRepository(session).get(program.id)
                if stored is None:
                    raise NotFound(f"Program {program.id} not found")

                active = ActiveProgram.start(
                    user_id=user.id,
                    program_id=stored.id,
                    duration=stored.duration,
                    duration_unit=stored.duration_unit,
                    now=now,
                )
                repo = ActiveProgramRepository(session)
                await repo.deactivate_all(user.id)
                active.id = await repo.create(active)

        logger.info(f"Activated program {program.id} for user {user.id}")
        return active

    async def get_for_user(self, user_id: int) -> dict | None:
        """Get the user's active program with its full tree, or None."""
        async with self.db.session() as session:
            active = await ActiveProgramRepository(session).get_active(user_id)
            if active is None:
                return None

            program = await ProgramRepository(session).get(active.program_id)
            if program is None:
                return None
            await load_tree(session, program)

        return {
            **program.to_dict(),
            "active_program_id": active.id,
            "program_id": program.id,
            "start_date": active.start_date.isoformat(),
            "end_date": active.end_date.isoformat() if active.end_date else None,
        }

    async def deactivate(self, user_id: int) -> ActiveProgram | None:
        """Remove the user's active program; returns what was removed, if anything."""
        with storage_errors(user_id=user_id):
            async with self.db.transaction() as session:
                removed = await ActiveProgramRepository(session).delete_active(user_id)

        if not removed:
            logger.info(f"No active program to deactivate for user {user_id}")
            return None
        return removed[0]
