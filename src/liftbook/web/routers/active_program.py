"""Active program routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ...db.engine import Database
from ...errors import ValidationRejected
from ...services.active_program import ActiveProgramService
from . import get_database

router = APIRouter(prefix="/active-program", tags=["active-program"])


@router.get("/user/{user_id}")
async def get_active_program(user_id: int, db: Database = Depends(get_database)):
    """Get the user's active program with its full tree."""
    active = await ActiveProgramService(db).get_for_user(user_id)
    return {"active_program": active}


@router.post("", status_code=201)
async def activate_program(
    payload: Any = Body(...),
    db: Database = Depends(get_database),
):
    """Activate a program for a user, replacing any current one."""
    if not isinstance(payload, dict):
        raise ValidationRejected("Both user_id and program_id are required")

    active = await ActiveProgramService(db).activate(
        payload.get("user_id", payload.get("userId")),
        payload.get("program_id", payload.get("programId")),
    )
    return {
        "message": "Program activated successfully",
        "active_program": active.to_dict(),
    }


@router.delete("/{user_id}")
async def deactivate_program(user_id: int, db: Database = Depends(get_database)):
    """Clear the user's active program."""
    removed = await ActiveProgramService(db).deactivate(user_id)
    if removed is None:
        return {"message": "No active program to delete", "deactivated_program": None}
    return {
        "message": "Active program deleted successfully",
        "deactivated_program": removed.to_dict(),
    }
