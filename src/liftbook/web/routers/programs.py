"""Program routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ...db.engine import Database
from ...services.programs import ProgramService
from . import get_database

router = APIRouter(tags=["programs"])


@router.get("/users/{user_id}/programs")
async def list_user_programs(user_id: int, db: Database = Depends(get_database)):
    """List all programs of a user with workouts, exercises and sets."""
    programs = await ProgramService(db).list_for_user(user_id)
    return [program.to_dict() for program in programs]


@router.get("/programs/{program_id}")
async def get_program(program_id: int, db: Database = Depends(get_database)):
    """Get one program with its full tree."""
    program = await ProgramService(db).get(program_id)
    return program.to_dict()


@router.post("/programs", status_code=201)
async def create_program(
    payload: Any = Body(...),
    db: Database = Depends(get_database),
):
    """Create a program with its workouts, exercises and sets."""
    program_id = await ProgramService(db).create(payload)
    return {"id": program_id, "message": "Program created successfully"}


@router.put("/programs/{program_id}")
async def update_program(
    program_id: int,
    payload: Any = Body(...),
    db: Database = Depends(get_database),
):
    """Update a program and reconcile its workouts, exercises and sets.

    Children with a known id are updated, children without one are created,
    and stored children missing from the payload are deleted.
    """
    await ProgramService(db).update(program_id, payload)
    return {"message": "Program updated successfully"}


@router.delete("/programs/{program_id}")
async def delete_program(program_id: int, db: Database = Depends(get_database)):
    """Delete a program and all associated data."""
    await ProgramService(db).delete(program_id)
    return {
        "message": "Program and all associated data deleted successfully",
        "deleted_program_id": program_id,
    }
