"""User routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ...db.engine import Database
from ...services.users import UserService
from . import get_database

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201)
async def create_user(payload: Any = Body(...), db: Database = Depends(get_database)):
    """Create a user."""
    user = await UserService(db).create(payload)
    return user.to_dict()


@router.get("/{user_id}")
async def get_user(user_id: int, db: Database = Depends(get_database)):
    """Get a user."""
    user = await UserService(db).get(user_id)
    return user.to_dict()
