"""Progress routes."""

from fastapi import APIRouter, Depends

from ...db.engine import Database
from ...services.workout_log import WorkoutLogService
from . import get_database

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/summary/{user_id}")
async def progress_summary(user_id: int, db: Database = Depends(get_database)):
    """Workouts this month and this week, with minutes per weekday."""
    summary = await WorkoutLogService(db).summary(user_id)
    return summary.to_dict()


@router.get("/records/{user_id}")
async def progress_records(user_id: int, db: Database = Depends(get_database)):
    """Personal records set this month."""
    records = await WorkoutLogService(db).records(user_id)
    return {"records": [r.to_dict() for r in records]}
