"""Workout routes: program workouts, logging finished sessions and history."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ...db.engine import Database
from ...services.programs import ProgramService
from ...services.workout_log import WorkoutLogService
from . import get_database

router = APIRouter(tags=["workouts"])


@router.get("/workout/{workout_id}")
async def get_workout(workout_id: int, db: Database = Depends(get_database)):
    """Get a program workout with its exercises and sets."""
    workout = await ProgramService(db).get_workout(workout_id)
    return workout.to_dict()


@router.post("/workout/complete", status_code=201)
async def complete_workout(
    payload: Any = Body(...),
    db: Database = Depends(get_database),
):
    """Log a finished workout."""
    workout_id = await WorkoutLogService(db).complete(payload)
    return {"message": "Workout completed successfully", "workout_id": workout_id}


@router.get("/workout/completed/{workout_id}")
async def get_completed_workout(workout_id: int, db: Database = Depends(get_database)):
    workout = await WorkoutLogService(db).get(workout_id)
    return workout.to_dict()


@router.get("/workout-history/{user_id}/{year}/{month}")
async def workout_history(
    user_id: int, year: int, month: int, db: Database = Depends(get_database)
):
    """A user's logged workouts for one month."""
    workouts = await WorkoutLogService(db).history(user_id, year, month)
    return {"workouts": [w.to_dict() for w in workouts]}
