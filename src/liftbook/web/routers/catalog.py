"""Exercise, equipment and muscle catalog routes."""

import math

from fastapi import APIRouter, Depends, Query

from ...db.engine import Database
from ...db.repositories import CatalogRepository
from ...errors import NotFound
from . import get_database

router = APIRouter(tags=["catalog"])


@router.get("/exercise-catalog")
async def list_exercise_catalog(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    name: str | None = None,
    muscles: list[str] | None = Query(None),
    equipment: list[str] | None = Query(None),
    db: Database = Depends(get_database),
):
    """Search the exercise catalog with pagination."""
    async with db.session() as session:
        exercises, total = await CatalogRepository(session).search_exercises(
            page=page,
            limit=limit,
            name=name,
            muscles=muscles,
            equipment=equipment,
        )

    offset = (page - 1) * limit
    return {
        "exercises": [ex.to_dict() for ex in exercises],
        "pagination": {
            "total": total,
            "current_page": page,
            "total_pages": math.ceil(total / limit),
            "has_more": offset + len(exercises) < total,
        },
    }


@router.get("/exercise-catalog/{exercise_id}")
async def get_catalog_exercise(exercise_id: int, db: Database = Depends(get_database)):
    """Get one catalog exercise."""
    async with db.session() as session:
        exercise = await CatalogRepository(session).get_exercise(exercise_id)
    if exercise is None:
        raise NotFound(f"Catalog exercise {exercise_id} not found")
    return exercise.to_dict()


@router.get("/equipment-catalog")
async def list_equipment(db: Database = Depends(get_database)):
    """List all equipment."""
    async with db.session() as session:
        equipment = await CatalogRepository(session).list_equipment()
    return [item.to_dict() for item in equipment]


@router.get("/muscles")
async def list_muscles(db: Database = Depends(get_database)):
    """List all muscles."""
    async with db.session() as session:
        muscles = await CatalogRepository(session).list_muscles()
    return [muscle.to_dict() for muscle in muscles]


@router.get("/muscles/{muscle_id}")
async def get_muscle(muscle_id: int, db: Database = Depends(get_database)):
    """Get one muscle."""
    async with db.session() as session:
        muscle = await CatalogRepository(session).get_muscle(muscle_id)
    if muscle is None:
        raise NotFound(f"Muscle {muscle_id} not found")
    return muscle.to_dict()
