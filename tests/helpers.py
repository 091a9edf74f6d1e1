"""Shared test helpers."""

# Ids assigned by seeding the built-in catalog into an empty database
BENCH_PRESS = 1
INCLINE_PRESS = 2
PUSH_UP = 3
OVERHEAD_PRESS = 4
SQUAT = 11
MISSING_CATALOG_ID = 9999


def as_payload(program) -> dict:
    """Turn a stored program back into an update payload that keeps every id."""
    return {
        "name": program.name,
        "duration": program.duration,
        "duration_unit": program.duration_unit,
        "days_per_week": program.days_per_week,
        "main_goal": program.main_goal,
        "workouts": [
            {
                "id": w.id,
                "name": w.name,
                "order": w.order,
                "exercises": [
                    {
                        "id": ex.id,
                        "catalog_exercise_id": ex.catalog_exercise_id,
                        "order": ex.order,
                        "sets": [
                            {"id": s.id, "reps": s.reps, "weight": s.weight, "order": s.order}
                            for s in ex.sets
                        ],
                    }
                    for ex in w.exercises
                ],
            }
            for w in program.workouts
        ],
    }


async def snapshot(db) -> dict:
    """Every row of the program tables, for before/after comparisons."""
    result = {}
    async with db.session() as session:
        for table in (
            "programs",
            "workouts",
            "exercises",
            "sets",
            "active_programs",
            "completed_workouts",
        ):
            rows = await session.query(f"SELECT * FROM {table} ORDER BY id")
            result[table] = [tuple(row) for row in rows]
    return result
