"""Catalog loader from JSON."""

import json
from pathlib import Path

from loguru import logger

from ..models.catalog import Catalog, CatalogExercise, Muscle


def load_catalog_json(path: Path) -> Catalog:
    """Load a catalog from a JSON file.

    Expected shape::

        {
          "muscles": [{"muscle": "chest", "muscle_group": "upper body", "subcategory": "push"}],
          "equipment": ["barbell"],
          "exercises": [{"name": "Bench Press", "muscle": "chest", "equipment": "barbell"}]
        }

    Entries missing required fields are skipped with a warning.

    Raises:
        ValueError: If the file is not a JSON object
    """
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")

    catalog = Catalog(equipment=[str(name) for name in data.get("equipment", [])])

    for entry in data.get("muscles", []):
        try:
            catalog.muscles.append(
                Muscle(
                    muscle=entry["muscle"],
                    muscle_group=entry["muscle_group"],
                    subcategory=entry.get("subcategory", ""),
                )
            )
        except (KeyError, TypeError) as e:
            logger.warning(f"Skipping invalid muscle entry: missing {e}")

    for entry in data.get("exercises", []):
        try:
            catalog.exercises.append(CatalogExercise.from_dict(entry))
        except (KeyError, TypeError) as e:
            logger.warning(f"Skipping invalid exercise entry: missing {e}")

    return catalog
