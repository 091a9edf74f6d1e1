"""Tests for the exercise catalog: seeding, search and JSON loading."""

import json

import pytest

from liftbook.data.catalog_loader import load_catalog_json
from liftbook.db import CatalogRepository, seed_catalog
from liftbook.models.catalog import BUILTIN_CATALOG, Catalog, CatalogExercise, Muscle


class TestCatalogSearch:
    """Tests for CatalogRepository."""

    async def test_pagination(self, db):
        async with db.session() as session:
            first, total = await CatalogRepository(session).search_exercises(page=1, limit=5)
            last, _ = await CatalogRepository(session).search_exercises(page=4, limit=5)

        assert total == len(BUILTIN_CATALOG.exercises)
        assert len(first) == 5
        assert first[0].name == "Bench Press"
        assert len(last) == total - 15

    async def test_name_filter_is_case_insensitive(self, db):
        async with db.session() as session:
            found, total = await CatalogRepository(session).search_exercises(name="PRESS")
        assert total == 4
        assert all("press" in ex.name.lower() for ex in found)

    async def test_muscle_and_equipment_filters(self, db):
        async with db.session() as session:
            found, total = await CatalogRepository(session).search_exercises(
                muscles=["Chest", "quads"], equipment=["barbell"]
            )
        assert [ex.name for ex in found] == ["Bench Press", "Squat"]
        assert total == 2

    async def test_get_exercise(self, db):
        async with db.session() as session:
            exercise = await CatalogRepository(session).get_exercise(11)
            missing = await CatalogRepository(session).get_exercise(999)
        assert exercise.name == "Squat"
        assert exercise.muscle_group == "lower body"
        assert missing is None

    async def test_muscles_and_equipment(self, db):
        async with db.session() as session:
            repo = CatalogRepository(session)
            muscles = await repo.list_muscles()
            equipment = await repo.list_equipment()
            chest = await repo.get_muscle(1)

        assert len(muscles) == len(BUILTIN_CATALOG.muscles)
        assert [e.name for e in equipment] == sorted(BUILTIN_CATALOG.equipment)
        assert chest.muscle == "chest"


class TestSeedCatalog:
    """Tests for seed_catalog."""

    async def test_seeding_twice_adds_nothing(self, db):
        assert await seed_catalog(db) == 0

    async def test_unknown_references_are_skipped(self, db):
        catalog = Catalog(
            muscles=[Muscle("forearms", "upper body", "arms")],
            equipment=["band"],
            exercises=[
                CatalogExercise("Wrist Curl", "forearms", "dumbbell"),
                CatalogExercise("Band Pull Apart", "rear delts", "band"),
            ],
        )
        assert await seed_catalog(db, catalog) == 1


class TestLoadCatalogJson:
    """Tests for load_catalog_json."""

    def test_loads_valid_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "muscles": [{"muscle": "forearms", "muscle_group": "upper body"}],
            "equipment": ["band"],
            "exercises": [
                {"name": "Wrist Curl", "muscle": "forearms", "equipment": "dumbbell"},
                {"name": "No Muscle", "equipment": "band"},
            ],
        }))

        catalog = load_catalog_json(path)

        assert catalog.equipment == ["band"]
        assert catalog.muscles[0].subcategory == ""
        assert [ex.name for ex in catalog.exercises] == ["Wrist Curl"]

    def test_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_catalog_json(path)

    def test_rejects_non_object(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            load_catalog_json(path)


class TestCatalogImages:
    async def test_image_path_is_returned(self, db):
        """Catalog entries expose their stored image reference."""
        catalog = Catalog(
            exercises=[CatalogExercise("Hack Squat", "quads", "machine", image_path="img/hack.gif")]
        )
        await seed_catalog(db, catalog)

        async with db.session() as session:
            found, _ = await CatalogRepository(session).search_exercises(name="hack")
            bench = await CatalogRepository(session).get_exercise(1)

        assert found[0].to_dict()["image_path"] == "img/hack.gif"
        assert bench.to_dict()["image_path"] is None
