"""Read-only catalog models and the built-in catalog."""

from dataclasses import dataclass, field


@dataclass
class Muscle:
    """A muscle row from the muscle catalog."""

    muscle: str
    muscle_group: str
    subcategory: str = ""
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "muscle": self.muscle,
            "muscle_group": self.muscle_group,
            "subcategory": self.subcategory,
        }


@dataclass
class Equipment:
    """A piece of equipment from the equipment catalog."""

    name: str
    id: int | None = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class CatalogExercise:
    """An exercise catalog entry.

    ``muscle`` and ``equipment`` hold names; the database stores references
    into the muscle and equipment catalogs.
    """

    name: str
    muscle: str
    equipment: str
    muscle_group: str | None = None
    subcategory: str | None = None
    image_path: str | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "muscle": self.muscle,
            "muscle_group": self.muscle_group,
            "subcategory": self.subcategory,
            "equipment": self.equipment,
            "image_path": self.image_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogExercise":
        return cls(
            name=data["name"],
            muscle=data["muscle"],
            equipment=data["equipment"],
            image_path=data.get("image_path"),
        )


@dataclass
class Catalog:
    """Everything needed to seed the catalog tables."""

    muscles: list[Muscle] = field(default_factory=list)
    equipment: list[str] = field(default_factory=list)
    exercises: list[CatalogExercise] = field(default_factory=list)


BUILTIN_CATALOG = Catalog(
    muscles=[
        Muscle("chest", "upper body", "push"),
        Muscle("front delts", "upper body", "push"),
        Muscle("side delts", "upper body", "push"),
        Muscle("triceps", "upper body", "arms"),
        Muscle("lats", "upper body", "pull"),
        Muscle("upper back", "upper body", "pull"),
        Muscle("biceps", "upper body", "arms"),
        Muscle("quads", "lower body", "legs"),
        Muscle("hamstrings", "lower body", "legs"),
        Muscle("glutes", "lower body", "hips"),
        Muscle("calves", "lower body", "legs"),
        Muscle("abs", "core", "trunk"),
    ],
    equipment=[
        "barbell",
        "dumbbell",
        "cable",
        "machine",
        "bodyweight",
        "kettlebell",
    ],
    exercises=[
        CatalogExercise("Bench Press", "chest", "barbell"),
        CatalogExercise("Incline Dumbbell Press", "chest", "dumbbell"),
        CatalogExercise("Push Up", "chest", "bodyweight"),
        CatalogExercise("Overhead Press", "front delts", "barbell"),
        CatalogExercise("Lateral Raise", "side delts", "dumbbell"),
        CatalogExercise("Triceps Pushdown", "triceps", "cable"),
        CatalogExercise("Pull Up", "lats", "bodyweight"),
        CatalogExercise("Lat Pulldown", "lats", "cable"),
        CatalogExercise("Barbell Row", "upper back", "barbell"),
        CatalogExercise("Dumbbell Curl", "biceps", "dumbbell"),
        CatalogExercise("Squat", "quads", "barbell"),
        CatalogExercise("Leg Press", "quads", "machine"),
        CatalogExercise("Romanian Deadlift", "hamstrings", "barbell"),
        CatalogExercise("Leg Curl", "hamstrings", "machine"),
        CatalogExercise("Hip Thrust", "glutes", "barbell"),
        CatalogExercise("Kettlebell Swing", "glutes", "kettlebell"),
        CatalogExercise("Standing Calf Raise", "calves", "machine"),
        CatalogExercise("Plank", "abs", "bodyweight"),
        CatalogExercise("Cable Crunch", "abs", "cable"),
    ],
)
