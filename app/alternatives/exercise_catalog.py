"""
Built-in global exercise catalog.

Used by ``scripts/init_db.py`` to seed a fresh database.  Each entry becomes
one global :class:`~app.models.exercise.Exercise` row (``organization_id``
is ``NULL``); insertion order defines the catalog order used for score
tie-breaks, so new entries should be appended, not inserted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.models.exercise import Exercise
from app.schemas.exercise import DifficultyTier, MovementPattern


@dataclass(frozen=True)
class CatalogExercise:
    """Seed definition for one global exercise."""

    name: str
    category: str
    muscle_groups: tuple[str, ...]
    equipment: tuple[str, ...]
    movement_pattern: MovementPattern
    difficulty: DifficultyTier
    aliases: tuple[str, ...] = field(default=())

    def to_model(self) -> Exercise:
        return Exercise(
            organization_id=None,
            name=self.name,
            category=self.category,
            muscle_groups=list(self.muscle_groups),
            equipment=list(self.equipment),
            movement_pattern=self.movement_pattern.value,
            difficulty=self.difficulty.value,
        )


# ======================================================================
# Helpers
# ======================================================================

# Aliases for brevity in the table below
BEG = DifficultyTier.BEGINNER
INT = DifficultyTier.INTERMEDIATE
ADV = DifficultyTier.ADVANCED
HPUSH = MovementPattern.HORIZONTAL_PUSH
HPULL = MovementPattern.HORIZONTAL_PULL
VPUSH = MovementPattern.VERTICAL_PUSH
VPULL = MovementPattern.VERTICAL_PULL
SQUAT = MovementPattern.SQUAT
HINGE = MovementPattern.HINGE
LUNGE = MovementPattern.LUNGE
CARRY = MovementPattern.CARRY
ROT = MovementPattern.ROTATION
ISO = MovementPattern.ISOLATION
CORE = MovementPattern.CORE

# ======================================================================
# Built-in exercises
# ======================================================================

BUILTIN_EXERCISES: list[CatalogExercise] = [
    # ── Chest ─────────────────────────────────────────────────────
    CatalogExercise("Barbell Bench Press", "chest",
                    ("chest", "triceps", "shoulders"), ("barbell", "bench"), HPUSH, INT),
    CatalogExercise("Dumbbell Bench Press", "chest",
                    ("chest", "triceps", "shoulders"), ("dumbbell",), HPUSH, BEG),
    CatalogExercise("Push-Up", "chest",
                    ("chest", "triceps", "shoulders", "core"), ("bodyweight",), HPUSH, BEG,
                    aliases=("press-up",)),
    CatalogExercise("Incline Dumbbell Press", "chest",
                    ("chest", "shoulders", "triceps"), ("dumbbell", "bench"), HPUSH, INT),
    CatalogExercise("Machine Chest Press", "chest",
                    ("chest", "triceps"), ("machine",), HPUSH, BEG),
    CatalogExercise("Cable Fly", "chest",
                    ("chest",), ("cable",), ISO, INT),
    CatalogExercise("Dips", "chest",
                    ("chest", "triceps"), ("bodyweight",), VPUSH, ADV),
    # ── Back ──────────────────────────────────────────────────────
    CatalogExercise("Pull-Up", "back",
                    ("back", "biceps"), ("pull_up_bar",), VPULL, ADV),
    CatalogExercise("Lat Pulldown", "back",
                    ("back", "biceps"), ("cable", "machine"), VPULL, BEG),
    CatalogExercise("Barbell Row", "back",
                    ("back", "biceps", "rear_delts"), ("barbell",), HPULL, INT),
    CatalogExercise("Dumbbell Row", "back",
                    ("back", "biceps"), ("dumbbell", "bench"), HPULL, BEG),
    CatalogExercise("Seated Cable Row", "back",
                    ("back", "biceps"), ("cable",), HPULL, BEG),
    CatalogExercise("Inverted Row", "back",
                    ("back", "biceps", "core"), ("bodyweight",), HPULL, INT),
    # ── Shoulders ─────────────────────────────────────────────────
    CatalogExercise("Overhead Press", "shoulders",
                    ("shoulders", "triceps"), ("barbell",), VPUSH, INT),
    CatalogExercise("Dumbbell Shoulder Press", "shoulders",
                    ("shoulders", "triceps"), ("dumbbell",), VPUSH, BEG),
    CatalogExercise("Pike Push-Up", "shoulders",
                    ("shoulders", "triceps"), ("bodyweight",), VPUSH, INT),
    CatalogExercise("Lateral Raise", "shoulders",
                    ("shoulders",), ("dumbbell",), ISO, BEG),
    # ── Lower body ────────────────────────────────────────────────
    CatalogExercise("Back Squat", "legs",
                    ("quadriceps", "glutes", "hamstrings"), ("barbell",), SQUAT, INT),
    CatalogExercise("Goblet Squat", "legs",
                    ("quadriceps", "glutes"), ("kettlebell",), SQUAT, BEG),
    CatalogExercise("Bodyweight Squat", "legs",
                    ("quadriceps", "glutes"), ("bodyweight",), SQUAT, BEG,
                    aliases=("air squat",)),
    CatalogExercise("Leg Press", "legs",
                    ("quadriceps", "glutes"), ("machine",), SQUAT, BEG),
    CatalogExercise("Conventional Deadlift", "legs",
                    ("hamstrings", "glutes", "back"), ("barbell",), HINGE, ADV),
    CatalogExercise("Romanian Deadlift", "legs",
                    ("hamstrings", "glutes"), ("barbell",), HINGE, INT),
    CatalogExercise("Kettlebell Swing", "legs",
                    ("hamstrings", "glutes", "core"), ("kettlebell",), HINGE, INT),
    CatalogExercise("Glute Bridge", "legs",
                    ("glutes", "hamstrings"), ("bodyweight",), HINGE, BEG),
    CatalogExercise("Walking Lunge", "legs",
                    ("quadriceps", "glutes"), ("dumbbell",), LUNGE, BEG),
    CatalogExercise("Bulgarian Split Squat", "legs",
                    ("quadriceps", "glutes"), ("dumbbell", "bench"), LUNGE, INT),
    CatalogExercise("Reverse Lunge", "legs",
                    ("quadriceps", "glutes"), ("bodyweight",), LUNGE, BEG),
    CatalogExercise("Leg Extension", "legs",
                    ("quadriceps",), ("machine",), ISO, BEG),
    CatalogExercise("Leg Curl", "legs",
                    ("hamstrings",), ("machine",), ISO, BEG),
    # ── Arms ──────────────────────────────────────────────────────
    CatalogExercise("Barbell Curl", "arms",
                    ("biceps",), ("barbell",), ISO, BEG),
    CatalogExercise("Dumbbell Curl", "arms",
                    ("biceps",), ("dumbbell",), ISO, BEG),
    CatalogExercise("Triceps Pushdown", "arms",
                    ("triceps",), ("cable",), ISO, BEG),
    CatalogExercise("Close-Grip Bench Press", "arms",
                    ("triceps", "chest"), ("barbell", "bench"), HPUSH, INT),
    # ── Core and carries ──────────────────────────────────────────
    CatalogExercise("Plank", "core",
                    ("core",), ("bodyweight",), CORE, BEG),
    CatalogExercise("Hanging Leg Raise", "core",
                    ("core",), ("pull_up_bar",), CORE, ADV),
    CatalogExercise("Cable Woodchop", "core",
                    ("core", "obliques"), ("cable",), ROT, INT),
    CatalogExercise("Russian Twist", "core",
                    ("core", "obliques"), ("bodyweight",), ROT, BEG),
    CatalogExercise("Farmer's Carry", "full_body",
                    ("forearms", "core", "traps"), ("dumbbell",), CARRY, BEG),
    CatalogExercise("Suitcase Carry", "full_body",
                    ("forearms", "core", "obliques"), ("kettlebell",), CARRY, INT),
]


def get_builtin_exercise(name: str) -> CatalogExercise | None:
    """Look up a built-in exercise by display name or alias (case-insensitive)."""
    needle = name.strip().lower()
    for entry in BUILTIN_EXERCISES:
        if entry.name.lower() == needle or needle in entry.aliases:
            return entry
    return None
