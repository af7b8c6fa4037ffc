"""
Exercise value objects used by the alternatives pipeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DifficultyTier(str, Enum):
    """Discrete skill level of an exercise."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Ordered from easiest to hardest; used for difficulty proximity.
DIFFICULTY_ORDER: list[str] = [t.value for t in DifficultyTier]


class MovementPattern(str, Enum):
    """Fundamental movement pattern of an exercise."""
    HORIZONTAL_PUSH = "horizontal_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PUSH = "vertical_push"
    VERTICAL_PULL = "vertical_pull"
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    CARRY = "carry"
    ROTATION = "rotation"
    ISOLATION = "isolation"
    CORE = "core"


BODYWEIGHT = "bodyweight"


class ExerciseData(BaseModel):
    """Immutable snapshot of a catalog exercise for one pipeline run."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    organization_id: Optional[str] = None
    category: Optional[str] = None
    muscle_groups: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    movement_pattern: Optional[str] = None
    difficulty: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.organization_id is None

    @property
    def needs_no_equipment(self) -> bool:
        """True for exercises with no equipment or bodyweight only."""
        return not (set(self.equipment) - {BODYWEIGHT})


class ExerciseSummary(BaseModel):
    """Exercise fields returned with each alternative."""

    id: int
    name: str
    muscle_groups: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    equipment: list[str] = Field(default_factory=list)
    difficulty: Optional[str] = None
    movement_pattern: Optional[str] = None

    @classmethod
    def from_exercise(cls, exercise: ExerciseData) -> "ExerciseSummary":
        return cls(
            id=exercise.id,
            name=exercise.name,
            muscle_groups=list(exercise.muscle_groups),
            category=exercise.category,
            equipment=list(exercise.equipment),
            difficulty=exercise.difficulty,
            movement_pattern=exercise.movement_pattern,
        )
