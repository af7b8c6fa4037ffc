"""
Equipment inventory value object.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Used when an organization never configured its equipment.
DEFAULT_EQUIPMENT: tuple[str, ...] = (
    "barbell",
    "dumbbell",
    "kettlebell",
    "cable",
    "machine",
    "bodyweight",
    "bench",
    "pull_up_bar",
)


def normalize_tags(tags) -> list[str]:
    """Lower-case, strip, dedupe and sort equipment tags."""
    return sorted({str(t).strip().lower() for t in tags if t and str(t).strip()})


class EquipmentInventory(BaseModel):
    """Allow-list and temporarily unavailable equipment for one gym."""

    model_config = ConfigDict(frozen=True)

    allowed: tuple[str, ...] = Field(default=DEFAULT_EQUIPMENT)
    unavailable: tuple[str, ...] = ()

    @property
    def available(self) -> frozenset[str]:
        """Allow-list minus the unavailable set, normalized."""
        return frozenset(normalize_tags(self.allowed)) - frozenset(normalize_tags(self.unavailable))
