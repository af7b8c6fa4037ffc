"""
Candidate filtering.

Narrows the visible catalog to exercises that are plausible substitutes for
a source exercise and can be performed with the gym's available equipment.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.schemas.exercise import BODYWEIGHT, DifficultyTier, ExerciseData

# Priority tiers (lower is better)
_PATTERN = 0
_MUSCLE = 1
_CATEGORY = 2


def is_performable(exercise: ExerciseData, available: frozenset[str]) -> bool:
    """True if every required tag except ``bodyweight`` is available."""
    required = {tag.strip().lower() for tag in exercise.equipment} - {BODYWEIGHT}
    return required <= available


def _match_tier(source: ExerciseData, candidate: ExerciseData) -> Optional[int]:
    if source.movement_pattern and source.movement_pattern == candidate.movement_pattern:
        return _PATTERN
    if set(source.muscle_groups) & set(candidate.muscle_groups):
        return _MUSCLE
    if (
        not source.movement_pattern
        and not candidate.movement_pattern
        and source.category
        and source.category == candidate.category
    ):
        return _CATEGORY
    return None


def find_candidates(
    source: ExerciseData,
    pool: Iterable[ExerciseData],
    available: frozenset[str],
    difficulty_filter: Optional[DifficultyTier] = None,
    limit: int = 50,
) -> list[ExerciseData]:
    """
    Select plausible, performable substitutes for ``source``.

    Args:
        source: Exercise being replaced
        pool: Active exercises visible to the organization, in catalog order
        available: Normalized available equipment tags
        difficulty_filter: Keep only this tier when set
        limit: Maximum number of candidates returned

    Returns:
        Pattern matches first, then muscle-group matches, then category
        matches; catalog order within each group.  May be empty.
    """
    wanted = difficulty_filter.value if difficulty_filter is not None else None
    tiers: list[tuple[int, int, ExerciseData]] = []

    for position, candidate in enumerate(pool):
        if candidate.id == source.id:
            continue
        if wanted is not None and candidate.difficulty != wanted:
            continue
        if not is_performable(candidate, available):
            continue
        tier = _match_tier(source, candidate)
        if tier is None:
            continue
        tiers.append((tier, position, candidate))

    tiers.sort(key=lambda item: (item[0], item[1]))
    return [candidate for _, _, candidate in tiers[:limit]]
