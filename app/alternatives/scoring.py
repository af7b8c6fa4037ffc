"""
Rule-based scoring.

Deterministic similarity score in ``[0, 100]`` plus a short human-readable
reason.  This ranking is always computed and is what callers receive
whenever generative re-ranking is unavailable.

Weights:

======================  ======
Component               Points
======================  ======
Muscle-group overlap    40
Movement pattern        30
Equipment availability  15
Difficulty proximity    10
Category                5
======================  ======
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from app.schemas.alternatives import AlternativeCandidate
from app.schemas.exercise import BODYWEIGHT, DIFFICULTY_ORDER, ExerciseData, ExerciseSummary

MUSCLE_WEIGHT = 40
PATTERN_WEIGHT = 30
EQUIPMENT_WEIGHT = 15
DIFFICULTY_WEIGHT = 10
CATEGORY_WEIGHT = 5

DEFAULT_REASON = "similar exercise"
MAX_REASON_FRAGMENTS = 2


def _jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    sa, sb = set(a), set(b)
    union = sa | sb
    if not union:
        return 0.0
    return len(sa & sb) / len(union)


def _equipment_points(candidate: ExerciseData, available: frozenset[str]) -> float:
    required = {tag.strip().lower() for tag in candidate.equipment} - {BODYWEIGHT}
    if not required:
        return float(EQUIPMENT_WEIGHT)
    return EQUIPMENT_WEIGHT * len(required & available) / len(required)


def _difficulty_points(source: ExerciseData, candidate: ExerciseData) -> float:
    if source.difficulty not in DIFFICULTY_ORDER or candidate.difficulty not in DIFFICULTY_ORDER:
        return 0.0
    gap = abs(DIFFICULTY_ORDER.index(source.difficulty) - DIFFICULTY_ORDER.index(candidate.difficulty))
    if gap == 0:
        return float(DIFFICULTY_WEIGHT)
    if gap == 1:
        return DIFFICULTY_WEIGHT / 2
    return 0.0


def _humanize(tag: str) -> str:
    return tag.replace("_", " ")


def build_reason(source: ExerciseData, candidate: ExerciseData) -> str:
    """Join up to two matching fragments, e.g. ``same horizontal push pattern, works chest and triceps``."""
    fragments: list[str] = []

    if source.movement_pattern and source.movement_pattern == candidate.movement_pattern:
        fragments.append(f"same {_humanize(source.movement_pattern)} pattern")

    shared = [m for m in candidate.muscle_groups if m in set(source.muscle_groups)]
    if len(shared) >= 2:
        fragments.append(f"works {_humanize(shared[0])} and {_humanize(shared[1])}")
    elif shared:
        fragments.append(f"works {_humanize(shared[0])}")

    if candidate.needs_no_equipment:
        fragments.append("no equipment needed")

    if source.difficulty and source.difficulty == candidate.difficulty:
        fragments.append(f"same {source.difficulty} level")

    if not fragments:
        return DEFAULT_REASON
    return ", ".join(fragments[:MAX_REASON_FRAGMENTS])


def score_candidate(
    source: ExerciseData,
    candidate: ExerciseData,
    available: frozenset[str],
) -> tuple[int, str]:
    """Return ``(score, reason)`` for one candidate."""
    points = MUSCLE_WEIGHT * _jaccard(source.muscle_groups, candidate.muscle_groups)
    if source.movement_pattern and source.movement_pattern == candidate.movement_pattern:
        points += PATTERN_WEIGHT
    points += _equipment_points(candidate, available)
    points += _difficulty_points(source, candidate)
    if source.category and source.category == candidate.category:
        points += CATEGORY_WEIGHT

    score = max(0, min(100, int(round(points))))
    return score, build_reason(source, candidate)


def sort_alternatives(alternatives: list[AlternativeCandidate]) -> list[AlternativeCandidate]:
    """Score descending, ties broken by catalog order."""
    return sorted(alternatives, key=lambda alt: (-alt.score, alt.exercise.id))


def rank_candidates(
    source: ExerciseData,
    candidates: Iterable[ExerciseData],
    available: frozenset[str],
) -> list[AlternativeCandidate]:
    """Score every candidate and return them best first."""
    scored = []
    for candidate in candidates:
        score, reason = score_candidate(source, candidate, available)
        scored.append(
            AlternativeCandidate(
                exercise=ExerciseSummary.from_exercise(candidate),
                reason=reason,
                score=score,
            )
        )
    return sort_alternatives(scored)


@dataclass(frozen=True)
class RuleBased:
    """Ranking produced by :func:`rank_candidates` alone."""

    alternatives: list[AlternativeCandidate]
    tokens_used: int = 0
