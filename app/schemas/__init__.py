"""Pydantic schemas for request/response validation."""

from app.schemas.alternatives import (
    AlternativeCandidate,
    AlternativesRequest,
    AlternativesResponse,
    CacheEntry,
    RankingMode,
)
from app.schemas.equipment import DEFAULT_EQUIPMENT, EquipmentInventory
from app.schemas.exercise import (
    DifficultyTier,
    ExerciseData,
    ExerciseSummary,
    MovementPattern,
)
from app.schemas.usage import ConsumeResult, TierUsage, UsageCheck, UsageSummary

__all__ = [
    "AlternativeCandidate",
    "AlternativesRequest",
    "AlternativesResponse",
    "CacheEntry",
    "RankingMode",
    "DEFAULT_EQUIPMENT",
    "EquipmentInventory",
    "DifficultyTier",
    "ExerciseData",
    "ExerciseSummary",
    "MovementPattern",
    "ConsumeResult",
    "TierUsage",
    "UsageCheck",
    "UsageSummary",
]
