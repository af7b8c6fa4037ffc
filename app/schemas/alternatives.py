"""
Alternatives API schemas.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.exercise import DifficultyTier, ExerciseSummary


class RankingMode(str, Enum):
    """Which stage produced the final ordering."""
    RULE_BASED = "rule_based"
    ENHANCED = "enhanced"


class AlternativesRequest(BaseModel):
    """Body of ``POST /ai/alternatives``."""

    exercise_id: int = Field(..., ge=1, description="Source exercise id")
    difficulty_filter: Optional[DifficultyTier] = Field(
        None, description="Only return alternatives of this tier"
    )
    limit: int = Field(5, ge=1, le=20, description="Maximum number of alternatives")


class AlternativeCandidate(BaseModel):
    """A scored substitute exercise."""

    exercise: ExerciseSummary
    reason: str
    score: int = Field(..., ge=0, le=100)


class CacheEntry(BaseModel):
    """Value stored in the alternatives cache."""

    alternatives: list[AlternativeCandidate]
    ranking: RankingMode = RankingMode.RULE_BASED
    model: Optional[str] = None
    tokens_used: int = 0
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)


class AlternativesResponse(BaseModel):
    """Body returned by ``POST /ai/alternatives``."""

    alternatives: list[AlternativeCandidate]
    was_cached: bool
    tokens_used: int = Field(..., ge=0)
    remaining_requests: int = Field(
        ..., description="Requests left for the caller this period (-1 = unlimited)"
    )
    ranking: RankingMode
