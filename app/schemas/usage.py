"""
Usage metering schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UsageCheck(BaseModel):
    """Result of a non-committing quota check."""

    allowed: bool
    used: int
    limit: int = Field(..., description="-1 = unlimited")
    limiting_tier: Optional[str] = Field(
        None, description="Tier that denied the request, if any"
    )
    remaining_for_user: int = Field(..., description="-1 = unlimited")


class ConsumeResult(BaseModel):
    """Result of an atomic usage commit."""

    success: bool
    remaining_for_user: int
    remaining_for_org: int
    limiting_tier: Optional[str] = None


class TierUsage(BaseModel):
    """Used / limit pair for one tier."""

    used: int
    limit: int
    percentage: int = Field(..., ge=0, le=100)


class UsageSummary(BaseModel):
    """AI usage overview for an organization and the calling user."""

    plan: str
    ai_enabled: bool
    period: str
    tokens: TierUsage
    alternatives: TierUsage
    requests_this_period: int
    features: dict[str, int] = Field(
        default_factory=dict, description="Requests per feature this period"
    )
    user_daily: TierUsage
    user_monthly: TierUsage
    remaining_for_user: int
    alert: bool = Field(
        ..., description="True once any organization tier crosses the alert threshold"
    )
