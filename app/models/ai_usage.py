"""
AI usage models.

* :class:`OrganizationAIUsage` holds the per-organization limits and the
  feature toggle.  Counters are **not** stored on it.
* :class:`UsageCounter` is a monotonically increasing counter identified by
  a string that encodes scope, tier and period (see
  :mod:`app.alternatives.metering`).  A new period means a new row, so
  counters never need to be reset.
* :class:`AIUsageLog` is an append-only record of served requests.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class OrganizationAIUsage(SQLModel, table=True):
    """AI plan, toggle and limits for one organization.

    Limits use ``-1`` as the "unlimited" sentinel.
    """

    __tablename__ = "organization_ai_usage"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: str = Field(nullable=False, max_length=64, unique=True, index=True)

    ai_plan: str = Field(default="free", max_length=20)
    ai_enabled: bool = Field(default=True)

    # Organization tiers (monthly)
    monthly_token_limit: int = Field(default=0)
    monthly_alternatives_limit: int = Field(default=0)

    # User tier
    max_requests_per_user_daily: int = Field(default=0)
    requests_per_user_monthly: int = Field(default=0)
    extra_requests_per_user: int = Field(default=0, ge=0)

    # Alerts
    alert_threshold_percent: int = Field(default=80, ge=1, le=100)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)

    @property
    def user_monthly_limit(self) -> int:
        """Base monthly user allowance plus purchased extras (or unlimited)."""
        if self.requests_per_user_monthly < 0:
            return -1
        return self.requests_per_user_monthly + self.extra_requests_per_user


class UsageCounter(SQLModel, table=True):
    """A single usage counter for one scope, tier and period."""

    __tablename__ = "usage_counters"

    counter_id: str = Field(primary_key=True, max_length=200)
    organization_id: str = Field(nullable=False, max_length=64, index=True)
    period: str = Field(nullable=False, max_length=10)
    value: int = Field(default=0, nullable=False)

    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)


class AIUsageLog(SQLModel, table=True):
    """One served alternatives request (cache hits included)."""

    __tablename__ = "ai_usage_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: str = Field(nullable=False, max_length=64, index=True)
    user_id: Optional[str] = Field(default=None, max_length=64)

    feature: str = Field(nullable=False, max_length=50)
    exercise_id: Optional[int] = Field(default=None)

    tokens_used: int = Field(default=0)
    was_cached: bool = Field(default=False)
    ranking: str = Field(default="rule_based", max_length=20)
    response_time_ms: Optional[int] = Field(default=None)
    alternatives_count: Optional[int] = Field(default=None)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow, index=True)
