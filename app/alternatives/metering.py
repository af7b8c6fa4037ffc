"""
Usage metering.

Quotas are enforced on monotonically increasing counters, one per scope,
tier and period.  The counter id encodes all three::

    org:<org>:tokens:<YYYY-MM>
    org:<org>:feature:<feature>:<YYYY-MM>
    user:<org>:<user>:daily:<YYYY-MM-DD>
    user:<org>:<user>:monthly:<YYYY-MM>
    user:<org>:<user>:tokens:<YYYY-MM>

A new period is a new id, so nothing ever has to be reset.  Every increment
is a conditional ``UPDATE`` (see
:meth:`~app.db.repositories.usage.UsageRepository.compare_and_increment`),
which makes "check the limit and add" a single atomic step even when many
requests race for the last unit.

All periods are computed in UTC.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.exceptions import FeatureNotEntitledError, StoreUnavailableError
from app.db.repositories.usage import UNLIMITED, UsageRepository
from app.models.ai_usage import AIUsageLog, OrganizationAIUsage
from app.schemas.usage import ConsumeResult, TierUsage, UsageCheck, UsageSummary

logger = logging.getLogger(__name__)

FEATURE_ALTERNATIVES = "alternatives"

# Tier names, in the order they are checked and incremented.
TIER_DISABLED = "disabled"
TIER_ORG_TOKENS = "org_tokens"
TIER_ORG_FEATURE = "org_feature"
TIER_USER_DAILY = "user_daily"
TIER_USER_MONTHLY = "user_monthly"
TIER_STORE_UNAVAILABLE = "store_unavailable"


# ======================================================================
# Plans
# ======================================================================


@dataclass(frozen=True)
class PlanLimits:
    """Defaults applied when an organization's usage row is created."""

    features: frozenset[str]
    monthly_tokens: int
    monthly_alternatives: int
    user_daily: int
    user_monthly: int
    model: str


PLAN_LIMITS: dict[str, PlanLimits] = {
    "free": PlanLimits(
        features=frozenset(),
        monthly_tokens=0,
        monthly_alternatives=0,
        user_daily=0,
        user_monthly=0,
        model="gpt-4o-mini",
    ),
    "pro": PlanLimits(
        features=frozenset({FEATURE_ALTERNATIVES}),
        monthly_tokens=50_000,
        monthly_alternatives=300,
        user_daily=10,
        user_monthly=50,
        model="gpt-4o-mini",
    ),
    "business": PlanLimits(
        features=frozenset({FEATURE_ALTERNATIVES}),
        monthly_tokens=200_000,
        monthly_alternatives=1_500,
        user_daily=25,
        user_monthly=200,
        model="gpt-4o-mini",
    ),
    "enterprise": PlanLimits(
        features=frozenset({FEATURE_ALTERNATIVES}),
        monthly_tokens=UNLIMITED,
        monthly_alternatives=UNLIMITED,
        user_daily=UNLIMITED,
        user_monthly=UNLIMITED,
        model="gpt-4o",
    ),
}

DEFAULT_PLAN = "free"


def get_plan_limits(plan: str) -> PlanLimits:
    """Limits for ``plan``; unknown plans fall back to the free plan."""
    return PLAN_LIMITS.get(plan, PLAN_LIMITS[DEFAULT_PLAN])


def default_usage_settings(organization_id: str, plan: str = DEFAULT_PLAN) -> OrganizationAIUsage:
    limits = get_plan_limits(plan)
    return OrganizationAIUsage(
        organization_id=organization_id,
        ai_plan=plan,
        ai_enabled=True,
        monthly_token_limit=limits.monthly_tokens,
        monthly_alternatives_limit=limits.monthly_alternatives,
        max_requests_per_user_daily=limits.user_daily,
        requests_per_user_monthly=limits.user_monthly,
    )


# ======================================================================
# Periods and counter ids
# ======================================================================


def month_period(now: datetime.datetime) -> str:
    return now.strftime("%Y-%m")


def day_period(now: datetime.datetime) -> str:
    return now.strftime("%Y-%m-%d")


def org_tokens_counter(org: str, month: str) -> str:
    return f"org:{org}:tokens:{month}"


def org_feature_counter(org: str, feature: str, month: str) -> str:
    return f"org:{org}:feature:{feature}:{month}"


def user_daily_counter(org: str, user: str, day: str) -> str:
    return f"user:{org}:{user}:daily:{day}"


def user_monthly_counter(org: str, user: str, month: str) -> str:
    return f"user:{org}:{user}:monthly:{month}"


def user_tokens_counter(org: str, user: str, month: str) -> str:
    return f"user:{org}:{user}:tokens:{month}"


def _remaining(used: int, limit: int) -> int:
    if limit == UNLIMITED:
        return UNLIMITED
    return max(0, limit - used)


def _percentage(used: int, limit: int) -> int:
    if limit == UNLIMITED:
        return 0
    if limit <= 0:
        return 100
    return min(100, used * 100 // limit)


@dataclass(frozen=True)
class _Tier:
    name: str
    counter_id: str
    period: str
    limit: int
    delta: int = 1


# ======================================================================
# Meter
# ======================================================================


class UsageMeter:
    """
    Quota checks and atomic usage commits for one organization/user pair.

    ``check`` never writes.  ``consume`` applies every tier in one
    transaction and rolls all of them back if any single tier is exhausted.
    """

    def __init__(
        self,
        session: Session,
        clock: Callable[[], datetime.datetime] = datetime.datetime.utcnow,
    ):
        self.session = session
        self.repository = UsageRepository(session)
        self.clock = clock

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self, organization_id: str) -> OrganizationAIUsage:
        """
        Read the organization's usage row, creating it with free-plan
        defaults on first access.

        Raises:
            StoreUnavailableError: if the row cannot be read or created
        """
        try:
            row = self.repository.get_settings(organization_id)
            if row is None:
                row = self.repository.create_settings_if_absent(default_usage_settings(organization_id))
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("usage settings unavailable") from exc
        return row

    def ensure_entitled(self, usage: OrganizationAIUsage, feature: str) -> None:
        """Raise :class:`FeatureNotEntitledError` unless the plan includes ``feature``."""
        if feature not in get_plan_limits(usage.ai_plan).features:
            raise FeatureNotEntitledError(feature, usage.ai_plan)

    def model_for(self, usage: OrganizationAIUsage) -> str:
        return get_plan_limits(usage.ai_plan).model

    def _feature_limit(self, usage: OrganizationAIUsage, feature: str) -> int:
        if feature == FEATURE_ALTERNATIVES:
            return usage.monthly_alternatives_limit
        return get_plan_limits(usage.ai_plan).monthly_alternatives

    def _tiers(self, usage: OrganizationAIUsage, user_id: str, feature: str, tokens: int, now: datetime.datetime) -> list[_Tier]:
        org = usage.organization_id
        month, day = month_period(now), day_period(now)
        return [
            _Tier(TIER_ORG_TOKENS, org_tokens_counter(org, month), month, usage.monthly_token_limit, tokens),
            _Tier(TIER_ORG_FEATURE, org_feature_counter(org, feature, month), month, self._feature_limit(usage, feature)),
            _Tier(TIER_USER_DAILY, user_daily_counter(org, user_id, day), day, usage.max_requests_per_user_daily),
            _Tier(TIER_USER_MONTHLY, user_monthly_counter(org, user_id, month), month, usage.user_monthly_limit),
        ]

    @staticmethod
    def _remaining_for_user(tiers: list[_Tier], values: dict[str, int]) -> int:
        remaining = [
            _remaining(values[t.counter_id], t.limit)
            for t in tiers
            if t.name in (TIER_USER_DAILY, TIER_USER_MONTHLY) and t.limit != UNLIMITED
        ]
        return min(remaining) if remaining else UNLIMITED

    # ------------------------------------------------------------------
    # Check / consume
    # ------------------------------------------------------------------

    def check(self, organization_id: str, user_id: str, feature: str) -> UsageCheck:
        """
        Report whether a request would currently be admitted.  Never writes
        counters.

        Tiers are evaluated in order: disabled, org_tokens, org_feature,
        user_daily, user_monthly.  The first exhausted tier is reported.

        Raises:
            StoreUnavailableError: if counters cannot be read
        """
        usage = self.get_settings(organization_id)
        tiers = self._tiers(usage, user_id, feature, 0, self.clock())
        try:
            values = self.repository.get_values(t.counter_id for t in tiers)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("usage counters unavailable") from exc

        remaining_for_user = self._remaining_for_user(tiers, values)

        if not usage.ai_enabled:
            return UsageCheck(
                allowed=False, used=0, limit=0,
                limiting_tier=TIER_DISABLED, remaining_for_user=remaining_for_user,
            )

        for tier in tiers:
            used = values[tier.counter_id]
            if tier.limit != UNLIMITED and used >= tier.limit:
                return UsageCheck(
                    allowed=False, used=used, limit=tier.limit,
                    limiting_tier=tier.name, remaining_for_user=remaining_for_user,
                )

        monthly = tiers[-1]
        return UsageCheck(
            allowed=True,
            used=values[monthly.counter_id],
            limit=monthly.limit,
            limiting_tier=None,
            remaining_for_user=remaining_for_user,
        )

    def consume(self, organization_id: str, user_id: str, feature: str, tokens: int) -> ConsumeResult:
        """
        Atomically charge one request and ``tokens`` tokens.

        Every tier is incremented inside a single transaction in a fixed
        order; the first denial rolls back the increments already made.
        Store errors are logged and reported as a failed commit with
        ``limiting_tier="store_unavailable"``.
        """
        try:
            usage = self.get_settings(organization_id)
        except StoreUnavailableError:
            logger.exception("Usage commit failed for org %s: settings unavailable", organization_id)
            return ConsumeResult(
                success=False, remaining_for_user=0, remaining_for_org=0,
                limiting_tier=TIER_STORE_UNAVAILABLE,
            )

        now = self.clock()
        month = month_period(now)
        tiers = self._tiers(usage, user_id, feature, tokens, now)
        # Spend breakdown per user; never limits anything.
        tiers.append(_Tier("user_tokens", user_tokens_counter(organization_id, user_id, month), month, UNLIMITED, tokens))

        try:
            for tier in tiers:
                self.repository.ensure_counter(tier.counter_id, organization_id, tier.period)
            for tier in tiers:
                if not self.repository.compare_and_increment(tier.counter_id, tier.delta, tier.limit):
                    self.session.rollback()
                    values = self.repository.get_values(t.counter_id for t in tiers)
                    logger.info(
                        "Usage commit denied for org %s user %s: %s exhausted",
                        organization_id, user_id, tier.name,
                    )
                    return ConsumeResult(
                        success=False,
                        remaining_for_user=self._remaining_for_user(tiers, values),
                        remaining_for_org=_remaining(values[tiers[1].counter_id], tiers[1].limit),
                        limiting_tier=tier.name,
                    )
            values = self.repository.get_values(t.counter_id for t in tiers)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Usage commit failed for org %s user %s", organization_id, user_id)
            return ConsumeResult(
                success=False, remaining_for_user=0, remaining_for_org=0,
                limiting_tier=TIER_STORE_UNAVAILABLE,
            )

        return ConsumeResult(
            success=True,
            remaining_for_user=self._remaining_for_user(tiers, values),
            remaining_for_org=_remaining(values[tiers[1].counter_id], tiers[1].limit),
        )

    # ------------------------------------------------------------------
    # Log / summary
    # ------------------------------------------------------------------

    def record_request(
        self,
        organization_id: str,
        user_id: Optional[str],
        feature: str,
        *,
        exercise_id: Optional[int] = None,
        tokens_used: int = 0,
        was_cached: bool = False,
        ranking: str = "rule_based",
        response_time_ms: Optional[int] = None,
        alternatives_count: Optional[int] = None,
    ) -> None:
        """Append a usage-log row.  Failures are logged, never raised."""
        entry = AIUsageLog(
            organization_id=organization_id,
            user_id=user_id,
            feature=feature,
            exercise_id=exercise_id,
            tokens_used=tokens_used,
            was_cached=was_cached,
            ranking=ranking,
            response_time_ms=response_time_ms,
            alternatives_count=alternatives_count,
            created_at=self.clock(),
        )
        try:
            self.repository.add_log(entry)
        except SQLAlchemyError:
            self.session.rollback()
            logger.warning("Failed to record usage log for org %s", organization_id, exc_info=True)

    def summary(self, organization_id: str, user_id: str) -> UsageSummary:
        """
        Usage overview for the current period.

        Raises:
            StoreUnavailableError: if counters cannot be read
        """
        usage = self.get_settings(organization_id)
        now = self.clock()
        month = month_period(now)
        tiers = self._tiers(usage, user_id, FEATURE_ALTERNATIVES, 0, now)
        feature_prefix = f"org:{organization_id}:feature:"

        try:
            values = self.repository.get_values(t.counter_id for t in tiers)
            per_feature = self.repository.get_values_with_prefix(feature_prefix, month)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("usage counters unavailable") from exc

        features = {
            counter_id[len(feature_prefix):].rsplit(":", 1)[0]: value
            for counter_id, value in per_feature.items()
        }

        def tier_usage(tier: _Tier) -> TierUsage:
            used = values[tier.counter_id]
            return TierUsage(used=used, limit=tier.limit, percentage=_percentage(used, tier.limit))

        tokens, alternatives, daily, monthly = (tier_usage(t) for t in tiers)
        alert = any(
            t.limit > 0 and t.percentage >= usage.alert_threshold_percent
            for t in (tokens, alternatives)
        )
        return UsageSummary(
            plan=usage.ai_plan,
            ai_enabled=usage.ai_enabled,
            period=month,
            tokens=tokens,
            alternatives=alternatives,
            requests_this_period=sum(features.values()),
            features=features,
            user_daily=daily,
            user_monthly=monthly,
            remaining_for_user=self._remaining_for_user(tiers, values),
            alert=alert,
        )
