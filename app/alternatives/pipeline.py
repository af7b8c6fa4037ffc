"""
Alternatives pipeline.

Orchestrates one request end to end::

    source exercise -> inventory -> quota check -> cache
        -> candidate filter -> rule scoring -> [AI re-rank -> usage commit]
        -> cache store -> usage log

Every stage after the cache lookup degrades instead of failing: a failed
re-rank or a lost quota race falls back to the rule-based ranking, and
cache or log writes that fail are only logged.
"""

from __future__ import annotations

import datetime
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.alternatives.cache import ResultCache, equipment_fingerprint, make_cache_key
from app.alternatives.candidates import find_candidates
from app.alternatives.llm_client import RankingClient
from app.alternatives.metering import (
    FEATURE_ALTERNATIVES,
    TIER_DISABLED,
    TIER_STORE_UNAVAILABLE,
    UsageMeter,
)
from app.alternatives.reranker import AIReranker, Enhanced
from app.alternatives.scoring import RuleBased, rank_candidates
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import (
    ExerciseNotFoundError,
    QuotaExceededError,
    StoreUnavailableError,
    UpstreamServiceError,
)
from app.core.security import Principal
from app.db.repositories.equipment import EquipmentRepository
from app.db.repositories.exercise import ExerciseRepository
from app.models.ai_usage import OrganizationAIUsage
from app.schemas.alternatives import (
    AlternativeCandidate,
    AlternativesRequest,
    AlternativesResponse,
    CacheEntry,
    RankingMode,
)
from app.schemas.equipment import DEFAULT_EQUIPMENT, EquipmentInventory
from app.schemas.exercise import ExerciseData

logger = logging.getLogger(__name__)

RankingOutcome = Union[RuleBased, Enhanced]


@dataclass(frozen=True)
class PipelineResult:
    """Final outcome of one pipeline run."""

    alternatives: list[AlternativeCandidate]
    was_cached: bool
    tokens_used: int
    remaining_requests: int
    ranking: RankingMode

    def to_response(self) -> AlternativesResponse:
        return AlternativesResponse(
            alternatives=self.alternatives,
            was_cached=self.was_cached,
            tokens_used=self.tokens_used,
            remaining_requests=self.remaining_requests,
            ranking=self.ranking,
        )


class AlternativesPipeline:
    """
    Produce ranked exercise alternatives for an authenticated caller.

    One instance serves one request; it shares the request's database
    session with the cache and the usage meter.
    """

    def __init__(
        self,
        session: Session,
        ranking_client: Optional[RankingClient] = None,
        settings: Settings = default_settings,
        clock: Callable[[], datetime.datetime] = datetime.datetime.utcnow,
    ):
        self.session = session
        self.settings = settings
        self.exercises = ExerciseRepository(session)
        self.equipment = EquipmentRepository(session)
        self.cache = ResultCache(session, clock=clock)
        self.meter = UsageMeter(session, clock=clock)
        self.reranker = (
            AIReranker(ranking_client, max_reason_length=settings.AI_MAX_REASON_LENGTH)
            if ranking_client is not None
            else None
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_source(self, exercise_id: int, organization_id: str) -> ExerciseData:
        try:
            row = self.exercises.get_visible(exercise_id, organization_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("exercise catalog unavailable") from exc
        if row is None:
            raise ExerciseNotFoundError(exercise_id)
        return ExerciseData.model_validate(row)

    def load_pool(self, organization_id: str) -> list[ExerciseData]:
        try:
            rows = self.exercises.list_visible(organization_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("exercise catalog unavailable") from exc
        return [ExerciseData.model_validate(row) for row in rows]

    def load_inventory(self, organization_id: str) -> EquipmentInventory:
        """Organization equipment, or the default allow-list when unconfigured."""
        try:
            row = self.equipment.get_by_organization(organization_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("equipment inventory unavailable") from exc
        if row is None:
            return EquipmentInventory(allowed=DEFAULT_EQUIPMENT)
        return EquipmentInventory(
            allowed=tuple(row.available_equipment),
            unavailable=tuple(row.unavailable_equipment or ()),
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, principal: Principal, request: AlternativesRequest) -> PipelineResult:
        """
        Execute the pipeline.

        Raises:
            FeatureNotEntitledError: plan lacks the alternatives feature
            ExerciseNotFoundError: source exercise unknown to the organization
            QuotaExceededError: a quota is exhausted and the policy is "gate"
            StoreUnavailableError: catalog, settings, counters or cache unreadable
        """
        started = time.perf_counter()
        org, user = principal.organization_id, principal.user_id

        usage = self.meter.get_settings(org)
        self.meter.ensure_entitled(usage, FEATURE_ALTERNATIVES)

        source = self.load_source(request.exercise_id, org)
        inventory = self.load_inventory(org)
        available = inventory.available
        difficulty = request.difficulty_filter.value if request.difficulty_filter else None
        key = make_cache_key(org, source.id, equipment_fingerprint(available), difficulty, request.limit)

        check = self.meter.check(org, user, FEATURE_ALTERNATIVES)
        if (
            not check.allowed
            and check.limiting_tier != TIER_DISABLED
            and self.settings.QUOTA_POLICY == "gate"
        ):
            raise QuotaExceededError(check.limiting_tier, check.used, check.limit)

        cached = self.cache.lookup(key)
        if cached is not None:
            logger.info("Alternatives cache hit: org=%s exercise=%s", org, source.id)
            self._record(org, user, source.id, 0, True, cached.ranking, len(cached.alternatives), started)
            return PipelineResult(
                alternatives=cached.alternatives,
                was_cached=True,
                tokens_used=0,
                remaining_requests=check.remaining_for_user,
                ranking=cached.ranking,
            )

        candidates = find_candidates(
            source,
            self.load_pool(org),
            available,
            request.difficulty_filter,
            self.settings.ALTERNATIVES_MAX_CANDIDATES,
        )
        outcome: RankingOutcome = RuleBased(alternatives=rank_candidates(source, candidates, available))
        remaining = check.remaining_for_user

        if usage.ai_enabled and self.reranker is not None and candidates and check.allowed:
            outcome, remaining = self._enhance(source, outcome, available, usage, org, user, remaining)

        ranking = RankingMode.ENHANCED if isinstance(outcome, Enhanced) else RankingMode.RULE_BASED
        alternatives = outcome.alternatives[: request.limit]

        entry = CacheEntry(
            alternatives=alternatives,
            ranking=ranking,
            model=outcome.model if isinstance(outcome, Enhanced) else None,
            tokens_used=outcome.tokens_used,
        )
        try:
            self.cache.store(key, org, source.id, entry, self.settings.ALTERNATIVES_CACHE_TTL_SECONDS)
        except SQLAlchemyError:
            logger.warning("Failed to store alternatives in cache for org %s", org, exc_info=True)

        self._record(org, user, source.id, outcome.tokens_used, False, ranking, len(alternatives), started)
        return PipelineResult(
            alternatives=alternatives,
            was_cached=False,
            tokens_used=outcome.tokens_used,
            remaining_requests=remaining,
            ranking=ranking,
        )

    def _enhance(
        self,
        source: ExerciseData,
        rule_based: RuleBased,
        available: frozenset[str],
        usage: OrganizationAIUsage,
        org: str,
        user: str,
        remaining: int,
    ) -> tuple[RankingOutcome, int]:
        """Re-rank and charge usage; fall back to ``rule_based`` on failure."""
        model = self.settings.OPENAI_MODEL or self.meter.model_for(usage)
        try:
            enhanced = self.reranker.rerank(source, rule_based.alternatives, available, model)
        except UpstreamServiceError as exc:
            logger.warning("AI re-rank failed, using rule-based ranking: %s", exc)
            return rule_based, remaining
        except Exception:
            logger.exception("Unexpected AI re-rank error, using rule-based ranking")
            return rule_based, remaining

        consumed = self.meter.consume(org, user, FEATURE_ALTERNATIVES, enhanced.tokens_used)
        if consumed.success:
            return enhanced, consumed.remaining_for_user
        if consumed.limiting_tier == TIER_STORE_UNAVAILABLE:
            # Already logged by the meter; the model call has been paid for.
            return enhanced, remaining
        logger.info(
            "Discarding AI ranking for org %s user %s: %s exhausted",
            org, user, consumed.limiting_tier,
        )
        return rule_based, consumed.remaining_for_user

    def _record(
        self,
        org: str,
        user: str,
        exercise_id: int,
        tokens: int,
        was_cached: bool,
        ranking: RankingMode,
        count: int,
        started: float,
    ) -> None:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self.meter.record_request(
            org,
            user,
            FEATURE_ALTERNATIVES,
            exercise_id=exercise_id,
            tokens_used=tokens,
            was_cached=was_cached,
            ranking=RankingMode(ranking).value,
            response_time_ms=elapsed_ms,
            alternatives_count=count,
        )
