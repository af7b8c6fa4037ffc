"""
Usage repository.

Counter writes do **not** commit: :class:`~app.alternatives.metering.UsageMeter`
groups several of them into one transaction and decides whether to commit
or roll back.
"""

import datetime
from typing import Iterable, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.db.dialects import insert_for
from app.models.ai_usage import AIUsageLog, OrganizationAIUsage, UsageCounter

UNLIMITED = -1


class UsageRepository:
    """Repository for AI usage settings, counters and log."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Organization settings
    # ------------------------------------------------------------------

    def get_settings(self, organization_id: str) -> Optional[OrganizationAIUsage]:
        statement = select(OrganizationAIUsage).where(
            OrganizationAIUsage.organization_id == organization_id
        )
        return self.session.exec(statement).first()

    def create_settings_if_absent(self, defaults: OrganizationAIUsage) -> OrganizationAIUsage:
        """Insert the row unless another request already did, then return the stored row."""
        values = defaults.model_dump(exclude={"id"})
        stmt = insert_for(self.session, OrganizationAIUsage).values(**values)
        stmt = stmt.on_conflict_do_nothing(index_elements=["organization_id"])
        self.session.connection().execute(stmt)
        self.session.commit()
        return self.get_settings(defaults.organization_id)

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def ensure_counter(self, counter_id: str, organization_id: str, period: str) -> None:
        stmt = insert_for(self.session, UsageCounter).values(
            counter_id=counter_id,
            organization_id=organization_id,
            period=period,
            value=0,
            updated_at=datetime.datetime.utcnow(),
        )
        self.session.connection().execute(stmt.on_conflict_do_nothing(index_elements=["counter_id"]))

    def compare_and_increment(self, counter_id: str, delta: int, limit: int) -> bool:
        """
        Atomically add ``delta`` if the counter is still below ``limit``.

        A single conditional ``UPDATE``; the database serialises concurrent
        writers on the row, and the guard is re-evaluated against the
        committed value.

        Args:
            counter_id: Counter to bump (must exist)
            delta: Amount to add (>= 0)
            limit: Upper bound, or ``UNLIMITED``

        Returns:
            True if the row was updated, False if the limit was reached
        """
        stmt = (
            update(UsageCounter)
            .where(UsageCounter.counter_id == counter_id)
            .values(value=UsageCounter.value + delta, updated_at=datetime.datetime.utcnow())
        )
        if limit != UNLIMITED:
            stmt = stmt.where(UsageCounter.value < limit)
        result = self.session.connection().execute(stmt)
        return result.rowcount == 1

    def get_values(self, counter_ids: Iterable[str]) -> dict[str, int]:
        """Current values for the given ids; missing counters read as 0."""
        ids = list(counter_ids)
        statement = select(UsageCounter.counter_id, UsageCounter.value).where(
            UsageCounter.counter_id.in_(ids)
        )
        found = {cid: value for cid, value in self.session.exec(statement).all()}
        return {cid: found.get(cid, 0) for cid in ids}

    def get_values_with_prefix(self, prefix: str, period: str) -> dict[str, int]:
        statement = (
            select(UsageCounter.counter_id, UsageCounter.value)
            .where(UsageCounter.counter_id.startswith(prefix, autoescape=True))
            .where(UsageCounter.period == period)
        )
        return {cid: value for cid, value in self.session.exec(statement).all()}

    # ------------------------------------------------------------------
    # Log
    # ------------------------------------------------------------------

    def add_log(self, entry: AIUsageLog) -> AIUsageLog:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry
