"""
Alternatives result cache.

Keys are content hashes of every pipeline input, so an inventory change or
a different filter produces a different key instead of invalidating
anything.
"""

from __future__ import annotations

import datetime
import hashlib
import json
import logging
from typing import Callable, Iterable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.exceptions import StoreUnavailableError
from app.db.repositories.alternatives_cache import AlternativesCacheRepository
from app.models.alternatives_cache import AlternativesCacheEntry
from app.schemas.equipment import normalize_tags
from app.schemas.alternatives import CacheEntry

logger = logging.getLogger(__name__)

FINGERPRINT_LENGTH = 16


def equipment_fingerprint(tags: Iterable[str]) -> str:
    """Short stable hash of a normalized equipment set."""
    canonical = ",".join(normalize_tags(tags))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def make_cache_key(
    organization_id: str,
    exercise_id: int,
    fingerprint: str,
    difficulty: Optional[str],
    limit: int,
) -> str:
    """SHA-256 over the canonical JSON of the cache inputs."""
    payload = json.dumps(
        {
            "organization_id": organization_id,
            "exercise_id": exercise_id,
            "equipment": fingerprint,
            "difficulty": difficulty,
            "limit": limit,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ResultCache:
    """Persistent TTL cache of ranked alternatives."""

    def __init__(
        self,
        session: Session,
        clock: Callable[[], datetime.datetime] = datetime.datetime.utcnow,
    ):
        self.session = session
        self.repository = AlternativesCacheRepository(session)
        self.clock = clock

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """
        Return the live entry for ``key``, or ``None``.

        Raises:
            StoreUnavailableError: if the cache table cannot be read
        """
        now = self.clock()
        try:
            row = self.repository.get_live(key, now)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreUnavailableError("alternatives cache unavailable") from exc
        if row is None:
            return None

        try:
            entry = CacheEntry.model_validate(row.payload)
        except ValidationError:
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

        try:
            self.repository.record_hit(key, now)
        except SQLAlchemyError:
            self.session.rollback()
            logger.warning("Failed to record cache hit for %s", key, exc_info=True)
        return entry

    def store(self, key: str, organization_id: str, exercise_id: int, entry: CacheEntry, ttl_seconds: int) -> None:
        """Insert or replace ``key``.  Errors propagate to the caller."""
        now = self.clock()
        row = AlternativesCacheEntry(
            cache_key=key,
            organization_id=organization_id,
            exercise_id=exercise_id,
            payload=entry.model_dump(mode="json"),
            tokens_used=entry.tokens_used,
            created_at=now,
            expires_at=now + datetime.timedelta(seconds=ttl_seconds),
        )
        try:
            self.repository.upsert(row)
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def purge_expired(self) -> int:
        """Delete expired rows and return how many were removed."""
        removed = self.repository.delete_expired(self.clock())
        logger.info("Purged %d expired alternatives cache entries", removed)
        return removed
