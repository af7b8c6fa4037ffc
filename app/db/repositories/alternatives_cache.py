"""Alternatives cache repository."""

import datetime
from typing import Optional

from sqlalchemy import delete, update
from sqlmodel import Session, select

from app.db.dialects import insert_for
from app.models.alternatives_cache import AlternativesCacheEntry


class AlternativesCacheRepository:
    """Repository for AlternativesCacheEntry database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_live(self, cache_key: str, now: datetime.datetime) -> Optional[AlternativesCacheEntry]:
        """Return the entry for ``cache_key`` unless it has expired."""
        statement = (
            select(AlternativesCacheEntry)
            .where(AlternativesCacheEntry.cache_key == cache_key)
            .where(AlternativesCacheEntry.expires_at > now)
        )
        return self.session.exec(statement).first()

    def upsert(self, entry: AlternativesCacheEntry) -> None:
        """Insert or replace (last write wins)."""
        values = entry.model_dump()
        stmt = insert_for(self.session, AlternativesCacheEntry).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["cache_key"],
            set_={
                "payload": stmt.excluded.payload,
                "tokens_used": stmt.excluded.tokens_used,
                "created_at": stmt.excluded.created_at,
                "expires_at": stmt.excluded.expires_at,
                "hit_count": 0,
                "last_hit_at": None,
            },
        )
        self.session.connection().execute(stmt)
        self.session.commit()

    def record_hit(self, cache_key: str, now: datetime.datetime) -> None:
        stmt = (
            update(AlternativesCacheEntry)
            .where(AlternativesCacheEntry.cache_key == cache_key)
            .values(hit_count=AlternativesCacheEntry.hit_count + 1, last_hit_at=now)
        )
        self.session.connection().execute(stmt)
        self.session.commit()

    def delete_expired(self, now: datetime.datetime) -> int:
        stmt = delete(AlternativesCacheEntry).where(AlternativesCacheEntry.expires_at <= now)
        result = self.session.connection().execute(stmt)
        self.session.commit()
        return result.rowcount
