"""
Alternatives cache model.

Content-addressed: ``cache_key`` hashes every input of a pipeline run, so a
changed equipment inventory simply produces a different key.  Stale rows are
never matched again and are removed once expired.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class AlternativesCacheEntry(SQLModel, table=True):
    """A cached, ordered list of alternatives for one input tuple."""

    __tablename__ = "alternatives_cache"

    cache_key: str = Field(primary_key=True, max_length=64)
    organization_id: str = Field(nullable=False, max_length=64, index=True)
    exercise_id: int = Field(nullable=False, index=True)

    payload: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    tokens_used: int = Field(default=0)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    expires_at: datetime.datetime = Field(nullable=False, index=True)
    hit_count: int = Field(default=0)
    last_hit_at: Optional[datetime.datetime] = Field(default=None)
