"""
Dialect-aware statement helpers.

Upserts are expressed with ``INSERT ... ON CONFLICT`` which both PostgreSQL
and SQLite support, each through its own dialect ``insert`` construct.
"""

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def insert_for(session: Session, model):
    """Return a dialect ``insert`` construct supporting ``on_conflict_*``."""
    dialect = session.get_bind().dialect.name
    try:
        factory = _INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Upserts are not supported on '{dialect}'") from None
    return factory(model)
