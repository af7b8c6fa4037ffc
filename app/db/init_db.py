"""
Database initialization.

Creates all tables and seeds the built-in global exercise catalog.
"""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel

from app.alternatives.exercise_catalog import BUILTIN_EXERCISES
from app.db import base  # noqa: F401  (registers every model on the metadata)
from app.db.repositories.exercise import ExerciseRepository

logger = logging.getLogger(__name__)


def create_tables(engine: Engine) -> None:
    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)


def seed_catalog(engine: Engine) -> int:
    """
    Insert the built-in exercises into an empty catalog.

    Returns:
        Number of exercises inserted (0 if the catalog already has rows)
    """
    with Session(engine) as session:
        repository = ExerciseRepository(session)
        if repository.count() > 0:
            logger.info("Exercise catalog already populated, skipping seed")
            return 0
        for entry in BUILTIN_EXERCISES:
            session.add(entry.to_model())
        session.commit()
    logger.info("Seeded %d built-in exercises", len(BUILTIN_EXERCISES))
    return len(BUILTIN_EXERCISES)


def init_db(engine: Engine) -> None:
    """
    Initialize database schema.

    - Creates all SQLModel tables
    - Seeds the global exercise catalog on first run
    """
    create_tables(engine)
    seed_catalog(engine)
    logger.info("Database initialization complete")
