"""
Database session management.

The engine is created by the application lifespan (see
:func:`app.main.create_app`) and kept on ``app.state``; request handlers get
a session bound to it through :func:`get_db`.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from app.core.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the SQLModel engine for ``settings.DATABASE_URL``."""
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=settings.DEBUG,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        url,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
        pool_pre_ping=True,   # Verify connections before using
        pool_size=5,          # Connection pool size
        max_overflow=10       # Max connections beyond pool_size
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session bound to the application's engine

    Example:
        @router.get("/usage")
        def usage(db: Session = Depends(get_db)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
