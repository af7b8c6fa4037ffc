"""
Delete expired alternatives cache entries.

Meant to run from cron; expired rows are never served, this only reclaims
space.

Usage:
    python scripts/purge_cache.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from sqlmodel import Session

from app.alternatives.cache import ResultCache
from app.core.config import settings
from app.db.session import build_engine

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    engine = build_engine(settings)
    try:
        with Session(engine) as session:
            removed = ResultCache(session).purge_expired()
    finally:
        engine.dispose()

    print(f"Removed {removed} expired cache entries")
