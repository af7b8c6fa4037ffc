"""
Database initialization script.

Creates the tables and seeds the built-in exercise catalog.  Production
databases should be migrated with ``alembic upgrade head`` and then
seeded with ``--seed-only``.

Usage:
    python scripts/init_db.py [--seed-only]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.init_db import init_db, seed_catalog
from app.db.session import build_engine

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the Spotter database")
    parser.add_argument("--seed-only", action="store_true", help="Only seed the exercise catalog")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 50)
    print("Spotter Database Initialization")
    print("=" * 50)

    engine = build_engine(settings)
    try:
        if args.seed_only:
            seed_catalog(engine)
        else:
            init_db(engine)
    except SQLAlchemyError as e:
        print(f"ERROR: Database initialization failed: {e}")
        sys.exit(1)
    finally:
        engine.dispose()

    print("SUCCESS: Database initialized!")
