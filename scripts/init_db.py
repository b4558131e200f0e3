#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates the MealTrack tables in the database named by DATABASE_URL.
"""

import argparse
import logging
import os
import sys

# Ensure we're using the right Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from app.config import settings  # noqa: E402
from domain.models import create_db_engine, init_database, dispose_engine  # noqa: E402

logger = logging.getLogger("mealtrack.scripts.init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create MealTrack database tables")
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy URL (defaults to DATABASE_URL)",
    )
    parser.add_argument("--echo", action="store_true", help="Log emitted SQL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=settings.log_format)

    engine = create_db_engine(args.database_url, echo=args.echo)
    try:
        init_database(engine)
    except Exception:
        logger.exception("Database initialization failed")
        return 1
    finally:
        dispose_engine(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
