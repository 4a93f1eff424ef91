"""Seed the default courses.

Usage: python -m roster_service.scripts.seed [--database-url URL]

Safe to run repeatedly: courses are matched by code and only missing ones
are inserted.
"""
import argparse
import sys

import structlog

from ..application.use_cases.seed_courses import SeedCourses
from ..config import Settings
from ..infrastructure.db import Database
from ..infrastructure.logs import configure_logging
from ..infrastructure.repositories import CourseRepository

logger = structlog.get_logger(__name__)


def seed(database: Database) -> int:
    """Create tables if needed and insert missing courses; returns how many were created."""
    database.create_all()
    with database.session() as db:
        results = SeedCourses(CourseRepository(db)).execute()
    return sum(1 for _, created in results if created)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed default courses")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    settings = Settings()
    if args.database_url:
        settings.DATABASE_URL = args.database_url
    configure_logging(settings.LOG_LEVEL)

    database = Database.from_settings(settings)
    logger.info("seeding_started")
    try:
        created = seed(database)
    except Exception:
        logger.exception("seeding_failed")
        return 1
    finally:
        database.dispose()
    logger.info("seeding_finished", created=created)
    return 0


if __name__ == "__main__":
    sys.exit(main())
