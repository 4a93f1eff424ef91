"""Verify database connectivity and the current user's privileges.

Usage: python -m roster_service.scripts.check_connection [--database-url URL]
"""
import argparse
import sys

import structlog
from sqlalchemy.exc import SQLAlchemyError

from ..config import Settings
from ..infrastructure.db import Database
from ..infrastructure.diagnostics import check_connection
from ..infrastructure.logs import configure_logging

logger = structlog.get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check database connection and permissions")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    settings = Settings()
    if args.database_url:
        settings.DATABASE_URL = args.database_url
    configure_logging(settings.LOG_LEVEL)

    database = Database.from_settings(settings)
    logger.info("connection_check_started", dialect=database.engine.dialect.name)
    try:
        report = check_connection(database)
    except SQLAlchemyError as e:
        logger.error("connection_check_failed", error=str(e))
        return 1
    finally:
        database.dispose()

    logger.info("connection_check_succeeded", **report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
