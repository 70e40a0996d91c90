"""
Journal API: Database Reset Command
===================================

What:  Drops every application table and recreates the schema from the ORM
       models. All accounts and entries are lost.
How:   `journal-reset-db` (console script) or `python -m journal_api.reset_db`.
       Reads DATABASE_URL like the server does. Exits 0 on success, 1 on any
       failure.
"""

import asyncio
import logging
import sys

from journal_api import models  # noqa: F401  (registers tables on Base.metadata)
from journal_api.config import Settings, get_settings
from journal_api.database import Database
from journal_api.main import setup_logging

logger = logging.getLogger(__name__)


async def reset(settings: Settings) -> None:
    database = Database.from_settings(settings)
    try:
        await database.drop_all()
        await database.create_all()
    finally:
        await database.dispose()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    try:
        asyncio.run(reset(settings))
    except Exception as e:
        logger.error("Database reset failed: %s", e, exc_info=True)
        sys.exit(1)
    logger.info("Database reset complete")
    sys.exit(0)


if __name__ == "__main__":
    main()
