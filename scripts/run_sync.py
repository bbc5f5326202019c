"""
Script to run one sync (upstream fetch or synthetic fallback) and exit
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import Database
from core.logging import setup_logging
from ingestion.runner import SyncRunner
from models.base import SyncOutcome, SyncTrigger

setup_logging()
logger = logging.getLogger(__name__)


async def run_sync() -> int:
    """Run a manual sync; exit code 1 when the run ended in error"""
    database = Database(settings.DATABASE_URL)
    await database.open()

    try:
        result = await SyncRunner(database).run(SyncTrigger.MANUAL)
    finally:
        await database.close()

    logger.info(
        f"Sync {result.run_id}: {result.outcome.value} - "
        f"touched: {result.records_touched}, failed: {result.records_failed}"
    )
    if result.error_message:
        logger.info(f"Reason: {result.error_message}")

    return 1 if result.outcome == SyncOutcome.ERROR else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run_sync()))
