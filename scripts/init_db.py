import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import Database
from core.logging import setup_logging
from services.catalog import DistrictCatalog
from services.reference_data import DISTRICTS, REGIONS

setup_logging()
logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Connecting to database...")
    database = Database(settings.DATABASE_URL)

    # open() creates every table defined in models
    await database.open()
    try:
        async with database.session() as session:
            stats = await DistrictCatalog(session).seed(REGIONS, DISTRICTS)
        logger.info(
            f"Catalog ready: {stats['regions_added']} regions and "
            f"{stats['districts_added']} districts added"
        )
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(init_database())
