import logging
from datetime import datetime
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger
from core.config import settings
from ingestion.runner import SyncRunner
from models.base import SyncTrigger

logger = logging.getLogger(__name__)

SYNC_JOB_ID = "district_sync"
STARTUP_JOB_ID = "district_sync_startup"


class SyncScheduler:
    def __init__(
        self,
        runner: SyncRunner,
        interval_hours: Optional[int] = None,
        run_on_startup: Optional[bool] = None
    ):
        self.runner = runner
        self.interval_hours = interval_hours or settings.SYNC_INTERVAL_HOURS
        self.run_on_startup = settings.SYNC_ON_STARTUP if run_on_startup is None else run_on_startup
        self.scheduler = AsyncIOScheduler()

    async def run_sync_job(self, trigger: str = SyncTrigger.SCHEDULED.value):
        """Job body; the runner never raises, this guards the scheduler anyway"""
        logger.info(f"Scheduler: starting {trigger} sync")
        try:
            result = await self.runner.run(trigger)
            if result is None:
                logger.info("Scheduler: sync skipped, another run is active")
        except Exception as e:
            logger.error(f"Scheduler: sync job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_sync_job,
            trigger=IntervalTrigger(hours=self.interval_hours),
            kwargs={"trigger": SyncTrigger.SCHEDULED.value},
            id=SYNC_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        if self.run_on_startup:
            self.scheduler.add_job(
                self.run_sync_job,
                trigger=DateTrigger(run_date=datetime.now()),
                kwargs={"trigger": SyncTrigger.STARTUP.value},
                id=STARTUP_JOB_ID,
                replace_existing=True
            )
        self.scheduler.start()
        logger.info(f"Sync scheduler started (every {self.interval_hours}h)")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Sync scheduler stopped")
