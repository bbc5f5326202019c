import pytest
from unittest.mock import AsyncMock, MagicMock
from core.config import settings
from ingestion.scheduler import STARTUP_JOB_ID, SYNC_JOB_ID, SyncScheduler


@pytest.mark.asyncio
async def test_scheduler_registers_jobs():
    scheduler = SyncScheduler(MagicMock(), interval_hours=6, run_on_startup=True)
    scheduler.start()
    try:
        job = scheduler.scheduler.get_job(SYNC_JOB_ID)
        assert job is not None
        assert job.max_instances == 1
        assert job.coalesce is True
        assert job.kwargs == {"trigger": "scheduled"}
        assert job.trigger.interval.total_seconds() == 6 * 3600

        startup = scheduler.scheduler.get_job(STARTUP_JOB_ID)
        assert startup is not None
        assert startup.kwargs == {"trigger": "startup"}
    finally:
        scheduler.stop()


def test_scheduler_defaults_from_settings():
    scheduler = SyncScheduler(MagicMock())

    assert scheduler.interval_hours == settings.SYNC_INTERVAL_HOURS
    assert scheduler.run_on_startup == settings.SYNC_ON_STARTUP


@pytest.mark.asyncio
async def test_startup_job_optional():
    scheduler = SyncScheduler(MagicMock(), run_on_startup=False)
    scheduler.start()
    try:
        assert scheduler.scheduler.get_job(STARTUP_JOB_ID) is None
    finally:
        scheduler.stop()


@pytest.mark.asyncio
async def test_scheduler_job_execution():
    runner = MagicMock()
    runner.run = AsyncMock(return_value=None)

    scheduler = SyncScheduler(runner)
    await scheduler.run_sync_job("scheduled")

    runner.run.assert_awaited_once_with("scheduled")


@pytest.mark.asyncio
async def test_scheduler_job_survives_runner_failure():
    runner = MagicMock()
    runner.run = AsyncMock(side_effect=RuntimeError("boom"))

    scheduler = SyncScheduler(runner)
    await scheduler.run_sync_job()

    runner.run.assert_awaited_once()
