"""
Sync status and manual trigger endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db, get_sync_runner
from ingestion.runner import SyncRunner
from models.base import SyncTrigger
from schemas.api import SyncRunResponse, SyncStatusResponse
from services.sync_log import SyncRunLog
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/sync", tags=["Sync"])


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(
    limit: int = Query(10, ge=1, le=100, description="Number of recent runs to return"),
    db: AsyncSession = Depends(get_db),
    runner: SyncRunner = Depends(get_sync_runner)
):
    runs = await SyncRunLog(db).recent(limit)
    recent = [SyncRunResponse.model_validate(run) for run in runs]
    return SyncStatusResponse(
        in_progress=runner.in_progress,
        state=runner.state.value,
        latest_run=recent[0] if recent else None,
        recent_runs=recent
    )


@router.post("", response_model=SyncRunResponse)
async def trigger_sync(runner: SyncRunner = Depends(get_sync_runner)):
    """
    Run a sync now and return its logged result.

    409 when a run is already in progress; the trigger is not queued.
    """
    if runner.in_progress:
        raise HTTPException(status_code=409, detail="A sync run is already in progress")

    result = await runner.run(SyncTrigger.MANUAL)
    if result is None:
        raise HTTPException(status_code=409, detail="A sync run is already in progress")

    logger.info(f"Manual sync {result.run_id}: {result.outcome.value}")
    return SyncRunResponse(**result.to_dict())
