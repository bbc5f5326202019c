"""
Append-only sync run log
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from models.sync_run import SyncRun
import logging

logger = logging.getLogger(__name__)


class SyncRunLog:
    """Writes one row per sync invocation; rows are never updated"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def append(self, result) -> SyncRun:
        """
        Persist a finished run.

        Args:
            result: SyncRunResult from the sync runner
        """
        entry = SyncRun(
            run_id=result.run_id,
            trigger=result.trigger,
            outcome=result.outcome,
            started_at=result.started_at,
            completed_at=result.completed_at,
            duration_seconds=result.duration_seconds,
            records_touched=result.records_touched,
            records_failed=result.records_failed,
            error_message=result.error_message,
            error_details=result.error_details or None,
        )
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def latest(self) -> Optional[SyncRun]:
        result = await self.db.execute(
            select(SyncRun).order_by(SyncRun.started_at.desc(), SyncRun.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def recent(self, limit: int = 10) -> List[SyncRun]:
        result = await self.db.execute(
            select(SyncRun).order_by(SyncRun.started_at.desc(), SyncRun.id.desc()).limit(limit)
        )
        return list(result.scalars().all())
