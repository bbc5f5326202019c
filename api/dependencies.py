"""
FastAPI dependencies: database sessions and shared services from app state
"""

from typing import AsyncGenerator
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import Database
from ingestion.runner import SyncRunner
from services.catalog import DistrictCatalog
from services.record_store import PerformanceStore


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)) -> AsyncGenerator[AsyncSession, None]:
    """One session per request, closed when the response is sent"""
    async with database.session() as session:
        yield session


def get_sync_runner(request: Request) -> SyncRunner:
    return request.app.state.sync_runner


def get_catalog(db: AsyncSession = Depends(get_db)) -> DistrictCatalog:
    return DistrictCatalog(db)


def get_store(db: AsyncSession = Depends(get_db)) -> PerformanceStore:
    return PerformanceStore(db)
