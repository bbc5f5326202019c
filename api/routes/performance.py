"""
Performance endpoints: history, latest summary with metrics, trends
"""

from fastapi import APIRouter, Depends, Query, Request
from api.dependencies import get_catalog, get_store
from schemas.api import (
    DistrictResponse,
    PerformanceHistoryResponse,
    PerformanceRecordResponse,
    PerformanceSummaryResponse,
    PerformanceWithMetrics,
    TrendResponse,
)
from services.catalog import DistrictCatalog
from services.record_store import PerformanceStore
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/performance", tags=["Performance"])


@router.get("/{code}", response_model=PerformanceHistoryResponse)
async def get_performance(
    request: Request,
    code: str,
    financial_year: Optional[str] = Query(None, description="e.g. 2024-2025 or 2024-25"),
    month: Optional[str] = Query(None, description="Month name, abbreviation or number"),
    catalog: DistrictCatalog = Depends(get_catalog),
    store: PerformanceStore = Depends(get_store)
):
    """Stored records for a district, newest first"""
    request_id = getattr(request.state, "request_id", "-")
    logger.info(
        f"[{request_id}] GET /api/performance/{code} - "
        f"filters: financial_year={financial_year}, month={month}"
    )

    district = await catalog.get(code.upper())
    records = await store.history_for(district.code, financial_year, month)
    return PerformanceHistoryResponse(
        district=DistrictResponse.model_validate(district),
        records=[PerformanceRecordResponse.model_validate(r) for r in records],
        total_records=len(records)
    )


@router.get("/{code}/summary", response_model=PerformanceSummaryResponse)
async def get_summary(
    code: str,
    catalog: DistrictCatalog = Depends(get_catalog),
    store: PerformanceStore = Depends(get_store)
):
    """Latest record by fiscal order with derived metrics"""
    district = await catalog.get(code.upper())
    latest = await store.latest_for(district.code)
    return PerformanceSummaryResponse(
        district=DistrictResponse.model_validate(district),
        latest=PerformanceWithMetrics.from_record(latest)
    )


@router.get("/{code}/trends", response_model=TrendResponse)
async def get_trends(
    code: str,
    limit: int = Query(12, ge=1, le=120, description="Number of most recent periods"),
    catalog: DistrictCatalog = Depends(get_catalog),
    store: PerformanceStore = Depends(get_store)
):
    """Up to ``limit`` most recent periods, oldest first"""
    district = await catalog.get(code.upper())
    records = await store.trend_for(district.code, limit)
    return TrendResponse(
        district=DistrictResponse.model_validate(district),
        periods=len(records),
        trends=[PerformanceWithMetrics.from_record(r) for r in records]
    )
