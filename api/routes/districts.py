"""
Region and district catalog endpoints: listing, search, nearest, comparison
"""

from fastapi import APIRouter, Depends, Query, Request
from api.dependencies import get_catalog, get_store
from schemas.api import (
    ComparisonResponse,
    DistrictComparison,
    DistrictResponse,
    NearestDistrictResponse,
    PerformanceWithMetrics,
    RegionResponse,
    RegionTotals,
)
from services.catalog import DistrictCatalog
from services.geo import NearestDistrictResolver
from services.record_store import PerformanceStore
from typing import List
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Districts"])


@router.get("/regions", response_model=List[RegionResponse])
async def list_regions(catalog: DistrictCatalog = Depends(get_catalog)):
    return await catalog.list_regions()


@router.get("/regions/{code}/districts", response_model=List[DistrictResponse])
async def list_region_districts(code: str, catalog: DistrictCatalog = Depends(get_catalog)):
    await catalog.get_region(code)
    return await catalog.list_by_region(code)


@router.get("/regions/{code}/comparison", response_model=ComparisonResponse)
async def compare_region(
    code: str,
    catalog: DistrictCatalog = Depends(get_catalog),
    store: PerformanceStore = Depends(get_store)
):
    """
    Each district's own latest record with metrics, most person-days first,
    plus totals over those records.
    """
    region = await catalog.get_region(code)
    districts = {d.code: d for d in await catalog.list_by_region(code)}
    records = await store.aggregate_latest_by_parent(code)

    ranked = sorted(records, key=lambda r: (-r.person_days_total, r.district_code))
    return ComparisonResponse(
        region=RegionResponse.model_validate(region),
        districts=[
            DistrictComparison(
                district=DistrictResponse.model_validate(districts[r.district_code]),
                latest=PerformanceWithMetrics.from_record(r)
            )
            for r in ranked
        ],
        totals=RegionTotals.from_records(records)
    )


@router.get("/districts", response_model=List[DistrictResponse])
async def list_districts(catalog: DistrictCatalog = Depends(get_catalog)):
    return await catalog.list_all()


@router.get("/districts/search", response_model=List[DistrictResponse])
async def search_districts(
    request: Request,
    q: str = Query(..., description="District name or part of it"),
    catalog: DistrictCatalog = Depends(get_catalog)
):
    request_id = getattr(request.state, "request_id", "-")
    logger.debug(f"[{request_id}] search q={q!r}")
    return await catalog.search(q)


@router.get("/districts/nearest", response_model=NearestDistrictResponse)
async def nearest_district(
    lat: float = Query(..., description="Latitude in decimal degrees"),
    lon: float = Query(..., description="Longitude in decimal degrees"),
    catalog: DistrictCatalog = Depends(get_catalog)
):
    """Closest district by great-circle distance; 400 for impossible coordinates"""
    match = await NearestDistrictResolver(catalog).resolve(lat, lon)
    return NearestDistrictResponse(
        district=DistrictResponse.model_validate(match.district),
        distance_km=round(match.distance_km, 3),
        latitude=lat,
        longitude=lon
    )


@router.get("/districts/{code}", response_model=DistrictResponse)
async def get_district(code: str, catalog: DistrictCatalog = Depends(get_catalog)):
    return await catalog.get(code.upper())
