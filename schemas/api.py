"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from models.base import RecordSource, SyncOutcome, SyncTrigger
from services.metrics import derive_metrics, aggregate_counters


# ============================================================================
# Catalog Schemas
# ============================================================================

class RegionResponse(BaseModel):
    code: str
    name: str

    class Config:
        from_attributes = True


class DistrictResponse(BaseModel):
    code: str
    name: str
    parent_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "code": "UP050",
                "name": "Lucknow",
                "parent_code": "UP",
                "latitude": 26.8467,
                "longitude": 80.9462
            }
        }


class NearestDistrictResponse(BaseModel):
    """Closest district to a coordinate pair"""
    district: DistrictResponse
    distance_km: float = Field(..., ge=0)
    latitude: float
    longitude: float


# ============================================================================
# Performance Schemas
# ============================================================================

class MetricsResponse(BaseModel):
    """Rates derived at read time; percentages unless named otherwise"""
    work_demand_rate: float
    work_provision_rate: float
    work_completion_rate: float
    avg_person_days_per_household: float
    sc_participation_rate: float
    st_participation_rate: float
    women_participation_rate: float

    @classmethod
    def from_counters(cls, source) -> "MetricsResponse":
        return cls(**derive_metrics(source).to_dict())


class PerformanceRecordResponse(BaseModel):
    """Stored counters for one district-month"""
    district_code: str
    financial_year: str
    month: str

    households_total: int
    households_demanding: int
    households_provided: int

    person_days_total: int
    person_days_sc: int
    person_days_st: int
    person_days_women: int

    works_total: int
    works_completed: int
    works_ongoing: int

    expenditure_wage: float
    expenditure_material: float
    expenditure_admin: float
    expenditure_total: float

    source: RecordSource
    updated_at: datetime

    class Config:
        from_attributes = True
        use_enum_values = True


class PerformanceWithMetrics(PerformanceRecordResponse):
    metrics: MetricsResponse

    @classmethod
    def from_record(cls, record) -> "PerformanceWithMetrics":
        base = PerformanceRecordResponse.model_validate(record)
        return cls(**base.model_dump(), metrics=MetricsResponse.from_counters(record))


class PerformanceHistoryResponse(BaseModel):
    district: DistrictResponse
    records: List[PerformanceRecordResponse]
    total_records: int


class PerformanceSummaryResponse(BaseModel):
    """Latest record for a district with its derived metrics"""
    district: DistrictResponse
    latest: PerformanceWithMetrics


class TrendResponse(BaseModel):
    """Most recent periods, oldest first"""
    district: DistrictResponse
    periods: int
    trends: List[PerformanceWithMetrics]


class DistrictComparison(BaseModel):
    district: DistrictResponse
    latest: PerformanceWithMetrics


class RegionTotals(BaseModel):
    """Counters summed over each district's own latest record"""
    districts_reporting: int
    households_total: int
    households_provided: int
    person_days_total: int
    works_total: int
    works_completed: int
    expenditure_total: float
    metrics: MetricsResponse

    @classmethod
    def from_records(cls, records) -> "RegionTotals":
        totals = aggregate_counters(records)
        return cls(
            districts_reporting=len(records),
            households_total=totals["households_total"],
            households_provided=totals["households_provided"],
            person_days_total=totals["person_days_total"],
            works_total=totals["works_total"],
            works_completed=totals["works_completed"],
            expenditure_total=(
                totals["expenditure_wage"] + totals["expenditure_material"] + totals["expenditure_admin"]
            ),
            metrics=MetricsResponse.from_counters(totals),
        )


class ComparisonResponse(BaseModel):
    """Districts of one region side by side, most person-days first"""
    region: RegionResponse
    districts: List[DistrictComparison]
    totals: RegionTotals


# ============================================================================
# Sync Schemas
# ============================================================================

class SyncRunResponse(BaseModel):
    run_id: str
    trigger: SyncTrigger
    outcome: SyncOutcome
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    records_touched: int = 0
    records_failed: int = 0
    error_message: Optional[str] = None

    class Config:
        from_attributes = True
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "run_id": "550e8400-e29b-41d4-a716-446655440000",
                "trigger": "scheduled",
                "outcome": "fallback",
                "started_at": "2024-01-15T10:00:00Z",
                "completed_at": "2024-01-15T10:00:04Z",
                "duration_seconds": 4.2,
                "records_touched": 912,
                "records_failed": 0,
                "error_message": "Upstream resource id or API key not configured"
            }
        }


class SyncStatusResponse(BaseModel):
    in_progress: bool
    state: str
    latest_run: Optional[SyncRunResponse] = None
    recent_runs: List[SyncRunResponse] = Field(default_factory=list)


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database_connected: bool
    total_districts: int = 0
    total_records: int = 0
    sync_in_progress: bool = False
    last_sync: Optional[SyncRunResponse] = None
    status: Optional[str] = Field(None, description="Overall system status: healthy, degraded, unhealthy")

    @validator("status", pre=True, always=True)
    def determine_status(cls, v, values):
        """Determine overall health status"""
        if not values.get("database_connected", False):
            return "unhealthy"

        if values.get("total_records", 0) == 0:
            return "degraded"  # Nothing to serve yet

        last_sync = values.get("last_sync")
        if last_sync is not None and last_sync.outcome != SyncOutcome.SUCCESS.value:
            return "degraded"

        return "healthy"

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "total_districts": 76,
                "total_records": 912,
                "sync_in_progress": False
            }
        }


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "NotFoundError",
                "detail": "Unknown district UP999",
                "context": {"resource": "district", "key": "UP999"},
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
