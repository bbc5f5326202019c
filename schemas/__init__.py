"""
Pydantic schemas for data validation and serialization.

Schemas:
    performance: PerformanceRecordCreate, the validated record entering the store
    api: API endpoint response models

Usage:
    from schemas.performance import PerformanceRecordCreate
    from schemas.api import PerformanceWithMetrics, HealthCheckResponse

Example:
    # Period labels are normalized and record invariants checked
    record = PerformanceRecordCreate(
        district_code="up050",
        financial_year="2024-25",
        month="apr",
        households_total=40000,
        households_demanding=20000,
        households_provided=18000
    )

    assert record.key == ("UP050", "2024-2025", "April")

Validation:
    - Counters are non-negative
    - provided <= demanding <= total households
    - completed + ongoing == total works
    - SC + ST + women person-days never exceed total person-days
"""

__all__ = [
    "PerformanceRecordCreate",
    "PerformanceWithMetrics",
    "HealthCheckResponse",
    "SyncRunResponse",
    "ErrorResponse",
]
