"""
Read-path services and domain logic.

Modules:
    periods: Fiscal-year period parsing and ordering
    metrics: Pure derived-metric functions (rates, averages)
    geo: Haversine distance and the nearest-district resolver
    catalog: Region and district catalog with idempotent seeding
    reference_data: Static district list used to seed the catalog
    record_store: Performance records with idempotent upsert
    sync_log: Append-only sync run log

Usage:
    from services.catalog import DistrictCatalog
    from services.record_store import PerformanceStore
    from services.metrics import derive_metrics
    from services.geo import NearestDistrictResolver

Example:
    async with database.session() as session:
        store = PerformanceStore(session)
        latest = await store.latest_for("UP050")
        metrics = derive_metrics(latest)
"""

__all__ = [
    "DistrictCatalog",
    "PerformanceStore",
    "SyncRunLog",
    "NearestDistrictResolver",
    "derive_metrics",
    "aggregate_counters",
    "Period",
    "trailing_periods",
]
