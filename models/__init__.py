"""
SQLAlchemy ORM models for database tables.

Models:
    base: Declarative base and shared enums (RecordSource, SyncOutcome, SyncTrigger)
    district: Region and District (the catalog of geographic units)
    performance: PerformanceRecord, one row per district per reporting month
    sync_run: SyncRun, append-only log of refresh attempts

Relationships:
    - Region → District (one-to-many via parent_code)
    - District → PerformanceRecord (one-to-many via district_code)

Importing this package registers every table on ``Base.metadata``.
"""

from models.base import Base, RecordSource, SyncOutcome, SyncTrigger
from models.district import Region, District
from models.performance import PerformanceRecord
from models.sync_run import SyncRun

__all__ = [
    "Base",
    "RecordSource",
    "SyncOutcome",
    "SyncTrigger",
    "Region",
    "District",
    "PerformanceRecord",
    "SyncRun",
]
