from sqlalchemy import Column, BigInteger, Integer, String, Enum, DateTime, Float, Text, Index
from datetime import datetime
import uuid
from models.base import Base, JSONType, SyncOutcome, SyncTrigger


class SyncRun(Base):
    """
    Append-only log of sync scheduler invocations.

    Purpose:
    - Audit trail of every refresh attempt
    - Distinguishes genuine syncs from synthetic fallback
    - Error tracking and debugging

    Rows are inserted once, after the run finishes, and never updated.
    """
    __tablename__ = "sync_runs"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    run_id = Column(String(36), default=lambda: str(uuid.uuid4()), unique=True, nullable=False, index=True)

    trigger = Column(Enum(SyncTrigger), nullable=False)
    outcome = Column(Enum(SyncOutcome), nullable=False, index=True)

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    records_touched = Column(Integer, nullable=False, default=0)
    records_failed = Column(Integer, nullable=False, default=0)

    # Error tracking
    error_message = Column(Text, nullable=True)
    error_details = Column(JSONType, nullable=True)

    __table_args__ = (
        Index("idx_sync_run_outcome_started", "outcome", "started_at"),
    )
