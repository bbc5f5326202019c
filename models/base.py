from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# ============================================================================
# ENUMS
# ============================================================================

class RecordSource(str, enum.Enum):
    """Where a performance record came from"""
    UPSTREAM = "upstream"
    SYNTHETIC = "synthetic"


class SyncOutcome(str, enum.Enum):
    """Sync run outcome"""
    SUCCESS = "success"
    FALLBACK = "fallback"
    ERROR = "error"


class SyncTrigger(str, enum.Enum):
    """What started a sync run"""
    STARTUP = "startup"
    SCHEDULED = "scheduled"
    MANUAL = "manual"
