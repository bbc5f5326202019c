"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/district_performance.db"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Upstream (data.gov.in resource API)
    UPSTREAM_BASE_URL: str = "https://api.data.gov.in/resource"
    UPSTREAM_RESOURCE_ID: Optional[str] = None
    UPSTREAM_API_KEY: Optional[str] = None
    UPSTREAM_STATE_NAME: str = "UTTAR PRADESH"
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0
    UPSTREAM_FETCH_DEADLINE_SECONDS: float = 300.0
    UPSTREAM_MAX_RETRIES: int = 3
    UPSTREAM_PAGE_SIZE: int = 500

    # Sync
    SYNC_INTERVAL_HOURS: int = 6
    SYNC_ON_STARTUP: bool = True
    TRAILING_PERIODS: int = 12
    FALLBACK_SEED: int = 20240401

    # Read path
    SEARCH_RESULT_LIMIT: int = 20

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
