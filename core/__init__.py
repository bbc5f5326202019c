"""
Core utilities and configuration for the district performance service.

Modules:
    config: Application configuration and environment variable management
    database: Database handle with explicit open/close lifecycle
    exceptions: Exception hierarchy shared by the read path and the sync pipeline
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.database import Database
    from core.exceptions import NotFoundError, InvalidCoordinateError
    from core.logging import setup_logging

Example:
    setup_logging()

    database = Database(settings.DATABASE_URL)
    await database.open()
    async with database.session() as session:
        ...
    await database.close()
"""

__all__ = [
    "settings",
    "Database",
    "setup_logging",
    # Exceptions
    "DistrictServiceError",
    "InvalidInputError",
    "InvalidCoordinateError",
    "InvalidQueryError",
    "NotFoundError",
    "UpstreamUnavailableError",
    "NetworkError",
    "UpstreamTimeoutError",
    "RateLimitError",
    "UpstreamStatusError",
    "AuthenticationError",
    "ResourceNotFoundError",
    "MalformedPayloadError",
    "UpstreamNotConfiguredError",
    "NormalizationError",
    "ConstraintViolationError",
    "StoreError",
    "RetryableError",
    "NonRetryableError",
]
