"""
Custom exceptions for the district performance service with structured context.

Each exception carries a context dictionary for debugging and for the
sync run log.

Exception Hierarchy:
    DistrictServiceError (base)
    ├── InvalidInputError
    │   ├── InvalidCoordinateError
    │   └── InvalidQueryError
    ├── NotFoundError
    ├── UpstreamUnavailableError
    │   ├── NetworkError / UpstreamTimeoutError / RateLimitError (retryable)
    │   ├── UpstreamStatusError (retryable for 5xx)
    │   └── AuthenticationError / ResourceNotFoundError /
    │       MalformedPayloadError / UpstreamNotConfiguredError (non-retryable)
    ├── NormalizationError
    ├── ConstraintViolationError
    ├── StoreError
    └── RetryableError / NonRetryableError (mixins)
"""

from typing import Optional, Dict, Any
from datetime import datetime


class DistrictServiceError(Exception):
    """
    Base exception for all service errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (unit code, url, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": {k: _jsonable(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


# ============================================================================
# Retry Strategy Mixins
# ============================================================================

class RetryableError(DistrictServiceError):
    """
    Mixin for errors that should trigger retry logic.

    Use this for transient errors like:
    - Network timeouts
    - Rate limiting (HTTP 429)
    - Service unavailable (HTTP 5xx)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ):
        super().__init__(message, context, original_exception)
        self.max_retries = max_retries
        self.retry_delay = retry_delay


class NonRetryableError(DistrictServiceError):
    """
    Mixin for errors that should NOT trigger retry logic.

    Use this for permanent errors like:
    - Authentication failures (HTTP 401, 403)
    - Resource not found (HTTP 404)
    - Malformed payloads
    - Invalid caller input
    """
    pass


# ============================================================================
# Read Path Errors
# ============================================================================

class InvalidInputError(NonRetryableError):
    """
    Caller supplied input that can never be valid.

    Rejected before any store access. Context should include the offending
    field and value.
    """
    pass


class InvalidCoordinateError(InvalidInputError):
    """Latitude/longitude not finite or outside [-90, 90] / [-180, 180]."""
    pass


class InvalidQueryError(InvalidInputError):
    """Blank or over-long free-text search query."""
    pass


class NotFoundError(DistrictServiceError):
    """
    No matching unit or record. An expected outcome, not a failure.

    Context should include:
        - resource: "district", "region", "performance_record"
        - key: the code or filter that matched nothing
    """
    pass


# ============================================================================
# Upstream Errors
# ============================================================================

class UpstreamUnavailableError(DistrictServiceError):
    """
    Upstream source could not supply data.

    Recovered locally by the sync scheduler (fallback generation), never
    surfaced to read-path callers.

    Context should include:
        - api_url: The endpoint that failed
        - status_code: HTTP status code (if applicable)
        - retry_count: Number of retries attempted
    """
    pass


class NetworkError(RetryableError, UpstreamUnavailableError):
    """Connection-level errors that should be retried."""
    pass


class UpstreamTimeoutError(RetryableError, UpstreamUnavailableError):
    """Request or overall fetch deadline exceeded."""
    pass


class RateLimitError(RetryableError, UpstreamUnavailableError):
    """Rate limiting errors (HTTP 429) that should be retried with backoff."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        retry_after: Optional[int] = None
    ):
        super().__init__(message, context, original_exception)
        self.retry_after = retry_after  # Seconds to wait before retry
        if retry_after:
            self.context["retry_after"] = retry_after


class UpstreamStatusError(RetryableError, UpstreamUnavailableError):
    """Non-success HTTP status (5xx after retries, or unexpected codes)."""
    pass


class AuthenticationError(NonRetryableError, UpstreamUnavailableError):
    """Authentication failures (HTTP 401, 403) that should not be retried."""
    pass


class ResourceNotFoundError(NonRetryableError, UpstreamUnavailableError):
    """Upstream resource id does not exist (HTTP 404)."""
    pass


class MalformedPayloadError(NonRetryableError, UpstreamUnavailableError):
    """Response body is not JSON or lacks the expected record list."""
    pass


class UpstreamNotConfiguredError(NonRetryableError, UpstreamUnavailableError):
    """No resource id or API key configured; nothing to fetch from."""
    pass


class NormalizationError(NonRetryableError):
    """
    A single upstream row could not be mapped onto a valid record.

    Rejects that row only. Context should include:
        - district: code or name found in the row
        - field_errors: validation messages
    """
    pass


# ============================================================================
# Store Errors
# ============================================================================

class ConstraintViolationError(NonRetryableError):
    """
    Foreign-key or uniqueness violation on upsert.

    Fatal to that single record only. Context should include:
        - district_code, financial_year, month
        - constraint: name of the violated constraint
    """
    pass


class StoreError(DistrictServiceError):
    """
    Unexpected database failure.

    Context should include:
        - operation: SELECT, UPSERT, INSERT
        - table_name: Name of the table
    """
    pass
