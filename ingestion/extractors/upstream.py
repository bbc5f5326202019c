"""
Upstream open-data client with retry logic and a circuit breaker.

Talks to the data.gov.in resource API:
- Exponential backoff retry logic for transient failures
- Circuit breaker pattern to stop hammering a dead endpoint
- Rate limiting protection (HTTP 429 with Retry-After)
- Offset pagination over the "records" list
"""

import httpx
import asyncio
from typing import List, Dict, Any, Iterable, Optional
from datetime import datetime, timedelta
from core.config import settings
from core.exceptions import (
    UpstreamUnavailableError,
    UpstreamNotConfiguredError,
    UpstreamStatusError,
    MalformedPayloadError,
    NetworkError,
    UpstreamTimeoutError,
    RateLimitError,
    AuthenticationError,
    ResourceNotFoundError,
)
import logging

logger = logging.getLogger(__name__)


class UpstreamClient:
    """
    Fetch raw performance rows from the open-data resource.

    Attributes:
        max_retries: Maximum number of attempts per request (default: 3)
        retry_delay: Initial retry delay in seconds (default: 1.0)
        timeout: Per-request timeout in seconds (default: 30.0)
        page_size: Rows requested per page
        circuit_breaker_threshold: Failures before circuit opens (default: 5)
        circuit_breaker_timeout: Seconds before circuit reset (default: 60)
    """

    def __init__(
        self,
        base_url: str,
        resource_id: Optional[str],
        api_key: Optional[str],
        state_name: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        page_size: int = 500
    ):
        self.base_url = base_url.rstrip("/")
        self.resource_id = resource_id
        self.api_key = api_key
        self.state_name = state_name
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.page_size = page_size

        # Circuit breaker state
        self._circuit_breaker_failures = 0
        self._circuit_breaker_threshold = 5
        self._circuit_breaker_open_until: Optional[datetime] = None
        self._circuit_breaker_timeout = 60  # seconds

    @classmethod
    def from_settings(cls, config=settings) -> "UpstreamClient":
        return cls(
            base_url=config.UPSTREAM_BASE_URL,
            resource_id=config.UPSTREAM_RESOURCE_ID,
            api_key=config.UPSTREAM_API_KEY,
            state_name=config.UPSTREAM_STATE_NAME,
            max_retries=config.UPSTREAM_MAX_RETRIES,
            timeout=config.UPSTREAM_TIMEOUT_SECONDS,
            page_size=config.UPSTREAM_PAGE_SIZE,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.resource_id and self.api_key)

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.resource_id}"

    def _is_circuit_open(self) -> bool:
        """Check if circuit breaker is open."""
        if self._circuit_breaker_open_until is None:
            return False

        if datetime.utcnow() >= self._circuit_breaker_open_until:
            # Circuit breaker timeout expired, reset
            logger.info("Circuit breaker reset for upstream")
            self._circuit_breaker_failures = 0
            self._circuit_breaker_open_until = None
            return False

        return True

    def _record_failure(self):
        """Record a failure and potentially open circuit breaker."""
        self._circuit_breaker_failures += 1

        if self._circuit_breaker_failures >= self._circuit_breaker_threshold:
            self._circuit_breaker_open_until = datetime.utcnow() + timedelta(
                seconds=self._circuit_breaker_timeout
            )
            logger.warning(
                f"Circuit breaker opened for upstream. "
                f"Will retry after {self._circuit_breaker_timeout} seconds."
            )

    def _record_success(self):
        """Record a successful request."""
        self._circuit_breaker_failures = 0
        self._circuit_breaker_open_until = None

    def _backoff(self, attempt: int) -> float:
        return self.retry_delay * (2 ** attempt)

    async def _make_request_with_retry(
        self,
        client: httpx.AsyncClient,
        params: Dict[str, Any]
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic and exponential backoff.

        Returns:
            HTTP response with a 2xx status

        Raises:
            UpstreamUnavailableError: circuit open, or any failure after retries
        """
        if self._is_circuit_open():
            raise UpstreamUnavailableError(
                "Circuit breaker is open for upstream",
                context={
                    "api_url": self.url,
                    "open_until": self._circuit_breaker_open_until.isoformat()
                }
            )

        for attempt in range(self.max_retries):
            last_attempt = attempt == self.max_retries - 1
            try:
                logger.debug(f"Request attempt {attempt + 1}/{self.max_retries} to {self.url}")

                response = await client.get(self.url, params=params, timeout=self.timeout)
                status = response.status_code

                if status in (401, 403):
                    self._record_failure()
                    raise AuthenticationError(
                        "Upstream rejected the API key",
                        context={"status_code": status, "api_url": self.url}
                    )

                if status == 404:
                    self._record_failure()
                    raise ResourceNotFoundError(
                        f"Upstream resource not found: {self.resource_id}",
                        context={"status_code": 404, "api_url": self.url}
                    )

                if status == 429:
                    retry_after = self._retry_after(response, attempt)
                    if not last_attempt:
                        logger.warning(f"Rate limited. Retrying after {retry_after} seconds")
                        await asyncio.sleep(retry_after)
                        continue
                    self._record_failure()
                    raise RateLimitError(
                        "Upstream rate limit exceeded",
                        context={"status_code": 429, "api_url": self.url, "retry_count": attempt + 1},
                        retry_after=retry_after
                    )

                if status >= 500:
                    if not last_attempt:
                        delay = self._backoff(attempt)
                        logger.warning(
                            f"Upstream error {status}. "
                            f"Retrying in {delay} seconds (attempt {attempt + 1}/{self.max_retries})"
                        )
                        await asyncio.sleep(delay)
                        continue
                    self._record_failure()
                    raise UpstreamStatusError(
                        f"Upstream error after {self.max_retries} attempts",
                        context={
                            "status_code": status,
                            "api_url": self.url,
                            "retry_count": attempt + 1,
                            "response_body": response.text[:500]  # Truncate
                        }
                    )

                if not 200 <= status < 300:
                    self._record_failure()
                    raise UpstreamStatusError(
                        f"Unexpected upstream status {status}",
                        context={"status_code": status, "api_url": self.url}
                    )

                self._record_success()
                return response

            except httpx.TimeoutException as e:
                if not last_attempt:
                    delay = self._backoff(attempt)
                    logger.warning(f"Request timeout. Retrying in {delay} seconds")
                    await asyncio.sleep(delay)
                    continue
                self._record_failure()
                raise UpstreamTimeoutError(
                    f"Request timeout after {self.max_retries} attempts",
                    context={"api_url": self.url, "timeout": self.timeout, "retry_count": attempt + 1},
                    original_exception=e
                )

            except httpx.TransportError as e:
                if not last_attempt:
                    delay = self._backoff(attempt)
                    logger.warning(f"Network error. Retrying in {delay} seconds")
                    await asyncio.sleep(delay)
                    continue
                self._record_failure()
                raise NetworkError(
                    f"Network error after {self.max_retries} attempts",
                    context={"api_url": self.url, "retry_count": attempt + 1},
                    original_exception=e
                )

            except httpx.HTTPError as e:
                self._record_failure()
                raise NetworkError(
                    f"HTTP error: {type(e).__name__}: {e}",
                    context={"api_url": self.url, "retry_count": attempt + 1},
                    original_exception=e
                )

        # Only reached with max_retries exhausted by 429/5xx continues
        raise UpstreamUnavailableError("Max retries exceeded", context={"api_url": self.url})

    @staticmethod
    def _retry_after(response: httpx.Response, attempt: int) -> float:
        header = response.headers.get("Retry-After")
        try:
            return max(0.0, float(header))
        except (TypeError, ValueError):
            return float(2 ** attempt)

    def _records_from(self, response: httpx.Response, offset: int) -> List[Dict[str, Any]]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedPayloadError(
                "Failed to parse JSON response",
                context={"api_url": self.url, "offset": offset, "response_body": response.text[:500]},
                original_exception=e
            )

        records = data.get("records") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise MalformedPayloadError(
                "Response has no records list",
                context={"api_url": self.url, "offset": offset}
            )
        return records

    async def fetch_records(self, financial_years: Iterable[str]) -> List[Dict[str, Any]]:
        """
        Fetch every row for the configured state in the given financial years.

        Args:
            financial_years: Labels such as "2024-2025"

        Returns:
            Raw upstream rows, unvalidated

        Raises:
            UpstreamNotConfiguredError: no resource id or API key
            UpstreamUnavailableError: any transport, status or payload failure
        """
        if not self.is_configured:
            raise UpstreamNotConfiguredError(
                "Upstream resource id or API key not configured",
                context={"base_url": self.base_url}
            )

        all_records: List[Dict[str, Any]] = []

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for financial_year in financial_years:
                offset = 0
                while True:
                    params = {
                        "api-key": self.api_key,
                        "format": "json",
                        "limit": self.page_size,
                        "offset": offset,
                        "filters[fin_year]": financial_year,
                    }
                    if self.state_name:
                        params["filters[state_name]"] = self.state_name

                    logger.info(f"Fetching {financial_year} rows from offset {offset}")
                    response = await self._make_request_with_retry(client, params)
                    records = self._records_from(response, offset)

                    all_records.extend(records)
                    logger.debug(f"Fetched {len(records)} rows at offset {offset}")

                    if len(records) < self.page_size:
                        break
                    offset += len(records)

        logger.info(f"Successfully fetched {len(all_records)} rows from upstream")
        return all_records
