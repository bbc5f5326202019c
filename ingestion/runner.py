# ============================================================================
# File: ingestion/runner.py
# Description: Sync run controller with upstream fetch and synthetic fallback
# ============================================================================
"""
Sync Runner - refreshes the record store from upstream, or from the
synthetic generator when upstream cannot supply data.

State machine for one run:

    IDLE -> CHECKING -> FETCHING -> APPLYING ------------> LOGGING -> IDLE
                 |           |                              ^
                 |           +--> FALLBACK_GENERATING ------+
                 +--(empty store)--^

- CHECKING seeds the catalog and counts stored records
- FETCHING is bounded by per-request timeouts and an overall deadline
- Any upstream failure routes to FALLBACK_GENERATING, never out of ``run``
- LOGGING writes exactly one SyncRun per invocation

Only one run executes at a time. The in-progress flag is set before the
first await, so a trigger arriving mid-run is ignored rather than queued.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union
import asyncio
import enum
import uuid
import logging

from core.config import settings
from core.database import Database
from core.exceptions import (
    ConstraintViolationError,
    DistrictServiceError,
    StoreError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from ingestion.extractors.upstream import UpstreamClient
from ingestion.generators.synthetic import SyntheticRecordGenerator
from ingestion.transformers.normalizer import UpstreamRecordNormalizer
from models.base import SyncOutcome, SyncTrigger
from schemas.performance import PerformanceRecordCreate
from services.catalog import DistrictCatalog
from services.periods import Period, trailing_periods
from services.record_store import PerformanceStore
from services.reference_data import DISTRICTS, REGIONS
from services.sync_log import SyncRunLog

logger = logging.getLogger(__name__)

# Per-record failures kept in a run's error_details
MAX_RECORDED_ERRORS = 20


class SyncState(str, enum.Enum):
    IDLE = "idle"
    CHECKING = "checking"
    FETCHING = "fetching"
    APPLYING = "applying"
    FALLBACK_GENERATING = "fallback_generating"
    LOGGING = "logging"


@dataclass
class CheckOutcome:
    district_codes: List[str]
    name_index: Dict[str, str]
    store_empty: bool


@dataclass
class FetchOutcome:
    """Result of FETCHING; ``error`` set means fall back"""

    records: List[PerformanceRecordCreate] = field(default_factory=list)
    rejected: int = 0
    skipped: int = 0  # valid rows outside the trailing window
    error: Optional[UpstreamUnavailableError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ApplyOutcome:
    """Result of writing records; ``error`` set means the store failed mid-way"""

    touched: int = 0
    failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[StoreError] = None


@dataclass
class SyncRunResult:
    """Everything the sync log records about one run"""

    run_id: str
    trigger: SyncTrigger
    outcome: SyncOutcome
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    records_touched: int = 0
    records_failed: int = 0
    error_message: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "trigger": self.trigger.value,
            "outcome": self.outcome.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "records_touched": self.records_touched,
            "records_failed": self.records_failed,
            "error_message": self.error_message,
        }


class SyncRunner:
    """
    Single-run controller shared by the scheduler, the API and scripts.

    Responsibilities:
    - Ignore overlapping triggers
    - Seed the catalog before every run
    - Prefer upstream data, fall back to synthetic records on any failure
    - Never overwrite stored rows with synthetic ones
    - Record exactly one SyncRun per invocation
    """

    def __init__(
        self,
        database: Database,
        upstream: Optional[UpstreamClient] = None,
        generator: Optional[SyntheticRecordGenerator] = None,
        trailing_count: Optional[int] = None,
        fetch_deadline: Optional[float] = None,
        today: Callable[[], date] = date.today
    ):
        self.database = database
        self.upstream = upstream or UpstreamClient.from_settings()
        self.generator = generator or SyntheticRecordGenerator(settings.FALLBACK_SEED)
        self.trailing_count = trailing_count if trailing_count is not None else settings.TRAILING_PERIODS
        self.fetch_deadline = (
            fetch_deadline if fetch_deadline is not None else settings.UPSTREAM_FETCH_DEADLINE_SECONDS
        )
        self.today = today

        self.state = SyncState.IDLE
        self.last_result: Optional[SyncRunResult] = None
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    async def run(self, trigger: Union[SyncTrigger, str] = SyncTrigger.MANUAL) -> Optional[SyncRunResult]:
        """
        Run one sync.

        Args:
            trigger: What started the run (startup, scheduled, manual)

        Returns:
            The logged result, or None when another run was already active
        """
        try:
            trigger = SyncTrigger(trigger)
        except ValueError:
            logger.warning(f"Unknown sync trigger {trigger!r}; recording it as manual")
            trigger = SyncTrigger.MANUAL
        if self._in_progress:
            logger.info(f"Sync already in progress; ignoring {trigger.value} trigger")
            return None

        self._in_progress = True
        try:
            result = await self._run(trigger)
            self.last_result = result
            return result
        finally:
            self.state = SyncState.IDLE
            self._in_progress = False

    async def _run(self, trigger: SyncTrigger) -> SyncRunResult:
        run_id = str(uuid.uuid4())
        started_at = datetime.utcnow()
        periods = trailing_periods(self.today(), self.trailing_count)

        outcome = SyncOutcome.ERROR
        touched = 0
        failed = 0
        error_message: Optional[str] = None
        error_details: Dict[str, Any] = {}

        logger.info(f"Sync run {run_id} started ({trigger.value}, {len(periods)} periods)")

        try:
            # --------------------------------------------------
            # CHECKING
            # --------------------------------------------------
            self.state = SyncState.CHECKING
            check = await self._check()

            if check.store_empty:
                logger.info("Record store is empty; generating bootstrap data")
                error_details["fallback_reason"] = "empty_store"
                applied = await self._fallback(check.district_codes, periods, keep_existing=False)
                outcome = SyncOutcome.FALLBACK
            else:
                # --------------------------------------------------
                # FETCHING
                # --------------------------------------------------
                self.state = SyncState.FETCHING
                fetched = await self._fetch(check, periods)

                if fetched.ok:
                    # --------------------------------------------------
                    # APPLYING
                    # --------------------------------------------------
                    self.state = SyncState.APPLYING
                    applied = await self._apply(fetched.records)
                    failed += fetched.rejected
                    if fetched.rejected:
                        error_details["rows_rejected"] = fetched.rejected
                    if fetched.skipped:
                        error_details["rows_outside_window"] = fetched.skipped
                    outcome = SyncOutcome.SUCCESS
                else:
                    logger.warning(f"Upstream unavailable, falling back: {fetched.error}")
                    error_message = fetched.error.message
                    error_details["fallback_reason"] = "upstream_unavailable"
                    error_details["upstream_error"] = fetched.error.to_dict()
                    applied = await self._fallback(check.district_codes, periods, keep_existing=True)
                    outcome = SyncOutcome.FALLBACK

            touched += applied.touched
            failed += applied.failed
            if applied.errors:
                error_details["record_errors"] = applied.errors[:MAX_RECORDED_ERRORS]
            if applied.error is not None:
                outcome = SyncOutcome.ERROR
                error_message = applied.error.message
                error_details["store_error"] = applied.error.to_dict()

        except DistrictServiceError as e:
            logger.error(f"Sync run {run_id} failed: {e}")
            outcome = SyncOutcome.ERROR
            error_message = e.message
            error_details["error"] = e.to_dict()

        except Exception as e:
            logger.exception(f"Unexpected error in sync run {run_id}")
            outcome = SyncOutcome.ERROR
            error_message = f"{type(e).__name__}: {e}"

        # --------------------------------------------------
        # LOGGING
        # --------------------------------------------------
        self.state = SyncState.LOGGING
        completed_at = datetime.utcnow()
        result = SyncRunResult(
            run_id=run_id,
            trigger=trigger,
            outcome=outcome,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            records_touched=touched,
            records_failed=failed,
            error_message=error_message,
            error_details=error_details,
        )
        await self._log(result)

        logger.info(
            f"Sync run {run_id} finished: {outcome.value} - "
            f"touched: {touched}, failed: {failed}, {result.duration_seconds:.2f}s"
        )
        return result

    async def _check(self) -> CheckOutcome:
        async with self.database.session() as session:
            catalog = DistrictCatalog(session)
            await catalog.seed(REGIONS, DISTRICTS)
            districts = await catalog.list_all()
            name_index = await catalog.name_index()
            store_empty = await PerformanceStore(session).is_empty()

        return CheckOutcome(
            district_codes=[d.code for d in districts],
            name_index=name_index,
            store_empty=store_empty,
        )

    async def _fetch(self, check: CheckOutcome, periods: List[Period]) -> FetchOutcome:
        financial_years = list(dict.fromkeys(p.financial_year for p in periods))

        try:
            rows = await asyncio.wait_for(
                self.upstream.fetch_records(financial_years),
                timeout=self.fetch_deadline
            )
        except asyncio.TimeoutError as e:
            return FetchOutcome(error=UpstreamTimeoutError(
                "Upstream fetch exceeded its deadline",
                context={"deadline_seconds": self.fetch_deadline},
                original_exception=e
            ))
        except UpstreamUnavailableError as e:
            return FetchOutcome(error=e)
        except Exception as e:
            logger.exception("Unexpected error while fetching upstream rows")
            return FetchOutcome(error=UpstreamUnavailableError(
                f"Upstream fetch failed: {type(e).__name__}: {e}",
                original_exception=e
            ))

        normalizer = UpstreamRecordNormalizer(check.district_codes, check.name_index)
        try:
            records, rejected = normalizer.normalize_many(rows)
        except Exception as e:
            logger.exception("Unexpected error while normalizing upstream rows")
            return FetchOutcome(error=UpstreamUnavailableError(
                f"Upstream payload could not be normalized: {type(e).__name__}: {e}",
                context={"rows": len(rows) if isinstance(rows, list) else None},
                original_exception=e
            ))

        window = {(p.financial_year, p.month) for p in periods}
        in_window = [r for r in records if (r.financial_year, r.month) in window]

        logger.info(
            f"Fetched {len(rows)} rows: {len(in_window)} usable, "
            f"{len(rejected)} rejected, {len(records) - len(in_window)} outside window"
        )
        return FetchOutcome(
            records=in_window,
            rejected=len(rejected),
            skipped=len(records) - len(in_window),
        )

    async def _fallback(
        self,
        district_codes: List[str],
        periods: List[Period],
        keep_existing: bool
    ) -> ApplyOutcome:
        self.state = SyncState.FALLBACK_GENERATING

        skip_keys: Set[Tuple[str, str, str]] = set()
        if keep_existing:
            async with self.database.session() as session:
                skip_keys = await PerformanceStore(session).existing_keys()

        records = list(self.generator.generate(district_codes, periods, skip_keys=skip_keys))
        logger.info(f"Generated {len(records)} synthetic records ({len(skip_keys)} stored keys kept)")
        return await self._apply(records)

    async def _apply(self, records: List[PerformanceRecordCreate]) -> ApplyOutcome:
        outcome = ApplyOutcome()

        async with self.database.session() as session:
            store = PerformanceStore(session)
            for record in records:
                try:
                    await store.upsert(record)
                    outcome.touched += 1
                except ConstraintViolationError as e:
                    outcome.failed += 1
                    outcome.errors.append(e.to_dict())
                    logger.warning(f"Record rejected by store: {e}")
                except StoreError as e:
                    logger.error(f"Store failure after {outcome.touched} records: {e}")
                    outcome.error = e
                    break

        return outcome

    async def _log(self, result: SyncRunResult):
        try:
            async with self.database.session() as session:
                await SyncRunLog(session).append(result)
        except Exception:
            logger.exception(f"Failed to record sync run {result.run_id}")
