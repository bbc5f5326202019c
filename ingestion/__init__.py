"""
Sync pipeline components that keep the record store fresh.

Modules:
    runner: Sync run controller (state machine, fallback, run log)
    scheduler: APScheduler integration for startup and periodic syncs

Subpackages:
    extractors: Upstream open-data client with retries and a circuit breaker
    transformers: Upstream row normalization and validation
    generators: Deterministic synthetic records for fallback

Architecture:
    Each run walks CHECKING -> FETCHING -> APPLYING or
    FALLBACK_GENERATING -> LOGGING. Any upstream failure is recovered
    locally by generating synthetic records for the keys the store is
    missing, so readers always have data.

Usage:
    from ingestion.runner import SyncRunner
    from ingestion.scheduler import SyncScheduler

Example:
    runner = SyncRunner(database)
    result = await runner.run("manual")

    print(f"{result.outcome.value}: {result.records_touched} records")

Error Handling:
    Upstream errors from core.exceptions are caught inside the runner and
    recorded on the SyncRun row; nothing escapes ``SyncRunner.run``.
"""

__all__ = [
    "SyncRunner",
    "SyncRunResult",
    "SyncScheduler",
    "UpstreamClient",
    "UpstreamRecordNormalizer",
    "SyntheticRecordGenerator",
]
