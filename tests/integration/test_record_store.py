"""
Integration tests for the performance record store (SQLite)
"""

import asyncio
import warnings
import pytest
from pydantic.warnings import PydanticDeprecatedSince20
from core.exceptions import ConstraintViolationError, InvalidInputError, NotFoundError
from models.base import RecordSource
from services.periods import FISCAL_MONTHS
from services.record_store import PerformanceStore


@pytest.mark.asyncio
async def test_upsert_is_idempotent(seeded_session, make_record):
    store = PerformanceStore(seeded_session)

    first = await store.upsert(make_record())
    first_updated = first.updated_at
    await asyncio.sleep(0.01)
    second = await store.upsert(make_record(households_total=45000, source=RecordSource.SYNTHETIC))

    assert await store.count() == 1
    assert second.id == first.id
    assert second.households_total == 45000
    assert second.source == RecordSource.SYNTHETIC
    assert second.updated_at >= first_updated


@pytest.mark.asyncio
async def test_upsert_uses_current_pydantic_api(seeded_session, make_record):
    store = PerformanceStore(seeded_session)

    with warnings.catch_warnings():
        warnings.simplefilter("error", PydanticDeprecatedSince20)
        stored = await store.upsert(make_record())

    assert stored.households_total == 40000


@pytest.mark.asyncio
async def test_upsert_unknown_district(seeded_session, make_record):
    store = PerformanceStore(seeded_session)

    with pytest.raises(ConstraintViolationError) as exc_info:
        await store.upsert(make_record(district_code="XX999"))

    assert exc_info.value.context["district_code"] == "XX999"
    assert await store.is_empty()


@pytest.mark.asyncio
async def test_latest_uses_fiscal_order(seeded_session, make_record):
    """March closes the financial year, so it beats April of the same label"""
    store = PerformanceStore(seeded_session)
    for month in ("March", "April", "December"):
        await store.upsert(make_record(month=month))

    latest = await store.latest_for("UP050")

    assert latest.month == "March"
    assert latest.financial_year == "2024-2025"


@pytest.mark.asyncio
async def test_latest_for_district_without_data(seeded_session):
    with pytest.raises(NotFoundError):
        await PerformanceStore(seeded_session).latest_for("UP002")


@pytest.mark.asyncio
async def test_trend_returns_most_recent_ascending(seeded_session, make_record):
    store = PerformanceStore(seeded_session)
    for month in FISCAL_MONTHS:
        await store.upsert(make_record(district_code="UP001", month=month))

    trend = await store.trend_for("UP001", 6)

    assert [r.month for r in trend] == FISCAL_MONTHS[6:]
    assert [r.period_rank for r in trend] == sorted(r.period_rank for r in trend)
    assert await store.trend_for("UP001", 0) == []
    assert await store.trend_for("UP002", 6) == []


@pytest.mark.asyncio
async def test_history_filters(seeded_session, make_record):
    store = PerformanceStore(seeded_session)
    await store.upsert(make_record(financial_year="2023-2024", month="May"))
    await store.upsert(make_record(financial_year="2024-2025", month="May"))
    await store.upsert(make_record(financial_year="2024-2025", month="June"))

    everything = await store.history_for("UP050")
    one_year = await store.history_for("UP050", financial_year="2024-25")
    one_month = await store.history_for("UP050", month="may")

    assert [(r.financial_year, r.month) for r in everything] == [
        ("2024-2025", "June"), ("2024-2025", "May"), ("2023-2024", "May")
    ]
    assert len(one_year) == 2
    assert len(one_month) == 2

    with pytest.raises(NotFoundError):
        await store.history_for("UP050", financial_year="2019-2020")
    with pytest.raises(InvalidInputError):
        await store.history_for("UP050", month="Smarch")


@pytest.mark.asyncio
async def test_aggregate_latest_by_parent(seeded_session, make_record):
    """Siblings contribute their own latest month, not a shared one"""
    store = PerformanceStore(seeded_session)
    await store.upsert(make_record(district_code="UP050", month="April"))
    await store.upsert(make_record(district_code="UP050", month="May"))
    await store.upsert(make_record(district_code="UP001", month="April"))

    records = await store.aggregate_latest_by_parent("UP")

    assert [(r.district_code, r.month) for r in records] == [("UP001", "April"), ("UP050", "May")]
    assert await store.aggregate_latest_by_parent("XX") == []


@pytest.mark.asyncio
async def test_existing_keys(seeded_session, make_record):
    store = PerformanceStore(seeded_session)
    await store.upsert(make_record())

    assert await store.existing_keys() == {("UP050", "2024-2025", "April")}
