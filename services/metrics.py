"""
Derived performance metrics.

Pure functions that turn raw program counters into comparable rates. Nothing
here touches the database: rates are recomputed on every read from the
stored counters, so they can never drift from the raw data.

Every rate is rounded to one decimal place (half away from zero) and a zero
denominator yields 0 rather than an error, so callers never special-case
missing data. SC, ST and women participation are computed independently;
the categories may overlap and their sum is not capped at 100.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Mapping

COUNTER_FIELDS = (
    "households_total",
    "households_demanding",
    "households_provided",
    "person_days_total",
    "person_days_sc",
    "person_days_st",
    "person_days_women",
    "works_total",
    "works_completed",
    "works_ongoing",
    "expenditure_wage",
    "expenditure_material",
    "expenditure_admin",
)


@dataclass(frozen=True)
class DerivedMetrics:
    work_demand_rate: float
    work_provision_rate: float
    work_completion_rate: float
    avg_person_days_per_household: float
    sc_participation_rate: float
    st_participation_rate: float
    women_participation_rate: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def round_half_away(value: float, places: int = 1) -> float:
    """Round like a person would: 12.25 -> 12.3, -12.25 -> -12.3"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return round_half_away(numerator / denominator)


def percentage(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return round_half_away(numerator / denominator * 100)


def _counter(source: Any, field: str) -> float:
    if isinstance(source, Mapping):
        value = source.get(field)
    else:
        value = getattr(source, field, None)
    return value or 0


def expenditure_total(source: Any) -> float:
    return (
        _counter(source, "expenditure_wage")
        + _counter(source, "expenditure_material")
        + _counter(source, "expenditure_admin")
    )


def derive_metrics(source: Any) -> DerivedMetrics:
    """
    Compute every rate for one record.

    Args:
        source: ORM record, Pydantic model or plain mapping with the counter
            fields; missing counters count as zero

    Returns:
        DerivedMetrics
    """
    c = {field: _counter(source, field) for field in COUNTER_FIELDS}

    return DerivedMetrics(
        work_demand_rate=percentage(c["households_demanding"], c["households_total"]),
        work_provision_rate=percentage(c["households_provided"], c["households_demanding"]),
        work_completion_rate=percentage(c["works_completed"], c["works_total"]),
        avg_person_days_per_household=ratio(c["person_days_total"], c["households_provided"]),
        sc_participation_rate=percentage(c["person_days_sc"], c["person_days_total"]),
        st_participation_rate=percentage(c["person_days_st"], c["person_days_total"]),
        women_participation_rate=percentage(c["person_days_women"], c["person_days_total"]),
    )


def aggregate_counters(records: Iterable[Any]) -> Dict[str, float]:
    """Sum counters across records so a group can be fed to derive_metrics"""
    totals: Dict[str, float] = {field: 0 for field in COUNTER_FIELDS}
    for record in records:
        for field in COUNTER_FIELDS:
            totals[field] += _counter(record, field)
    return totals
