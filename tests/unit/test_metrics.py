"""
Unit tests for derived metrics
"""

import pytest
from services.metrics import (
    aggregate_counters,
    derive_metrics,
    expenditure_total,
    percentage,
    ratio,
    round_half_away,
)


class TestRounding:
    """Half-away-from-zero rounding to one decimal"""

    @pytest.mark.parametrize("value,expected", [
        (12.25, 12.3),
        (12.35, 12.4),
        (-12.25, -12.3),
        (0.05, 0.1),
        (99.94, 99.9),
    ])
    def test_round_half_away(self, value, expected):
        assert round_half_away(value) == expected

    def test_zero_denominator_yields_zero(self):
        assert percentage(10, 0) == 0.0
        assert ratio(10, 0) == 0.0
        assert percentage(0, 0) == 0.0


class TestDeriveMetrics:
    """Test rate computation from counters"""

    def test_lucknow_scenario(self, make_record):
        """40000 total, 20000 demanding, 18000 provided"""
        metrics = derive_metrics(make_record())

        assert metrics.work_demand_rate == 50.0
        assert metrics.work_provision_rate == 90.0
        assert metrics.work_completion_rate == 60.0
        assert metrics.avg_person_days_per_household == 30.0
        assert metrics.sc_participation_rate == 20.0
        assert metrics.st_participation_rate == 5.0
        assert metrics.women_participation_rate == 40.0

    def test_all_zero_record(self, make_record):
        record = make_record(
            households_total=0, households_demanding=0, households_provided=0,
            person_days_total=0, person_days_sc=0, person_days_st=0, person_days_women=0,
            works_total=0, works_completed=0, works_ongoing=0,
        )
        metrics = derive_metrics(record)

        assert all(value == 0.0 for value in metrics.to_dict().values())

    def test_accepts_plain_mapping(self):
        metrics = derive_metrics({"households_total": 3, "households_demanding": 1})

        assert metrics.work_demand_rate == 33.3
        assert metrics.work_provision_rate == 0.0

    def test_rates_within_bounds_for_valid_records(self, make_record):
        record = make_record(
            households_total=7, households_demanding=7, households_provided=3,
            person_days_total=11, person_days_sc=0, person_days_st=0, person_days_women=11,
        )
        metrics = derive_metrics(record)

        for name in ("work_demand_rate", "work_provision_rate", "work_completion_rate",
                     "sc_participation_rate", "st_participation_rate", "women_participation_rate"):
            assert 0.0 <= getattr(metrics, name) <= 100.0
        assert metrics.work_demand_rate == 100.0
        assert metrics.work_provision_rate == 42.9

    def test_participation_rates_are_independent(self, make_record):
        """Categories overlap, so their rates are not forced to sum to 100"""
        record = make_record(person_days_total=100, person_days_sc=30, person_days_st=10, person_days_women=50)
        metrics = derive_metrics(record)

        assert metrics.sc_participation_rate + metrics.st_participation_rate + metrics.women_participation_rate == 90.0


def test_expenditure_total(make_record):
    assert expenditure_total(make_record()) == 12000000.0 + 4800000.0 + 840000.0


def test_aggregate_counters_then_derive(make_record):
    records = [
        make_record(district_code="UP050"),
        make_record(district_code="UP001", households_total=60000, households_demanding=40000, households_provided=20000),
    ]
    totals = aggregate_counters(records)

    assert totals["households_total"] == 100000
    assert totals["households_demanding"] == 60000
    assert derive_metrics(totals).work_demand_rate == 60.0
