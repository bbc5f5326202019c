"""
Unit tests for fiscal period handling
"""

import pytest
from datetime import date
from services.periods import Period, normalize_financial_year, normalize_month, period_rank, trailing_periods


class TestNormalization:

    @pytest.mark.parametrize("value,expected", [
        ("April", "April"),
        ("apr", "April"),
        ("SEPT", "September"),
        (" march ", "March"),
        (1, "January"),
        ("12", "December"),
    ])
    def test_month(self, value, expected):
        assert normalize_month(value) == expected

    @pytest.mark.parametrize("value", ["Smarch", 0, 13, ""])
    def test_month_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            normalize_month(value)

    @pytest.mark.parametrize("value,expected", [
        ("2024-2025", "2024-2025"),
        ("2024-25", "2024-2025"),
        ("1999-00", "1999-2000"),
    ])
    def test_financial_year(self, value, expected):
        assert normalize_financial_year(value) == expected

    @pytest.mark.parametrize("value", ["2024-2026", "2024", "24-25", "FY2024"])
    def test_financial_year_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            normalize_financial_year(value)


class TestOrdering:
    """April opens the fiscal year, March closes it"""

    def test_march_follows_december_in_same_year(self):
        assert period_rank("2024-2025", "December") < period_rank("2024-2025", "January")
        assert period_rank("2024-2025", "January") < period_rank("2024-2025", "March")

    def test_april_follows_previous_march(self):
        assert period_rank("2024-2025", "March") + 1 == period_rank("2025-2026", "April")

    def test_sort(self):
        periods = [Period("2025-2026", "April"), Period("2024-2025", "March"), Period("2024-2025", "April")]

        assert sorted(periods) == [
            Period("2024-2025", "April"),
            Period("2024-2025", "March"),
            Period("2025-2026", "April"),
        ]

    def test_from_date(self):
        assert Period.from_date(date(2025, 3, 31)) == Period("2024-2025", "March")
        assert Period.from_date(date(2025, 4, 1)) == Period("2025-2026", "April")

    def test_rank_round_trip(self):
        period = Period("2023-2024", "February")
        assert Period.from_rank(period.rank) == period
        assert period.previous() == Period("2023-2024", "January")


class TestTrailingPeriods:

    def test_twelve_months_ending_now(self):
        periods = trailing_periods(date(2025, 6, 15), 12)

        assert len(periods) == 12
        assert periods[0] == Period("2024-2025", "July")
        assert periods[-1] == Period("2025-2026", "June")
        assert [p.rank for p in periods] == list(range(periods[0].rank, periods[0].rank + 12))

    def test_non_positive_count(self):
        assert trailing_periods(date(2025, 6, 15), 0) == []
