"""
Unit tests for record validation
"""

import pytest
from pydantic import ValidationError
from models.base import RecordSource


class TestPerformanceRecordCreate:

    def test_valid_record_is_normalized(self, make_record):
        record = make_record(district_code=" up050 ", financial_year="2024-25", month="apr")

        assert record.key == ("UP050", "2024-2025", "April")
        assert record.source == RecordSource.UPSTREAM
        assert record.expenditure_total == 12000000.0 + 4800000.0 + 840000.0

    def test_negative_counter_rejected(self, make_record):
        with pytest.raises(ValidationError):
            make_record(households_total=-1)

    def test_provided_above_demanding_rejected(self, make_record):
        with pytest.raises(ValidationError, match="provided <= demanding <= total"):
            make_record(households_demanding=100, households_provided=101)

    def test_demanding_above_total_rejected(self, make_record):
        with pytest.raises(ValidationError):
            make_record(households_total=100, households_demanding=101, households_provided=50)

    def test_works_must_add_up(self, make_record):
        with pytest.raises(ValidationError, match="works_completed"):
            make_record(works_total=150, works_completed=90, works_ongoing=59)

    def test_person_day_categories_bounded_by_total(self, make_record):
        with pytest.raises(ValidationError, match="must not exceed"):
            make_record(person_days_total=100, person_days_sc=40, person_days_st=20, person_days_women=41)

    def test_person_day_categories_may_reach_total(self, make_record):
        record = make_record(person_days_total=100, person_days_sc=40, person_days_st=20, person_days_women=40)
        assert record.person_days_total == 100

    @pytest.mark.parametrize("field,value", [
        ("month", "Smarch"),
        ("financial_year", "2024-2026"),
        ("district_code", "   "),
    ])
    def test_bad_key_rejected(self, make_record, field, value):
        with pytest.raises(ValidationError):
            make_record(**{field: value})
