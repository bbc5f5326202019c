"""
Pydantic schema for performance records entering the store
"""

from pydantic import BaseModel, Field, validator, root_validator
from models.base import RecordSource
from services.periods import Period, normalize_financial_year, normalize_month


class PerformanceRecordCreate(BaseModel):
    """
    Validated performance record ready for upsert.

    Ensures:
    - Counters are non-negative
    - Period labels are canonical ("2024-2025", "April")
    - provided <= demanding <= total households
    - completed + ongoing == total works
    - sc + st + women person-days <= total person-days (<=, not ==, since
      the categories may overlap)
    """

    # Key
    district_code: str = Field(..., min_length=1, max_length=32)
    financial_year: str
    month: str

    # Households
    households_total: int = Field(0, ge=0)
    households_demanding: int = Field(0, ge=0)
    households_provided: int = Field(0, ge=0)

    # Person-days
    person_days_total: int = Field(0, ge=0)
    person_days_sc: int = Field(0, ge=0)
    person_days_st: int = Field(0, ge=0)
    person_days_women: int = Field(0, ge=0)

    # Works
    works_total: int = Field(0, ge=0)
    works_completed: int = Field(0, ge=0)
    works_ongoing: int = Field(0, ge=0)

    # Expenditure
    expenditure_wage: float = Field(0, ge=0)
    expenditure_material: float = Field(0, ge=0)
    expenditure_admin: float = Field(0, ge=0)

    source: RecordSource = RecordSource.UPSTREAM

    @validator("district_code")
    def clean_district_code(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("district_code cannot be empty")
        return v

    @validator("financial_year")
    def clean_financial_year(cls, v):
        return normalize_financial_year(v)

    @validator("month", pre=True)
    def clean_month(cls, v):
        return normalize_month(v)

    @root_validator(skip_on_failure=True)
    def check_invariants(cls, values):
        if not values["households_provided"] <= values["households_demanding"] <= values["households_total"]:
            raise ValueError(
                "households must satisfy provided <= demanding <= total "
                f"(got {values['households_provided']}, {values['households_demanding']}, "
                f"{values['households_total']})"
            )

        if values["works_completed"] + values["works_ongoing"] != values["works_total"]:
            raise ValueError(
                "works_completed + works_ongoing must equal works_total "
                f"(got {values['works_completed']} + {values['works_ongoing']} != {values['works_total']})"
            )

        categories = values["person_days_sc"] + values["person_days_st"] + values["person_days_women"]
        if categories > values["person_days_total"]:
            raise ValueError(
                "person_days_sc + person_days_st + person_days_women must not exceed person_days_total "
                f"(got {categories} > {values['person_days_total']})"
            )

        return values

    @property
    def period(self) -> Period:
        return Period(self.financial_year, self.month)

    @property
    def key(self) -> tuple:
        return (self.district_code, self.financial_year, self.month)

    @property
    def expenditure_total(self) -> float:
        return self.expenditure_wage + self.expenditure_material + self.expenditure_admin
