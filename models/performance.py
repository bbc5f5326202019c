from sqlalchemy import Column, BigInteger, Integer, String, Float, Enum, DateTime, ForeignKey, Index, UniqueConstraint
from datetime import datetime
from models.base import Base, RecordSource


class PerformanceRecord(Base):
    """
    One month of program counters for one district.

    Design:
    - Unique on (district_code, financial_year, month); re-syncing a key
      replaces every non-key column
    - period_rank encodes the fiscal-year ordering (April first, March last)
      so "latest" and "trend" queries can sort numerically
    - expenditure_total is derived from its three components, not stored
    """
    __tablename__ = "performance_records"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    # Key
    district_code = Column(String(32), ForeignKey("districts.code"), nullable=False, index=True)
    financial_year = Column(String(9), nullable=False)  # "2024-2025"
    month = Column(String(12), nullable=False)  # "April"
    period_rank = Column(Integer, nullable=False)

    # Households
    households_total = Column(Integer, nullable=False, default=0)
    households_demanding = Column(Integer, nullable=False, default=0)
    households_provided = Column(Integer, nullable=False, default=0)

    # Person-days
    person_days_total = Column(BigInteger, nullable=False, default=0)
    person_days_sc = Column(BigInteger, nullable=False, default=0)
    person_days_st = Column(BigInteger, nullable=False, default=0)
    person_days_women = Column(BigInteger, nullable=False, default=0)

    # Works
    works_total = Column(Integer, nullable=False, default=0)
    works_completed = Column(Integer, nullable=False, default=0)
    works_ongoing = Column(Integer, nullable=False, default=0)

    # Expenditure
    expenditure_wage = Column(Float, nullable=False, default=0)
    expenditure_material = Column(Float, nullable=False, default=0)
    expenditure_admin = Column(Float, nullable=False, default=0)

    source = Column(Enum(RecordSource), nullable=False, default=RecordSource.UPSTREAM)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("district_code", "financial_year", "month", name="uq_performance_period"),
        Index("idx_performance_district_rank", "district_code", "period_rank"),
    )

    @property
    def expenditure_total(self) -> float:
        return (self.expenditure_wage or 0) + (self.expenditure_material or 0) + (self.expenditure_admin or 0)
