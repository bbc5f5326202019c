"""
Performance record store with idempotent upsert (INSERT ... ON CONFLICT UPDATE)
"""

from datetime import datetime
from typing import List, Optional, Set, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models.district import District
from models.performance import PerformanceRecord
from schemas.performance import PerformanceRecordCreate
from core.exceptions import ConstraintViolationError, InvalidInputError, NotFoundError, StoreError
from services.periods import normalize_financial_year, normalize_month
import logging

logger = logging.getLogger(__name__)

# Columns replaced on conflict; the key, id and created_at are kept
_REPLACED_COLUMNS = (
    "period_rank",
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
    "source",
    "updated_at",
)


class PerformanceStore:
    """
    One performance record per (district, financial year, month).

    Ensures:
    - No duplicate rows on repeated syncs
    - A re-sync fully replaces the stored values
    - Each upsert commits on its own, so a reader never sees half a row
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    def _insert(self):
        dialect = self.db.bind.dialect.name if self.db.bind is not None else "sqlite"
        if dialect == "postgresql":
            return pg_insert(PerformanceRecord)
        return sqlite_insert(PerformanceRecord)

    async def upsert(self, record: PerformanceRecordCreate) -> PerformanceRecord:
        """
        Insert a record or replace every non-key field of the existing one.

        Args:
            record: Validated record

        Returns:
            The stored row

        Raises:
            ConstraintViolationError: district_code not in the catalog
            StoreError: any other database failure
        """
        district_known = await self.db.execute(
            select(District.id).where(District.code == record.district_code)
        )
        if district_known.scalar_one_or_none() is None:
            raise ConstraintViolationError(
                f"Unknown district {record.district_code}",
                context={
                    "district_code": record.district_code,
                    "financial_year": record.financial_year,
                    "month": record.month,
                    "constraint": "districts.code"
                }
            )

        now = datetime.utcnow()
        values = record.model_dump()
        values["period_rank"] = record.period.rank
        values["created_at"] = now
        values["updated_at"] = now

        stmt = self._insert().values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["district_code", "financial_year", "month"],
            set_={column: getattr(stmt.excluded, column) for column in _REPLACED_COLUMNS}
        )

        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConstraintViolationError(
                "Integrity constraint violated on upsert",
                context={
                    "district_code": record.district_code,
                    "financial_year": record.financial_year,
                    "month": record.month
                },
                original_exception=e
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                "Upsert failed",
                context={"operation": "UPSERT", "table_name": PerformanceRecord.__tablename__},
                original_exception=e
            )

        return await self._get(*record.key)

    async def _get(self, district_code: str, financial_year: str, month: str) -> PerformanceRecord:
        result = await self.db.execute(
            select(PerformanceRecord)
            .where(
                and_(
                    PerformanceRecord.district_code == district_code,
                    PerformanceRecord.financial_year == financial_year,
                    PerformanceRecord.month == month
                )
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(PerformanceRecord))
        return result.scalar() or 0

    async def is_empty(self) -> bool:
        return await self.count() == 0

    async def existing_keys(self) -> Set[Tuple[str, str, str]]:
        result = await self.db.execute(
            select(
                PerformanceRecord.district_code,
                PerformanceRecord.financial_year,
                PerformanceRecord.month
            )
        )
        return {tuple(row) for row in result.all()}

    async def latest_for(self, district_code: str) -> PerformanceRecord:
        """
        Most recent record by fiscal order.

        Raises:
            NotFoundError: no records for the district
        """
        result = await self.db.execute(
            select(PerformanceRecord)
            .where(PerformanceRecord.district_code == district_code)
            .order_by(PerformanceRecord.period_rank.desc())
            .limit(1)
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(
                f"No data found for district {district_code}",
                context={"resource": "performance_record", "key": district_code}
            )
        return record

    async def trend_for(self, district_code: str, limit: int) -> List[PerformanceRecord]:
        """
        Up to ``limit`` most recent records, oldest first.

        Empty when the district has no data.
        """
        if limit < 1:
            return []
        result = await self.db.execute(
            select(PerformanceRecord)
            .where(PerformanceRecord.district_code == district_code)
            .order_by(PerformanceRecord.period_rank.desc())
            .limit(limit)
        )
        newest_first = list(result.scalars().all())
        newest_first.reverse()
        return newest_first

    async def history_for(
        self,
        district_code: str,
        financial_year: Optional[str] = None,
        month: Optional[str] = None
    ) -> List[PerformanceRecord]:
        """
        All records for a district, newest first, optionally filtered.

        Raises:
            NotFoundError: nothing matches
        """
        filters = [PerformanceRecord.district_code == district_code]
        try:
            if financial_year:
                filters.append(PerformanceRecord.financial_year == normalize_financial_year(financial_year))
            if month:
                filters.append(PerformanceRecord.month == normalize_month(month))
        except ValueError as e:
            raise InvalidInputError(
                str(e),
                context={"financial_year": financial_year, "month": month},
                original_exception=e
            )

        result = await self.db.execute(
            select(PerformanceRecord)
            .where(and_(*filters))
            .order_by(PerformanceRecord.period_rank.desc())
        )
        records = list(result.scalars().all())
        if not records:
            raise NotFoundError(
                f"No data found for district {district_code}",
                context={
                    "resource": "performance_record",
                    "key": district_code,
                    "financial_year": financial_year,
                    "month": month
                }
            )
        return records

    async def aggregate_latest_by_parent(self, parent_code: str) -> List[PerformanceRecord]:
        """
        Each child district's own latest record.

        Siblings are not aligned to a common period; a district synced less
        recently contributes its older latest month.
        """
        latest_rank = (
            select(
                PerformanceRecord.district_code.label("district_code"),
                func.max(PerformanceRecord.period_rank).label("max_rank")
            )
            .join(District, District.code == PerformanceRecord.district_code)
            .where(District.parent_code == parent_code)
            .group_by(PerformanceRecord.district_code)
            .subquery()
        )

        result = await self.db.execute(
            select(PerformanceRecord)
            .join(
                latest_rank,
                and_(
                    PerformanceRecord.district_code == latest_rank.c.district_code,
                    PerformanceRecord.period_rank == latest_rank.c.max_rank
                )
            )
            .order_by(PerformanceRecord.district_code)
        )
        return list(result.scalars().all())
