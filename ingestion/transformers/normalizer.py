"""
Transform raw upstream rows into validated performance records
"""

from typing import Dict, Any, Optional, Iterable, List, Tuple
from pydantic import ValidationError
from schemas.performance import PerformanceRecordCreate
from models.base import RecordSource
from core.exceptions import NormalizationError
import math
import logging

logger = logging.getLogger(__name__)


# Canonical field -> accepted upstream column names, first match wins.
# Covers our own column names, the legacy export and data.gov.in's
# "MGNREGA at a glance" resource.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "financial_year": ("financial_year", "fin_year"),
    "month": ("month",),
    "district_code": ("district_code",),
    "district_name": ("district_name",),
    "households_total": ("households_total", "total_households", "Total_No_of_JobCards_issued"),
    "households_demanding": ("households_demanding", "households_demanding_work", "Total_No_of_Active_Job_Cards"),
    "households_provided": ("households_provided", "households_provided_work", "Total_Households_Worked"),
    "person_days_total": ("person_days_total", "total_person_days", "Persondays_of_Central_Liability_so_far"),
    "person_days_sc": ("person_days_sc", "sc_person_days", "SC_persondays"),
    "person_days_st": ("person_days_st", "st_person_days", "ST_persondays"),
    "person_days_women": ("person_days_women", "women_person_days", "Women_Persondays"),
    "works_total": ("works_total", "total_works", "Total_No_of_Works_Takenup"),
    "works_completed": ("works_completed", "completed_works", "Number_of_Completed_Works"),
    "works_ongoing": ("works_ongoing", "ongoing_works", "Number_of_Ongoing_Works"),
    "expenditure_wage": ("expenditure_wage", "wage_expenditure", "Wages"),
    "expenditure_material": ("expenditure_material", "material_expenditure", "Material_and_skilled_Wages"),
    "expenditure_admin": ("expenditure_admin", "admin_expenditure", "Total_Adm_Expenditure"),
}

INT_FIELDS = (
    "households_total", "households_demanding", "households_provided",
    "person_days_total", "person_days_sc", "person_days_st", "person_days_women",
    "works_total", "works_completed", "works_ongoing",
)
FLOAT_FIELDS = ("expenditure_wage", "expenditure_material", "expenditure_admin")


class UpstreamRecordNormalizer:
    """
    Normalize upstream rows into the performance record schema.

    Handles:
    - Column name mapping
    - Type conversion ("1,234", "12.0", "" and "NA")
    - District resolution by code, then by name
    - Deriving a missing works total or ongoing count

    Attributes:
        known_codes: District codes present in the catalog
        name_index: Lower-cased district name -> code
    """

    def __init__(self, known_codes: Iterable[str], name_index: Dict[str, str]):
        self.known_codes = set(known_codes)
        self.name_index = name_index

    def normalize(self, row: Dict[str, Any]) -> PerformanceRecordCreate:
        """
        Normalize one upstream row.

        Returns:
            Validated PerformanceRecordCreate with source UPSTREAM

        Raises:
            NormalizationError: missing key fields or violated record invariants
        """
        if not isinstance(row, dict):
            raise NormalizationError(
                "Upstream row is not an object",
                context={"row_type": type(row).__name__}
            )

        district_code = self._resolve_district(row)
        values: Dict[str, Any] = {
            "district_code": district_code,
            "financial_year": self._pick(row, "financial_year"),
            "month": self._pick(row, "month"),
            "source": RecordSource.UPSTREAM,
        }

        for field in INT_FIELDS:
            values[field] = self._parse_int(self._pick(row, field))
        for field in FLOAT_FIELDS:
            values[field] = self._parse_float(self._pick(row, field))

        self._derive_works(values)

        missing = [k for k in ("district_code", "financial_year", "month") if values[k] in (None, "")]
        if missing:
            raise NormalizationError(
                "Upstream row lacks key fields",
                context={"district": district_code, "missing": ",".join(missing)}
            )

        # Absent counters are reported as zero upstream
        for field in INT_FIELDS + FLOAT_FIELDS:
            if values[field] is None:
                values[field] = 0

        try:
            return PerformanceRecordCreate(**values)
        except ValidationError as e:
            raise NormalizationError(
                "Upstream row failed validation",
                context={
                    "district": district_code,
                    "financial_year": values["financial_year"],
                    "month": values["month"],
                    "field_errors": "; ".join(err["msg"] for err in e.errors()),
                },
                original_exception=e
            )

    def normalize_many(
        self,
        rows: Iterable[Dict[str, Any]]
    ) -> Tuple[List[PerformanceRecordCreate], List[NormalizationError]]:
        """Normalize every row; bad rows are collected, never raised"""
        records: List[PerformanceRecordCreate] = []
        rejected: List[NormalizationError] = []
        for row in rows:
            try:
                records.append(self.normalize(row))
            except NormalizationError as e:
                logger.debug(f"Rejected upstream row: {e}")
                rejected.append(e)
        if rejected:
            logger.warning(f"Rejected {len(rejected)} of {len(records) + len(rejected)} upstream rows")
        return records, rejected

    def _resolve_district(self, row: Dict[str, Any]) -> Optional[str]:
        """
        Catalog code for the row.

        An unknown code with no recognisable name is passed through so the
        store reports it as a constraint violation.
        """
        code = self._pick(row, "district_code")
        if code is not None:
            code = str(code).strip().upper()
            if code in self.known_codes:
                return code

        name = self._pick(row, "district_name")
        if name is not None:
            by_name = self.name_index.get(str(name).strip().lower())
            if by_name:
                return by_name

        return code or None

    @staticmethod
    def _derive_works(values: Dict[str, Any]):
        total = values["works_total"]
        completed = values["works_completed"]
        ongoing = values["works_ongoing"]
        if total is None and completed is not None and ongoing is not None:
            values["works_total"] = completed + ongoing
        elif ongoing is None and total is not None and completed is not None:
            values["works_ongoing"] = max(total - completed, 0)

    @staticmethod
    def _pick(row: Dict[str, Any], field: str) -> Any:
        for alias in FIELD_ALIASES[field]:
            value = row.get(alias)
            if value is not None and value != "":
                return value
        return None

    @staticmethod
    def _parse_float(value: Any) -> Optional[float]:
        """Safely parse float value"""
        if value is None or value == "":
            return None
        if isinstance(value, str):
            value = value.replace(",", "").strip()
        try:
            number = float(value)
        except (ValueError, TypeError):
            return None
        return number if math.isfinite(number) else None

    @staticmethod
    def _parse_int(value: Any) -> Optional[int]:
        """Safely parse int value"""
        number = UpstreamRecordNormalizer._parse_float(value)
        if number is None:
            return None
        return int(number)  # Handle "10.0" strings
