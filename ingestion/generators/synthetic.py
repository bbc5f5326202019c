"""
Deterministic synthetic performance records.

Used only when no authoritative data is reachable, so the service stays
demonstrably usable. Every record is drawn from its own seeded random
source keyed by (seed, district, financial year, month): the same inputs
always give the same record, whatever order districts are generated in.

Records are built so the stored invariants hold by construction:
provided <= demanding <= total households, completed + ongoing == total
works, and the SC/ST/women shares sum to at most 90% of person-days.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple
import math
import random
import logging

from models.base import RecordSource
from schemas.performance import PerformanceRecordCreate
from services.periods import Period

logger = logging.getLogger(__name__)

Range = Tuple[float, float]


@dataclass(frozen=True)
class FallbackBounds:
    """Ranges the synthetic ratios are drawn from (uniform)"""

    households_total: Tuple[int, int] = (10000, 60000)
    demand_rate: Range = (0.30, 0.70)  # of total households
    provision_rate: Range = (0.70, 0.95)  # of demanding households
    person_days_per_household: Range = (20.0, 50.0)
    sc_share: Range = (0.15, 0.25)  # of person-days
    st_share: Range = (0.05, 0.15)
    women_share: Range = (0.30, 0.50)
    works_total: Tuple[int, int] = (50, 250)
    completion_rate: Range = (0.40, 0.80)
    wage_per_person_day: Range = (200.0, 250.0)  # currency units
    material_to_wage: Range = (0.30, 0.50)
    admin_rate: float = 0.05  # of wage + material


DEFAULT_BOUNDS = FallbackBounds()


class SyntheticRecordGenerator:
    """
    Generate plausible records for districts and periods.

    Attributes:
        seed: Base seed; change it to get a different but still repeatable dataset
        bounds: Ratio ranges
    """

    def __init__(self, seed: int, bounds: FallbackBounds = DEFAULT_BOUNDS):
        self.seed = seed
        self.bounds = bounds

    def _rng(self, district_code: str, period: Period) -> random.Random:
        return random.Random(f"{self.seed}:{district_code}:{period.financial_year}:{period.month}")

    def generate_one(self, district_code: str, period: Period) -> PerformanceRecordCreate:
        rng = self._rng(district_code, period)
        b = self.bounds

        households_total = rng.randint(*b.households_total)
        households_demanding = math.floor(households_total * rng.uniform(*b.demand_rate))
        households_provided = math.floor(households_demanding * rng.uniform(*b.provision_rate))

        person_days_total = math.floor(households_provided * rng.uniform(*b.person_days_per_household))
        person_days_sc = math.floor(person_days_total * rng.uniform(*b.sc_share))
        person_days_st = math.floor(person_days_total * rng.uniform(*b.st_share))
        person_days_women = math.floor(person_days_total * rng.uniform(*b.women_share))

        works_total = rng.randint(*b.works_total)
        works_completed = math.floor(works_total * rng.uniform(*b.completion_rate))
        works_ongoing = works_total - works_completed

        expenditure_wage = round(person_days_total * rng.uniform(*b.wage_per_person_day))
        expenditure_material = round(expenditure_wage * rng.uniform(*b.material_to_wage))
        expenditure_admin = round((expenditure_wage + expenditure_material) * b.admin_rate)

        return PerformanceRecordCreate(
            district_code=district_code,
            financial_year=period.financial_year,
            month=period.month,
            households_total=households_total,
            households_demanding=households_demanding,
            households_provided=households_provided,
            person_days_total=person_days_total,
            person_days_sc=person_days_sc,
            person_days_st=person_days_st,
            person_days_women=person_days_women,
            works_total=works_total,
            works_completed=works_completed,
            works_ongoing=works_ongoing,
            expenditure_wage=expenditure_wage,
            expenditure_material=expenditure_material,
            expenditure_admin=expenditure_admin,
            source=RecordSource.SYNTHETIC,
        )

    def generate(
        self,
        district_codes: Iterable[str],
        periods: List[Period],
        skip_keys: Optional[Set[Tuple[str, str, str]]] = None
    ) -> Iterator[PerformanceRecordCreate]:
        """
        Records for every district x period, skipping keys already stored.

        Args:
            district_codes: Districts to cover
            periods: Periods to cover
            skip_keys: (district_code, financial_year, month) triples to leave alone
        """
        skip_keys = skip_keys or set()
        for code in district_codes:
            for period in periods:
                if (code, period.financial_year, period.month) in skip_keys:
                    continue
                yield self.generate_one(code, period)
