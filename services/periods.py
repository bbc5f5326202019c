"""
Fiscal reporting periods.

The program reports on an April-March financial year labelled
"2024-2025". Periods sort by the fiscal start year, then by the month's
position inside that year, so April 2024 < March 2025 < April 2025.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Union
import re

FISCAL_MONTHS = [
    "April", "May", "June", "July", "August", "September",
    "October", "November", "December", "January", "February", "March",
]

_MONTH_LOOKUP = {}
for _offset, _name in enumerate(FISCAL_MONTHS):
    _MONTH_LOOKUP[_name.lower()] = _name
    _MONTH_LOOKUP[_name[:3].lower()] = _name
_MONTH_LOOKUP["sept"] = "September"

# Calendar month number (1-12) -> month name
_CALENDAR_MONTHS = {((offset + 3) % 12) + 1: name for offset, name in enumerate(FISCAL_MONTHS)}

_FY_PATTERN = re.compile(r"^\s*(\d{4})\s*[-/]\s*(\d{2}|\d{4})\s*$")


def normalize_month(value: Union[str, int]) -> str:
    """Canonical month name from a name, abbreviation or calendar number"""
    if isinstance(value, int) and not isinstance(value, bool):
        if value in _CALENDAR_MONTHS:
            return _CALENDAR_MONTHS[value]
        raise ValueError(f"Month number out of range: {value}")

    text = str(value).strip()
    if text.isdigit():
        return normalize_month(int(text))

    name = _MONTH_LOOKUP.get(text.lower())
    if name is None:
        raise ValueError(f"Unknown month: {value!r}")
    return name


def normalize_financial_year(value: str) -> str:
    """Canonical "YYYY-YYYY" label from "2024-2025" or "2024-25" """
    match = _FY_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Unrecognised financial year: {value!r}")

    start = int(match.group(1))
    end_text = match.group(2)
    if len(end_text) == 4:
        consecutive = int(end_text) == start + 1
    else:
        consecutive = int(end_text) == (start + 1) % 100

    if not consecutive:
        raise ValueError(f"Financial year must span consecutive years: {value!r}")
    return f"{start}-{start + 1}"


@dataclass(frozen=True)
class Period:
    """One reporting month inside a financial year"""

    financial_year: str
    month: str

    @classmethod
    def parse(cls, financial_year: str, month: Union[str, int]) -> "Period":
        return cls(normalize_financial_year(financial_year), normalize_month(month))

    @classmethod
    def from_date(cls, day: date) -> "Period":
        start_year = day.year if day.month >= 4 else day.year - 1
        return cls(f"{start_year}-{start_year + 1}", _CALENDAR_MONTHS[day.month])

    @property
    def start_year(self) -> int:
        return int(self.financial_year.split("-")[0])

    @property
    def month_offset(self) -> int:
        return FISCAL_MONTHS.index(self.month)

    @property
    def rank(self) -> int:
        """Monotonic integer key; consecutive months differ by one"""
        return self.start_year * 12 + self.month_offset

    @classmethod
    def from_rank(cls, rank: int) -> "Period":
        start_year, offset = divmod(rank, 12)
        return cls(f"{start_year}-{start_year + 1}", FISCAL_MONTHS[offset])

    def previous(self) -> "Period":
        return Period.from_rank(self.rank - 1)

    def __lt__(self, other: "Period") -> bool:
        return self.rank < other.rank


def period_rank(financial_year: str, month: str) -> int:
    return Period.parse(financial_year, month).rank


def trailing_periods(today: date, count: int) -> List[Period]:
    """The ``count`` periods ending with today's month, oldest first"""
    if count < 1:
        return []
    current = Period.from_date(today)
    return [Period.from_rank(current.rank - i) for i in range(count - 1, -1, -1)]
