"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import Database
from schemas.performance import PerformanceRecordCreate
from services.catalog import DistrictCatalog
from services.reference_data import DISTRICTS, REGIONS
from typing import AsyncGenerator


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Throw-away SQLite database with all tables created"""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.open()

    yield db

    await db.close()


@pytest_asyncio.fixture(scope="function")
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with database.session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def seeded_session(db_session) -> AsyncSession:
    """Session over a database with the reference catalog loaded"""
    await DistrictCatalog(db_session).seed(REGIONS, DISTRICTS)
    return db_session


@pytest.fixture
def make_record():
    """Factory for valid records; override any field by keyword"""

    def _make(district_code="UP050", financial_year="2024-2025", month="April", **overrides):
        values = {
            "district_code": district_code,
            "financial_year": financial_year,
            "month": month,
            "households_total": 40000,
            "households_demanding": 20000,
            "households_provided": 18000,
            "person_days_total": 540000,
            "person_days_sc": 108000,
            "person_days_st": 27000,
            "person_days_women": 216000,
            "works_total": 150,
            "works_completed": 90,
            "works_ongoing": 60,
            "expenditure_wage": 12000000.0,
            "expenditure_material": 4800000.0,
            "expenditure_admin": 840000.0,
        }
        values.update(overrides)
        return PerformanceRecordCreate(**values)

    return _make


@pytest.fixture
def upstream_rows():
    """Rows shaped like the data.gov.in resource payload"""
    return [
        {
            "fin_year": "2024-2025",
            "month": "Apr",
            "state_name": "UTTAR PRADESH",
            "district_name": "LUCKNOW",
            "Total_No_of_JobCards_issued": "40,000",
            "Total_No_of_Active_Job_Cards": "20000",
            "Total_Households_Worked": "18000",
            "Persondays_of_Central_Liability_so_far": "540000",
            "SC_persondays": "108000",
            "ST_persondays": "27000",
            "Women_Persondays": "216000",
            "Total_No_of_Works_Takenup": "150",
            "Number_of_Completed_Works": "90",
            "Number_of_Ongoing_Works": "60",
            "Wages": "12000000",
            "Material_and_skilled_Wages": "4800000.5",
            "Total_Adm_Expenditure": "840000",
        },
        {
            "fin_year": "2024-2025",
            "month": "May",
            "state_name": "UTTAR PRADESH",
            "district_name": "Agra",
            "Total_No_of_JobCards_issued": "30000",
            "Total_No_of_Active_Job_Cards": "15000",
            "Total_Households_Worked": "12000",
            "Persondays_of_Central_Liability_so_far": "300000",
            "SC_persondays": "60000",
            "ST_persondays": "15000",
            "Women_Persondays": "120000",
            "Number_of_Completed_Works": "70",
            "Number_of_Ongoing_Works": "30",
            "Wages": "6600000",
            "Material_and_skilled_Wages": "2600000",
            "Total_Adm_Expenditure": "460000",
        },
    ]
