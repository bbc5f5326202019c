"""
District catalog: read access to regions and districts, plus idempotent seeding
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case
from models.district import District, Region
from core.config import settings
from core.exceptions import InvalidQueryError, NotFoundError
import logging

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 100


class DistrictCatalog:
    """
    Known geographic units.

    Reads never fail on an empty result; only ``get`` raises NotFoundError
    for an unknown code.
    """

    def __init__(self, db_session: AsyncSession, search_limit: Optional[int] = None):
        self.db = db_session
        self.search_limit = search_limit or settings.SEARCH_RESULT_LIMIT

    async def list_all(self) -> List[District]:
        result = await self.db.execute(
            select(District).order_by(District.name, District.code)
        )
        return list(result.scalars().all())

    async def list_with_coordinates(self) -> List[District]:
        result = await self.db.execute(
            select(District)
            .where(District.latitude.isnot(None), District.longitude.isnot(None))
            .order_by(District.name, District.code)
        )
        return list(result.scalars().all())

    async def search(self, query: str) -> List[District]:
        """
        Case-insensitive name search.

        Prefix matches come first, then other substring matches, each
        alphabetical. Queries shorter than two characters match nothing.

        Raises:
            InvalidQueryError: blank or longer than 100 characters
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidQueryError("Search query must not be blank", context={"query": query})

        needle = query.strip().lower()
        if len(needle) > MAX_QUERY_LENGTH:
            raise InvalidQueryError(
                f"Search query longer than {MAX_QUERY_LENGTH} characters",
                context={"length": len(needle)}
            )
        if len(needle) < MIN_QUERY_LENGTH:
            return []

        name = func.lower(District.name)
        prefix_first = case((name.startswith(needle, autoescape=True), 0), else_=1)

        result = await self.db.execute(
            select(District)
            .where(name.contains(needle, autoescape=True))
            .order_by(prefix_first, District.name, District.code)
            .limit(self.search_limit)
        )
        return list(result.scalars().all())

    async def get(self, code: str) -> District:
        result = await self.db.execute(select(District).where(District.code == code))
        district = result.scalar_one_or_none()
        if district is None:
            raise NotFoundError(
                f"Unknown district {code}",
                context={"resource": "district", "key": code}
            )
        return district

    async def exists(self, code: str) -> bool:
        result = await self.db.execute(select(District.id).where(District.code == code))
        return result.scalar_one_or_none() is not None

    async def list_regions(self) -> List[Region]:
        result = await self.db.execute(select(Region).order_by(Region.name))
        return list(result.scalars().all())

    async def get_region(self, code: str) -> Region:
        result = await self.db.execute(select(Region).where(Region.code == code))
        region = result.scalar_one_or_none()
        if region is None:
            raise NotFoundError(
                f"Unknown region {code}",
                context={"resource": "region", "key": code}
            )
        return region

    async def list_by_region(self, parent_code: str) -> List[District]:
        result = await self.db.execute(
            select(District)
            .where(District.parent_code == parent_code)
            .order_by(District.name, District.code)
        )
        return list(result.scalars().all())

    async def name_index(self) -> Dict[str, str]:
        """Lower-cased district name -> code"""
        result = await self.db.execute(select(District.name, District.code))
        return {name.strip().lower(): code for name, code in result.all()}

    async def seed(
        self,
        regions: Iterable[Mapping[str, Any]],
        districts: Iterable[Mapping[str, Any]]
    ) -> Dict[str, int]:
        """
        Insert missing regions and districts.

        Existing districts keep their name and parent; only coordinates that
        are still absent get filled in.

        Returns:
            Counts of regions added, districts added and coordinates backfilled
        """
        stats = {"regions_added": 0, "districts_added": 0, "coordinates_backfilled": 0}

        existing_regions = set((await self.db.execute(select(Region.code))).scalars().all())
        for region in regions:
            if region["code"] not in existing_regions:
                self.db.add(Region(code=region["code"], name=region["name"]))
                existing_regions.add(region["code"])
                stats["regions_added"] += 1

        result = await self.db.execute(select(District))
        existing = {d.code: d for d in result.scalars().all()}

        for entry in districts:
            district = existing.get(entry["code"])
            if district is None:
                district = District(
                    code=entry["code"],
                    name=entry["name"],
                    parent_code=entry["parent_code"],
                    latitude=entry.get("latitude"),
                    longitude=entry.get("longitude"),
                )
                self.db.add(district)
                existing[entry["code"]] = district
                stats["districts_added"] += 1
            elif not district.has_coordinates and entry.get("latitude") is not None and entry.get("longitude") is not None:
                district.latitude = entry["latitude"]
                district.longitude = entry["longitude"]
                stats["coordinates_backfilled"] += 1

        await self.db.commit()

        if any(stats.values()):
            logger.info(
                f"Catalog seeded: {stats['regions_added']} regions, "
                f"{stats['districts_added']} districts added, "
                f"{stats['coordinates_backfilled']} coordinates backfilled"
            )
        return stats
