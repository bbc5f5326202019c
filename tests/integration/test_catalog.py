"""
Integration tests for the district catalog
"""

import pytest
from core.exceptions import InvalidQueryError, NotFoundError
from services.catalog import DistrictCatalog
from services.geo import NearestDistrictResolver
from services.reference_data import DISTRICTS, REGIONS


@pytest.mark.asyncio
async def test_seed_is_idempotent(db_session):
    catalog = DistrictCatalog(db_session)

    first = await catalog.seed(REGIONS, DISTRICTS)
    second = await catalog.seed(REGIONS, DISTRICTS)

    assert first["regions_added"] == len(REGIONS)
    assert first["districts_added"] == len(DISTRICTS)
    assert second == {"regions_added": 0, "districts_added": 0, "coordinates_backfilled": 0}
    assert len(await catalog.list_all()) == len(DISTRICTS)


@pytest.mark.asyncio
async def test_seed_backfills_missing_coordinates(db_session):
    catalog = DistrictCatalog(db_session)
    bare = [dict(d, latitude=None, longitude=None) for d in DISTRICTS[:3]]
    await catalog.seed(REGIONS, bare)

    stats = await catalog.seed(REGIONS, DISTRICTS[:3])

    assert stats["coordinates_backfilled"] == 3
    assert len(await catalog.list_with_coordinates()) == 3


@pytest.mark.asyncio
async def test_get_and_exists(seeded_session):
    catalog = DistrictCatalog(seeded_session)

    district = await catalog.get("UP050")

    assert district.name == "Lucknow"
    assert district.parent_code == "UP"
    assert await catalog.exists("UP050")
    assert not await catalog.exists("UP999")
    with pytest.raises(NotFoundError):
        await catalog.get("UP999")


@pytest.mark.asyncio
async def test_regions(seeded_session):
    catalog = DistrictCatalog(seeded_session)

    regions = await catalog.list_regions()

    assert [r.code for r in regions] == ["UP"]
    assert len(await catalog.list_by_region("UP")) == len(DISTRICTS)
    assert await catalog.list_by_region("XX") == []
    with pytest.raises(NotFoundError):
        await catalog.get_region("XX")


class TestSearch:

    @pytest.mark.asyncio
    async def test_case_insensitive_substring(self, seeded_session):
        results = await DistrictCatalog(seeded_session).search("LUCK")

        assert [d.code for d in results] == ["UP050"]

    @pytest.mark.asyncio
    async def test_prefix_matches_first(self, seeded_session):
        results = await DistrictCatalog(seeded_session).search("ba")

        names = [d.name for d in results]
        prefix = [n for n in names if n.lower().startswith("ba")]
        assert names[:len(prefix)] == sorted(prefix)
        assert all("ba" in n.lower() for n in names)

    @pytest.mark.asyncio
    async def test_result_limit(self, seeded_session):
        results = await DistrictCatalog(seeded_session, search_limit=3).search("a")

        assert results == []  # single character

        results = await DistrictCatalog(seeded_session, search_limit=3).search("an")
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, seeded_session):
        assert await DistrictCatalog(seeded_session).search("%%") == []
        assert await DistrictCatalog(seeded_session).search("__") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "x" * 101])
    async def test_invalid_queries(self, seeded_session, query):
        with pytest.raises(InvalidQueryError):
            await DistrictCatalog(seeded_session).search(query)


@pytest.mark.asyncio
async def test_nearest_against_seeded_catalog(seeded_session):
    resolver = NearestDistrictResolver(DistrictCatalog(seeded_session))

    lucknow = await resolver.resolve(26.85, 80.95)
    tie = await resolver.resolve(25.4358, 81.8463)

    assert lucknow.district.code == "UP050"
    assert tie.district.name == "Allahabad"  # shares coordinates with Prayagraj
    assert tie.distance_km == 0
