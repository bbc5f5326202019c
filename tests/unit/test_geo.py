"""
Unit tests for haversine distance and nearest-district resolution
"""

import math
import random
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock
from core.exceptions import InvalidCoordinateError, NotFoundError
from services.geo import NearestDistrictResolver, find_nearest, haversine_km, validate_coordinate

LUCKNOW = SimpleNamespace(code="UP050", name="Lucknow", latitude=26.8467, longitude=80.9462)
AGRA = SimpleNamespace(code="UP001", name="Agra", latitude=27.1767, longitude=78.0081)


def _catalog(districts):
    catalog = AsyncMock()
    catalog.list_with_coordinates.return_value = districts
    return catalog


class TestHaversine:
    """Test great-circle distance"""

    def test_same_point_is_zero(self):
        assert haversine_km(26.8467, 80.9462, 26.8467, 80.9462) == 0

    def test_symmetric(self):
        rng = random.Random(7)
        for _ in range(50):
            a = (rng.uniform(-90, 90), rng.uniform(-180, 180))
            b = (rng.uniform(-90, 90), rng.uniform(-180, 180))
            assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a), abs=1e-9)

    def test_lucknow_to_agra(self):
        distance = haversine_km(LUCKNOW.latitude, LUCKNOW.longitude, AGRA.latitude, AGRA.longitude)
        assert 285 < distance < 300

    def test_quarter_meridian(self):
        assert haversine_km(0, 0, 90, 0) == pytest.approx(math.pi * 6371 / 2)


class TestValidateCoordinate:

    @pytest.mark.parametrize("lat,lon", [
        (91, 0),
        (-90.5, 0),
        (0, 180.01),
        (0, -181),
        (float("nan"), 0),
        (0, float("inf")),
        ("north", 0),
        (None, 0),
        (True, 0),
    ])
    def test_rejects_invalid(self, lat, lon):
        with pytest.raises(InvalidCoordinateError):
            validate_coordinate(lat, lon)

    def test_accepts_bounds_and_numeric_strings(self):
        assert validate_coordinate(90, -180) == (90.0, -180.0)
        assert validate_coordinate("26.85", "80.95") == (26.85, 80.95)


class TestFindNearest:

    def test_point_near_lucknow(self):
        match = find_nearest([AGRA, LUCKNOW], 26.85, 80.95)

        assert match.district is LUCKNOW
        assert match.distance_km < 1

    def test_skips_districts_without_coordinates(self):
        unplaced = SimpleNamespace(code="UP999", name="Nowhere", latitude=None, longitude=None)

        assert find_nearest([unplaced, AGRA], 26.85, 80.95).district is AGRA
        assert find_nearest([unplaced], 26.85, 80.95) is None

    def test_tie_goes_to_first_district(self):
        first = SimpleNamespace(code="A", name="A", latitude=25.0, longitude=80.0)
        second = SimpleNamespace(code="B", name="B", latitude=25.0, longitude=80.0)

        assert find_nearest([first, second], 25.1, 80.1).district is first

    def test_agrees_with_brute_force(self):
        rng = random.Random(42)
        for _ in range(20):
            districts = [
                SimpleNamespace(code=f"D{i}", name=f"D{i}", latitude=rng.uniform(-60, 60), longitude=rng.uniform(-170, 170))
                for i in range(30)
            ]
            lat, lon = rng.uniform(-60, 60), rng.uniform(-170, 170)

            expected = min(districts, key=lambda d: haversine_km(lat, lon, d.latitude, d.longitude))
            assert find_nearest(districts, lat, lon).district is expected


class TestNearestDistrictResolver:

    @pytest.mark.asyncio
    async def test_resolve(self):
        resolver = NearestDistrictResolver(_catalog([AGRA, LUCKNOW]))

        match = await resolver.resolve(26.85, 80.95)

        assert match.district.code == "UP050"

    @pytest.mark.asyncio
    async def test_invalid_input_checked_before_store(self):
        catalog = _catalog([LUCKNOW])
        resolver = NearestDistrictResolver(catalog)

        with pytest.raises(InvalidCoordinateError):
            await resolver.resolve(120, 80)

        catalog.list_with_coordinates.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_catalog_is_not_found(self):
        resolver = NearestDistrictResolver(_catalog([]))

        with pytest.raises(NotFoundError):
            await resolver.resolve(26.85, 80.95)
