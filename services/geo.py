"""
Great-circle distance and nearest-district resolution.

The resolver is a linear scan over every district with coordinates. The
catalog holds a few hundred units, so an O(n) scan per lookup is the
intended scaling limit; a spatial index would only pay off for catalogs
orders of magnitude larger.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional
import math
import logging

from core.exceptions import InvalidCoordinateError, NotFoundError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def validate_coordinate(latitude: Any, longitude: Any) -> tuple:
    """
    Check a coordinate pair and return it as floats.

    Raises:
        InvalidCoordinateError: non-numeric, non-finite or out of range
    """
    values = []
    for name, value, limit in (("latitude", latitude, 90), ("longitude", longitude, 180)):
        if isinstance(value, bool):
            raise InvalidCoordinateError(
                f"{name} must be a number",
                context={"field": name, "value": value}
            )
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidCoordinateError(
                f"{name} must be a number",
                context={"field": name, "value": value},
                original_exception=e
            )
        if not math.isfinite(number) or not -limit <= number <= limit:
            raise InvalidCoordinateError(
                f"{name} must be within [-{limit}, {limit}]",
                context={"field": name, "value": value}
            )
        values.append(number)
    return values[0], values[1]


@dataclass(frozen=True)
class NearestMatch:
    district: Any
    distance_km: float


def find_nearest(districts: Iterable[Any], latitude: float, longitude: float) -> Optional[NearestMatch]:
    """
    Closest district by haversine distance.

    Districts without both coordinates are skipped. On an exact tie the
    first district in iteration order wins.
    """
    best: Optional[NearestMatch] = None
    for district in districts:
        if district.latitude is None or district.longitude is None:
            continue
        distance = haversine_km(latitude, longitude, district.latitude, district.longitude)
        if best is None or distance < best.distance_km:
            best = NearestMatch(district=district, distance_km=distance)
    return best


class NearestDistrictResolver:
    """Resolve a coordinate to the closest catalog district"""

    def __init__(self, catalog):
        self.catalog = catalog

    async def resolve(self, latitude: Any, longitude: Any) -> NearestMatch:
        """
        Args:
            latitude: Decimal degrees in [-90, 90]
            longitude: Decimal degrees in [-180, 180]

        Returns:
            NearestMatch with the district and its distance in km

        Raises:
            InvalidCoordinateError: bad input (checked before any store access)
            NotFoundError: no district has coordinates
        """
        lat, lon = validate_coordinate(latitude, longitude)

        districts = await self.catalog.list_with_coordinates()
        match = find_nearest(districts, lat, lon)

        if match is None:
            raise NotFoundError(
                "No districts with coordinates",
                context={"resource": "district", "latitude": lat, "longitude": lon}
            )

        logger.debug(
            f"Resolved ({lat}, {lon}) to {match.district.code} "
            f"at {match.distance_km:.2f} km"
        )
        return match
