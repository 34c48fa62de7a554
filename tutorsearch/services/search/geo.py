# tutorsearch/services/search/geo.py
"""Great-circle helpers used when the database has no spatial extension."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional, Tuple

from tutorsearch.core.constants import EARTH_RADIUS_M


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 point. Coordinates are validated on construction."""

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")

    def to_coordinates(self) -> list[float]:
        return [self.longitude, self.latitude]


def haversine_m(origin: GeoPoint, lat: float, lng: float) -> float:
    """Numerically stable haversine distance in meters."""
    rlat1, rlng1 = math.radians(origin.latitude), math.radians(origin.longitude)
    rlat2, rlng2 = math.radians(lat), math.radians(lng)
    dlat = rlat2 - rlat1
    dlng = rlng2 - rlng1
    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))
    return EARTH_RADIUS_M * c


def bounding_box(
    origin: GeoPoint, radius_m: float
) -> Tuple[float, float, Optional[float], Optional[float]]:
    """
    Return (lat_min, lat_max, lng_min, lng_max) enclosing a circle of radius_m.

    The longitude bounds are None when the box touches a pole or wraps the
    antimeridian; callers then filter on latitude only.
    """
    angular = radius_m / EARTH_RADIUS_M
    lat_delta = math.degrees(angular)
    lat_min = max(-90.0, origin.latitude - lat_delta)
    lat_max = min(90.0, origin.latitude + lat_delta)

    cos_lat = math.cos(math.radians(origin.latitude))
    if lat_min <= -90.0 or lat_max >= 90.0 or cos_lat <= 1e-12:
        return lat_min, lat_max, None, None

    ratio = math.sin(angular) / cos_lat
    if ratio >= 1.0:
        return lat_min, lat_max, None, None
    # Widest longitude the circle reaches
    lng_delta = math.degrees(math.asin(ratio))
    lng_min = origin.longitude - lng_delta
    lng_max = origin.longitude + lng_delta
    if lng_delta >= 180.0 or lng_min < -180.0 or lng_max > 180.0:
        return lat_min, lat_max, None, None
    return lat_min, lat_max, lng_min, lng_max
