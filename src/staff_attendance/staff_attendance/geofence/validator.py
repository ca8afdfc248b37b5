from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import OutOfRangeError


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two WGS84 points (haversine)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    # Clamp rounding noise so asin stays in its domain.
    c = 2 * math.asin(min(1.0, math.sqrt(a)))
    return EARTH_RADIUS_METERS * c


def validate_location(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    radius_meters: float,
) -> float:
    """Return the distance to the center, or raise OutOfRangeError beyond the radius.

    A point exactly on the boundary is accepted.
    """
    distance = haversine_distance(lat, lon, center_lat, center_lon)
    if distance > radius_meters:
        raise OutOfRangeError(distance, radius_meters)
    return distance
