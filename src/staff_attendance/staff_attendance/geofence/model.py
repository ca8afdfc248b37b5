from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..common.validators import require_float_range, require_int_range
from ..core.constants import MAX_GEOFENCE_RADIUS_METERS, MIN_GEOFENCE_RADIUS_METERS
from .validator import validate_location


@dataclass(frozen=True)
class GeofenceConfig:
    """Circular area around the residence center where clock events are allowed."""

    center_lat: float
    center_lon: float
    radius_meters: int

    @classmethod
    def checked(cls, center_lat: Any, center_lon: Any, radius_meters: Any) -> "GeofenceConfig":
        """Build a config, raising ValidationError for out-of-range values."""
        return cls(
            center_lat=require_float_range(center_lat, "Latitude", -90, 90),
            center_lon=require_float_range(center_lon, "Longitude", -180, 180),
            radius_meters=require_int_range(
                radius_meters, "Radius", MIN_GEOFENCE_RADIUS_METERS, MAX_GEOFENCE_RADIUS_METERS
            ),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeofenceConfig":
        return cls.checked(data.get("center_lat"), data.get("center_lon"), data.get("radius_meters"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "center_lat": self.center_lat,
            "center_lon": self.center_lon,
            "radius_meters": self.radius_meters,
        }

    def validate(self, lat: float, lon: float) -> float:
        return validate_location(lat, lon, self.center_lat, self.center_lon, self.radius_meters)
