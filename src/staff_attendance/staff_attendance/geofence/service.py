from __future__ import annotations

import logging
from typing import Any, Optional

from .config_cache import CachedGeofenceConfig
from .model import GeofenceConfig
from .repository import SystemConfigRepository

logger = logging.getLogger(__name__)


class GeofenceService:
    def __init__(self, config_repo: SystemConfigRepository, cache: CachedGeofenceConfig):
        self._config_repo = config_repo
        self._cache = cache

    def get_config(self) -> GeofenceConfig:
        return self._cache.get()

    def validate(self, lat: float, lon: float) -> float:
        """Distance to the current center; raises OutOfRangeError outside the radius."""
        return self._cache.get().validate(lat, lon)

    def update_config(
        self,
        *,
        center_lat: Any,
        center_lon: Any,
        radius_meters: Any,
        updated_by: Optional[int] = None,
    ) -> GeofenceConfig:
        config = GeofenceConfig.checked(center_lat, center_lon, radius_meters)
        self._config_repo.set_geofence(config, updated_by=updated_by)
        self._cache.invalidate()
        logger.info(
            "Geofence updated by %s: center=(%.6f, %.6f) radius=%dm",
            updated_by,
            config.center_lat,
            config.center_lon,
            config.radius_meters,
        )
        return config
