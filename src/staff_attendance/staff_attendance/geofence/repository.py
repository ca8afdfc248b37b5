from __future__ import annotations

from typing import Optional, Protocol

from .model import GeofenceConfig


class SystemConfigRepository(Protocol):
    def get_geofence(self) -> Optional[GeofenceConfig]:
        """Stored geofence, or None when it was never configured."""

        raise NotImplementedError

    def set_geofence(self, config: GeofenceConfig, *, updated_by: Optional[int] = None) -> None:
        raise NotImplementedError
