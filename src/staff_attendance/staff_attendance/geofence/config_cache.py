from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ..core.constants import DEFAULT_GEOFENCE_CACHE_TTL_SECONDS
from .model import GeofenceConfig
from .repository import SystemConfigRepository


class CachedGeofenceConfig:
    """Read-through cache in front of the stored geofence.

    Note: Falls back to ``default`` when nothing is stored. Writers must call
    ``invalidate()`` so the next read sees the new value.
    """

    def __init__(
        self,
        source: SystemConfigRepository,
        default: GeofenceConfig,
        *,
        ttl_seconds: float = DEFAULT_GEOFENCE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._default = default
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._value: Optional[GeofenceConfig] = None
        self._loaded_at: Optional[float] = None

    def get(self) -> GeofenceConfig:
        with self._lock:
            now = self._clock()
            if self._value is not None and self._loaded_at is not None and now - self._loaded_at < self._ttl_seconds:
                return self._value

            self._value = self._source.get_geofence() or self._default
            self._loaded_at = now
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._loaded_at = None
