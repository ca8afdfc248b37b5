from __future__ import annotations

import json
from typing import Optional

from ..core.constants import GEOFENCE_CONFIG_KEY
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import GeofenceConfig
from .repository import SystemConfigRepository


class MySQLSystemConfigRepository(SystemConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_geofence(self) -> Optional[GeofenceConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT value FROM system_config WHERE config_key=%s", (GEOFENCE_CONFIG_KEY,))
            r = fetchone(cur)
            if not r:
                return None
            value = r["value"]
            if isinstance(value, (bytes, bytearray)):
                value = value.decode("utf-8")
            data = json.loads(value) if isinstance(value, str) else value
            return GeofenceConfig.from_mapping(data)

    def set_geofence(self, config: GeofenceConfig, *, updated_by: Optional[int] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_config(config_key, value, updated_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE value=VALUES(value), updated_by=VALUES(updated_by)
                """,
                (GEOFENCE_CONFIG_KEY, json.dumps(config.to_dict()), updated_by),
            )
