from __future__ import annotations

from flask import Flask

from ..common.http import field_int, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/system-config/geofence", methods=["GET"], endpoint="geofence_get")
    def geofence_get():
        return ok(container.geofence_service.get_config().to_dict())

    @app.route("/api/system-config/geofence", methods=["POST"], endpoint="geofence_update")
    def geofence_update():
        data = json_body()
        config = container.geofence_service.update_config(
            center_lat=data.get("center_lat"),
            center_lon=data.get("center_lon"),
            radius_meters=data.get("radius_meters"),
            updated_by=field_int(data, "updated_by", required=False),
        )
        return ok(config.to_dict(), message="Geofence configuration updated")
