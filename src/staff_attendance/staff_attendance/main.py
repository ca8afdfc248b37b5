from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .core.exceptions import (
    CapacityError,
    ConflictError,
    DomainError,
    InvalidReferenceError,
    OutOfRangeError,
    ValidationError,
)
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .attendance.controller import register as register_attendance
from .geofence.controller import register as register_geofence
from .schedules.controller import register as register_schedules
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400, "validation_error"),
    (InvalidReferenceError, 404, "reference_error"),
    (OutOfRangeError, 403, "out_of_range"),
    (ConflictError, 409, "conflict"),
    (CapacityError, 422, "capacity_error"),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status, kind = 400, "domain_error"
        for error_type, error_status, error_kind in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                status, kind = error_status, error_kind
                break

        body = {"success": False, "error": kind, "message": str(e)}
        if isinstance(e, OutOfRangeError):
            body["distance_meters"] = round(e.distance_meters)
            body["radius_meters"] = e.radius_meters
        return jsonify(body), status


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if app.config["DEBUG"]:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        if app.config["DEBUG"]:
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        geofence_default=getattr(settings, "GEOFENCE_DEFAULT"),
        civil_utc_offset_minutes=int(getattr(settings, "CIVIL_UTC_OFFSET_MINUTES", 0)),
        geofence_cache_ttl_seconds=getattr(settings, "GEOFENCE_CACHE_TTL_SECONDS", None),
    )
    app.extensions["staff_attendance"] = container

    _register_error_handlers(app)
    register_geofence(app, container)
    register_shifts(app, container)
    register_schedules(app, container)
    register_attendance(app, container)

    return app
