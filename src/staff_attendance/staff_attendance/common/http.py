from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError
from .datetime_utils import format_wall_clock, parse_iso_date


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums and date/time values -> plain JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        if hasattr(value, "is_open"):
            data["is_open"] = value.is_open
        if hasattr(value, "is_active"):
            data["is_active"] = value.is_active
        return data
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return format_wall_clock(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def ok(data: Any = None, *, status: int = 200, message: Optional[str] = None):
    body: Dict[str, Any] = {"success": True, "data": to_jsonable(data)}
    if message:
        body["message"] = message
    return jsonify(body), status


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def field_int(data: Mapping[str, Any], name: str, *, required: bool = True) -> Optional[int]:
    value = data.get(name)
    if value is None or value == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def field_date(data: Mapping[str, Any], name: str, *, required: bool = True) -> Optional[date]:
    value = data.get(name)
    if value is None or value == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    return parse_iso_date(str(value))


def field_bool(data: Mapping[str, Any], name: str) -> Optional[bool]:
    value = data.get(name)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes"}
