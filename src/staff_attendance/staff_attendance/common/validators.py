from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.enums import JobCategory
from ..core.exceptions import ValidationError

def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()

def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters")
    return value

def require_int_range(value: int, field_name: str, min_value: int, max_value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    if value < min_value or value > max_value:
        raise ValidationError(f"{field_name} must be between {min_value} and {max_value}")
    return value

def require_float_range(value: float, field_name: str, min_value: float, max_value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number != number or number < min_value or number > max_value:
        raise ValidationError(f"{field_name} must be between {min_value:g} and {max_value:g}")
    return number

def require_date_order(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("Start date must be before or equal to end date")

def clean_optional_text(value: Optional[str], field_name: str = "Text") -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    value = value.strip() if value else None
    return value or None

def parse_job_category(value: Any) -> JobCategory:
    if isinstance(value, JobCategory):
        return value
    try:
        return JobCategory(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(c.value for c in JobCategory)
        raise ValidationError(f"Invalid job category {value!r}. Use one of: {allowed}")
