from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles as stored in the directory."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"
    USER = "USER"


class JobCategory(str, Enum):
    """Fixed classification of a worker's job."""

    SECURITY = "SECURITY"
    CLEANING = "CLEANING"
    GARDENING = "GARDENING"
    MAINTENANCE = "MAINTENANCE"
    OTHER = "OTHER"


class TemplateState(str, Enum):
    """Lifecycle of a shift template. Retired templates are never hard-deleted."""

    ACTIVE = "ACTIVE"
    RETIRED = "RETIRED"

    @classmethod
    def from_flag(cls, is_active: bool) -> "TemplateState":
        return cls.ACTIVE if is_active else cls.RETIRED
