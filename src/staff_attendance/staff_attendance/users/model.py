from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import JobCategory, Role


@dataclass(frozen=True)
class User:
    """Read-only view of a directory user (worker or administrator).

    Note: The directory itself is owned elsewhere; this package never writes it.
    """

    user_id: int
    full_name: str
    role: Role
    job_category: Optional[JobCategory]
    is_active: bool = True

    @property
    def is_staff(self) -> bool:
        return self.role == Role.STAFF
