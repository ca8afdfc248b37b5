from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import JobCategory
from .model import User


class UserRepository(Protocol):
    """Directory of workers and administrators.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def exists(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_active_staff(self, job_category: JobCategory) -> Sequence[User]:
        """Active STAFF users of a job category, ordered by name."""

        raise NotImplementedError
