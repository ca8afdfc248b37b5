from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..core.enums import JobCategory, TemplateState
from .model import ShiftTemplate


class ShiftTemplateRepository(Protocol):
    def get_by_id(self, template_id: int) -> Optional[ShiftTemplate]:
        raise NotImplementedError

    def find_by_name(self, job_category: JobCategory, shift_name: str) -> Optional[ShiftTemplate]:
        raise NotImplementedError

    def list_templates(
        self,
        *,
        job_category: Optional[JobCategory] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[ShiftTemplate]:
        """Ordered by job category, then start time."""

        raise NotImplementedError

    def list_active_for_job_category(self, job_category: JobCategory) -> Sequence[ShiftTemplate]:
        """Active templates of one category ordered by start time, then id."""

        raise NotImplementedError

    def create(
        self,
        *,
        job_category: JobCategory,
        shift_name: str,
        start_time: time,
        end_time: time,
        tolerance_minutes: int,
        required_staff_count: int,
    ) -> Optional[ShiftTemplate]:
        """Insert a template; returns None when (job_category, shift_name) is taken."""

        raise NotImplementedError

    def update(self, template: ShiftTemplate) -> Optional[ShiftTemplate]:
        """Persist editable fields and state; returns None when the new name collides."""

        raise NotImplementedError

    def set_state(self, template_id: int, state: TemplateState) -> bool:
        raise NotImplementedError
