from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import JobCategory, TemplateState


@dataclass(frozen=True)
class ShiftTemplate:
    """A named daily working window for one job category."""

    template_id: int
    job_category: JobCategory
    shift_name: str
    start_time: time
    end_time: time
    tolerance_minutes: int
    required_staff_count: int
    state: TemplateState = TemplateState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == TemplateState.ACTIVE
