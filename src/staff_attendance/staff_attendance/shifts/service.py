from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Any, Optional, Sequence, Union

from ..common.datetime_utils import CivilOffset, parse_wall_clock
from ..common.validators import parse_job_category, require_int_range, require_max_length, require_non_empty
from ..core.constants import (
    DEFAULT_REQUIRED_STAFF,
    DEFAULT_TOLERANCE_MINUTES,
    MAX_REQUIRED_STAFF,
    MAX_SHIFT_NAME_LENGTH,
    MAX_TOLERANCE_MINUTES,
    MIN_REQUIRED_STAFF,
    MIN_TOLERANCE_MINUTES,
)
from ..core.enums import JobCategory, TemplateState
from ..core.exceptions import ConflictError, InvalidReferenceError
from ..schedules.repository import ScheduleRepository
from .model import ShiftTemplate
from .repository import ShiftTemplateRepository

logger = logging.getLogger(__name__)

WallClock = Union[str, time]


def _clean_name(shift_name: str) -> str:
    name = require_non_empty(shift_name, "Shift name")
    require_max_length(name, "Shift name", MAX_SHIFT_NAME_LENGTH)
    return name


def _duplicate_message(job_category: JobCategory, shift_name: str) -> str:
    return f'Shift template "{shift_name}" already exists for {job_category.value}'


class ShiftTemplateService:
    def __init__(
        self,
        shifts: ShiftTemplateRepository,
        schedules: ScheduleRepository,
        *,
        civil_offset: CivilOffset = CivilOffset(),
    ):
        self._shifts = shifts
        self._schedules = schedules
        self._civil_offset = civil_offset

    def create_template(
        self,
        *,
        job_category: Any,
        shift_name: str,
        start_time: WallClock,
        end_time: WallClock,
        tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
        required_staff_count: int = DEFAULT_REQUIRED_STAFF,
    ) -> ShiftTemplate:
        category = parse_job_category(job_category)
        name = _clean_name(shift_name)
        start = parse_wall_clock(start_time, "Start time")
        end = parse_wall_clock(end_time, "End time")
        tolerance = require_int_range(
            tolerance_minutes, "Tolerance minutes", MIN_TOLERANCE_MINUTES, MAX_TOLERANCE_MINUTES
        )
        required = require_int_range(
            required_staff_count, "Required staff count", MIN_REQUIRED_STAFF, MAX_REQUIRED_STAFF
        )

        if self._shifts.find_by_name(category, name):
            raise ConflictError(_duplicate_message(category, name))

        created = self._shifts.create(
            job_category=category,
            shift_name=name,
            start_time=start,
            end_time=end,
            tolerance_minutes=tolerance,
            required_staff_count=required,
        )
        if created is None:
            raise ConflictError(_duplicate_message(category, name))
        return created

    def update_template(
        self,
        template_id: int,
        *,
        shift_name: Optional[str] = None,
        start_time: Optional[WallClock] = None,
        end_time: Optional[WallClock] = None,
        tolerance_minutes: Optional[int] = None,
        required_staff_count: Optional[int] = None,
        is_active: Optional[bool] = None,
        today: Optional[date] = None,
    ) -> ShiftTemplate:
        """Edit fields and optionally retire or reactivate in one write.

        Every field and the retire check are validated before anything is saved.
        """
        current = self.get_template(template_id)

        changes: dict[str, Any] = {}
        if shift_name is not None:
            changes["shift_name"] = _clean_name(shift_name)
        if start_time is not None:
            changes["start_time"] = parse_wall_clock(start_time, "Start time")
        if end_time is not None:
            changes["end_time"] = parse_wall_clock(end_time, "End time")
        if tolerance_minutes is not None:
            changes["tolerance_minutes"] = require_int_range(
                tolerance_minutes, "Tolerance minutes", MIN_TOLERANCE_MINUTES, MAX_TOLERANCE_MINUTES
            )
        if required_staff_count is not None:
            changes["required_staff_count"] = require_int_range(
                required_staff_count, "Required staff count", MIN_REQUIRED_STAFF, MAX_REQUIRED_STAFF
            )
        if is_active is not None:
            state = TemplateState.from_flag(bool(is_active))
            if state != current.state:
                if state == TemplateState.RETIRED:
                    self._require_no_future_schedules(current, today)
                changes["state"] = state
        if not changes:
            return current

        updated = replace(current, **changes)
        if updated.shift_name != current.shift_name:
            clash = self._shifts.find_by_name(updated.job_category, updated.shift_name)
            if clash and clash.template_id != current.template_id:
                raise ConflictError(_duplicate_message(updated.job_category, updated.shift_name))

        saved = self._shifts.update(updated)
        if saved is None:
            raise ConflictError(_duplicate_message(updated.job_category, updated.shift_name))
        if saved.state != current.state:
            logger.info("Shift template %s (%s) set to %s", saved.template_id, saved.shift_name, saved.state.value)
        return saved

    def _require_no_future_schedules(self, template: ShiftTemplate, today: Optional[date]) -> None:
        today = today or self._civil_offset.today()
        future = self._schedules.count_for_template_after(template.template_id, after=today)
        if future > 0:
            raise ConflictError(f"Cannot retire template. {future} future schedule(s) exist.")

    def retire_template(self, template_id: int, *, today: Optional[date] = None) -> ShiftTemplate:
        """Soft-delete a template that has no schedules after today."""
        template = self.get_template(template_id)
        if not template.is_active:
            return template

        self._require_no_future_schedules(template, today)

        self._shifts.set_state(template.template_id, TemplateState.RETIRED)
        logger.info("Shift template %s (%s) retired", template.template_id, template.shift_name)
        return replace(template, state=TemplateState.RETIRED)

    def reactivate_template(self, template_id: int) -> ShiftTemplate:
        template = self.get_template(template_id)
        if template.is_active:
            return template

        self._shifts.set_state(template.template_id, TemplateState.ACTIVE)
        logger.info("Shift template %s (%s) reactivated", template.template_id, template.shift_name)
        return replace(template, state=TemplateState.ACTIVE)

    def get_template(self, template_id: int) -> ShiftTemplate:
        template = self._shifts.get_by_id(int(template_id))
        if template is None:
            raise InvalidReferenceError("Shift template not found")
        return template

    def list_templates(
        self,
        *,
        job_category: Any = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[ShiftTemplate]:
        category = parse_job_category(job_category) if job_category is not None else None
        return self._shifts.list_templates(job_category=category, is_active=is_active)

    def list_active_for_job_category(self, job_category: Any) -> Sequence[ShiftTemplate]:
        return self._shifts.list_active_for_job_category(parse_job_category(job_category))
