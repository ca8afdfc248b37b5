from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Union

from ..common.datetime_utils import CivilOffset, date_range, normalize_work_date
from ..common.validators import (
    clean_optional_text,
    parse_job_category,
    require_date_order,
    require_max_length,
)
from ..core.constants import MAX_CONSECUTIVE_SAME_SHIFT_DAYS, MAX_NOTES_LENGTH
from ..core.exceptions import CapacityError, ConflictError, InvalidReferenceError, ValidationError
from ..shifts.model import ShiftTemplate
from ..shifts.repository import ShiftTemplateRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import AutoGenerateReport, BulkCreateResult, BulkDeleteResult, PlannedAssignment, StaffSchedule
from .repository import ScheduleRepository
from .rotation import AssignmentIndex, plan_rotation

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        shifts: ShiftTemplateRepository,
        users: UserRepository,
        *,
        civil_offset: CivilOffset = CivilOffset(),
    ):
        self._schedules = schedules
        self._shifts = shifts
        self._users = users
        self._civil_offset = civil_offset

    def _day(self, value: DateLike) -> date:
        return normalize_work_date(value, self._civil_offset)

    def _require_staff(self, staff_id: int) -> User:
        staff = self._users.get_by_id(int(staff_id))
        if staff is None:
            raise InvalidReferenceError("Staff not found")
        if not staff.is_staff:
            raise InvalidReferenceError("User must have STAFF role")
        return staff

    def _require_creator(self, created_by: int) -> None:
        if not self._users.exists(int(created_by)):
            raise InvalidReferenceError(f"User with ID {created_by} not found")

    def _require_template_for(self, staff: User, shift_template_id: int) -> ShiftTemplate:
        template = self._shifts.get_by_id(int(shift_template_id))
        if template is None:
            raise InvalidReferenceError("Shift template not found")
        if staff.job_category != template.job_category:
            staff_category = staff.job_category.value if staff.job_category else "none"
            raise InvalidReferenceError(
                f"Shift template job category ({template.job_category.value}) "
                f"doesn't match staff job category ({staff_category})"
            )
        if not template.is_active:
            raise ValidationError(f'Shift template "{template.shift_name}" is retired')
        return template

    def _clean_notes(self, notes: Optional[str]) -> Optional[str]:
        return require_max_length(clean_optional_text(notes, "Notes"), "Notes", MAX_NOTES_LENGTH)

    def create_schedule(
        self,
        *,
        staff_id: int,
        shift_template_id: int,
        work_date: DateLike,
        created_by: int,
        notes: Optional[str] = None,
    ) -> StaffSchedule:
        notes = self._clean_notes(notes)
        staff = self._require_staff(staff_id)
        self._require_creator(created_by)
        template = self._require_template_for(staff, shift_template_id)
        day = self._day(work_date)

        if self._schedules.get_for_staff_and_date(staff_id=staff.user_id, work_date=day):
            raise ConflictError("Staff already has a schedule for this date")

        created = self._schedules.create(
            staff_id=staff.user_id,
            shift_template_id=template.template_id,
            work_date=day,
            created_by=int(created_by),
            notes=notes,
        )
        if created is None:
            raise ConflictError("Staff already has a schedule for this date")
        return created

    def bulk_create_schedules(
        self,
        *,
        staff_id: int,
        shift_template_id: int,
        start_date: DateLike,
        end_date: DateLike,
        created_by: int,
        notes: Optional[str] = None,
    ) -> BulkCreateResult:
        notes = self._clean_notes(notes)
        staff = self._require_staff(staff_id)
        self._require_creator(created_by)
        template = self._require_template_for(staff, shift_template_id)

        start, end = self._day(start_date), self._day(end_date)
        require_date_order(start, end)

        days = list(date_range(start, end))
        taken = set(self._schedules.list_dates_for_staff(staff_id=staff.user_id, start=start, end=end))
        pending = [PlannedAssignment(staff.user_id, template.template_id, d) for d in days if d not in taken]

        created = self._schedules.insert_many_ignore_duplicates(pending, created_by=int(created_by), notes=notes)
        skipped_dates = tuple(d for d in days if d in taken)

        logger.info(
            "Bulk schedule for staff %s (%s..%s): %d created, %d skipped",
            staff.user_id,
            start,
            end,
            created,
            len(days) - created,
        )
        return BulkCreateResult(
            created=created,
            skipped=len(days) - created,
            total=len(days),
            skipped_dates=skipped_dates,
        )

    def auto_generate_schedules(
        self,
        *,
        job_category: Any,
        start_date: DateLike,
        end_date: DateLike,
        created_by: int,
    ) -> AutoGenerateReport:
        """Fill every active shift of a job category for each day in the range.

        Additive only: existing schedules are kept and count toward headcount.
        Days where a shift cannot be fully staffed are reported as shortfalls.
        """
        category = parse_job_category(job_category)
        start, end = self._day(start_date), self._day(end_date)
        require_date_order(start, end)
        self._require_creator(created_by)

        roster = list(self._users.list_active_staff(category))
        if not roster:
            raise CapacityError(f"No staff found with job category {category.value}")

        templates = sorted(
            self._shifts.list_active_for_job_category(category),
            key=lambda t: (t.start_time, t.template_id),
        )
        if not templates:
            raise ValidationError(f"No active shift templates found for {category.value}")

        required_per_day = sum(t.required_staff_count for t in templates)
        if required_per_day > len(roster):
            breakdown = ", ".join(f"{t.shift_name}: {t.required_staff_count}" for t in templates)
            raise CapacityError(
                f"Insufficient staff: {required_per_day} required per day ({breakdown}), "
                f"only {len(roster)} available"
            )
        if required_per_day == len(roster):
            logger.warning(
                "%s roster (%d) exactly matches daily requirement; nobody is off and rotation is limited",
                category.value,
                len(roster),
            )

        roster_ids = [u.user_id for u in roster]
        lookback_start = start - timedelta(days=MAX_CONSECUTIVE_SAME_SHIFT_DAYS)
        existing = self._schedules.list_for_staff_in_range(staff_ids=roster_ids, start=lookback_start, end=end)
        index = AssignmentIndex.from_schedules(existing)

        dates = list(date_range(start, end))
        plan = plan_rotation(roster_ids, templates, dates, index)

        created = self._schedules.insert_many_ignore_duplicates(plan.assignments, created_by=int(created_by))
        skipped = len(plan.assignments) - created

        for s in plan.shortfalls:
            logger.warning(
                "Shortfall on %s for %s: %d of %d staff assigned",
                s.work_date,
                s.shift_name,
                s.assigned,
                s.required,
            )
        logger.info(
            "Auto-generated %s schedules %s..%s: %d created, %d skipped, %d shortfall(s)",
            category.value,
            start,
            end,
            created,
            skipped,
            len(plan.shortfalls),
        )

        return AutoGenerateReport(
            created=created,
            skipped=skipped,
            dates=len(dates),
            staff_count=len(roster),
            shifts_per_day=len(templates),
            required_per_day=required_per_day,
            shortfalls=plan.shortfalls,
        )

    def update_schedule(
        self,
        schedule_id: int,
        *,
        shift_template_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> StaffSchedule:
        schedule = self.get_schedule(schedule_id)
        template_id = schedule.shift_template_id
        if shift_template_id is not None and int(shift_template_id) != schedule.shift_template_id:
            staff = self._users.get_by_id(schedule.staff_id)
            if staff is None:
                raise InvalidReferenceError("Staff not found")
            template_id = self._require_template_for(staff, shift_template_id).template_id

        new_notes = self._clean_notes(notes) if notes is not None else schedule.notes
        self._schedules.update(schedule_id=schedule.schedule_id, shift_template_id=template_id, notes=new_notes)
        return StaffSchedule(
            schedule_id=schedule.schedule_id,
            staff_id=schedule.staff_id,
            shift_template_id=template_id,
            work_date=schedule.work_date,
            created_by=schedule.created_by,
            notes=new_notes,
        )

    def delete_schedule(self, schedule_id: int) -> None:
        schedule = self.get_schedule(schedule_id)
        if self._schedules.count_attendance(schedule.schedule_id) > 0:
            raise ConflictError("Cannot delete schedule. Attendance record exists.")
        if not self._schedules.delete(schedule.schedule_id):
            raise ConflictError("Cannot delete schedule. Attendance record exists.")

    def bulk_delete_schedules(self, schedule_ids: Iterable[int]) -> BulkDeleteResult:
        """Delete what can be deleted; schedules with attendance are reported, not removed."""
        deleted = 0
        blocked: List[int] = []
        for schedule_id in dict.fromkeys(int(i) for i in schedule_ids):
            if self._schedules.count_attendance(schedule_id) > 0:
                blocked.append(schedule_id)
                continue
            if self._schedules.delete(schedule_id):
                deleted += 1
            elif self._schedules.get_by_id(schedule_id) is not None:
                blocked.append(schedule_id)
        return BulkDeleteResult(deleted=deleted, blocked=tuple(blocked))

    def get_schedule(self, schedule_id: int) -> StaffSchedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if schedule is None:
            raise InvalidReferenceError("Schedule not found")
        return schedule

    def list_schedules(
        self,
        *,
        staff_id: Optional[int] = None,
        shift_template_id: Optional[int] = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> Sequence[StaffSchedule]:
        start = self._day(start_date) if start_date is not None else None
        end = self._day(end_date) if end_date is not None else None
        if start is not None and end is not None:
            require_date_order(start, end)
        return self._schedules.list_schedules(
            staff_id=staff_id,
            shift_template_id=shift_template_id,
            start=start,
            end=end,
        )

    def get_schedule_for_staff_on_date(self, staff_id: int, work_date: DateLike) -> Optional[StaffSchedule]:
        return self._schedules.get_for_staff_and_date(staff_id=int(staff_id), work_date=self._day(work_date))
