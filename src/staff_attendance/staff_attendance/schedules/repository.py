from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import PlannedAssignment, StaffSchedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[StaffSchedule]:
        raise NotImplementedError

    def get_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[StaffSchedule]:
        raise NotImplementedError

    def create(
        self,
        *,
        staff_id: int,
        shift_template_id: int,
        work_date: date,
        created_by: int,
        notes: Optional[str] = None,
    ) -> Optional[StaffSchedule]:
        """Insert one schedule; returns None when the worker already has that day."""

        raise NotImplementedError

    def insert_many_ignore_duplicates(
        self,
        assignments: Sequence[PlannedAssignment],
        *,
        created_by: int,
        notes: Optional[str] = None,
    ) -> int:
        """Insert in one statement, skipping (staff, day) pairs that exist. Returns rows created."""

        raise NotImplementedError

    def list_dates_for_staff(self, *, staff_id: int, start: date, end: date) -> Sequence[date]:
        raise NotImplementedError

    def list_for_staff_in_range(
        self,
        *,
        staff_ids: Iterable[int],
        start: date,
        end: date,
    ) -> Sequence[StaffSchedule]:
        raise NotImplementedError

    def list_schedules(
        self,
        *,
        staff_id: Optional[int] = None,
        shift_template_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[StaffSchedule]:
        """Ordered by work date, then staff id."""

        raise NotImplementedError

    def count_for_template_after(self, template_id: int, *, after: date) -> int:
        """Schedules of a template dated strictly after ``after``."""

        raise NotImplementedError

    def count_attendance(self, schedule_id: int) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        schedule_id: int,
        shift_template_id: int,
        notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError
