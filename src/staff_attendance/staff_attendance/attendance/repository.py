from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import JobCategory
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_open_for_staff(self, staff_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        staff_id: int,
        schedule_id: Optional[int],
        clock_in_at: datetime,
        shift_start_time: str,
        late_minutes: Optional[int],
        lat: float,
        lon: float,
        photo_ref: str,
    ) -> Optional[AttendanceRecord]:
        """Insert an open row; returns None when the worker already has one."""

        raise NotImplementedError

    def close(
        self,
        *,
        attendance_id: int,
        clock_out_at: datetime,
        lat: float,
        lon: float,
        photo_ref: str,
    ) -> bool:
        """Set clock-out only if the row is still open."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_recent_for_staff(self, staff_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_attendance(
        self,
        *,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest clock-in first; ``start``/``end`` bound clock_in_at (end exclusive)."""

        raise NotImplementedError

    def list_open_for_job_category(self, job_category: JobCategory) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
