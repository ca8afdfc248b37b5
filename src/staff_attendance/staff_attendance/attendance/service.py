from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Sequence, Union

from ..common.datetime_utils import CivilOffset, as_utc, format_wall_clock, now_utc, parse_wall_clock
from ..common.validators import parse_job_category, require_date_order, require_float_range, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ConflictError, InvalidReferenceError, OutOfRangeError
from ..geofence.service import GeofenceService
from ..schedules.repository import ScheduleRepository
from ..shifts.model import ShiftTemplate
from ..shifts.repository import ShiftTemplateRepository
from ..users.repository import UserRepository
from .lateness import compute_lateness
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

NO_ACTIVE_SHIFT = "No active shift found. Clock in first."
ALREADY_ON_DUTY = "You already have an active shift. Please clock out first."


class AttendanceService:
    """Clock-in/clock-out session of a worker.

    A worker is on duty while they have an open attendance row (no clock-out).
    Both transitions check the geofence before touching any state.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        shifts: ShiftTemplateRepository,
        users: UserRepository,
        geofence: GeofenceService,
        *,
        civil_offset: CivilOffset = CivilOffset(),
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._shifts = shifts
        self._users = users
        self._geofence = geofence
        self._civil_offset = civil_offset

    def _check_location(self, staff_id: int, lat: Any, lon: Any) -> tuple[float, float]:
        lat = require_float_range(lat, "Latitude", -90, 90)
        lon = require_float_range(lon, "Longitude", -180, 180)
        try:
            self._geofence.validate(lat, lon)
        except OutOfRangeError as e:
            logger.info("Location rejected for staff %s: %.0fm from center", staff_id, e.distance_meters)
            raise
        return lat, lon

    def _scheduled_shift(self, staff_id: int, schedule_id: Optional[int]) -> Optional[ShiftTemplate]:
        if schedule_id is None:
            return None

        schedule = self._schedules.get_by_id(int(schedule_id))
        if schedule is None or schedule.staff_id != int(staff_id):
            raise InvalidReferenceError("Schedule not found or does not belong to this staff")

        template = self._shifts.get_by_id(schedule.shift_template_id)
        if template is None:
            raise InvalidReferenceError("Shift template not found")
        return template

    def clock_in(
        self,
        *,
        staff_id: int,
        shift_start_time: Union[str, time],
        lat: Any,
        lon: Any,
        photo_ref: str,
        schedule_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        shift_start = format_wall_clock(parse_wall_clock(shift_start_time, "Shift start time"))
        photo_ref = require_non_empty(photo_ref, "Photo")

        if not self._users.exists(int(staff_id)):
            raise InvalidReferenceError("Staff not found")

        lat, lon = self._check_location(staff_id, lat, lon)

        clock_in_at = as_utc(now) if now else now_utc()
        late_minutes = None
        template = self._scheduled_shift(staff_id, schedule_id)
        if template is not None:
            # Scheduled start overrides the requested one.
            shift_start = format_wall_clock(template.start_time)
            late_minutes = compute_lateness(
                template.start_time, template.tolerance_minutes, clock_in_at, self._civil_offset
            )

        if self._attendance.get_open_for_staff(int(staff_id)) is not None:
            raise ConflictError(ALREADY_ON_DUTY)

        record = self._attendance.create_clock_in(
            staff_id=int(staff_id),
            schedule_id=int(schedule_id) if schedule_id is not None else None,
            clock_in_at=clock_in_at,
            shift_start_time=shift_start,
            late_minutes=late_minutes,
            lat=lat,
            lon=lon,
            photo_ref=photo_ref,
        )
        if record is None:
            raise ConflictError(ALREADY_ON_DUTY)

        logger.info(
            "Staff %s clocked in at %s (shift %s, late=%s)",
            staff_id,
            clock_in_at.isoformat(),
            shift_start,
            late_minutes,
        )
        return record

    def clock_out(
        self,
        *,
        staff_id: int,
        lat: Any,
        lon: Any,
        photo_ref: str,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        photo_ref = require_non_empty(photo_ref, "Photo")
        lat, lon = self._check_location(staff_id, lat, lon)

        record = self._attendance.get_open_for_staff(int(staff_id))
        if record is None:
            raise ConflictError(NO_ACTIVE_SHIFT)

        clock_out_at = as_utc(now) if now else now_utc()
        closed = self._attendance.close(
            attendance_id=record.attendance_id,
            clock_out_at=clock_out_at,
            lat=lat,
            lon=lon,
            photo_ref=photo_ref,
        )
        if not closed:
            raise ConflictError(NO_ACTIVE_SHIFT)

        logger.info("Staff %s clocked out at %s", staff_id, clock_out_at.isoformat())
        return AttendanceRecord(
            attendance_id=record.attendance_id,
            staff_id=record.staff_id,
            schedule_id=record.schedule_id,
            clock_in_at=record.clock_in_at,
            shift_start_time=record.shift_start_time,
            late_minutes=record.late_minutes,
            clock_in_lat=record.clock_in_lat,
            clock_in_lon=record.clock_in_lon,
            clock_in_photo=record.clock_in_photo,
            clock_out_at=clock_out_at,
            clock_out_lat=lat,
            clock_out_lon=lon,
            clock_out_photo=photo_ref,
        )

    def get_active_shift(self, staff_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_open_for_staff(int(staff_id))

    def get_history(self, staff_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_recent_for_staff(int(staff_id), max(int(limit), 1))

    def list_attendance(
        self,
        *,
        staff_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Attendance whose clock-in falls within the civil days [start_date, end_date]."""
        if start_date and end_date:
            require_date_order(start_date, end_date)
        start = self._civil_offset.to_instant(datetime.combine(start_date, time())) if start_date else None
        end = (
            self._civil_offset.to_instant(datetime.combine(end_date + timedelta(days=1), time()))
            if end_date
            else None
        )
        return self._attendance.list_attendance(staff_id=staff_id, start=start, end=end)

    def get_on_duty(self, job_category: Any) -> Sequence[AttendanceRecord]:
        return self._attendance.list_open_for_job_category(parse_job_category(job_category))
