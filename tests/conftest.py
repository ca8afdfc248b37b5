from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timezone
from typing import Optional

import pytest

from src.staff_attendance.staff_attendance.attendance.model import AttendanceRecord
from src.staff_attendance.staff_attendance.attendance.service import AttendanceService
from src.staff_attendance.staff_attendance.common.datetime_utils import CivilOffset
from src.staff_attendance.staff_attendance.core.enums import JobCategory, Role, TemplateState
from src.staff_attendance.staff_attendance.geofence.config_cache import CachedGeofenceConfig
from src.staff_attendance.staff_attendance.geofence.model import GeofenceConfig
from src.staff_attendance.staff_attendance.geofence.service import GeofenceService
from src.staff_attendance.staff_attendance.schedules.model import StaffSchedule
from src.staff_attendance.staff_attendance.schedules.service import ScheduleService
from src.staff_attendance.staff_attendance.shifts.model import ShiftTemplate
from src.staff_attendance.staff_attendance.shifts.service import ShiftTemplateService
from src.staff_attendance.staff_attendance.users.model import User

# UTC+7
CIVIL = CivilOffset(420)
CENTER = GeofenceConfig(center_lat=-6.2, center_lon=106.816666, radius_meters=100)
ADMIN_ID = 1


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}

    def add(self, user: User) -> User:
        self.users[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def exists(self, user_id: int) -> bool:
        return user_id in self.users

    def list_active_staff(self, job_category: JobCategory):
        staff = [
            u
            for u in self.users.values()
            if u.role == Role.STAFF and u.job_category == job_category and u.is_active
        ]
        return sorted(staff, key=lambda u: (u.full_name, u.user_id))


class InMemoryShiftTemplates:
    def __init__(self):
        self.templates: dict[int, ShiftTemplate] = {}
        self._id = 0

    def get_by_id(self, template_id: int) -> Optional[ShiftTemplate]:
        return self.templates.get(template_id)

    def find_by_name(self, job_category, shift_name):
        for t in self.templates.values():
            if t.job_category == job_category and t.shift_name == shift_name:
                return t
        return None

    def list_templates(self, *, job_category=None, is_active=None):
        items = [
            t
            for t in self.templates.values()
            if (job_category is None or t.job_category == job_category)
            and (is_active is None or t.is_active == is_active)
        ]
        return sorted(items, key=lambda t: (t.job_category.value, t.start_time, t.template_id))

    def list_active_for_job_category(self, job_category):
        items = [t for t in self.templates.values() if t.job_category == job_category and t.is_active]
        return sorted(items, key=lambda t: (t.start_time, t.template_id))

    def create(self, *, job_category, shift_name, start_time, end_time, tolerance_minutes, required_staff_count):
        if self.find_by_name(job_category, shift_name):
            return None
        self._id += 1
        template = ShiftTemplate(
            template_id=self._id,
            job_category=job_category,
            shift_name=shift_name,
            start_time=start_time,
            end_time=end_time,
            tolerance_minutes=tolerance_minutes,
            required_staff_count=required_staff_count,
        )
        self.templates[self._id] = template
        return template

    def update(self, template: ShiftTemplate):
        clash = self.find_by_name(template.job_category, template.shift_name)
        if clash and clash.template_id != template.template_id:
            return None
        self.templates[template.template_id] = template
        return template

    def set_state(self, template_id: int, state: TemplateState) -> bool:
        if template_id not in self.templates:
            return False
        self.templates[template_id] = replace(self.templates[template_id], state=state)
        return True


class InMemorySchedules:
    def __init__(self):
        self.rows: dict[int, StaffSchedule] = {}
        self.attendance_counts: dict[int, int] = {}
        self.bulk_calls = 0
        self._id = 0

    def _taken(self, staff_id: int, work_date: date) -> bool:
        return any(s.staff_id == staff_id and s.work_date == work_date for s in self.rows.values())

    def get_by_id(self, schedule_id: int):
        return self.rows.get(schedule_id)

    def get_for_staff_and_date(self, *, staff_id: int, work_date: date):
        for s in self.rows.values():
            if s.staff_id == staff_id and s.work_date == work_date:
                return s
        return None

    def create(self, *, staff_id, shift_template_id, work_date, created_by, notes=None):
        if self._taken(staff_id, work_date):
            return None
        self._id += 1
        schedule = StaffSchedule(
            schedule_id=self._id,
            staff_id=staff_id,
            shift_template_id=shift_template_id,
            work_date=work_date,
            created_by=created_by,
            notes=notes,
        )
        self.rows[self._id] = schedule
        return schedule

    def insert_many_ignore_duplicates(self, assignments, *, created_by, notes=None) -> int:
        self.bulk_calls += 1
        created = 0
        for a in assignments:
            if self.create(
                staff_id=a.staff_id,
                shift_template_id=a.shift_template_id,
                work_date=a.work_date,
                created_by=created_by,
                notes=notes,
            ):
                created += 1
        return created

    def list_dates_for_staff(self, *, staff_id, start, end):
        return sorted(s.work_date for s in self.rows.values() if s.staff_id == staff_id and start <= s.work_date <= end)

    def list_for_staff_in_range(self, *, staff_ids, start, end):
        ids = set(staff_ids)
        return [s for s in self.rows.values() if s.staff_id in ids and start <= s.work_date <= end]

    def list_schedules(self, *, staff_id=None, shift_template_id=None, start=None, end=None):
        items = [
            s
            for s in self.rows.values()
            if (staff_id is None or s.staff_id == staff_id)
            and (shift_template_id is None or s.shift_template_id == shift_template_id)
            and (start is None or s.work_date >= start)
            and (end is None or s.work_date <= end)
        ]
        return sorted(items, key=lambda s: (s.work_date, s.staff_id))

    def count_for_template_after(self, template_id, *, after):
        return sum(1 for s in self.rows.values() if s.shift_template_id == template_id and s.work_date > after)

    def count_attendance(self, schedule_id):
        return self.attendance_counts.get(schedule_id, 0)

    def update(self, *, schedule_id, shift_template_id, notes):
        if schedule_id not in self.rows:
            return False
        self.rows[schedule_id] = replace(self.rows[schedule_id], shift_template_id=shift_template_id, notes=notes)
        return True

    def delete(self, schedule_id):
        return self.rows.pop(schedule_id, None) is not None


class InMemoryAttendance:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self.users = users
        self.rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_open_for_staff(self, staff_id: int):
        for r in self.rows.values():
            if r.staff_id == staff_id and r.is_open:
                return r
        return None

    def create_clock_in(self, *, staff_id, schedule_id, clock_in_at, shift_start_time, late_minutes, lat, lon, photo_ref):
        if self.get_open_for_staff(staff_id):
            return None
        self._id += 1
        record = AttendanceRecord(
            attendance_id=self._id,
            staff_id=staff_id,
            schedule_id=schedule_id,
            clock_in_at=clock_in_at,
            shift_start_time=shift_start_time,
            late_minutes=late_minutes,
            clock_in_lat=lat,
            clock_in_lon=lon,
            clock_in_photo=photo_ref,
        )
        self.rows[self._id] = record
        return record

    def close(self, *, attendance_id, clock_out_at, lat, lon, photo_ref) -> bool:
        record = self.rows.get(attendance_id)
        if record is None or not record.is_open:
            return False
        self.rows[attendance_id] = replace(
            record,
            clock_out_at=clock_out_at,
            clock_out_lat=lat,
            clock_out_lon=lon,
            clock_out_photo=photo_ref,
        )
        return True

    def get_by_id(self, attendance_id):
        return self.rows.get(attendance_id)

    def list_recent_for_staff(self, staff_id, limit):
        items = [r for r in self.rows.values() if r.staff_id == staff_id]
        items.sort(key=lambda r: r.clock_in_at, reverse=True)
        return items[:limit]

    def list_attendance(self, *, staff_id=None, start=None, end=None):
        items = [
            r
            for r in self.rows.values()
            if (staff_id is None or r.staff_id == staff_id)
            and (start is None or r.clock_in_at >= start)
            and (end is None or r.clock_in_at < end)
        ]
        return sorted(items, key=lambda r: r.clock_in_at, reverse=True)

    def list_open_for_job_category(self, job_category):
        def category_of(staff_id):
            user = self.users.get_by_id(staff_id) if self.users else None
            return user.job_category if user else None

        return [r for r in self.rows.values() if r.is_open and category_of(r.staff_id) == job_category]


class InMemorySystemConfig:
    def __init__(self, stored: Optional[GeofenceConfig] = None):
        self.stored = stored
        self.reads = 0

    def get_geofence(self):
        self.reads += 1
        return self.stored

    def set_geofence(self, config, *, updated_by=None):
        self.stored = config


def staff(user_id: int, name: str, job_category: JobCategory = JobCategory.SECURITY, **kwargs) -> User:
    return User(user_id=user_id, full_name=name, role=Role.STAFF, job_category=job_category, **kwargs)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def users() -> InMemoryUsers:
    repo = InMemoryUsers()
    repo.add(User(user_id=ADMIN_ID, full_name="Admin", role=Role.ADMIN, job_category=None))
    return repo


@pytest.fixture
def shifts() -> InMemoryShiftTemplates:
    return InMemoryShiftTemplates()


@pytest.fixture
def schedules() -> InMemorySchedules:
    return InMemorySchedules()


@pytest.fixture
def attendance(users) -> InMemoryAttendance:
    return InMemoryAttendance(users)


@pytest.fixture
def system_config() -> InMemorySystemConfig:
    return InMemorySystemConfig()


@pytest.fixture
def geofence_service(system_config) -> GeofenceService:
    return GeofenceService(system_config, CachedGeofenceConfig(system_config, CENTER, ttl_seconds=300))


@pytest.fixture
def shift_service(shifts, schedules) -> ShiftTemplateService:
    return ShiftTemplateService(shifts, schedules, civil_offset=CIVIL)


@pytest.fixture
def schedule_service(schedules, shifts, users) -> ScheduleService:
    return ScheduleService(schedules, shifts, users, civil_offset=CIVIL)


@pytest.fixture
def attendance_service(attendance, schedules, shifts, users, geofence_service) -> AttendanceService:
    return AttendanceService(attendance, schedules, shifts, users, geofence_service, civil_offset=CIVIL)


@pytest.fixture
def morning(shifts) -> ShiftTemplate:
    return shifts.create(
        job_category=JobCategory.SECURITY,
        shift_name="Morning",
        start_time=time(6, 0),
        end_time=time(14, 0),
        tolerance_minutes=15,
        required_staff_count=1,
    )
