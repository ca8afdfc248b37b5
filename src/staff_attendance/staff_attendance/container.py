from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import CivilOffset
from .core.constants import DEFAULT_GEOFENCE_CACHE_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .geofence.config_cache import CachedGeofenceConfig
from .geofence.model import GeofenceConfig
from .geofence.mysql_system_config_repository import MySQLSystemConfigRepository
from .geofence.service import GeofenceService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .shifts.mysql_shift_repository import MySQLShiftTemplateRepository
from .shifts.service import ShiftTemplateService
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    civil_offset: CivilOffset

    users_repo: MySQLUserRepository
    shifts_repo: MySQLShiftTemplateRepository
    schedules_repo: MySQLScheduleRepository
    attendance_repo: MySQLAttendanceRepository
    system_config_repo: MySQLSystemConfigRepository

    geofence_service: GeofenceService
    shift_template_service: ShiftTemplateService
    schedule_service: ScheduleService
    attendance_service: AttendanceService


def build_container(
    *,
    db_config: Mapping[str, Any],
    geofence_default: Mapping[str, Any],
    civil_utc_offset_minutes: int = 0,
    geofence_cache_ttl_seconds: Optional[float] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    civil_offset = CivilOffset(int(civil_utc_offset_minutes))

    users_repo = MySQLUserRepository(conn)
    shifts_repo = MySQLShiftTemplateRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    system_config_repo = MySQLSystemConfigRepository(conn)

    geofence_cache = CachedGeofenceConfig(
        system_config_repo,
        GeofenceConfig.from_mapping(geofence_default),
        ttl_seconds=(
            DEFAULT_GEOFENCE_CACHE_TTL_SECONDS if geofence_cache_ttl_seconds is None else geofence_cache_ttl_seconds
        ),
    )
    geofence_service = GeofenceService(system_config_repo, geofence_cache)
    shift_template_service = ShiftTemplateService(shifts_repo, schedules_repo, civil_offset=civil_offset)
    schedule_service = ScheduleService(schedules_repo, shifts_repo, users_repo, civil_offset=civil_offset)
    attendance_service = AttendanceService(
        attendance_repo,
        schedules_repo,
        shifts_repo,
        users_repo,
        geofence_service,
        civil_offset=civil_offset,
    )

    return Container(
        conn=conn,
        civil_offset=civil_offset,
        users_repo=users_repo,
        shifts_repo=shifts_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        system_config_repo=system_config_repo,
        geofence_service=geofence_service,
        shift_template_service=shift_template_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
    )
