from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import JobCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_db_datetime, to_utc_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    a.attendance_id, a.staff_id, a.schedule_id, a.clock_in_at, a.shift_start_time, a.late_minutes,
    a.clock_in_lat, a.clock_in_lon, a.clock_in_photo,
    a.clock_out_at, a.clock_out_lat, a.clock_out_lon, a.clock_out_photo
"""


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        schedule_id=int(r["schedule_id"]) if r.get("schedule_id") is not None else None,
        clock_in_at=to_utc_datetime(r["clock_in_at"]),
        shift_start_time=r["shift_start_time"],
        late_minutes=int(r["late_minutes"]) if r.get("late_minutes") is not None else None,
        clock_in_lat=float(r["clock_in_lat"]),
        clock_in_lon=float(r["clock_in_lon"]),
        clock_in_photo=r["clock_in_photo"],
        clock_out_at=to_utc_datetime(r.get("clock_out_at")),
        clock_out_lat=_opt_float(r.get("clock_out_lat")),
        clock_out_lon=_opt_float(r.get("clock_out_lon")),
        clock_out_photo=r.get("clock_out_photo"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_open_for_staff(self, staff_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.staff_id=%s AND a.clock_out_at IS NULL
                ORDER BY a.clock_in_at DESC
                LIMIT 1
                """,
                (int(staff_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Lock the worker's open rows so concurrent clock-ins serialize here;
                # the unique open_staff_id index catches whatever slips past.
                cur.execute(
                    "SELECT attendance_id FROM attendance WHERE staff_id=%s AND clock_out_at IS NULL FOR UPDATE",
                    (int(staff_id),),
                )
                if fetchall(cur):
                    return None

                cur.execute(
                    """
                    INSERT INTO attendance(
                        staff_id, schedule_id, clock_in_at, shift_start_time, late_minutes,
                        clock_in_lat, clock_in_lon, clock_in_photo
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(staff_id),
                        schedule_id,
                        to_db_datetime(clock_in_at),
                        shift_start_time,
                        late_minutes,
                        float(lat),
                        float(lon),
                        photo_ref,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            return None

        return AttendanceRecord(
            attendance_id=attendance_id,
            staff_id=int(staff_id),
            schedule_id=schedule_id,
            clock_in_at=to_utc_datetime(clock_in_at),
            shift_start_time=shift_start_time,
            late_minutes=late_minutes,
            clock_in_lat=float(lat),
            clock_in_lon=float(lon),
            clock_in_photo=photo_ref,
        )

    def close(
        self,
        *,
        attendance_id: int,
        clock_out_at: datetime,
        lat: float,
        lon: float,
        photo_ref: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out_at=%s, clock_out_lat=%s, clock_out_lon=%s, clock_out_photo=%s
                WHERE attendance_id=%s AND clock_out_at IS NULL
                """,
                (to_db_datetime(clock_out_at), float(lat), float(lon), photo_ref, int(attendance_id)),
            )
            return cur.rowcount == 1

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance a WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_recent_for_staff(self, staff_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.staff_id=%s
                ORDER BY a.clock_in_at DESC
                LIMIT %s
                """,
                (int(staff_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_attendance(
        self,
        *,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if staff_id is not None:
            clauses.append("a.staff_id=%s")
            params.append(int(staff_id))
        if start is not None:
            clauses.append("a.clock_in_at >= %s")
            params.append(to_db_datetime(start))
        if end is not None:
            clauses.append("a.clock_in_at < %s")
            params.append(to_db_datetime(end))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                {where}
                ORDER BY a.clock_in_at DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_open_for_job_category(self, job_category: JobCategory) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                JOIN users u ON u.user_id = a.staff_id
                WHERE a.clock_out_at IS NULL AND u.job_category=%s
                ORDER BY a.clock_in_at ASC
                """,
                (job_category.value,),
            )
            return [_to_record(r) for r in fetchall(cur)]
