from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Optional, Sequence

import mysql.connector

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PlannedAssignment, StaffSchedule
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, staff_id, shift_template_id, work_date, created_by, notes"


def _to_schedule(r: Dict[str, Any]) -> StaffSchedule:
    return StaffSchedule(
        schedule_id=int(r["schedule_id"]),
        staff_id=int(r["staff_id"]),
        shift_template_id=int(r["shift_template_id"]),
        work_date=r["work_date"],
        created_by=int(r["created_by"]),
        notes=r.get("notes"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[StaffSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff_schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def get_for_staff_and_date(self, *, staff_id: int, work_date: date) -> Optional[StaffSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM staff_schedules WHERE staff_id=%s AND work_date=%s",
                (int(staff_id), work_date),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def create(
        self,
        *,
        staff_id: int,
        shift_template_id: int,
        work_date: date,
        created_by: int,
        notes: Optional[str] = None,
    ) -> Optional[StaffSchedule]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO staff_schedules(staff_id, shift_template_id, work_date, created_by, notes)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(staff_id), int(shift_template_id), work_date, int(created_by), notes),
                )
                schedule_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            return None

        return StaffSchedule(
            schedule_id=schedule_id,
            staff_id=int(staff_id),
            shift_template_id=int(shift_template_id),
            work_date=work_date,
            created_by=int(created_by),
            notes=notes,
        )

    def insert_many_ignore_duplicates(
        self,
        assignments: Sequence[PlannedAssignment],
        *,
        created_by: int,
        notes: Optional[str] = None,
    ) -> int:
        if not assignments:
            return 0

        rows = [
            (int(a.staff_id), int(a.shift_template_id), a.work_date, int(created_by), notes)
            for a in assignments
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            # One transaction for the batch; the (staff_id, work_date) key drops duplicates.
            cur.executemany(
                """
                INSERT IGNORE INTO staff_schedules(staff_id, shift_template_id, work_date, created_by, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                rows,
            )
            return max(int(cur.rowcount), 0)

    def list_dates_for_staff(self, *, staff_id: int, start: date, end: date) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT work_date
                FROM staff_schedules
                WHERE staff_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(staff_id), start, end),
            )
            return [r["work_date"] for r in fetchall(cur)]

    def list_for_staff_in_range(
        self,
        *,
        staff_ids: Iterable[int],
        start: date,
        end: date,
    ) -> Sequence[StaffSchedule]:
        ids = [int(s) for s in staff_ids]
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM staff_schedules
                WHERE staff_id IN ({placeholders}) AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, staff_id ASC
                """,
                (*ids, start, end),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_schedules(
        self,
        *,
        staff_id: Optional[int] = None,
        shift_template_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[StaffSchedule]:
        clauses: list[str] = []
        params: list[object] = []
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if shift_template_id is not None:
            clauses.append("shift_template_id=%s")
            params.append(int(shift_template_id))
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM staff_schedules
                {where}
                ORDER BY work_date ASC, staff_id ASC
                """,
                tuple(params),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def count_for_template_after(self, template_id: int, *, after: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM staff_schedules WHERE shift_template_id=%s AND work_date > %s",
                (int(template_id), after),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_attendance(self, schedule_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def update(
        self,
        *,
        schedule_id: int,
        shift_template_id: int,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE staff_schedules SET shift_template_id=%s, notes=%s WHERE schedule_id=%s",
                (int(shift_template_id), notes, int(schedule_id)),
            )
            return cur.rowcount > 0

    def delete(self, schedule_id: int) -> bool:
        # The attendance foreign key refuses deletes of referenced schedules.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM staff_schedules WHERE schedule_id=%s", (int(schedule_id),))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError:
            return False
