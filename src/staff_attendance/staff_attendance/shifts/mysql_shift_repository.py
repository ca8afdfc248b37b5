from __future__ import annotations

from datetime import time
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import JobCategory, TemplateState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftTemplate
from .repository import ShiftTemplateRepository

_COLUMNS = """
    template_id, job_category, shift_name, start_time, end_time,
    tolerance_minutes, required_staff_count, is_active
"""


def _to_template(r: Dict[str, Any]) -> ShiftTemplate:
    return ShiftTemplate(
        template_id=int(r["template_id"]),
        job_category=JobCategory(r["job_category"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        tolerance_minutes=int(r["tolerance_minutes"]),
        required_staff_count=int(r["required_staff_count"]),
        state=TemplateState.from_flag(bool(r["is_active"])),
    )


class MySQLShiftTemplateRepository(ShiftTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, template_id: int) -> Optional[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shift_templates WHERE template_id=%s", (int(template_id),))
            r = fetchone(cur)
            return _to_template(r) if r else None

    def find_by_name(self, job_category: JobCategory, shift_name: str) -> Optional[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shift_templates WHERE job_category=%s AND shift_name=%s",
                (job_category.value, shift_name),
            )
            r = fetchone(cur)
            return _to_template(r) if r else None

    def list_templates(
        self,
        *,
        job_category: Optional[JobCategory] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[ShiftTemplate]:
        clauses: list[str] = []
        params: list[object] = []
        if job_category is not None:
            clauses.append("job_category=%s")
            params.append(job_category.value)
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shift_templates
                {where}
                ORDER BY job_category ASC, start_time ASC, template_id ASC
                """,
                tuple(params),
            )
            return [_to_template(r) for r in fetchall(cur)]

    def list_active_for_job_category(self, job_category: JobCategory) -> Sequence[ShiftTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shift_templates
                WHERE job_category=%s AND is_active=1
                ORDER BY start_time ASC, template_id ASC
                """,
                (job_category.value,),
            )
            return [_to_template(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        job_category: JobCategory,
        shift_name: str,
        start_time: time,
        end_time: time,
        tolerance_minutes: int,
        required_staff_count: int,
    ) -> Optional[ShiftTemplate]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO shift_templates(
                        job_category, shift_name, start_time, end_time,
                        tolerance_minutes, required_staff_count, is_active
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,1)
                    """,
                    (
                        job_category.value,
                        shift_name,
                        start_time,
                        end_time,
                        int(tolerance_minutes),
                        int(required_staff_count),
                    ),
                )
                template_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            return None

        return ShiftTemplate(
            template_id=template_id,
            job_category=job_category,
            shift_name=shift_name,
            start_time=start_time,
            end_time=end_time,
            tolerance_minutes=int(tolerance_minutes),
            required_staff_count=int(required_staff_count),
            state=TemplateState.ACTIVE,
        )

    def update(self, template: ShiftTemplate) -> Optional[ShiftTemplate]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE shift_templates
                    SET shift_name=%s, start_time=%s, end_time=%s,
                        tolerance_minutes=%s, required_staff_count=%s, is_active=%s
                    WHERE template_id=%s
                    """,
                    (
                        template.shift_name,
                        template.start_time,
                        template.end_time,
                        int(template.tolerance_minutes),
                        int(template.required_staff_count),
                        1 if template.is_active else 0,
                        int(template.template_id),
                    ),
                )
        except mysql.connector.IntegrityError:
            return None
        return template

    def set_state(self, template_id: int, state: TemplateState) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE shift_templates SET is_active=%s WHERE template_id=%s",
                (1 if state == TemplateState.ACTIVE else 0, int(template_id)),
            )
            return cur.rowcount > 0
