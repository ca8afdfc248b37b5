from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import JobCategory, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _to_user(row: Dict[str, Any]) -> User:
    job_category = row.get("job_category")
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        role=Role(row["role"]),
        job_category=JobCategory(job_category) if job_category else None,
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, role, job_category, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def exists(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s LIMIT 1", (int(user_id),))
            return fetchone(cur) is not None

    def list_active_staff(self, job_category: JobCategory) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, role, job_category, is_active
                FROM users
                WHERE role=%s AND job_category=%s AND is_active=1
                ORDER BY full_name ASC, user_id ASC
                """,
                (Role.STAFF.value, job_category.value),
            )
            return [_to_user(r) for r in fetchall(cur)]
