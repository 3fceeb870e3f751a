from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import UserProfile
from .repository import UserRepository

_COLUMNS = "username, full_name, password, role, job_title, photo_url, required_uniform, assigned_store_ids"


def _row_to_user(row: dict) -> UserProfile:
    return UserProfile(
        username=row["username"],
        full_name=row["full_name"],
        password=row["password"],
        role=Role(row["role"]),
        job_title=row.get("job_title") or "",
        photo_url=row.get("photo_url") or "",
        required_uniform=row.get("required_uniform"),
        assigned_store_ids=tuple(load_json(row.get("assigned_store_ids"), [])),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_username(self, username: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY full_name")
            return [_row_to_user(r) for r in fetchall(cur)]

    def create(self, user: UserProfile) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO users({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.username,
                    user.full_name,
                    user.password,
                    user.role.value,
                    user.job_title,
                    user.photo_url,
                    user.required_uniform,
                    dump_json(list(user.assigned_store_ids)),
                ),
            )

    def update(self, user: UserProfile) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET full_name=%s, password=%s, role=%s, job_title=%s, photo_url=%s,
                    required_uniform=%s, assigned_store_ids=%s
                WHERE username=%s
                """,
                (
                    user.full_name,
                    user.password,
                    user.role.value,
                    user.job_title,
                    user.photo_url,
                    user.required_uniform,
                    dump_json(list(user.assigned_store_ids)),
                    user.username,
                ),
            )
            return cur.rowcount > 0
