from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import ApprovalFilter, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone, where_clause
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, name, email, phone, password_hash, role, is_approved,
    registration_date, approved_date, approved_by, qr_code, qr_code_data, event_id, created_at
"""


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_approved=bool(row.get("is_approved")),
        registration_date=row.get("registration_date"),
        approved_date=row.get("approved_date"),
        approved_by=row.get("approved_by"),
        qr_code=row.get("qr_code"),
        qr_code_data=row.get("qr_code_data"),
        event_id=row.get("event_id"),
        created_at=row.get("created_at"),
    )


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email.lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_ids(self, user_ids: Iterable[int]) -> Dict[int, User]:
        ids = sorted({int(i) for i in user_ids if i is not None})
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id IN ({placeholders})", tuple(ids))
            return {u.user_id: u for u in map(_to_user, fetchall(cur))}

    def create_user(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        password_hash: str,
        role: Role,
        is_approved: bool,
        registration_date: datetime,
        approved_date: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, phone, password_hash, role, is_approved, registration_date, approved_date, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, email.lower(), phone, password_hash, role.value, int(is_approved), registration_date, approved_date, registration_date),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, name: Optional[str] = None, phone: Optional[str] = None) -> bool:
        assignments = []
        params: list = []
        if name is not None:
            assignments.append("name=%s")
            params.append(name)
        if phone is not None:
            assignments.append("phone=%s")
            params.append(phone)
        if not assignments:
            return self.get_by_id(user_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {', '.join(assignments)} WHERE user_id=%s", (*params, int(user_id)))
            # rowcount is 0 when values are unchanged, so re-check existence.
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE user_id=%s", (int(user_id),))
            return fetch_count(cur) > 0

    def mark_approved(self, user_id: int, *, approved_by: Optional[int], approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET is_approved=1, approved_date=%s, approved_by=%s WHERE user_id=%s",
                (approved_at, approved_by, int(user_id)),
            )
            return cur.rowcount > 0

    def promote_to_admin(self, user_id: int, *, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET role=%s, is_approved=1, approved_date=%s WHERE user_id=%s",
                (Role.ADMIN.value, approved_at, int(user_id)),
            )
            return cur.rowcount > 0

    def set_qr(self, user_id: int, *, qr_code: str, qr_code_data: str, event_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET qr_code=%s, qr_code_data=%s, event_id=%s WHERE user_id=%s",
                (qr_code, qr_code_data, event_id, int(user_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def search(self, *, search: str, approval: ApprovalFilter, page: PageRequest) -> Page[User]:
        conditions: list[str] = []
        params: list = []
        if search:
            conditions.append("(name LIKE %s OR email LIKE %s OR phone LIKE %s)")
            params.extend([_like(search)] * 3)
        if approval == ApprovalFilter.APPROVED:
            conditions.append("is_approved=1")
        elif approval == ApprovalFilter.PENDING:
            conditions.append("is_approved=0")
        where = where_clause(conditions)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM users {where}", tuple(params))
            total = fetch_count(cur)
            cur.execute(
                f"""
                SELECT {_USER_COLUMNS} FROM users {where}
                ORDER BY created_at DESC, user_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            return Page(items=[_to_user(r) for r in fetchall(cur)], total=total, request=page)

    def count(
        self,
        *,
        role: Optional[Role] = None,
        is_approved: Optional[bool] = None,
        created_since: Optional[datetime] = None,
    ) -> int:
        conditions: list[str] = []
        params: list = []
        if role is not None:
            conditions.append("role=%s")
            params.append(role.value)
        if is_approved is not None:
            conditions.append("is_approved=%s")
            params.append(int(is_approved))
        if created_since is not None:
            conditions.append("created_at>=%s")
            params.append(created_since)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM users {where_clause(conditions)}", tuple(params))
            return fetch_count(cur)

    def first_admin(self) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s ORDER BY user_id LIMIT 1",
                (Role.ADMIN.value,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC, user_id DESC")
            return [_to_user(r) for r in fetchall(cur)]
