from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, duplicate_key_name, fetchall, fetchone, is_duplicate_key
from .model import User, UserFilter
from .repository import UserRepository

_COLUMNS = """
    user_id, first_name, last_name, email, password_hash, role, department,
    employee_id, assigned_admin_id, device_id, is_active, join_date
"""

# User field name -> column, for partial updates
_UPDATABLE = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "department": "department",
    "employee_id": "employee_id",
    "role": "role",
    "is_active": "is_active",
    "assigned_admin_id": "assigned_admin_id",
    "device_id": "device_id",
}


def _row_to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        department=r["department"],
        employee_id=r["employee_id"],
        assigned_admin_id=int(r["assigned_admin_id"]) if r.get("assigned_admin_id") is not None else None,
        device_id=r.get("device_id"),
        is_active=bool(r.get("is_active", True)),
        join_date=r.get("join_date"),
    )


def _conflict_from(exc: Exception) -> ConflictError:
    key = duplicate_key_name(exc)
    if key == "uq_users_employee_id":
        return ConflictError("Employee ID already exists")
    return ConflictError("Email already registered")


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_employee_id(self, employee_id: str) -> Optional[User]:
        return self._get_one("employee_id", employee_id)

    def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        role: Role,
        department: str,
        employee_id: str,
        assigned_admin_id: Optional[int] = None,
        device_id: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(first_name, last_name, email, password_hash, role, department,
                                      employee_id, assigned_admin_id, device_id, is_active)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                    """,
                    (first_name, last_name, email, password_hash, role.value, department,
                     employee_id, assigned_admin_id, device_id),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise _conflict_from(e) from e
            raise

    def update_user(self, user_id: int, changes: dict) -> bool:
        sets: list[str] = []
        params: list[object] = []
        for field, value in changes.items():
            column = _UPDATABLE.get(field)
            if not column:
                raise ValueError(f"Unsupported user field: {field}")
            if isinstance(value, Role):
                value = value.value
            elif isinstance(value, bool):
                value = int(value)
            sets.append(f"{column}=%s")
            params.append(value)
        if not sets:
            return True

        params.append(int(user_id))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE user_id=%s", tuple(params))
                return cur.rowcount > 0
        except Exception as e:
            if is_duplicate_key(e):
                raise _conflict_from(e) from e
            raise

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (int(is_active), int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_users(self, filters: UserFilter) -> Sequence[User]:
        clauses: list[str] = []
        params: list[object] = []
        if filters.assigned_admin_id is not None:
            clauses.append("assigned_admin_id=%s")
            params.append(int(filters.assigned_admin_id))
        if filters.department is not None:
            clauses.append("department=%s")
            params.append(filters.department)
        if filters.role is not None:
            clauses.append("role=%s")
            params.append(filters.role.value)
        if filters.is_active is not None:
            clauses.append("is_active=%s")
            params.append(int(filters.is_active))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users {build_where(clauses)} ORDER BY user_id DESC", tuple(params))
            return [_row_to_user(r) for r in fetchall(cur)]

    def count_users(self, *, role: Optional[Role] = None, department: Optional[str] = None) -> int:
        clauses: list[str] = []
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if department is not None:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM users {build_where(clauses)}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
