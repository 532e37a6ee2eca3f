from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.enums import Role, UserType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, set_clause
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, email, name, first_name, middle_initial, last_name,
    password_hash, role, user_type, user_verified, is_active
"""

_NAME_COLUMNS = ("first_name", "middle_initial", "last_name")


def row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        name=row["name"],
        first_name=row.get("first_name"),
        middle_initial=row.get("middle_initial"),
        last_name=row.get("last_name"),
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        user_type=UserType(row["user_type"]),
        user_verified=bool(row.get("user_verified", False)),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def update_names(self, user_id: int, fields: Mapping[str, Any]) -> None:
        values = {k: v for k, v in fields.items() if k in _NAME_COLUMNS}
        if not values:
            return
        clause, params = set_clause(values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {clause} WHERE user_id=%s", tuple(params + [int(user_id)]))
