from __future__ import annotations

from typing import Optional

from mysql.connector import Error as MySQLError

from ..core.enums import UserRole
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_name, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, email, phone, password_hash, role,
    is_email_verified, is_profile_complete, is_active, created_at
"""

_KEY_FIELDS = {"uq_users_email": "email", "uq_users_phone": "phone"}


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        phone=row["phone"],
        password_hash=row["password_hash"],
        role=UserRole(row["role"]),
        is_email_verified=bool(row.get("is_email_verified")),
        is_profile_complete=bool(row.get("is_profile_complete")),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_phone(self, phone: str) -> Optional[User]:
        return self._get_one("phone", phone)

    def create_user(self, *, email: str, phone: str, password_hash: str, role: UserRole) -> User:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(email, phone, password_hash, role, is_email_verified, is_profile_complete, is_active)
                    VALUES(%s,%s,%s,%s,0,0,1)
                    """,
                    (email, phone, password_hash, role.value),
                )
                user_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
                return _row_to_user(fetchone(cur))
        except MySQLError as e:
            if is_duplicate_key(e):
                field = _KEY_FIELDS.get(duplicate_key_name(e) or "", "field")
                raise ConflictError(f"A user with this {field} already exists") from e
            raise
