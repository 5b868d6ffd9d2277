from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import EmailVerificationToken
from .repository import VerificationTokenRepository


def _row_to_token(row: dict) -> EmailVerificationToken:
    return EmailVerificationToken(
        token_id=int(row["token_id"]),
        user_id=int(row["user_id"]),
        otp=str(row["otp"]),
        expires_at=row["expires_at"],
        used=bool(row.get("used")),
        created_at=row.get("created_at"),
    )


class MySQLVerificationTokenRepository(VerificationTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_token(self, *, user_id: int, otp: str, expires_at: datetime) -> EmailVerificationToken:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO email_verification_tokens(user_id, otp, expires_at, used)
                VALUES(%s,%s,%s,0)
                """,
                (user_id, otp, expires_at),
            )
            token_id = int(cur.lastrowid)
            cur.execute(
                """
                SELECT token_id, user_id, otp, expires_at, used, created_at
                FROM email_verification_tokens
                WHERE token_id=%s
                """,
                (token_id,),
            )
            return _row_to_token(fetchone(cur))

    def find_latest_unused(self, *, user_id: int, otp: str) -> Optional[EmailVerificationToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT token_id, user_id, otp, expires_at, used, created_at
                FROM email_verification_tokens
                WHERE user_id=%s AND otp=%s AND used=0
                ORDER BY created_at DESC, token_id DESC
                LIMIT 1
                """,
                (user_id, otp),
            )
            row = fetchone(cur)
            return _row_to_token(row) if row else None

    def mark_verified(self, *, user_id: int, token_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_email_verified=1 WHERE user_id=%s", (user_id,))
            cur.execute("UPDATE email_verification_tokens SET used=1 WHERE token_id=%s", (token_id,))
