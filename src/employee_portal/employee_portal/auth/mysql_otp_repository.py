from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OneTimeCode
from .repository import OneTimeCodeRepository


class MySQLOneTimeCodeRepository(OneTimeCodeRepository):
    """otp_codes has email as PRIMARY KEY, so there is never more than one live row per email."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replace(self, *, email: str, code_hash: str, created_at: datetime, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO otp_codes(email, code_hash, created_at, expires_at, attempts)
                VALUES(%s,%s,%s,%s,0)
                ON DUPLICATE KEY UPDATE
                    code_hash=VALUES(code_hash),
                    created_at=VALUES(created_at),
                    expires_at=VALUES(expires_at),
                    attempts=0
                """,
                (email, code_hash, created_at, expires_at),
            )

    def get_live(self, email: str, *, now: datetime) -> Optional[OneTimeCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT email, code_hash, created_at, expires_at, attempts
                FROM otp_codes
                WHERE email=%s AND expires_at >= %s
                """,
                (email, now),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OneTimeCode(
                email=r["email"],
                code_hash=r["code_hash"],
                created_at=r["created_at"],
                expires_at=r["expires_at"],
                attempts=int(r["attempts"]),
            )

    def increment_attempts(self, *, email: str, code_hash: str, max_attempts: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE otp_codes
                SET attempts = attempts + 1
                WHERE email=%s AND code_hash=%s AND attempts < %s
                """,
                (email, code_hash, int(max_attempts)),
            )
            return cur.rowcount > 0

    def delete(self, *, email: str, code_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM otp_codes WHERE email=%s AND code_hash=%s", (email, code_hash))
            return cur.rowcount > 0

    def delete_expired(self, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM otp_codes WHERE expires_at < %s", (now,))
            return int(cur.rowcount)
