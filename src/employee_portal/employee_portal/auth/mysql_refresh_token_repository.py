from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import RefreshRecord
from .repository import RefreshTokenRepository


class MySQLRefreshTokenRepository(RefreshTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, token_hash: str, user_id: int, expires_at: datetime, created_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO refresh_tokens(token_hash, user_id, expires_at, revoked, created_at)
                VALUES(%s,%s,%s,0,%s)
                """,
                (token_hash, user_id, expires_at, created_at),
            )

    def get(self, token_hash: str) -> Optional[RefreshRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT token_hash, user_id, expires_at, revoked, created_at
                FROM refresh_tokens
                WHERE token_hash=%s
                """,
                (token_hash,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return RefreshRecord(
                token_hash=r["token_hash"],
                user_id=int(r["user_id"]),
                expires_at=r["expires_at"],
                revoked=bool(r["revoked"]),
                created_at=r.get("created_at"),
            )

    def revoke(self, token_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE refresh_tokens SET revoked=1 WHERE token_hash=%s AND revoked=0",
                (token_hash,),
            )
            return cur.rowcount > 0

    def delete_expired(self, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM refresh_tokens WHERE expires_at < %s OR revoked=1", (now,))
            return int(cur.rowcount)
