from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import OneTimeCode, RefreshRecord


class OneTimeCodeRepository(Protocol):
    """Store for live one-time codes, keyed by email.

    Implementations must make ``replace`` an atomic upsert and ``delete`` a
    compare-and-delete on (email, code_hash).
    """

    def replace(self, *, email: str, code_hash: str, created_at: datetime, expires_at: datetime) -> None:
        raise NotImplementedError

    def get_live(self, email: str, *, now: datetime) -> Optional[OneTimeCode]:
        raise NotImplementedError

    def increment_attempts(self, *, email: str, code_hash: str, max_attempts: int) -> bool:
        raise NotImplementedError

    def delete(self, *, email: str, code_hash: str) -> bool:
        raise NotImplementedError

    def delete_expired(self, *, now: datetime) -> int:
        raise NotImplementedError


class RefreshTokenRepository(Protocol):
    def create(self, *, token_hash: str, user_id: int, expires_at: datetime, created_at: datetime) -> None:
        raise NotImplementedError

    def get(self, token_hash: str) -> Optional[RefreshRecord]:
        raise NotImplementedError

    def revoke(self, token_hash: str) -> bool:
        """Mark revoked. Returns True only if this call changed the record."""

        raise NotImplementedError

    def delete_expired(self, *, now: datetime) -> int:
        raise NotImplementedError
