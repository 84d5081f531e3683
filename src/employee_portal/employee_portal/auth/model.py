from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..users.model import User


@dataclass(frozen=True)
class OneTimeCode:
    """A live login code. At most one per email."""

    email: str
    code_hash: str
    created_at: datetime
    expires_at: datetime
    attempts: int = 0

@dataclass(frozen=True)
class RefreshRecord:
    """Persisted side of a refresh token (keyed by the token's SHA-256)."""

    token_hash: str
    user_id: int
    expires_at: datetime
    revoked: bool = False
    created_at: Optional[datetime] = None

    def is_usable(self, now: datetime) -> bool:
        return not self.revoked and now <= self.expires_at


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims embedded in every signed token."""

    user_id: int
    email: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "TokenClaims":
        return cls(user_id=user.user_id, email=user.email, role=user.role)

@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class RotationResult:
    """Outcome of a refresh; ``refresh_token`` is set only when it was replaced."""

    access_token: str
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class LoginResult:
    user: User
    tokens: TokenPair
