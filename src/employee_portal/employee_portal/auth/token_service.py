from __future__ import annotations

import hashlib
import logging
import math
import uuid
from datetime import datetime, timedelta
from typing import Optional, Union

import jwt

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ACCESS_TOKEN_MINUTES, DEFAULT_JWT_ALGORITHM, DEFAULT_REFRESH_TOKEN_DAYS
from ..core.enums import Role
from ..core.exceptions import RefreshTokenRevokedOrUnknown, TokenExpired, TokenInvalid
from ..users.model import User
from .model import RotationResult, TokenClaims, TokenPair
from .repository import RefreshTokenRepository

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def hash_token(token: str) -> str:
    """Lookup key for a refresh token; the raw token is never stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenService:
    """Mints and verifies access/refresh JWTs and rotates access tokens.

    Access tokens are stateless. Refresh tokens are signed with a separate
    secret and mirrored by a RefreshRecord so they can be revoked.

    Expiry is checked against ``now`` (default: local clock) rather than
    PyJWT's internal clock, so callers and tests share one notion of time.
    """

    def __init__(
        self,
        refresh_tokens: RefreshTokenRepository,
        *,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = DEFAULT_JWT_ALGORITHM,
        access_lifetime: timedelta = timedelta(minutes=DEFAULT_ACCESS_TOKEN_MINUTES),
        refresh_lifetime: timedelta = timedelta(days=DEFAULT_REFRESH_TOKEN_DAYS),
        rotate_refresh_tokens: bool = False,
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets")
        self._refresh_tokens = refresh_tokens
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._algorithm = algorithm
        self._access_lifetime = access_lifetime
        self._refresh_lifetime = refresh_lifetime
        self._rotate_refresh_tokens = bool(rotate_refresh_tokens)

    @property
    def refresh_lifetime(self) -> timedelta:
        return self._refresh_lifetime

    def _encode(self, claims: TokenClaims, *, token_type: str, secret: str, now: datetime, lifetime: timedelta) -> str:
        payload = {
            "sub": str(claims.user_id),
            "email": claims.email,
            "role": claims.role.value,
            "type": token_type,
            "iat": int(now.timestamp()),
            # Whole seconds, rounded up: valid through now + lifetime.
            "exp": math.ceil((now + lifetime).timestamp()),
        }
        if token_type == REFRESH:
            payload["jti"] = uuid.uuid4().hex
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _decode(self, token: str, *, token_type: str, secret: str, now: datetime) -> TokenClaims:
        if not token:
            raise TokenInvalid()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalid() from e

        if payload.get("type") != token_type:
            raise TokenInvalid()
        if now.timestamp() > payload["exp"]:
            raise TokenExpired()

        try:
            return TokenClaims(user_id=int(payload["sub"]), email=str(payload["email"]), role=Role(payload["role"]))
        except (KeyError, ValueError) as e:
            raise TokenInvalid() from e

    def issue_access_token(self, identity: Union[User, TokenClaims], *, now: Optional[datetime] = None) -> str:
        claims = identity if isinstance(identity, TokenClaims) else TokenClaims.from_user(identity)
        return self._encode(
            claims,
            token_type=ACCESS,
            secret=self._access_secret,
            now=now or now_local(),
            lifetime=self._access_lifetime,
        )

    def issue_refresh_token(self, identity: Union[User, TokenClaims], *, now: Optional[datetime] = None) -> str:
        now = now or now_local()
        claims = identity if isinstance(identity, TokenClaims) else TokenClaims.from_user(identity)
        token = self._encode(
            claims,
            token_type=REFRESH,
            secret=self._refresh_secret,
            now=now,
            lifetime=self._refresh_lifetime,
        )
        self._refresh_tokens.create(
            token_hash=hash_token(token),
            user_id=claims.user_id,
            expires_at=now + self._refresh_lifetime,
            created_at=now,
        )
        return token

    def issue_token_pair(self, identity: Union[User, TokenClaims], *, now: Optional[datetime] = None) -> TokenPair:
        now = now or now_local()
        return TokenPair(
            access_token=self.issue_access_token(identity, now=now),
            refresh_token=self.issue_refresh_token(identity, now=now),
        )

    def verify_access_token(self, token: str, *, now: Optional[datetime] = None) -> TokenClaims:
        return self._decode(token, token_type=ACCESS, secret=self._access_secret, now=now or now_local())

    def rotate_access_token(self, refresh_token: str, *, now: Optional[datetime] = None) -> RotationResult:
        """Exchange a live refresh token for a new access token.

        With ``rotate_refresh_tokens`` the refresh token is replaced as well and
        the old one revoked; only one of several concurrent rotations wins.
        """
        now = now or now_local()
        claims = self._decode(refresh_token, token_type=REFRESH, secret=self._refresh_secret, now=now)

        token_hash = hash_token(refresh_token)
        record = self._refresh_tokens.get(token_hash)
        if not record or record.user_id != claims.user_id or not record.is_usable(now):
            raise RefreshTokenRevokedOrUnknown()

        access_token = self.issue_access_token(claims, now=now)
        if not self._rotate_refresh_tokens:
            logger.info("Access token refreshed for user %s", claims.user_id)
            return RotationResult(access_token=access_token)

        if not self._refresh_tokens.revoke(token_hash):
            raise RefreshTokenRevokedOrUnknown()
        new_refresh = self.issue_refresh_token(claims, now=now)
        logger.info("Token pair rotated for user %s", claims.user_id)
        return RotationResult(access_token=access_token, refresh_token=new_refresh)

    def revoke(self, refresh_token: str) -> None:
        if not refresh_token:
            return
        if self._refresh_tokens.revoke(hash_token(refresh_token)):
            logger.info("Refresh token revoked")

    def sweep_expired(self, *, now: Optional[datetime] = None) -> int:
        removed = self._refresh_tokens.delete_expired(now=now or now_local())
        logger.info("Swept %s expired or revoked refresh tokens", removed)
        return removed
