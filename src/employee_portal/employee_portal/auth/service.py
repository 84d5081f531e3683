from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.retry import call_with_retry
from ..core.exceptions import IdentityInactive, IdentityNotFound
from ..users.repository import UserRepository
from .model import LoginResult, RotationResult
from .otp_service import OTPAuthenticator
from .token_service import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: passwordless login, token refresh and logout."""

    def __init__(self, users: UserRepository, otp: OTPAuthenticator, tokens: TokenService):
        self._users = users
        self._otp = otp
        self._tokens = tokens

    def initiate_login(self, email: str, *, now: Optional[datetime] = None) -> datetime:
        return self._otp.request_code(email, now=now)

    def resend_code(self, email: str, *, now: Optional[datetime] = None) -> datetime:
        return self._otp.resend_code(email, now=now)

    def verify_otp_and_login(self, email: str, code: str, *, now: Optional[datetime] = None) -> LoginResult:
        """Consume the code and open a session.

        Store steps retry individually: once the code is consumed, repeating
        the whole call would find it gone.
        """
        now = now or now_local()
        call_with_retry(self._otp.verify_code, email, code, now=now)

        # Re-check the identity in case it was deactivated after the code went out.
        user = call_with_retry(self._users.get_by_email, email)
        if not user:
            raise IdentityNotFound()
        if not user.is_active:
            raise IdentityInactive()

        tokens = call_with_retry(self._tokens.issue_token_pair, user, now=now)
        call_with_retry(self._users.touch_last_login, user.user_id, at=now)
        logger.info("User %s logged in", email)
        return LoginResult(user=call_with_retry(self._users.get_by_id, user.user_id) or user, tokens=tokens)

    def refresh(self, refresh_token: str, *, now: Optional[datetime] = None) -> RotationResult:
        return self._tokens.rotate_access_token(refresh_token, now=now)

    def logout(self, refresh_token: Optional[str]) -> None:
        if refresh_token:
            self._tokens.revoke(refresh_token)
        logger.info("User logged out")
