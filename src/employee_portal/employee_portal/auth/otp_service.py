from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_OTP_EXPIRY_MINUTES, DEFAULT_OTP_MAX_ATTEMPTS
from ..core.exceptions import (
    AttemptsExceeded,
    CodeNotFound,
    IdentityInactive,
    IdentityNotFound,
    InvalidCode,
)
from ..users.repository import UserRepository
from .delivery import CodeSender
from .repository import OneTimeCodeRepository
from .secret_generator import SecretGenerator

logger = logging.getLogger(__name__)


class OTPAuthenticator:
    """Use case: issue, deliver, verify and consume one-time login codes.

    The per-email state lives entirely in the code repository; this class
    keeps nothing between calls.
    """

    def __init__(
        self,
        users: UserRepository,
        codes: OneTimeCodeRepository,
        sender: CodeSender,
        *,
        secrets: Optional[SecretGenerator] = None,
        expiry_minutes: int = DEFAULT_OTP_EXPIRY_MINUTES,
        max_attempts: int = DEFAULT_OTP_MAX_ATTEMPTS,
    ):
        self._users = users
        self._codes = codes
        self._sender = sender
        self._secrets = secrets or SecretGenerator()
        self._window = timedelta(minutes=int(expiry_minutes))
        self._max_attempts = int(max_attempts)

    def request_code(self, email: str, *, now: Optional[datetime] = None) -> datetime:
        """Issue a fresh code for ``email`` and return its expiry.

        Replaces any live code for the same email (attempt counter included).
        """
        now = now or now_local()

        user = self._users.get_by_email(email)
        if not user:
            raise IdentityNotFound()
        if not user.is_active:
            raise IdentityInactive()

        code = self._secrets.generate_code()
        expires_at = now + self._window
        self._codes.replace(
            email=email,
            code_hash=self._secrets.hash(code),
            created_at=now,
            expires_at=expires_at,
        )

        self._sender.send_code(email, code, expires_at=expires_at, now=now)
        logger.info("OTP issued for %s (expires %s)", email, expires_at.isoformat())
        return expires_at

    def resend_code(self, email: str, *, now: Optional[datetime] = None) -> datetime:
        return self.request_code(email, now=now)

    def verify_code(self, email: str, submitted_code: str, *, now: Optional[datetime] = None) -> None:
        """Consume the live code for ``email`` if ``submitted_code`` matches.

        Returns normally exactly once per issued code; every other outcome raises.
        """
        now = now or now_local()

        record = self._codes.get_live(email, now=now)
        if not record:
            raise CodeNotFound()

        if record.attempts >= self._max_attempts:
            self._codes.delete(email=email, code_hash=record.code_hash)
            logger.warning("OTP attempts exceeded for %s", email)
            raise AttemptsExceeded()

        if not self._secrets.verify(submitted_code, record.code_hash):
            self._codes.increment_attempts(
                email=email,
                code_hash=record.code_hash,
                max_attempts=self._max_attempts,
            )
            logger.warning("Invalid OTP for %s (attempt %s)", email, record.attempts + 1)
            raise InvalidCode()

        # A concurrent verification may have consumed it between read and delete.
        if not self._codes.delete(email=email, code_hash=record.code_hash):
            raise CodeNotFound()

    def sweep_expired(self, *, now: Optional[datetime] = None) -> int:
        removed = self._codes.delete_expired(now=now or now_local())
        logger.info("Swept %s expired OTP codes", removed)
        return removed
