from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from ..core.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class CodeSender(Protocol):
    """Hands a plaintext one-time code to the user out of band."""

    def send_code(self, email: str, code: str, *, expires_at: datetime, now: datetime) -> None:
        raise NotImplementedError


def _minutes_left(expires_at: datetime, now: datetime) -> int:
    return max(0, int((expires_at - now).total_seconds() // 60))


class SmtpCodeSender(CodeSender):
    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        from_email: str,
        from_name: str = "Employee Portal",
        use_tls: bool = True,
        timeout: int = 10,
    ):
        self._host = host
        self._port = int(port)
        self._username = username
        self._password = password
        self._from_email = from_email
        self._from_name = from_name
        self._use_tls = use_tls
        self._timeout = int(timeout)

    def _build_message(self, email: str, code: str, minutes: int) -> MIMEMultipart:
        message = MIMEMultipart()
        message["From"] = f'"{self._from_name}" <{self._from_email}>'
        message["To"] = email
        message["Subject"] = "Your Login OTP - Employee Portal"

        body = (
            f"Hello,\n\n"
            f"Your one-time login code is: {code}\n"
            f"It is valid for the next {minutes} minutes.\n\n"
            f"Never share this code with anyone. If you did not request it, "
            f"ignore this email or contact your administrator.\n\n"
            f"Regards,\n{self._from_name}"
        )
        message.attach(MIMEText(body, "plain"))
        return message

    def send_code(self, email: str, code: str, *, expires_at: datetime, now: datetime) -> None:
        message = self._build_message(email, code, _minutes_left(expires_at, now))
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls()
                if self._username:
                    server.login(self._username, self._password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send OTP email to %s: %s", email, e)
            raise DeliveryError() from e

        logger.info("OTP email sent to %s", email)


class ConsoleCodeSender(CodeSender):
    """Development sender: writes the code to the log instead of mailing it."""

    def send_code(self, email: str, code: str, *, expires_at: datetime, now: datetime) -> None:
        logger.info("OTP for %s: %s (valid %s minutes)", email, code, _minutes_left(expires_at, now))


def build_code_sender(settings) -> CodeSender:
    backend = str(getattr(settings, "EMAIL_BACKEND", "console")).lower()
    if backend == "console":
        return ConsoleCodeSender()
    if backend == "smtp":
        smtp = getattr(settings, "SMTP_CONFIG")
        return SmtpCodeSender(
            host=str(smtp["host"]),
            port=int(smtp.get("port", 587)),
            username=str(smtp.get("user", "")),
            password=str(smtp.get("password", "")),
            from_email=str(smtp["from_email"]),
            from_name=str(smtp.get("from_name", "Employee Portal")),
            use_tls=bool(smtp.get("use_tls", True)),
        )
    raise ValueError(f"Unsupported EMAIL_BACKEND: {backend!r}")
