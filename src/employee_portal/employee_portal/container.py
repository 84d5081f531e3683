from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.delivery import CodeSender, build_code_sender
from .auth.middleware import SessionMiddleware
from .auth.mysql_otp_repository import MySQLOneTimeCodeRepository
from .auth.mysql_refresh_token_repository import MySQLRefreshTokenRepository
from .auth.otp_service import OTPAuthenticator
from .auth.repository import OneTimeCodeRepository, RefreshTokenRepository
from .auth.secret_generator import SecretGenerator
from .auth.service import AuthService
from .auth.token_service import TokenService
from .common.datetime_utils import parse_clock_time
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    codes_repo: OneTimeCodeRepository
    refresh_tokens_repo: RefreshTokenRepository
    attendance_repo: AttendanceRepository

    otp_authenticator: OTPAuthenticator
    token_service: TokenService
    session: SessionMiddleware
    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService


def _setting(settings: Any, name: str, default: Any) -> Any:
    return getattr(settings, name, default)


def wire_container(
    *,
    settings: Any,
    users_repo: UserRepository,
    codes_repo: OneTimeCodeRepository,
    refresh_tokens_repo: RefreshTokenRepository,
    attendance_repo: AttendanceRepository,
    code_sender: CodeSender,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of whatever repositories the caller provides."""

    secrets = SecretGenerator(hash_method=str(_setting(settings, "HASH_METHOD", constants.DEFAULT_HASH_METHOD)))
    otp_authenticator = OTPAuthenticator(
        users_repo,
        codes_repo,
        code_sender,
        secrets=secrets,
        expiry_minutes=int(_setting(settings, "OTP_EXPIRY_MINUTES", constants.DEFAULT_OTP_EXPIRY_MINUTES)),
        max_attempts=int(_setting(settings, "OTP_MAX_ATTEMPTS", constants.DEFAULT_OTP_MAX_ATTEMPTS)),
    )
    token_service = TokenService(
        refresh_tokens_repo,
        access_secret=str(getattr(settings, "JWT_ACCESS_SECRET")),
        refresh_secret=str(getattr(settings, "JWT_REFRESH_SECRET")),
        algorithm=str(_setting(settings, "JWT_ALGORITHM", constants.DEFAULT_JWT_ALGORITHM)),
        access_lifetime=timedelta(
            minutes=int(_setting(settings, "ACCESS_TOKEN_MINUTES", constants.DEFAULT_ACCESS_TOKEN_MINUTES))
        ),
        refresh_lifetime=timedelta(days=int(_setting(settings, "REFRESH_TOKEN_DAYS", constants.DEFAULT_REFRESH_TOKEN_DAYS))),
        rotate_refresh_tokens=bool(_setting(settings, "ROTATE_REFRESH_TOKENS", False)),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        strategy_factory=AttendanceStrategyFactory(),
        late_cutoff=parse_clock_time(str(_setting(settings, "LATE_CUTOFF", "09:30"))),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        codes_repo=codes_repo,
        refresh_tokens_repo=refresh_tokens_repo,
        attendance_repo=attendance_repo,
        otp_authenticator=otp_authenticator,
        token_service=token_service,
        session=SessionMiddleware(token_service),
        auth_service=AuthService(users_repo, otp_authenticator, token_service),
        user_service=UserService(users_repo),
        attendance_service=attendance_service,
    )


def build_container(*, settings: Any) -> Container:
    db_config = getattr(settings, "DB_CONFIG")
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        timeout_seconds=int(_setting(settings, "DB_TIMEOUT_SECONDS", constants.DEFAULT_DB_TIMEOUT_SECONDS)),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_container(
        settings=settings,
        users_repo=MySQLUserRepository(conn),
        codes_repo=MySQLOneTimeCodeRepository(conn),
        refresh_tokens_repo=MySQLRefreshTokenRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        code_sender=build_code_sender(settings),
        conn=conn,
    )
