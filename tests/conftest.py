from __future__ import annotations

import importlib
import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.employee_portal.employee_portal.attendance.model import AttendanceRecord
from src.employee_portal.employee_portal.auth.model import OneTimeCode, RefreshRecord
from src.employee_portal.employee_portal.auth.otp_service import OTPAuthenticator
from src.employee_portal.employee_portal.auth.secret_generator import SecretGenerator
from src.employee_portal.employee_portal.auth.token_service import TokenService
from src.employee_portal.employee_portal.container import wire_container
from src.employee_portal.employee_portal.core.enums import AttendanceStatus, Role
from src.employee_portal.employee_portal.main import create_app
from src.employee_portal.employee_portal.users.model import User

ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"
FAST_HASH = "pbkdf2:sha256:1000"


class InMemoryUsers:
    def __init__(self, users):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.email == email), None)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(user, is_active=is_active)
        return True

    def touch_last_login(self, user_id: int, *, at: datetime) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(user, last_login=at)
        return True


class InMemoryCodes:
    """Mirrors otp_codes: email primary key, conditional update/delete."""

    def __init__(self):
        self._lock = threading.Lock()
        self.rows: dict[str, OneTimeCode] = {}

    def replace(self, *, email: str, code_hash: str, created_at: datetime, expires_at: datetime) -> None:
        with self._lock:
            self.rows[email] = OneTimeCode(
                email=email,
                code_hash=code_hash,
                created_at=created_at,
                expires_at=expires_at,
                attempts=0,
            )

    def get_live(self, email: str, *, now: datetime) -> Optional[OneTimeCode]:
        with self._lock:
            row = self.rows.get(email)
            if row and row.expires_at >= now:
                return row
            return None

    def increment_attempts(self, *, email: str, code_hash: str, max_attempts: int) -> bool:
        with self._lock:
            row = self.rows.get(email)
            if not row or row.code_hash != code_hash or row.attempts >= max_attempts:
                return False
            self.rows[email] = replace(row, attempts=row.attempts + 1)
            return True

    def delete(self, *, email: str, code_hash: str) -> bool:
        with self._lock:
            row = self.rows.get(email)
            if not row or row.code_hash != code_hash:
                return False
            del self.rows[email]
            return True

    def delete_expired(self, *, now: datetime) -> int:
        with self._lock:
            expired = [email for email, row in self.rows.items() if row.expires_at < now]
            for email in expired:
                del self.rows[email]
            return len(expired)


class InMemoryRefreshTokens:
    def __init__(self):
        self._lock = threading.Lock()
        self.rows: dict[str, RefreshRecord] = {}

    def create(self, *, token_hash: str, user_id: int, expires_at: datetime, created_at: datetime) -> None:
        with self._lock:
            if token_hash in self.rows:
                raise KeyError(token_hash)
            self.rows[token_hash] = RefreshRecord(
                token_hash=token_hash,
                user_id=user_id,
                expires_at=expires_at,
                created_at=created_at,
            )

    def get(self, token_hash: str) -> Optional[RefreshRecord]:
        return self.rows.get(token_hash)

    def revoke(self, token_hash: str) -> bool:
        with self._lock:
            row = self.rows.get(token_hash)
            if not row or row.revoked:
                return False
            self.rows[token_hash] = replace(row, revoked=True)
            return True

    def delete_expired(self, *, now: datetime) -> int:
        with self._lock:
            stale = [h for h, row in self.rows.items() if row.revoked or row.expires_at < now]
            for h in stale:
                del self.rows[h]
            return len(stale)


class InMemoryAttendance:
    """Mirrors attendance_records: unique (user_id, work_date)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> Optional[AttendanceRecord]:
        with self._lock:
            if (user_id, work_date) in self._by_user_date:
                return None
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                user_id=user_id,
                work_date=work_date,
                check_in_time=check_in_time,
                status=status,
            )
            self._by_user_date[(user_id, work_date)] = rec
            return rec

    def complete_checkout(self, *, attendance_id: int, check_out_time: datetime, work_hours: float) -> bool:
        with self._lock:
            for k, v in self._by_user_date.items():
                if v.attendance_id == attendance_id:
                    if v.check_out_time is not None:
                        return False
                    self._by_user_date[k] = replace(v, check_out_time=check_out_time, work_hours=work_hours)
                    return True
            return False

    def count(self) -> int:
        return len(self._by_user_date)


class RecordingSender:
    """Delivery stub that remembers every code it was handed."""

    def __init__(self):
        self.sent: list[tuple[str, str, datetime]] = []

    def send_code(self, email: str, code: str, *, expires_at: datetime, now: datetime) -> None:
        self.sent.append((email, code, expires_at))

    def last_code(self, email: str) -> str:
        return [code for to, code, _ in self.sent if to == email][-1]


def make_users() -> list[User]:
    return [
        User(user_id=1, email="a@co.com", full_name="Alice Employee", role=Role.EMPLOYEE, employee_id="EMP-1"),
        User(user_id=2, email="admin@co.com", full_name="Ada Admin", role=Role.ADMIN, employee_id="EMP-2"),
        User(user_id=3, email="gone@co.com", full_name="Gone User", role=Role.EMPLOYEE, is_active=False),
        User(user_id=4, email="hr@co.com", full_name="Hank HR", role=Role.HR, employee_id="EMP-4"),
    ]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(make_users())


@pytest.fixture
def codes_repo() -> InMemoryCodes:
    return InMemoryCodes()


@pytest.fixture
def refresh_repo() -> InMemoryRefreshTokens:
    return InMemoryRefreshTokens()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def secrets() -> SecretGenerator:
    return SecretGenerator(hash_method=FAST_HASH)


@pytest.fixture
def otp(users_repo, codes_repo, sender, secrets) -> OTPAuthenticator:
    return OTPAuthenticator(users_repo, codes_repo, sender, secrets=secrets, expiry_minutes=10, max_attempts=3)


@pytest.fixture
def tokens(refresh_repo) -> TokenService:
    return TokenService(refresh_repo, access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def container(users_repo, codes_repo, refresh_repo, attendance_repo, sender):
    return wire_container(
        settings=importlib.import_module("config.testing"),
        users_repo=users_repo,
        codes_repo=codes_repo,
        refresh_tokens_repo=refresh_repo,
        attendance_repo=attendance_repo,
        code_sender=sender,
    )


@pytest.fixture
def app(container):
    return create_app("config.testing", container=container)


@pytest.fixture
def client(app):
    # Cookies are passed explicitly so the tests see exactly what is sent.
    return app.test_client(use_cookies=False)
