from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from src.employee_portal.employee_portal.core.exceptions import (
    AttemptsExceeded,
    CodeNotFound,
    IdentityInactive,
    IdentityNotFound,
    InvalidCode,
)


def _wrong(code: str) -> str:
    return "000000" if code != "000000" else "111111"


def test_request_code_stores_hash_and_delivers_plaintext(otp, codes_repo, sender, secrets, fixed_now):
    expires_at = otp.request_code("a@co.com", now=fixed_now)

    assert expires_at == fixed_now + timedelta(minutes=10)
    row = codes_repo.rows["a@co.com"]
    code = sender.last_code("a@co.com")
    assert row.attempts == 0
    assert row.code_hash != code
    assert secrets.verify(code, row.code_hash)


def test_request_code_unknown_email(otp, sender, fixed_now):
    with pytest.raises(IdentityNotFound):
        otp.request_code("nobody@co.com", now=fixed_now)
    assert sender.sent == []


def test_request_code_inactive_identity(otp, codes_repo, fixed_now):
    with pytest.raises(IdentityInactive):
        otp.request_code("gone@co.com", now=fixed_now)
    assert "gone@co.com" not in codes_repo.rows


def test_verify_consumes_code_exactly_once(otp, codes_repo, sender, fixed_now):
    otp.request_code("a@co.com", now=fixed_now)
    code = sender.last_code("a@co.com")

    otp.verify_code("a@co.com", code, now=fixed_now + timedelta(minutes=1))
    assert "a@co.com" not in codes_repo.rows

    with pytest.raises(CodeNotFound):
        otp.verify_code("a@co.com", code, now=fixed_now + timedelta(minutes=1))


def test_attempt_cap_then_record_is_gone(otp, codes_repo, sender, fixed_now):
    otp.request_code("a@co.com", now=fixed_now)
    code = sender.last_code("a@co.com")

    for expected_attempts in (1, 2, 3):
        with pytest.raises(InvalidCode):
            otp.verify_code("a@co.com", _wrong(code), now=fixed_now)
        assert codes_repo.rows["a@co.com"].attempts == expected_attempts

    with pytest.raises(AttemptsExceeded):
        otp.verify_code("a@co.com", code, now=fixed_now)
    assert "a@co.com" not in codes_repo.rows

    with pytest.raises(CodeNotFound):
        otp.verify_code("a@co.com", code, now=fixed_now)


def test_second_request_invalidates_first_code(otp, sender, fixed_now, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp._secrets, "generate_code", lambda: next(codes))

    otp.request_code("a@co.com", now=fixed_now)
    otp.request_code("a@co.com", now=fixed_now + timedelta(seconds=30))

    with pytest.raises(InvalidCode):
        otp.verify_code("a@co.com", "111111", now=fixed_now + timedelta(minutes=1))
    otp.verify_code("a@co.com", "222222", now=fixed_now + timedelta(minutes=1))


def test_resend_resets_attempt_counter(otp, codes_repo, sender, fixed_now):
    otp.request_code("a@co.com", now=fixed_now)
    first = sender.last_code("a@co.com")
    for _ in range(2):
        with pytest.raises(InvalidCode):
            otp.verify_code("a@co.com", _wrong(first), now=fixed_now)

    otp.resend_code("a@co.com", now=fixed_now + timedelta(minutes=1))

    assert codes_repo.rows["a@co.com"].attempts == 0
    assert len(sender.sent) == 2


def test_expired_code_is_treated_as_absent(otp, sender, fixed_now):
    otp.request_code("a@co.com", now=fixed_now)
    code = sender.last_code("a@co.com")

    with pytest.raises(CodeNotFound):
        otp.verify_code("a@co.com", code, now=fixed_now + timedelta(minutes=10, seconds=1))


def test_code_still_valid_at_end_of_window(otp, sender, fixed_now):
    otp.request_code("a@co.com", now=fixed_now)
    otp.verify_code("a@co.com", sender.last_code("a@co.com"), now=fixed_now + timedelta(minutes=10))


def test_concurrent_correct_verifications_single_winner(otp, sender, fixed_now):
    otp.request_code("a@co.com", now=fixed_now)
    code = sender.last_code("a@co.com")

    outcomes = []
    barrier = threading.Barrier(4)

    def attempt():
        barrier.wait()
        try:
            otp.verify_code("a@co.com", code, now=fixed_now)
            outcomes.append("ok")
        except CodeNotFound:
            outcomes.append("gone")

    threads = [threading.Thread(target=attempt) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("gone") == 3


def test_sweep_removes_only_expired(otp, codes_repo, fixed_now):
    otp.request_code("a@co.com", now=fixed_now - timedelta(hours=1))
    otp.request_code("admin@co.com", now=fixed_now)

    assert otp.sweep_expired(now=fixed_now) == 1
    assert list(codes_repo.rows) == ["admin@co.com"]
