from __future__ import annotations

import pytest

from src.employee_portal.employee_portal.core.exceptions import TransientError


class FailingCalls:
    """Wraps a fake repository; the named method raises TransientError ``times`` times."""

    def __init__(self, inner, method: str, times: int = 1):
        self._inner = inner
        self._method = method
        self.remaining = times

    def __getattr__(self, name):
        attr = getattr(self._inner, name)
        if name != self._method:
            return attr

        def call(*args, **kwargs):
            if self.remaining:
                self.remaining -= 1
                raise TransientError()
            return attr(*args, **kwargs)

        return call


@pytest.fixture
def refresh_repo(refresh_repo):
    return FailingCalls(refresh_repo, "create", times=1)


def _verify(client, sender):
    client.post("/auth/login", json={"email": "a@co.com"})
    return client.post("/auth/verify-otp", json={"email": "a@co.com", "otp": sender.last_code("a@co.com")})


def test_refresh_store_hiccup_after_code_consumed_still_logs_in(client, sender, refresh_repo, codes_repo):
    resp = _verify(client, sender)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["accessToken"]
    assert refresh_repo.remaining == 0
    assert "a@co.com" not in codes_repo.rows


def test_refresh_store_down_reports_transient_error(client, sender, refresh_repo):
    refresh_repo.remaining = 5

    resp = _verify(client, sender)

    assert resp.status_code == 503
    assert resp.get_json()["error"]["code"] == "TRANSIENT_ERROR"


def test_last_login_hiccup_is_retried(client, sender, container, users_repo):
    flaky = FailingCalls(users_repo, "touch_last_login", times=1)
    container.auth_service._users = flaky

    resp = _verify(client, sender)

    assert resp.status_code == 200
    assert flaky.remaining == 0
    assert users_repo.get_by_id(1).last_login is not None


def test_code_store_hiccup_during_verify_is_retried(client, sender, container, codes_repo):
    client.post("/auth/login", json={"email": "a@co.com"})
    container.otp_authenticator._codes = FailingCalls(codes_repo, "get_live", times=1)

    resp = client.post("/auth/verify-otp", json={"email": "a@co.com", "otp": sender.last_code("a@co.com")})

    assert resp.status_code == 200
