from __future__ import annotations

import logging

from flask import Flask, request

from ..common.responses import error_response, internal_error, send_error, send_success
from ..common.retry import call_with_retry
from ..common.validators import require_email, require_otp
from ..container import Container
from ..core.exceptions import DomainError, TransientError
from .middleware import current_claims

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    login_required = container.session.login_required

    def _cookie_name() -> str:
        return app.config["REFRESH_COOKIE_NAME"]

    def _set_refresh_cookie(resp, token: str) -> None:
        resp.set_cookie(
            _cookie_name(),
            token,
            max_age=int(container.token_service.refresh_lifetime.total_seconds()),
            httponly=True,
            secure=bool(app.config["REFRESH_COOKIE_SECURE"]),
            samesite="Strict",
            path="/",
        )

    def _clear_refresh_cookie(resp) -> None:
        resp.delete_cookie(
            _cookie_name(),
            path="/",
            httponly=True,
            secure=bool(app.config["REFRESH_COOKIE_SECURE"]),
            samesite="Strict",
        )

    def _json_body() -> dict:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        try:
            email = require_email(_json_body().get("email"))
            expires_at = call_with_retry(container.auth_service.initiate_login, email)
            return send_success({"expiresAt": expires_at.isoformat()}, "OTP sent successfully to your email")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Login initiation failed")
            return internal_error()

    @app.route("/auth/resend-otp", methods=["POST"], endpoint="auth_resend_otp")
    def resend_otp():
        try:
            email = require_email(_json_body().get("email"))
            expires_at = call_with_retry(container.auth_service.resend_code, email)
            return send_success({"expiresAt": expires_at.isoformat()}, "A new OTP was sent to your email")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("OTP resend failed")
            return internal_error()

    @app.route("/auth/verify-otp", methods=["POST"], endpoint="auth_verify_otp")
    def verify_otp():
        try:
            body = _json_body()
            email = require_email(body.get("email"))
            code = require_otp(body.get("otp"))
            result = container.auth_service.verify_otp_and_login(email, code)
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("OTP verification failed")
            return internal_error()

        resp, status = send_success(
            {"user": result.user.to_profile(), "accessToken": result.tokens.access_token},
            "Login successful",
        )
        _set_refresh_cookie(resp, result.tokens.refresh_token)
        return resp, status

    @app.route("/auth/refresh", methods=["POST"], endpoint="auth_refresh")
    def refresh():
        refresh_token = request.cookies.get(_cookie_name())
        if not refresh_token:
            return send_error("UNAUTHORIZED", "Refresh token not found", 401)

        try:
            result = call_with_retry(container.auth_service.refresh, refresh_token)
        except DomainError as e:
            resp, status = error_response(e)
            _clear_refresh_cookie(resp)
            return resp, status
        except TransientError as e:
            return error_response(e)
        except Exception:
            logger.exception("Token refresh failed")
            return internal_error()

        resp, status = send_success({"accessToken": result.access_token}, "Token refreshed successfully")
        if result.refresh_token:
            _set_refresh_cookie(resp, result.refresh_token)
        return resp, status

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        refresh_token = request.cookies.get(_cookie_name()) or _json_body().get("refreshToken")
        try:
            call_with_retry(container.auth_service.logout, refresh_token)
        except Exception:
            # Logout always succeeds for the client; the token just stays unrevoked.
            logger.exception("Refresh token revocation failed during logout")

        resp, status = send_success({}, "Logged out successfully")
        _clear_refresh_cookie(resp)
        return resp, status

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        try:
            user = call_with_retry(container.user_service.get_profile, current_claims().user_id)
            return send_success(user.to_profile(), "User details retrieved successfully")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Loading current user failed")
            return internal_error()
