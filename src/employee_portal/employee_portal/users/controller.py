from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, request

from ..auth.middleware import current_claims
from ..common.responses import error_response, internal_error, send_success
from ..common.retry import call_with_retry
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, TransientError, ValidationError
from ..database.mysql_base import ping

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    role_required = container.session.role_required

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        timestamp = datetime.now().isoformat()
        if container.conn is None:
            return send_success({"status": "healthy", "timestamp": timestamp, "database": "not configured"})
        try:
            ping(container.conn)
        except Exception:
            logger.exception("Health check failed")
            return send_success(
                {"status": "unhealthy", "timestamp": timestamp, "database": "disconnected"},
                "Service is unhealthy",
                503,
            )
        return send_success(
            {"status": "healthy", "timestamp": timestamp, "database": "connected"},
            "Service is healthy",
        )

    @app.route("/admin/users/<int:user_id>/active", methods=["PATCH"], endpoint="admin_set_user_active")
    @role_required(Role.HR)
    def set_user_active(user_id: int):
        try:
            body = request.get_json(silent=True) or {}
            is_active = body.get("isActive") if isinstance(body, dict) else None
            if not isinstance(is_active, bool):
                raise ValidationError("isActive must be true or false")

            user = call_with_retry(
                container.user_service.set_active,
                actor_role=current_claims().role,
                user_id=user_id,
                is_active=is_active,
            )
            return send_success(user.to_profile(), "User updated")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Updating user %s failed", user_id)
            return internal_error()

    @app.route("/admin/maintenance/sweep", methods=["POST"], endpoint="admin_sweep")
    @role_required(Role.ADMIN)
    def sweep():
        try:
            removed_codes = call_with_retry(container.otp_authenticator.sweep_expired)
            removed_tokens = call_with_retry(container.token_service.sweep_expired)
            return send_success({"otpCodes": removed_codes, "refreshTokens": removed_tokens}, "Sweep complete")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Maintenance sweep failed")
            return internal_error()
