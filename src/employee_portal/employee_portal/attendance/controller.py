from __future__ import annotations

import logging

from flask import Flask

from ..auth.middleware import current_claims
from ..common.responses import error_response, internal_error, send_success
from ..common.retry import call_with_retry
from ..container import Container
from ..core.exceptions import DomainError, TransientError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    login_required = container.session.login_required

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        try:
            record = call_with_retry(container.attendance_service.get_today, current_claims().user_id)
            return send_success(record.to_dict() if record else None, "Today's attendance retrieved")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Loading today's attendance failed")
            return internal_error()

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        try:
            record = call_with_retry(container.attendance_service.check_in, current_claims().user_id)
            return send_success(record.to_dict(), "Checked in successfully", 201)
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Check-in failed")
            return internal_error()

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        try:
            record = call_with_retry(container.attendance_service.check_out, current_claims().user_id)
            return send_success(record.to_dict(), "Checked out successfully")
        except (DomainError, TransientError) as e:
            return error_response(e)
        except Exception:
            logger.exception("Check-out failed")
            return internal_error()
