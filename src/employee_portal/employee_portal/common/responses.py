"""JSON response envelope shared by the controllers.

Shape: ``{success, data?, message?, error?: {code, message}}``.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from flask import jsonify

from ..core.exceptions import DomainError, TransientError


def send_success(data: Any = None, message: Optional[str] = None, status_code: int = 200):
    body: dict = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status_code


def send_error(code: str, message: str, status_code: int = 400):
    return jsonify({"success": False, "error": {"code": code, "message": message}}), status_code


def error_response(exc: Union[DomainError, TransientError]):
    return send_error(exc.code, exc.message, exc.status_code)


def internal_error():
    return send_error("INTERNAL_ERROR", "Unexpected server error", 500)
