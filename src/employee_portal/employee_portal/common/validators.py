from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_RE = re.compile(r"^\d{6}$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def normalize_email(value: str) -> str:
    return value.strip().lower()


def require_email(value: Any) -> str:
    email = normalize_email(require_non_empty(value, "Email"))
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    return email


def require_otp(value: Any) -> str:
    code = require_non_empty(value, "OTP")
    if not OTP_RE.match(code):
        raise ValidationError("OTP must be a 6-digit code")
    return code
