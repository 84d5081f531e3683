"""Settings shared by every environment.

Environment modules star-import this one and override what differs.
"""

import os


def _env_bool(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.environ.get("DB_HOST", "localhost"),
    "port": int(os.environ.get("DB_PORT", "3306")),
    "user": os.environ.get("DB_USER", "root"),
    "password": os.environ.get("DB_PASSWORD", ""),
    "database": os.environ.get("DB_NAME", "employee_portal"),
}
# Deadline for connecting and for each statement.
DB_TIMEOUT_SECONDS = int(os.environ.get("DB_TIMEOUT_SECONDS", "5"))

# Tokens
JWT_ACCESS_SECRET = os.environ.get("JWT_ACCESS_SECRET", "dev-access-secret-change-me-0123456789")
JWT_REFRESH_SECRET = os.environ.get("JWT_REFRESH_SECRET", "dev-refresh-secret-change-me-0123456789")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_MINUTES = int(os.environ.get("ACCESS_TOKEN_MINUTES", "15"))
REFRESH_TOKEN_DAYS = int(os.environ.get("REFRESH_TOKEN_DAYS", "7"))
ROTATE_REFRESH_TOKENS = _env_bool("ROTATE_REFRESH_TOKENS", "0")

REFRESH_COOKIE_NAME = os.environ.get("REFRESH_COOKIE_NAME", "refresh_token")
REFRESH_COOKIE_SECURE = _env_bool("REFRESH_COOKIE_SECURE", "1")

# One-time codes
OTP_EXPIRY_MINUTES = int(os.environ.get("OTP_EXPIRY_MINUTES", "10"))
OTP_MAX_ATTEMPTS = int(os.environ.get("OTP_MAX_ATTEMPTS", "3"))
HASH_METHOD = os.environ.get("HASH_METHOD", "pbkdf2:sha256:600000")

# Attendance
LATE_CUTOFF = os.environ.get("LATE_CUTOFF", "09:30")

# Code delivery: "console" logs the code, "smtp" mails it
EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "console")
SMTP_CONFIG = {
    "host": os.environ.get("SMTP_HOST", "smtp.office365.com"),
    "port": int(os.environ.get("SMTP_PORT", "587")),
    "user": os.environ.get("SMTP_USER", ""),
    "password": os.environ.get("SMTP_PASSWORD", ""),
    "from_email": os.environ.get("SMTP_FROM_EMAIL", "no-reply@example.com"),
    "from_name": os.environ.get("SMTP_FROM_NAME", "Employee Portal"),
    "use_tls": _env_bool("SMTP_USE_TLS", "1"),
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

DEBUG = False

# Dev helpers
AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _env_bool("AUTO_SEED_DB", "0")
