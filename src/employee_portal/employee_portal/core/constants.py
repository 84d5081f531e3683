"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_OTP_EXPIRY_MINUTES = 10
DEFAULT_OTP_MAX_ATTEMPTS = 3
OTP_LENGTH = 6

DEFAULT_ACCESS_TOKEN_MINUTES = 15
DEFAULT_REFRESH_TOKEN_DAYS = 7
DEFAULT_JWT_ALGORITHM = "HS256"

DEFAULT_HASH_METHOD = "pbkdf2:sha256:600000"
DEFAULT_LATE_CUTOFF = time(9, 30)

DEFAULT_DB_TIMEOUT_SECONDS = 5
DEFAULT_REFRESH_COOKIE_NAME = "refresh_token"

# Higher rank includes the capabilities of lower ranks.
ROLE_RANK = {
    "EMPLOYEE": 0,
    "HR": 1,
    "ADMIN": 2,
}
