import os

from .config import *  # noqa: F401,F403
from .config import _env_bool

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Local http, so the refresh cookie cannot require https here.
REFRESH_COOKIE_SECURE = _env_bool("REFRESH_COOKIE_SECURE", "0")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", "1")
