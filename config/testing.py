from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

JWT_ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"

# Cheap hashing keeps the suite fast.
HASH_METHOD = "pbkdf2:sha256:1000"

EMAIL_BACKEND = "console"
ROTATE_REFRESH_TOKENS = False

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
