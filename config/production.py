import os

from .config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "please-set-JWT_ACCESS_SECRET")
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "please-set-JWT_REFRESH_SECRET")

EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "smtp")

DEBUG = False
