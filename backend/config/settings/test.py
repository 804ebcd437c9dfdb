"""
Test settings.

In-memory SQLite, a fixed signing secret and console SMS delivery.
"""

from apps.core.logging import configure_logging

from .base import *  # noqa: F403

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

JWT_SECRET = "test-jwt-secret-with-enough-bytes-for-hs256"
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_IN_DAYS = 7

OTP_ECHO_CODE = False
SMS_BACKEND = "console"
SMS_APP_NAME = "Verify"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOG_JSON = False
configure_logging(json_format=LOG_JSON, log_level="WARNING", cache_loggers=False)
