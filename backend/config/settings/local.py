"""
Local development settings.

Extends base settings with development-friendly defaults.
"""

from apps.core.logging import configure_logging

from .base import *  # noqa: F403
from .base import settings

DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Echo OTP codes in send-otp responses unless OTP_ECHO_CODE=false is set
OTP_ECHO_CODE = settings.explicit_or("OTP_ECHO_CODE", True)
SMS_BACKEND = "console"

# Fall back to a throwaway signing secret so the dev server boots
JWT_SECRET = settings.JWT_SECRET or "local-dev-jwt-secret"

LOG_JSON = False
configure_logging(json_format=LOG_JSON, log_level=settings.LOG_LEVEL)
