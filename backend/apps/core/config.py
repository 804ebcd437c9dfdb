"""
Immutable runtime configuration for the OTP flow and session issuer.

Built once from Django settings and handed to the services explicitly, so
business logic never reads settings or the environment on its own.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

# How long an issued code stays redeemable
OTP_VALIDITY = timedelta(minutes=10)

SUPPORTED_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class AuthConfig:
    """
    Configuration consumed by the OTP flow controller and session issuer.

    Attributes:
        jwt_secret: Secret used to sign session tokens
        jwt_algorithm: HMAC algorithm for session tokens
        token_ttl: Lifetime of an issued session token
        otp_ttl: Lifetime of an issued OTP code
        echo_code: Return the issued code to the caller (development only)
        sms_app_name: Product name used in the SMS text
    """

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(days=7)
    otp_ttl: timedelta = OTP_VALIDITY
    echo_code: bool = False
    sms_app_name: str = "Verify"


def build_auth_config() -> AuthConfig:
    """
    Build AuthConfig from Django settings.

    Raises:
        ImproperlyConfigured: If the signing secret is missing or the
            algorithm/expiry settings are unusable
    """
    secret = getattr(settings, "JWT_SECRET", "")
    if not secret:
        raise ImproperlyConfigured("JWT_SECRET must be set to sign session tokens")

    algorithm = getattr(settings, "JWT_ALGORITHM", "HS256")
    if algorithm not in SUPPORTED_JWT_ALGORITHMS:
        raise ImproperlyConfigured(f"Unsupported JWT_ALGORITHM: {algorithm}")

    expires_in_days = int(getattr(settings, "JWT_EXPIRES_IN_DAYS", 7))
    if expires_in_days <= 0:
        raise ImproperlyConfigured("JWT_EXPIRES_IN_DAYS must be positive")

    return AuthConfig(
        jwt_secret=secret,
        jwt_algorithm=algorithm,
        token_ttl=timedelta(days=expires_in_days),
        otp_ttl=OTP_VALIDITY,
        echo_code=bool(getattr(settings, "OTP_ECHO_CODE", False)),
        sms_app_name=getattr(settings, "SMS_APP_NAME", "Verify"),
    )


@lru_cache(maxsize=1)
def get_auth_config() -> AuthConfig:
    """Process-wide AuthConfig, built on first use (normally at startup)."""
    return build_auth_config()
