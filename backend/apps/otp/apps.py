"""
OTP app configuration.
"""

from django.apps import AppConfig


class OtpConfig(AppConfig):
    """Configuration for OTP app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.otp"
    verbose_name = "Phone OTP"
