"""
Admin configuration for OTP app.
"""

from django.contrib import admin

from apps.core.logging import mask_phone
from apps.otp.models import PendingVerification


@admin.register(PendingVerification)
class PendingVerificationAdmin(admin.ModelAdmin):
    """Admin for pending verifications. The code itself is never shown."""

    list_display = [
        "id",
        "phone_number_masked",
        "consumed",
        "is_expired_display",
        "created_at",
        "expires_at",
    ]
    list_filter = ["consumed", "created_at"]
    search_fields = ["phone_number"]
    exclude = ["code"]
    readonly_fields = [
        "phone_number",
        "consumed",
        "consumed_at",
        "created_at",
        "expires_at",
    ]

    def has_add_permission(self, request) -> bool:  # type: ignore[no-untyped-def]
        return False

    def phone_number_masked(self, obj: PendingVerification) -> str:
        """Show only last 4 digits of phone for privacy."""
        return mask_phone(obj.phone_number)

    phone_number_masked.short_description = "Phone"  # type: ignore[attr-defined]

    def is_expired_display(self, obj: PendingVerification) -> bool:
        """Display expired status."""
        return obj.is_expired

    is_expired_display.short_description = "Expired"  # type: ignore[attr-defined]
    is_expired_display.boolean = True  # type: ignore[attr-defined]
