"""
Admin configuration for accounts app.
"""

from django.contrib import admin

from apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin for phone-verified users."""

    list_display = ["id", "phone", "name", "gender", "is_verified", "is_active", "created_at"]
    list_filter = ["is_verified", "is_active", "gender"]
    search_fields = ["phone", "name"]
    readonly_fields = ["phone", "is_verified", "created_at", "updated_at", "last_login"]
    exclude = ["password", "groups", "user_permissions"]
