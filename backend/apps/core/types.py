"""
Custom type definitions for the application.

These types help mypy understand custom attributes added by auth and middleware.
"""

from typing import TYPE_CHECKING

from django.http import HttpRequest

if TYPE_CHECKING:
    from apps.accounts.tokens import SessionClaims


class AuthenticatedHttpRequest(HttpRequest):
    """
    HttpRequest after SessionBearerAuth has accepted the bearer token.

    Use this type for endpoints that require authentication.
    """

    auth: "SessionClaims"
    trace_id: str
