"""
Core security - authentication classes for API.
"""

from django.http import HttpRequest
from ninja.security import HttpBearer

from apps.accounts.exceptions import SessionTokenError
from apps.accounts.tokens import SessionClaims, decode_session_token


class SessionBearerAuth(HttpBearer):
    """
    Bearer token authentication for API endpoints.

    Validates the session token issued after OTP verification. On success
    request.auth holds the SessionClaims; a missing, expired or tampered
    token makes ninja answer 401.
    """

    def authenticate(self, request: HttpRequest, token: str) -> SessionClaims | None:
        if not token:
            return None
        try:
            return decode_session_token(token)
        except SessionTokenError:
            return None
