"""
Exceptions for accounts app.
"""


class SessionTokenError(Exception):
    """Base exception for session token problems."""

    pass


class SessionTokenExpiredError(SessionTokenError):
    """Session token is past its expiry."""

    pass


class SessionTokenInvalidError(SessionTokenError):
    """Session token is malformed, tampered with, or of the wrong type."""

    pass
