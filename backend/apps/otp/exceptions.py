"""
Exceptions for the OTP app.
"""


class OTPError(Exception):
    """Base exception for OTP operations."""

    pass


class CodeInvalidOrExpiredError(OTPError):
    """
    The submitted code cannot be redeemed.

    Deliberately covers wrong, expired, already used and never issued codes
    alike, so callers cannot probe which of those applies.
    """

    def __init__(self, message: str = "Invalid or expired OTP") -> None:
        super().__init__(message)
