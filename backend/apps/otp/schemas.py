"""
Schemas for OTP endpoints.
"""

import re

from pydantic import BaseModel, Field, field_validator

from apps.accounts.schemas import UserSummary
from apps.core.schemas import Envelope

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{9,14}$")
OTP_PATTERN = re.compile(r"^\d{6}$")


def validate_phone_number(value: str) -> str:
    """Check a phone number is plausible: optional +, then 10-15 digits."""
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone number format")
    return value


class SendOTPRequest(BaseModel):
    """Request to send an OTP to a phone number."""

    phone: str = Field(
        ...,
        description="Mobile phone number, optionally prefixed with +",
        examples=["+919999999999"],
    )

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)


class VerifyOTPRequest(BaseModel):
    """Request to verify an OTP code."""

    phone: str = Field(
        ...,
        description="Phone number the code was sent to",
        examples=["+919999999999"],
    )
    otp: str = Field(
        ...,
        description="The 6-digit code received via SMS",
        examples=["482913"],
    )

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)

    @field_validator("otp")
    @classmethod
    def validate_otp(cls, v: str) -> str:
        v = v.strip()
        if not OTP_PATTERN.match(v):
            raise ValueError("OTP must be 6 digits")
        return v


class SendOTPData(BaseModel):
    message: str
    code: str | None = Field(
        None,
        description="The issued code; only present in development configurations",
    )


class SendOTPResponse(Envelope):
    """Response after sending an OTP."""

    data: SendOTPData


class VerifyOTPData(BaseModel):
    token: str = Field(..., description="Signed session token (Bearer)")
    user: UserSummary
    is_new_user: bool = Field(..., alias="isNewUser")

    model_config = {"populate_by_name": True}


class VerifyOTPResponse(Envelope):
    """Response after successful OTP verification."""

    data: VerifyOTPData
