"""
Accounts API schemas - Pydantic models for request/response.

JSON field names are camelCase; routes serialize by alias.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from apps.accounts.models import User
from apps.core.schemas import Envelope

# --- Request Schemas ---


class CompleteProfileRequest(BaseModel):
    """Request to fill in the profile of the authenticated user."""

    name: str = Field(
        ...,
        description="Display name, 2-100 characters after trimming",
        examples=["Asha Verma"],
    )
    birth_date: date = Field(
        ...,
        alias="birthDate",
        description="ISO-8601 birth date",
        examples=["1990-04-12"],
    )
    gender: User.Gender = Field(..., description="One of male, female, other")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trim and enforce the 2-100 character range."""
        v = v.strip()
        if not 2 <= len(v) <= 100:
            raise ValueError("Name must be between 2-100 characters")
        return v


# --- Response Schemas ---


class UserSummary(BaseModel):
    """User fields returned after verification and profile updates."""

    id: int = Field(..., description="Local database user ID")
    phone: str = Field(..., description="Verified phone number")
    name: str | None = Field(None, description="Display name, null until profile completion")
    birth_date: date | None = Field(None, alias="birthDate")
    gender: str | None = Field(None, description="male, female or other")
    is_verified: bool = Field(..., alias="isVerified")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=user.pk,
            phone=user.phone,
            name=user.name,
            birth_date=user.birth_date,
            gender=user.gender,
            is_verified=user.is_verified,
        )


class UserDetail(UserSummary):
    """Current user as returned by /auth/me."""

    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserDetail":
        return cls(
            id=user.pk,
            phone=user.phone,
            name=user.name,
            birth_date=user.birth_date,
            gender=user.gender,
            is_verified=user.is_verified,
            created_at=user.created_at,
        )


class UserData(BaseModel):
    user: UserSummary


class UserDetailData(BaseModel):
    user: UserDetail


class UserResponse(Envelope):
    """Envelope carrying the updated user."""

    data: UserData


class MeResponse(Envelope):
    """Envelope carrying the current user."""

    data: UserDetailData

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "message": "Success",
                "data": {
                    "user": {
                        "id": 1,
                        "phone": "+919999999999",
                        "name": "Asha Verma",
                        "birthDate": "1990-04-12",
                        "gender": "female",
                        "isVerified": True,
                        "createdAt": "2025-01-01T12:00:00Z",
                    }
                },
                "timestamp": "2025-01-01T12:00:00Z",
            }
        }
    }
