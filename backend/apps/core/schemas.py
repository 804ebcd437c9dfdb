"""
Core schemas - the response envelope shared by every endpoint.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class Envelope(BaseModel):
    """Uniform response envelope."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable status message")
    timestamp: datetime = Field(..., description="Server time the response was produced")


class ErrorResponse(Envelope):
    """Standard error response format."""

    errors: list[dict[str, Any]] | None = Field(
        default=None,
        description="Field-level validation errors, when the request was malformed",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": False,
                "message": "Invalid or expired OTP",
                "timestamp": "2025-01-01T12:00:00Z",
            }
        }
    }
