"""
API endpoints for phone OTP login.
"""

from django.db import DatabaseError
from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.accounts.schemas import UserSummary
from apps.core.logging import get_logger, mask_phone
from apps.core.responses import success_response
from apps.core.schemas import ErrorResponse
from apps.otp.exceptions import CodeInvalidOrExpiredError
from apps.otp.flow import request_code, verify_code
from apps.otp.schemas import (
    SendOTPData,
    SendOTPRequest,
    SendOTPResponse,
    VerifyOTPData,
    VerifyOTPRequest,
    VerifyOTPResponse,
)

logger = get_logger(__name__)

router = Router(tags=["auth"])


@router.post(
    "/send-otp",
    response={200: SendOTPResponse, 400: ErrorResponse, 500: ErrorResponse},
    operation_id="sendOTP",
    summary="Send login OTP",
    by_alias=True,
    exclude_none=True,
)
def send_otp(request: HttpRequest, payload: SendOTPRequest) -> dict:
    """
    Send a one-time code to a phone number.

    Any code previously sent to the same number stops working.
    The code expires after 10 minutes.
    """
    try:
        result = request_code(payload.phone)
    except Exception:
        logger.exception("send_otp_failed", phone=mask_phone(payload.phone))
        raise HttpError(500, "Failed to send OTP") from None

    return success_response(
        SendOTPData(message="OTP sent successfully", code=result.code),
        message="OTP sent successfully",
    )


@router.post(
    "/verify-otp",
    response={200: VerifyOTPResponse, 400: ErrorResponse, 500: ErrorResponse},
    operation_id="verifyOTP",
    summary="Verify OTP and log in",
    by_alias=True,
)
def verify_otp(request: HttpRequest, payload: VerifyOTPRequest) -> dict:
    """
    Verify a one-time code and return a session token.

    Creates the user on first verification of a phone number;
    isNewUser tells the client whether to show profile completion.
    """
    try:
        result = verify_code(payload.phone, payload.otp)
    except CodeInvalidOrExpiredError as e:
        raise HttpError(400, str(e)) from None
    except DatabaseError:
        logger.exception("verify_otp_failed", phone=mask_phone(payload.phone))
        raise HttpError(500, "Failed to verify OTP") from None

    return success_response(
        VerifyOTPData(
            token=result.token,
            user=UserSummary.from_user(result.user),
            is_new_user=result.is_new_user,
        ),
        message="OTP verified successfully",
    )
