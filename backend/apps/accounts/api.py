"""
Account API endpoints.

Profile completion and current-user lookup for a verified session.
"""

from django.db import DatabaseError
from ninja import Router
from ninja.errors import HttpError

from apps.accounts.schemas import (
    CompleteProfileRequest,
    MeResponse,
    UserDetail,
    UserResponse,
    UserSummary,
)
from apps.accounts.services import complete_profile, get_user
from apps.core.logging import get_logger
from apps.core.responses import success_response
from apps.core.schemas import ErrorResponse
from apps.core.security import SessionBearerAuth
from apps.core.types import AuthenticatedHttpRequest

logger = get_logger(__name__)

router = Router(tags=["auth"])
bearer_auth = SessionBearerAuth()


@router.post(
    "/complete-profile",
    response={
        200: UserResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        404: ErrorResponse,
        500: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="completeProfile",
    summary="Complete user profile",
    by_alias=True,
)
def complete_user_profile(request: AuthenticatedHttpRequest, payload: CompleteProfileRequest) -> dict:
    """Set name, birth date and gender for the authenticated user."""
    user_id = request.auth.user_id

    try:
        user = get_user(user_id)
        if user is None:
            raise HttpError(404, "User not found")

        user = complete_profile(
            user,
            name=payload.name,
            birth_date=payload.birth_date,
            gender=payload.gender.value,
        )
    except DatabaseError:
        logger.exception("complete_profile_failed", user_id=user_id)
        raise HttpError(500, "Failed to complete profile") from None

    return success_response(
        {"user": UserSummary.from_user(user)},
        message="Profile completed successfully",
    )


@router.get(
    "/me",
    response={200: MeResponse, 401: ErrorResponse, 404: ErrorResponse, 500: ErrorResponse},
    auth=bearer_auth,
    operation_id="getCurrentUser",
    summary="Get current user",
    by_alias=True,
)
def get_current_user(request: AuthenticatedHttpRequest) -> dict:
    """
    Return the user the session token was issued to.

    Returns 404 if the user was removed after the token was issued.
    """
    user_id = request.auth.user_id

    try:
        user = get_user(user_id)
    except DatabaseError:
        logger.exception("get_user_failed", user_id=user_id)
        raise HttpError(500, "Failed to get user data") from None

    if user is None:
        raise HttpError(404, "User not found")

    return success_response({"user": UserDetail.from_user(user)})
