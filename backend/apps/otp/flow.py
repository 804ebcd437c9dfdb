"""
OTP login flow: request a code, then trade it for a session.

Per-phone state is never stored as a status; it follows from the rows:

    NoPendingCode -> CodeIssued -> (Consumed | Expired) -> Verified

request_code() always lands in CodeIssued, whatever came before.
verify_code() moves a matching active code to Consumed and the phone's
identity to Verified, or fails without touching anything.
"""

from dataclasses import dataclass
from datetime import datetime

from apps.accounts.models import User
from apps.accounts.services import resolve_user_on_verification
from apps.accounts.tokens import issue_session_token
from apps.core.config import AuthConfig, get_auth_config
from apps.core.logging import get_logger, mask_phone
from apps.otp.exceptions import CodeInvalidOrExpiredError
from apps.otp.notifications import SMSError, send_otp_message
from apps.otp.services import consume_verification, issue_verification

logger = get_logger(__name__)


@dataclass
class CodeRequestResult:
    """Outcome of request_code()."""

    expires_at: datetime
    delivered: bool
    # Only populated when AuthConfig.echo_code is set
    code: str | None = None


@dataclass
class VerificationResult:
    """Outcome of a successful verify_code()."""

    token: str
    user: User
    is_new_user: bool


def request_code(phone_number: str, config: AuthConfig | None = None) -> CodeRequestResult:
    """
    Issue a new code for a phone and send it by SMS.

    Any earlier code for the phone stops working. A failed delivery is
    logged but does not undo the issue: the code stays redeemable.

    Raises:
        DatabaseError: If the code could not be stored
    """
    config = config or get_auth_config()

    otp = issue_verification(phone_number, ttl=config.otp_ttl)

    delivered = True
    try:
        send_otp_message(phone_number, otp.code, app_name=config.sms_app_name)
    except SMSError as e:
        delivered = False
        logger.error(
            "otp_delivery_failed",
            phone=mask_phone(phone_number),
            otp_id=otp.id,
            error=str(e),
        )
    except Exception:
        delivered = False
        logger.exception(
            "otp_delivery_failed",
            phone=mask_phone(phone_number),
            otp_id=otp.id,
        )

    return CodeRequestResult(
        expires_at=otp.expires_at,
        delivered=delivered,
        code=otp.code if config.echo_code else None,
    )


def verify_code(
    phone_number: str, code: str, config: AuthConfig | None = None
) -> VerificationResult:
    """
    Redeem a code and open a session for the phone's identity.

    Raises:
        CodeInvalidOrExpiredError: If the code cannot be redeemed, for any reason
        DatabaseError: If the store is unavailable
    """
    config = config or get_auth_config()

    otp = consume_verification(phone_number, code)
    if otp is None:
        raise CodeInvalidOrExpiredError()

    user, is_new_user = resolve_user_on_verification(phone_number)
    token = issue_session_token(user, config=config)

    logger.info(
        "otp_verified",
        phone=mask_phone(phone_number),
        user_id=user.pk,
        is_new_user=is_new_user,
    )

    return VerificationResult(token=token, user=user, is_new_user=is_new_user)
