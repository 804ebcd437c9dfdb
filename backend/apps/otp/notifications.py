"""
OTP delivery over SMS.

Two backends, selected by settings.SMS_BACKEND:
- "console": writes the message to the log (local development and tests)
- "aws": AWS End User Messaging via boto3 pinpoint-sms-voice-v2
"""

from functools import lru_cache
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from apps.core.config import OTP_VALIDITY
from apps.core.logging import get_logger, mask_phone

logger = get_logger(__name__)

CONSOLE_BACKEND = "console"
AWS_BACKEND = "aws"


class SMSError(Exception):
    """Exception raised when SMS sending fails."""

    pass


@lru_cache(maxsize=1)
def get_sms_client() -> Any:
    """
    Get AWS SMS client (pinpoint-sms-voice-v2).

    Credentials come from the environment or the IAM role when running on AWS.
    """
    return boto3.client(
        "pinpoint-sms-voice-v2",
        region_name=settings.AWS_SMS_REGION,
    )


def _send_via_aws(phone_number: str, message: str) -> dict[str, Any]:
    if not settings.AWS_SMS_ORIGINATION_IDENTITY:
        logger.error("sms_not_configured")
        raise SMSError("SMS service not configured")

    client = get_sms_client()

    try:
        response = client.send_text_message(
            DestinationPhoneNumber=phone_number,
            OriginationIdentity=settings.AWS_SMS_ORIGINATION_IDENTITY,
            MessageBody=message,
            MessageType="TRANSACTIONAL",
        )
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        error_message = e.response.get("Error", {}).get("Message", str(e))
        logger.error("sms_client_error", error_code=error_code, error=error_message)
        raise SMSError(f"Failed to send SMS: {error_message}") from e
    except BotoCoreError as e:
        logger.error("sms_botocore_error", error=str(e))
        raise SMSError(f"SMS service error: {str(e)}") from e

    logger.info(
        "sms_sent",
        phone=mask_phone(phone_number),
        message_id=response.get("MessageId"),
    )
    return {"message_id": response.get("MessageId", ""), "success": True}


def _send_via_console(phone_number: str, message: str) -> dict[str, Any]:
    # Local stand-in for a real SMS gateway; the message text is only ever logged here
    logger.info("sms_console_delivery", to=mask_phone(phone_number), body=message)
    return {"message_id": "", "success": True}


def send_sms(phone_number: str, message: str) -> dict[str, Any]:
    """
    Send an SMS message through the configured backend.

    Returns:
        Dict with message_id and success flag

    Raises:
        SMSError: If sending fails or the backend is unknown
    """
    backend = getattr(settings, "SMS_BACKEND", CONSOLE_BACKEND)
    if backend == AWS_BACKEND:
        return _send_via_aws(phone_number, message)
    if backend == CONSOLE_BACKEND:
        return _send_via_console(phone_number, message)
    raise SMSError(f"Unknown SMS backend: {backend}")


def format_otp_message(otp_code: str, app_name: str) -> str:
    minutes = int(OTP_VALIDITY.total_seconds() // 60)
    return f"Your {app_name} verification code is: {otp_code}. It expires in {minutes} minutes."


def send_otp_message(phone_number: str, otp_code: str, app_name: str = "Verify") -> dict[str, Any]:
    """Send an OTP verification message."""
    return send_sms(phone_number, format_otp_message(otp_code, app_name))
