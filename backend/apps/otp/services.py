"""
OTP generation and verification store.

issue_verification() and consume_verification() are the only writers of
PendingVerification rows. Both keep their read-modify-write steps atomic at
the database level so concurrent requests cannot double-issue or
double-consume a code.
"""

import secrets
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.core.config import OTP_VALIDITY
from apps.core.logging import get_logger, mask_phone
from apps.otp.models import PendingVerification

logger = get_logger(__name__)

OTP_LENGTH = 6
OTP_MIN = 10 ** (OTP_LENGTH - 1)
OTP_MAX = 10**OTP_LENGTH - 1

# A concurrent issue for the same phone can trip the one-unconsumed-code constraint
ISSUE_ATTEMPTS = 2


def generate_otp_code() -> str:
    """
    Generate a cryptographically secure 6-digit OTP code.

    Uniform over 100000..999999, so the code never has a leading zero.
    """
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def issue_verification(
    phone_number: str, ttl: timedelta = OTP_VALIDITY
) -> PendingVerification:
    """
    Replace any codes for a phone with a freshly generated one.

    Deletes every existing row for the phone (consumed or not) and inserts
    the new code in the same transaction.

    Args:
        phone_number: The subject phone number
        ttl: How long the code stays redeemable

    Returns:
        The created PendingVerification

    Raises:
        DatabaseError: If the store is unavailable
    """
    attempt = 1
    while True:
        try:
            with transaction.atomic():
                deleted, _ = PendingVerification.objects.for_phone(phone_number).delete()
                otp = PendingVerification.objects.create(
                    phone_number=phone_number,
                    code=generate_otp_code(),
                    expires_at=timezone.now() + ttl,
                )
            break
        except IntegrityError:
            if attempt >= ISSUE_ATTEMPTS:
                raise
            logger.info("otp_issue_conflict", phone=mask_phone(phone_number), attempt=attempt)
            attempt += 1

    logger.info(
        "otp_issued",
        phone=mask_phone(phone_number),
        otp_id=otp.id,
        replaced=deleted,
    )
    return otp


def consume_verification(phone_number: str, code: str) -> PendingVerification | None:
    """
    Redeem a code for a phone number.

    The code must match an unconsumed, unexpired row for the phone. The row
    is claimed with a conditional UPDATE, so of two concurrent attempts with
    the same code exactly one succeeds.

    Returns:
        The consumed PendingVerification, or None when the code is wrong,
        expired, already used, never issued, or was claimed concurrently.
        None is a normal negative result, not an error.
    """
    now = timezone.now()

    candidates = (
        PendingVerification.objects.for_phone(phone_number)
        .filter(consumed=False, expires_at__gt=now)
        .order_by("-created_at")
    )

    # Constant-time comparison to prevent timing attacks
    submitted = code.encode()
    otp = next(
        (c for c in candidates if secrets.compare_digest(c.code.encode(), submitted)),
        None,
    )

    if otp is None:
        logger.info("otp_rejected", phone=mask_phone(phone_number))
        return None

    claimed = PendingVerification.objects.filter(
        pk=otp.pk, consumed=False, expires_at__gt=now
    ).update(consumed=True, consumed_at=now)

    if claimed != 1:
        logger.info("otp_claim_lost", phone=mask_phone(phone_number), otp_id=otp.id)
        return None

    otp.consumed = True
    otp.consumed_at = now

    logger.info("otp_consumed", phone=mask_phone(phone_number), otp_id=otp.id)

    return otp


def cleanup_expired_verifications(
    older_than: timedelta = timedelta(hours=24), dry_run: bool = False
) -> int:
    """
    Delete consumed or expired rows created before the cutoff.

    Not needed for correctness (stale rows never match); keeps the table small.

    Returns:
        Number of rows deleted (or that would be deleted with dry_run)
    """
    now = timezone.now()
    stale = PendingVerification.objects.filter(
        Q(consumed=True) | Q(expires_at__lte=now),
        created_at__lt=now - older_than,
    )

    if dry_run:
        return stale.count()

    deleted, _ = stale.delete()
    if deleted:
        logger.info("otp_cleanup", deleted=deleted)
    return deleted
