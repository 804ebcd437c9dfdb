"""
OTP verification models.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone


class PendingVerificationQuerySet(models.QuerySet):
    def active(self) -> "PendingVerificationQuerySet":
        """Rows that can still be redeemed: unconsumed and not yet expired."""
        return self.filter(consumed=False, expires_at__gt=timezone.now())

    def for_phone(self, phone_number: str) -> "PendingVerificationQuerySet":
        return self.filter(phone_number=phone_number)


class PendingVerification(models.Model):
    """
    A one-time code awaiting submission for a phone number.

    State is derived, not stored:
    - active: consumed is False and expires_at is in the future
    - consumed: consumed is True (kept as an audit trail until the next issue)
    - expired: expires_at has passed

    Issuing a new code deletes every earlier row for the phone, so there is
    never more than one unconsumed row per phone number.
    """

    phone_number = models.CharField(
        max_length=20,
        db_index=True,
        help_text="Phone number the code was sent to",
    )
    code = models.CharField(max_length=6, help_text="The 6-digit OTP code")

    # Status tracking
    consumed = models.BooleanField(default=False)
    consumed_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    objects = PendingVerificationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["phone_number", "consumed"], name="otp_pending_phone_n_4b1f0e_idx"),
            models.Index(fields=["expires_at"], name="otp_pending_expires_7c2d9a_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["phone_number"],
                condition=Q(consumed=False),
                name="otp_one_unconsumed_code_per_phone",
            ),
        ]

    def __str__(self) -> str:
        return f"OTP for {self.phone_number[-4:]}"

    @property
    def is_expired(self) -> bool:
        """Check if the code is past its expiry instant."""
        return timezone.now() >= self.expires_at

    @property
    def is_active(self) -> bool:
        """Check if the code can still be redeemed."""
        return not self.consumed and not self.is_expired
