"""
Tests for the OTP code generator and verification store.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.otp.models import PendingVerification
from apps.otp.services import (
    cleanup_expired_verifications,
    consume_verification,
    generate_otp_code,
    issue_verification,
)
from tests.otp.factories import PendingVerificationFactory

PHONE = "+919999999999"


class TestGenerateOTPCode:
    """Tests for OTP code generation."""

    def test_generates_six_digits(self) -> None:
        """Should generate a 6-character numeric code."""
        for _ in range(200):
            code = generate_otp_code()
            assert len(code) == 6
            assert code.isdigit()

    def test_stays_in_range(self) -> None:
        """Should never produce a leading zero or exceed 999999."""
        for _ in range(200):
            assert 100000 <= int(generate_otp_code()) <= 999999

    def test_range_bounds_are_reachable(self) -> None:
        """Lowest and highest draws map to 100000 and 999999."""
        with patch("apps.otp.services.secrets.randbelow", return_value=0):
            assert generate_otp_code() == "100000"
        with patch("apps.otp.services.secrets.randbelow", return_value=899999):
            assert generate_otp_code() == "999999"


@pytest.mark.django_db
class TestIssueVerification:
    """Tests for issuing a code."""

    def test_creates_active_code(self) -> None:
        """Should store a fresh, unconsumed code expiring in 10 minutes."""
        before = timezone.now()

        otp = issue_verification(PHONE)

        assert otp.phone_number == PHONE
        assert len(otp.code) == 6
        assert not otp.consumed
        assert otp.is_active
        assert before + timedelta(minutes=10) <= otp.expires_at
        assert otp.expires_at <= timezone.now() + timedelta(minutes=10)

    def test_replaces_previous_codes(self) -> None:
        """Should delete every earlier row for the phone."""
        first = issue_verification(PHONE)
        second = issue_verification(PHONE)

        assert not PendingVerification.objects.filter(id=first.id).exists()
        assert list(PendingVerification.objects.for_phone(PHONE)) == [second]

    def test_removes_consumed_rows_too(self) -> None:
        """Should also clear consumed rows left for the phone."""
        PendingVerificationFactory.create(phone_number=PHONE, consumed=True)

        issue_verification(PHONE)

        assert PendingVerification.objects.for_phone(PHONE).count() == 1
        assert not PendingVerification.objects.for_phone(PHONE).filter(consumed=True).exists()

    def test_leaves_other_phones_alone(self) -> None:
        """Should only touch rows for the requested phone."""
        other = PendingVerificationFactory.create(phone_number="+918888888888")

        issue_verification(PHONE)

        assert PendingVerification.objects.filter(id=other.id).exists()

    def test_honours_custom_ttl(self) -> None:
        """Should compute expiry from the given ttl."""
        otp = issue_verification(PHONE, ttl=timedelta(minutes=1))

        assert otp.expires_at <= timezone.now() + timedelta(minutes=1)

    def test_retries_once_on_concurrent_issue(self) -> None:
        """A uniqueness conflict from a parallel issue is retried."""
        real_create = PendingVerification.objects.create
        calls = {"n": 0}

        def flaky_create(**kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise IntegrityError("duplicate key value")
            return real_create(**kwargs)

        with patch.object(PendingVerification.objects, "create", side_effect=flaky_create):
            otp = issue_verification(PHONE)

        assert calls["n"] == 2
        assert otp.is_active

    def test_gives_up_after_repeated_conflicts(self) -> None:
        """Persistent conflicts propagate as a storage failure."""
        with patch.object(
            PendingVerification.objects, "create", side_effect=IntegrityError("duplicate")
        ):
            with pytest.raises(IntegrityError):
                issue_verification(PHONE)

    def test_store_rejects_second_unconsumed_row(self) -> None:
        """The database allows only one unconsumed row per phone."""
        PendingVerificationFactory.create(phone_number=PHONE)

        with pytest.raises(IntegrityError), transaction.atomic():
            PendingVerificationFactory.create(phone_number=PHONE)


@pytest.mark.django_db
class TestConsumeVerification:
    """Tests for redeeming a code."""

    def test_consumes_matching_code(self) -> None:
        """Should mark a matching active code consumed and return it."""
        otp = issue_verification(PHONE)

        consumed = consume_verification(PHONE, otp.code)

        assert consumed is not None
        assert consumed.id == otp.id
        otp.refresh_from_db()
        assert otp.consumed
        assert otp.consumed_at is not None

    def test_code_can_only_be_used_once(self) -> None:
        """A repeat with the same code finds nothing."""
        otp = issue_verification(PHONE)

        assert consume_verification(PHONE, otp.code) is not None
        assert consume_verification(PHONE, otp.code) is None

    def test_consumed_row_is_kept(self) -> None:
        """Replays are stopped by the consumed flag, not by deleting the row."""
        otp = issue_verification(PHONE)
        consume_verification(PHONE, otp.code)

        assert PendingVerification.objects.filter(id=otp.id, consumed=True).exists()

    def test_rejects_wrong_code(self) -> None:
        """Should return None and leave the row untouched."""
        otp = PendingVerificationFactory.create(phone_number=PHONE, code="123456")

        assert consume_verification(PHONE, "654321") is None

        otp.refresh_from_db()
        assert not otp.consumed

    def test_rejects_code_for_other_phone(self) -> None:
        """A code is bound to the phone it was issued for."""
        otp = PendingVerificationFactory.create(phone_number=PHONE, code="123456")

        assert consume_verification("+918888888888", otp.code) is None

    def test_rejects_expired_code(self) -> None:
        """A correct code past its expiry does not verify."""
        otp = issue_verification(PHONE)
        otp.expires_at = timezone.now() - timedelta(microseconds=1)
        otp.save(update_fields=["expires_at"])

        assert consume_verification(PHONE, otp.code) is None

    def test_rejects_just_after_expiry_instant(self) -> None:
        """Verifying at expires_at + epsilon fails."""
        otp = issue_verification(PHONE)
        later = otp.expires_at + timedelta(milliseconds=1)

        with patch("apps.otp.services.timezone.now", return_value=later):
            assert consume_verification(PHONE, otp.code) is None

    def test_accepts_just_before_expiry_instant(self) -> None:
        """Verifying right before expires_at still succeeds."""
        otp = issue_verification(PHONE)
        earlier = otp.expires_at - timedelta(milliseconds=1)

        with patch("apps.otp.services.timezone.now", return_value=earlier):
            assert consume_verification(PHONE, otp.code) is not None

    def test_rejects_when_nothing_issued(self) -> None:
        """Should return None for a phone that never requested a code."""
        assert consume_verification(PHONE, "123456") is None

    def test_reissue_invalidates_old_code(self) -> None:
        """The old row is gone, so only the new row can ever be consumed."""
        with patch("apps.otp.services.generate_otp_code", side_effect=["111111", "222222"]):
            old = issue_verification(PHONE)
            issue_verification(PHONE)

        assert consume_verification(PHONE, old.code) is None
        assert consume_verification(PHONE, "222222") is not None

    def test_concurrent_consumers_have_one_winner(self) -> None:
        """
        Two consumers reading the same row: only the first claim succeeds.

        The second consumer is simulated by letting the first claim land
        between the loser's read and its conditional update.
        """
        otp = issue_verification(PHONE)
        real_filter = PendingVerification.objects.filter

        def filter_after_competitor_wins(*args, **kwargs):
            if "pk" in kwargs:
                # Competing request commits its claim first
                real_filter(pk=kwargs["pk"]).update(consumed=True, consumed_at=timezone.now())
            return real_filter(*args, **kwargs)

        with patch.object(
            PendingVerification.objects, "filter", side_effect=filter_after_competitor_wins
        ):
            assert consume_verification(PHONE, otp.code) is None

        otp.refresh_from_db()
        assert otp.consumed


@pytest.mark.django_db
class TestCleanupExpiredVerifications:
    """Tests for housekeeping of stale rows."""

    def _backdate(self, otp: PendingVerification, hours: int) -> None:
        PendingVerification.objects.filter(id=otp.id).update(
            created_at=timezone.now() - timedelta(hours=hours)
        )

    def test_deletes_old_expired_and_consumed_rows(self) -> None:
        """Should delete stale rows older than the cutoff."""
        expired = PendingVerificationFactory.create(
            expires_at=timezone.now() - timedelta(hours=25)
        )
        consumed = PendingVerificationFactory.create(consumed=True)
        self._backdate(expired, 26)
        self._backdate(consumed, 26)

        deleted = cleanup_expired_verifications()

        assert deleted == 2
        assert not PendingVerification.objects.filter(id__in=[expired.id, consumed.id]).exists()

    def test_keeps_recent_and_active_rows(self) -> None:
        """Recent stale rows and active rows survive."""
        recent_expired = PendingVerificationFactory.create(
            expires_at=timezone.now() - timedelta(minutes=5)
        )
        active = PendingVerificationFactory.create()
        self._backdate(active, 30)

        deleted = cleanup_expired_verifications()

        assert deleted == 0
        assert PendingVerification.objects.filter(id__in=[recent_expired.id, active.id]).count() == 2

    def test_dry_run_counts_without_deleting(self) -> None:
        """Dry run reports the count and keeps the rows."""
        stale = PendingVerificationFactory.create(consumed=True)
        self._backdate(stale, 48)

        assert cleanup_expired_verifications(dry_run=True) == 1
        assert PendingVerification.objects.filter(id=stale.id).exists()
