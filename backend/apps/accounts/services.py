"""
Account services - identity resolution and profile management.
"""

from datetime import date

from django.db import IntegrityError, transaction

from apps.accounts.models import User
from apps.core.logging import get_logger, mask_phone

logger = get_logger(__name__)


def _get_user_for_update(phone: str) -> User | None:
    return User.objects.select_for_update().filter(phone=phone).first()


def resolve_user_on_verification(phone: str) -> tuple[User, bool]:
    """
    Map a freshly verified phone number to a user identity.

    Creates the user on first verification; otherwise re-asserts
    is_verified on the existing record. This is the only place that sets
    is_verified, and it only ever sets it to True.

    Concurrent first-time verifications for the same phone are resolved by
    the unique key: the losing insert hits IntegrityError, re-reads the
    winner's row and takes the update path, so exactly one caller sees
    is_new_user=True.

    Returns:
        Tuple of (user, is_new_user)
    """
    with transaction.atomic():
        user = _get_user_for_update(phone)

        if user is None:
            try:
                # Savepoint so a constraint violation leaves the outer transaction usable
                with transaction.atomic():
                    user = User.objects.create_user(phone=phone, is_verified=True)
            except IntegrityError:
                logger.info("user_create_conflict", phone=mask_phone(phone))
                user = User.objects.select_for_update().get(phone=phone)
            else:
                logger.info("user_created", user_id=user.pk, phone=mask_phone(phone))
                return user, True

        user.is_verified = True
        user.save(update_fields=["is_verified", "updated_at"])

    logger.info("user_logged_in", user_id=user.pk, phone=mask_phone(phone))
    return user, False


def complete_profile(user: User, name: str, birth_date: date, gender: str) -> User:
    """
    Overwrite the user's profile fields.

    Applying the same values twice leaves the same stored state.
    """
    user.name = name
    user.birth_date = birth_date
    user.gender = gender
    user.save(update_fields=["name", "birth_date", "gender", "updated_at"])

    logger.info("profile_completed", user_id=user.pk)

    return user


def get_user(user_id: int) -> User | None:
    """Fetch an active user by id, or None if it no longer exists."""
    return User.objects.filter(pk=user_id, is_active=True).first()
