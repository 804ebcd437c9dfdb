"""
Accounts models - phone-based user identity.
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class UserManager(BaseUserManager):
    """Custom manager for User model."""

    def create_user(
        self,
        phone: str,
        **extra_fields,
    ) -> "User":
        """Create and return a regular user."""
        if not phone:
            raise ValueError("Phone is required")

        user = self.model(phone=phone.strip(), **extra_fields)
        # No password - possession of the phone is the credential
        user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(
        self,
        phone: str,
        password: str | None = None,
        **extra_fields,
    ) -> "User":
        """Create and return a superuser (for Django admin access)."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        user = self.create_user(phone, **extra_fields)
        if password:
            user.set_password(password)
            user.save(update_fields=["password"])
        return user


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model - one identity per verified phone number.

    This is AUTH_USER_MODEL. The phone is the unique key and never changes
    after creation. Profile fields stay empty until the user completes
    their profile.
    """

    class Gender(models.TextChoices):
        MALE = "male", "Male"
        FEMALE = "female", "Female"
        OTHER = "other", "Other"

    phone = models.CharField(
        max_length=20,
        unique=True,
        db_index=True,
        help_text="Phone number the identity was verified with",
    )

    # Profile
    name = models.CharField(max_length=100, null=True, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(
        max_length=10,
        choices=Gender.choices,
        null=True,
        blank=True,
    )

    # Set on every successful OTP verification, never cleared
    is_verified = models.BooleanField(default=False)

    # Django auth compatibility
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(
        default=False,
        help_text="Can access Django admin",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "phone"
    REQUIRED_FIELDS = []  # Phone is already required via USERNAME_FIELD

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.phone

    @property
    def has_completed_profile(self) -> bool:
        """Check whether name, birth date and gender are all set."""
        return bool(self.name and self.birth_date and self.gender)
