import uuid

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Manager for the User model that uses ``username`` as identifier.

    Canvassers log in with their phone number, which is stored as the
    username; administrators get an explicit login id.
    """

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError("A username is required.")
        email = extra_fields.pop("email", "") or ""
        extra_fields.setdefault("is_active", True)
        user = self.model(username=username, email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("role", User.Role.ZOPPER_ADMINISTRATOR)
        extra_fields.setdefault("validation", User.Validation.APPROVED)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Platform user.

    Every login goes through this model. Field agents additionally own a
    ``stores.Canvasser`` profile; administrators only need the user row.
    Only ``APPROVED`` users are allowed through API authentication.
    """

    class Role(models.TextChoices):
        ABM = "ABM", "Area Business Manager"
        ASE = "ASE", "Area Sales Executive"
        ZSM = "ZSM", "Zonal Sales Manager"
        ZSE = "ZSE", "Zonal Sales Executive"
        CANVASSER = "CANVASSER", "Canvasser"
        SEC = "SEC", "SEC (legacy canvasser)"
        SAMSUNG_ADMINISTRATOR = "SAMSUNG_ADMINISTRATOR", "Samsung administrator"
        ZOPPER_ADMINISTRATOR = "ZOPPER_ADMINISTRATOR", "Zopper administrator"

    class Validation(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        BLOCKED = "BLOCKED", "Blocked"

    CANVASSER_ROLES = (Role.CANVASSER, Role.SEC)

    HOME_PATHS = {
        Role.ABM: "/ABM",
        Role.ASE: "/ASE",
        Role.ZSM: "/ZSM",
        Role.ZSE: "/ZSE",
        Role.CANVASSER: "/canvasser/home",
        Role.SEC: "/canvasser/home",
        Role.SAMSUNG_ADMINISTRATOR: "/Samsung-Administrator",
        Role.ZOPPER_ADMINISTRATOR: "/Zopper-Administrator",
    }

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )
    username = models.CharField(
        "username",
        max_length=150,
        unique=True,
        error_messages={
            "unique": "A user with this username already exists.",
        },
    )
    email = models.EmailField("email address", blank=True, default="")
    full_name = models.CharField("full name", max_length=200, blank=True, default="")
    phone = models.CharField("phone", max_length=20, blank=True, default="", db_index=True)
    role = models.CharField(
        "role",
        max_length=32,
        choices=Role.choices,
        default=Role.CANVASSER,
        db_index=True,
    )
    validation = models.CharField(
        "validation",
        max_length=16,
        choices=Validation.choices,
        default=Validation.PENDING,
        db_index=True,
    )
    metadata = models.JSONField("metadata", default=dict, blank=True)
    is_active = models.BooleanField("active", default=True, db_index=True)
    is_staff = models.BooleanField("staff status", default=False)
    date_joined = models.DateTimeField("date joined", default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["username"]

    def __str__(self):
        return self.full_name or self.username

    def get_full_name(self):
        return self.full_name

    def get_short_name(self):
        return self.full_name.split(" ")[0] if self.full_name else self.username

    # ------------------------------------------------------------------
    # Role helper properties
    # ------------------------------------------------------------------

    @property
    def is_canvasser(self):
        return self.role in self.CANVASSER_ROLES

    @property
    def is_zopper_admin(self):
        return self.role == self.Role.ZOPPER_ADMINISTRATOR

    @property
    def is_approved(self):
        return self.validation == self.Validation.APPROVED

    @property
    def is_uat_user(self):
        return bool((self.metadata or {}).get("isUatUser"))

    @property
    def home_path(self):
        return self.HOME_PATHS.get(self.role, "/login/canvasser")


class OtpCode(models.Model):
    """One-time password sent to a phone number.

    At most one live code exists per (phone, purpose): issuing a new one
    deletes the previous rows.
    """

    class Purpose(models.TextChoices):
        LOGIN = "LOGIN", "Canvasser login"
        REWARD = "REWARD", "Reward dispatch confirmation"

    phone = models.CharField("phone", max_length=20, db_index=True)
    code = models.CharField("code", max_length=6)
    purpose = models.CharField(
        "purpose",
        max_length=16,
        choices=Purpose.choices,
        default=Purpose.LOGIN,
    )
    expires_at = models.DateTimeField("expires at")
    verified = models.BooleanField("verified", default=False)
    verified_at = models.DateTimeField("verified at", null=True, blank=True)
    created_at = models.DateTimeField("created at", auto_now_add=True)

    class Meta:
        verbose_name = "OTP code"
        verbose_name_plural = "OTP codes"
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["phone", "purpose", "verified"], name="otp_phone_purpose_idx")]

    def __str__(self):
        return f"{self.phone} ({self.purpose})"

    @property
    def is_expired(self):
        return timezone.now() >= self.expires_at
