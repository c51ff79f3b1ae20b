"""Account-related helper services: phone handling, OTPs, canvasser login."""

from __future__ import annotations

import logging
import re
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import DomainError, ForbiddenError

from .models import OtpCode, User

logger = logging.getLogger("spotincentive")

PHONE_LENGTH = 10


class InvalidPhone(DomainError):
    pass


class OtpError(DomainError):
    pass


class OtpExpired(OtpError):
    # the expired code is deleted before raising and that delete must stick
    rollback = False


def normalize_phone(raw) -> str:
    """Keep the digits of *raw* and return the first ten of them."""
    digits = re.sub(r"\D", "", str(raw or ""))[:PHONE_LENGTH]
    if len(digits) != PHONE_LENGTH:
        raise InvalidPhone("Please enter a valid 10-digit phone number")
    return digits


def _generate_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def issue_otp(phone: str, purpose: str = OtpCode.Purpose.LOGIN) -> OtpCode:
    """Replace any previous code for (*phone*, *purpose*) with a fresh one."""
    ttl = getattr(settings, "OTP_TTL_SECONDS", 300)
    with transaction.atomic():
        OtpCode.objects.filter(phone=phone, purpose=purpose).delete()
        otp = OtpCode.objects.create(
            phone=phone,
            code=_generate_code(),
            purpose=purpose,
            expires_at=timezone.now() + timedelta(seconds=ttl),
        )
    if settings.DEBUG:
        logger.info("OTP %s issued for %s: %s", purpose, phone, otp.code)
    else:
        logger.info("OTP %s issued for %s", purpose, phone)
    return otp


def verify_otp(phone: str, code: str, purpose: str = OtpCode.Purpose.LOGIN) -> OtpCode:
    """Consume the latest unverified code for *phone*.

    Raises :class:`OtpError` when there is no code, when it expired (the row
    is deleted) or when *code* does not match.
    """
    otp = (
        OtpCode.objects.filter(phone=phone, purpose=purpose, verified=False)
        .order_by("-created_at")
        .first()
    )
    if otp is None:
        raise OtpError("No OTP found. Please request a new one.")
    if otp.is_expired:
        otp.delete()
        raise OtpExpired("OTP expired. Please request a new one.")
    if not secrets.compare_digest(otp.code, str(code or "").strip()):
        raise OtpError("Invalid OTP")

    otp.verified = True
    otp.verified_at = timezone.now()
    otp.save(update_fields=["verified", "verified_at"])
    return otp


def has_recent_reward_otp(user) -> bool:
    """True when *user* confirmed a reward OTP inside the configured window."""
    try:
        phone = normalize_phone(user.phone)
    except InvalidPhone:
        return False
    window = getattr(settings, "REWARD_OTP_WINDOW_SECONDS", 600)
    return OtpCode.objects.filter(
        phone=phone,
        purpose=OtpCode.Purpose.REWARD,
        verified=True,
        verified_at__gte=timezone.now() - timedelta(seconds=window),
    ).exists()


def login_canvasser(phone: str) -> User:
    """Return the canvasser user for *phone*, creating it on first login.

    The matching ``stores.Canvasser`` profile is created or linked as well.
    """
    from stores.models import Canvasser

    with transaction.atomic():
        user, created = User.objects.get_or_create(
            username=phone,
            defaults={
                "phone": phone,
                "role": User.Role.CANVASSER,
                "validation": User.Validation.APPROVED,
            },
        )
        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            logger.info("Canvasser user created for %s", phone)

        if user.validation == User.Validation.BLOCKED or not user.is_active:
            raise ForbiddenError("Your account has been blocked. Please contact support.")
        if not user.is_canvasser:
            raise ForbiddenError("This phone number is not registered as a canvasser.")

        profile, _ = Canvasser.objects.get_or_create(phone=phone)
        if profile.user_id is None:
            profile.user = user
            profile.save(update_fields=["user", "updated_at"])
        if profile.full_name and not user.full_name:
            user.full_name = profile.full_name
            user.save(update_fields=["full_name"])
    return user


def set_validation(user: User, validation: str, actor=None) -> User:
    if validation not in User.Validation.values:
        raise DomainError("Invalid status. Use PENDING, APPROVED, or BLOCKED.")
    user.validation = validation
    user.save(update_fields=["validation"])
    logger.info(
        "User %s validation set to %s by %s",
        user.username,
        validation,
        getattr(actor, "username", "system"),
    )
    return user
