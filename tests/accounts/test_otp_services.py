from datetime import timedelta

import pytest
from django.utils import timezone

from accounts.models import OtpCode, User
from accounts.services import (
    InvalidPhone,
    OtpError,
    has_recent_reward_otp,
    issue_otp,
    login_canvasser,
    normalize_phone,
    verify_otp,
)
from accounts.tasks import purge_expired_otps
from core.exceptions import ForbiddenError
from stores.models import Canvasser


def test_normalize_phone_keeps_first_ten_digits():
    assert normalize_phone("98765-43210") == "9876543210"
    assert normalize_phone("98765432109999") == "9876543210"


def test_normalize_phone_rejects_short_numbers():
    with pytest.raises(InvalidPhone):
        normalize_phone("12345")
    with pytest.raises(InvalidPhone):
        normalize_phone(None)


@pytest.mark.django_db
def test_issue_otp_replaces_previous_code():
    first = issue_otp("9876543210")
    second = issue_otp("9876543210")

    assert len(second.code) == 6
    assert second.code.isdigit()
    assert not OtpCode.objects.filter(pk=first.pk).exists()
    assert OtpCode.objects.filter(phone="9876543210", purpose=OtpCode.Purpose.LOGIN).count() == 1


@pytest.mark.django_db
def test_issue_otp_keeps_codes_of_other_purpose():
    issue_otp("9876543210", OtpCode.Purpose.REWARD)
    issue_otp("9876543210", OtpCode.Purpose.LOGIN)

    assert OtpCode.objects.filter(phone="9876543210").count() == 2


@pytest.mark.django_db
def test_verify_otp_marks_code_verified():
    otp = issue_otp("9876543210")

    verified = verify_otp("9876543210", otp.code)

    assert verified.pk == otp.pk
    assert verified.verified is True
    assert verified.verified_at is not None


@pytest.mark.django_db
def test_verify_otp_without_code_on_file():
    with pytest.raises(OtpError, match="No OTP found"):
        verify_otp("9876543210", "123456")


@pytest.mark.django_db
def test_verify_otp_rejects_wrong_code():
    otp = issue_otp("9876543210")
    wrong = "000000" if otp.code != "000000" else "111111"

    with pytest.raises(OtpError, match="Invalid OTP"):
        verify_otp("9876543210", wrong)


@pytest.mark.django_db
def test_verify_otp_deletes_expired_code():
    otp = issue_otp("9876543210")
    OtpCode.objects.filter(pk=otp.pk).update(expires_at=timezone.now() - timedelta(seconds=1))

    with pytest.raises(OtpError, match="OTP expired"):
        verify_otp("9876543210", otp.code)
    assert not OtpCode.objects.filter(pk=otp.pk).exists()


@pytest.mark.django_db
def test_has_recent_reward_otp_respects_window(admin_user, settings):
    settings.REWARD_OTP_WINDOW_SECONDS = 600
    otp = issue_otp(admin_user.phone, OtpCode.Purpose.REWARD)
    assert has_recent_reward_otp(admin_user) is False

    verify_otp(admin_user.phone, otp.code, OtpCode.Purpose.REWARD)
    assert has_recent_reward_otp(admin_user) is True

    OtpCode.objects.filter(pk=otp.pk).update(verified_at=timezone.now() - timedelta(minutes=11))
    assert has_recent_reward_otp(admin_user) is False


@pytest.mark.django_db
def test_login_canvasser_creates_user_and_profile():
    user = login_canvasser("9123456780")

    assert user.username == "9123456780"
    assert user.role == User.Role.CANVASSER
    assert user.validation == User.Validation.APPROVED
    assert not user.has_usable_password()
    profile = Canvasser.objects.get(phone="9123456780")
    assert profile.user_id == user.pk
    assert profile.employee_id == "CANV-0001"


@pytest.mark.django_db
def test_login_canvasser_links_preloaded_profile(store):
    Canvasser.objects.create(phone="9123456780", full_name="Preloaded Agent", store=store)

    user = login_canvasser("9123456780")

    assert user.full_name == "Preloaded Agent"
    assert Canvasser.objects.get(phone="9123456780").user_id == user.pk


@pytest.mark.django_db
def test_login_canvasser_refuses_blocked_user(canvasser_user):
    canvasser_user.validation = User.Validation.BLOCKED
    canvasser_user.save(update_fields=["validation"])

    with pytest.raises(ForbiddenError):
        login_canvasser(canvasser_user.username)


@pytest.mark.django_db
def test_login_canvasser_refuses_admin_phone(admin_user):
    User.objects.create_user(
        "9000000002",
        role=User.Role.ZOPPER_ADMINISTRATOR,
        validation=User.Validation.APPROVED,
    )

    with pytest.raises(ForbiddenError):
        login_canvasser("9000000002")


@pytest.mark.django_db
def test_purge_expired_otps_keeps_live_and_verified_codes():
    live = issue_otp("9876543210")
    stale = issue_otp("9123456780")
    used = issue_otp("9000000009")
    verify_otp("9000000009", used.code)
    past = timezone.now() - timedelta(minutes=1)
    OtpCode.objects.filter(pk__in=[stale.pk, used.pk]).update(expires_at=past)

    deleted = purge_expired_otps()

    assert deleted == 1
    assert set(OtpCode.objects.values_list("pk", flat=True)) == {live.pk, used.pk}
