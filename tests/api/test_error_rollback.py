from datetime import timedelta

import pytest
from django.db import connection
from django.utils import timezone

from accounts.models import OtpCode
from accounts.services import issue_otp
from core.exceptions import DomainError
from stores.models import Store

SUBMIT_URL = "/api/canvasser/incentive-form/submit/"


@pytest.fixture
def atomic_requests(monkeypatch):
    monkeypatch.setitem(connection.settings_dict, "ATOMIC_REQUESTS", True)


def _write_then_raise(error):
    def submit(profile, data):
        Store.objects.create(name="HALF WRITTEN - (9999)", code="9999")
        raise error

    return submit


@pytest.mark.django_db(transaction=True)
def test_domain_error_rolls_back_request_writes(atomic_requests, canvasser_client, monkeypatch):
    monkeypatch.setattr(
        "api.v1.incentive_views.submit_sale", _write_then_raise(DomainError("Invalid invoice price"))
    )

    response = canvasser_client.post(SUBMIT_URL, {"serialNumber": "SN-1"}, format="json")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid invoice price"
    assert not Store.objects.filter(code="9999").exists()


@pytest.mark.django_db(transaction=True)
def test_unexpected_error_rolls_back_request_writes(atomic_requests, canvasser_client, monkeypatch):
    monkeypatch.setattr("api.v1.incentive_views.submit_sale", _write_then_raise(RuntimeError("boom")))

    response = canvasser_client.post(SUBMIT_URL, {"serialNumber": "SN-1"}, format="json")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert not Store.objects.filter(code="9999").exists()


@pytest.mark.django_db(transaction=True)
def test_expired_otp_delete_survives_error_response(atomic_requests, api_client):
    otp = issue_otp("9876543210")
    OtpCode.objects.filter(pk=otp.pk).update(expires_at=timezone.now() - timedelta(seconds=1))

    response = api_client.post(
        "/api/auth/canvasser/verify-otp/", {"phone": "9876543210", "otp": otp.code}, format="json"
    )

    assert response.status_code == 400
    assert response.json()["error"] == "OTP expired. Please request a new one."
    assert not OtpCode.objects.filter(pk=otp.pk).exists()
