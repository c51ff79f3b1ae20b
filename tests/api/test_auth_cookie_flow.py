import json

import pytest
from django.conf import settings
from django.test import Client

from accounts.models import User


def _login_via_api(client, username: str, password: str):
    return client.post(
        "/api/auth/login/",
        data=json.dumps({"username": username, "password": password}),
        content_type="application/json",
    )


def _otp_login(client, phone="9876543210"):
    sent = client.post(
        "/api/auth/canvasser/send-otp/",
        data=json.dumps({"phone": phone}),
        content_type="application/json",
    )
    assert sent.status_code == 200
    return client.post(
        "/api/auth/canvasser/verify-otp/",
        data=json.dumps({"phone": phone, "otp": sent.json()["otp"]}),
        content_type="application/json",
    )


@pytest.mark.django_db
def test_auth_csrf_endpoint_returns_token(client):
    response = client.get("/api/auth/csrf/")

    assert response.status_code == 200
    payload = response.json()
    assert "csrfToken" in payload
    assert payload["csrfToken"]


@pytest.mark.django_db
def test_auth_login_sets_http_only_jwt_cookies(client, admin_user):
    response = _login_via_api(client, admin_user.username, "testpass123")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["user"]["username"] == admin_user.username
    assert payload["homePath"] == "/Zopper-Administrator"
    assert "access" not in payload
    assert "refresh" not in payload

    access_cookie_name = settings.JWT_AUTH_COOKIE
    refresh_cookie_name = settings.JWT_AUTH_REFRESH_COOKIE
    assert access_cookie_name in response.cookies
    assert refresh_cookie_name in response.cookies
    assert response.cookies[access_cookie_name]["httponly"]
    assert response.cookies[refresh_cookie_name]["httponly"]


@pytest.mark.django_db
def test_auth_login_rejects_pending_user(client):
    User.objects.create_user("pending.admin", password="testpass123", role=User.Role.ZOPPER_ADMINISTRATOR)

    response = _login_via_api(client, "pending.admin", "testpass123")

    assert response.status_code == 403
    assert response.json()["error"] == "Your account is pending approval."


@pytest.mark.django_db
def test_auth_login_rejects_bad_password(client, admin_user):
    response = _login_via_api(client, admin_user.username, "wrong-password")

    assert response.status_code == 401
    assert "error" in response.json()


@pytest.mark.django_db
def test_canvasser_otp_login_creates_account_and_sets_cookies(client):
    response = _otp_login(client)

    assert response.status_code == 200
    payload = response.json()
    assert payload["homePath"] == "/canvasser/home"
    assert payload["user"]["role"] == "CANVASSER"
    assert payload["user"]["profile"]["phone"] == "9876543210"
    assert settings.JWT_AUTH_COOKIE in response.cookies

    verify = client.get("/api/auth/verify/")
    assert verify.status_code == 200
    assert verify.json()["authenticated"] is True


@pytest.mark.django_db
def test_send_otp_rejects_invalid_phone(client):
    response = client.post(
        "/api/auth/canvasser/send-otp/",
        data=json.dumps({"phone": "12345"}),
        content_type="application/json",
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Please enter a valid 10-digit phone number"


@pytest.mark.django_db
def test_verify_otp_requires_code(client):
    response = client.post(
        "/api/auth/sec/verify-otp/",
        data=json.dumps({"phone": "9876543210"}),
        content_type="application/json",
    )

    assert response.status_code == 400


@pytest.mark.django_db
def test_verify_without_cookies_is_unauthenticated(client):
    response = client.get("/api/auth/verify/")

    assert response.status_code == 401


@pytest.mark.django_db
def test_blocked_user_cookie_is_rejected(client, admin_user):
    assert _login_via_api(client, admin_user.username, "testpass123").status_code == 200
    admin_user.validation = User.Validation.BLOCKED
    admin_user.save(update_fields=["validation"])

    response = client.get("/api/auth/verify/")

    assert response.status_code == 401
    assert response.json()["error"] == "Account is not approved"


@pytest.mark.django_db
def test_cookie_authenticated_post_requires_csrf_header(admin_user):
    strict_client = Client(enforce_csrf_checks=True)
    login_response = _login_via_api(strict_client, admin_user.username, "testpass123")
    assert login_response.status_code == 200

    # Without CSRF header -> denied for cookie-authenticated unsafe method.
    response_no_csrf = strict_client.post(
        "/api/zopper-administrator/spot-incentive-report/send-reward-otp/",
        data=json.dumps({}),
        content_type="application/json",
    )
    assert response_no_csrf.status_code == 403

    csrf_response = strict_client.get("/api/auth/csrf/")
    csrf_token = csrf_response.json()["csrfToken"]

    response_with_csrf = strict_client.post(
        "/api/zopper-administrator/spot-incentive-report/send-reward-otp/",
        data=json.dumps({}),
        content_type="application/json",
        HTTP_X_CSRFTOKEN=csrf_token,
    )
    assert response_with_csrf.status_code == 200


@pytest.mark.django_db
def test_refresh_cookie_alone_authenticates(client, admin_user):
    assert _login_via_api(client, admin_user.username, "testpass123").status_code == 200
    del client.cookies[settings.JWT_AUTH_COOKIE]

    response = client.get("/api/auth/verify/")

    assert response.status_code == 200
    assert response.json()["user"]["username"] == admin_user.username


@pytest.mark.django_db
def test_refresh_uses_refresh_cookie_when_body_missing(client, admin_user):
    login_response = _login_via_api(client, admin_user.username, "testpass123")
    assert login_response.status_code == 200

    refresh_response = client.post(
        "/api/auth/token/refresh/",
        data=json.dumps({}),
        content_type="application/json",
    )

    assert refresh_response.status_code == 200
    assert settings.JWT_AUTH_COOKIE in refresh_response.cookies


@pytest.mark.django_db
def test_refresh_without_token_is_unauthorized(client):
    response = client.post(
        "/api/auth/token/refresh/",
        data=json.dumps({}),
        content_type="application/json",
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Refresh token missing"


@pytest.mark.django_db
def test_logout_blacklists_refresh_and_clears_cookies(client, admin_user):
    login_response = _login_via_api(client, admin_user.username, "testpass123")
    refresh_token = login_response.cookies[settings.JWT_AUTH_REFRESH_COOKIE].value

    response = client.post("/api/auth/logout/")

    assert response.status_code == 204
    assert response.cookies[settings.JWT_AUTH_COOKIE].value == ""

    reuse = client.post(
        "/api/auth/token/refresh/",
        data=json.dumps({"refresh": refresh_token}),
        content_type="application/json",
    )
    assert reuse.status_code == 401
