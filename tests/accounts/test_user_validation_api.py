import pytest

from accounts.models import User


@pytest.mark.django_db
def test_validation_list_defaults_to_pending(admin_client):
    User.objects.create_user("pending.one", role=User.Role.CANVASSER)
    User.objects.create_user("approved.one", validation=User.Validation.APPROVED)

    response = admin_client.get("/api/zopper-administrator/user-validate/users/")

    assert response.status_code == 200
    usernames = [user["username"] for user in response.json()["data"]["users"]]
    assert usernames == ["pending.one"]


@pytest.mark.django_db
def test_validation_list_rejects_unknown_status(admin_client):
    response = admin_client.get("/api/zopper-administrator/user-validate/users/?status=LOST")

    assert response.status_code == 400
    assert "Invalid status" in response.json()["error"]


@pytest.mark.django_db
def test_admin_can_approve_user(admin_client):
    user = User.objects.create_user("pending.one")

    response = admin_client.patch(
        f"/api/zopper-administrator/user-validate/users/{user.pk}/",
        {"validation": "APPROVED"},
        format="json",
    )

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.validation == User.Validation.APPROVED


@pytest.mark.django_db
def test_validation_update_for_unknown_user(admin_client):
    response = admin_client.patch(
        "/api/zopper-administrator/user-validate/users/00000000-0000-0000-0000-000000000000/",
        {"validation": "APPROVED"},
        format="json",
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


@pytest.mark.django_db
def test_uat_user_cannot_validate_users(api_client, uat_user):
    user = User.objects.create_user("pending.one")
    api_client.force_authenticate(user=uat_user)

    response = api_client.patch(
        f"/api/zopper-administrator/user-validate/users/{user.pk}/",
        {"validation": "APPROVED"},
        format="json",
    )

    assert response.status_code == 403
    assert response.json()["error"] == "UAT users cannot access this endpoint"


@pytest.mark.django_db
def test_canvasser_cannot_list_users(canvasser_client):
    response = canvasser_client.get("/api/zopper-administrator/user-validate/users/")

    assert response.status_code == 403


@pytest.mark.django_db
def test_admin_profile_returns_home_path(admin_client, admin_user):
    response = admin_client.get("/api/zopper-administrator/profile/")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["username"] == admin_user.username
    assert data["homePath"] == "/Zopper-Administrator"
    assert data["profile"] is None


@pytest.mark.django_db
def test_health_reports_database_status(api_client):
    response = api_client.get("/api/health/")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["database"] == "ok"
    assert payload["benepikConfigured"] is True
