import pytest

from stores.models import Canvasser, StoreChangeRequest


@pytest.mark.django_db
def test_store_list_filters_by_search(canvasser_client, store, other_store):
    response = canvasser_client.get("/api/stores/?search=madurai")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [row["code"] for row in data["stores"]] == ["1410"]
    assert data["cities"] == ["MADURAI", "PALAYAMKOTTAI"]


@pytest.mark.django_db
def test_canvasser_profile(canvasser_client, canvasser, store):
    response = canvasser_client.get("/api/canvasser/profile/")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["phone"] == canvasser.phone
    assert data["employeeId"] == canvasser.employee_id
    assert data["store"]["id"] == str(store.pk)


@pytest.mark.django_db
def test_canvasser_profile_update_syncs_user_name(canvasser_client, canvasser):
    response = canvasser_client.post(
        "/api/canvasser/profile/update/",
        {"fullName": "Ravi K", "agency": "Field Force Ltd"},
        format="json",
    )

    assert response.status_code == 200
    canvasser.refresh_from_db()
    assert canvasser.full_name == "Ravi K"
    assert canvasser.agency == "Field Force Ltd"
    assert canvasser.user.full_name == "Ravi K"


@pytest.mark.django_db
def test_canvasser_profile_update_requires_a_field(canvasser_client):
    response = canvasser_client.post("/api/canvasser/profile/update/", {}, format="json")

    assert response.status_code == 400
    assert response.json()["error"] == "No profile fields to update"


@pytest.mark.django_db
def test_profile_missing_for_unlinked_canvasser(api_client, canvasser_user):
    api_client.force_authenticate(user=canvasser_user)

    response = api_client.get("/api/canvasser/profile/")

    assert response.status_code == 404
    assert "Canvasser profile not found" in response.json()["error"]


@pytest.mark.django_db
def test_kyc_info(canvasser_client, canvasser):
    Canvasser.objects.filter(pk=canvasser.pk).update(kyc_info={"pan": "ABCDE1234F"})

    response = canvasser_client.get("/api/canvasser/kyc/info/")

    assert response.status_code == 200
    assert response.json()["data"] == {"hasKyc": True, "kycInfo": {"pan": "ABCDE1234F"}}


@pytest.mark.django_db
def test_canvasser_submits_store_change(canvasser_client, other_store):
    response = canvasser_client.post(
        "/api/canvasser/store-change-request/",
        {"storeIds": [str(other_store.pk)], "reason": "Relocated"},
        format="json",
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["requestedStore"]["id"] == str(other_store.pk)
    assert data["status"] == "PENDING"

    listing = canvasser_client.get("/api/canvasser/store-change-request/")
    assert len(listing.json()["data"]) == 1


@pytest.mark.django_db
def test_admin_reviews_store_change(admin_client, canvasser, other_store):
    change = StoreChangeRequest.objects.create(
        canvasser=canvasser,
        current_store=canvasser.store,
        requested_store=other_store,
    )

    listing = admin_client.get("/api/admin/store-change-requests/")
    assert listing.status_code == 200
    body = listing.json()["data"]
    assert body["pagination"]["total"] == 1
    assert body["items"][0]["id"] == str(change.pk)

    response = admin_client.post(
        "/api/admin/store-change-requests/",
        {"requestId": str(change.pk), "action": "approve", "reviewNotes": "Approved"},
        format="json",
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "APPROVED"
    canvasser.refresh_from_db()
    assert canvasser.store == other_store


@pytest.mark.django_db
def test_admin_review_rejects_bad_action(admin_client, canvasser, other_store):
    change = StoreChangeRequest.objects.create(canvasser=canvasser, requested_store=other_store)

    response = admin_client.post(
        "/api/admin/store-change-requests/",
        {"requestId": str(change.pk), "action": "maybe"},
        format="json",
    )

    assert response.status_code == 400


@pytest.mark.django_db
def test_admin_cannot_review_store_change_twice(admin_client, canvasser, other_store, store):
    change = StoreChangeRequest.objects.create(canvasser=canvasser, requested_store=other_store)
    url = "/api/admin/store-change-requests/"

    first = admin_client.post(url, {"requestId": str(change.pk), "action": "reject"}, format="json")
    second = admin_client.post(url, {"requestId": str(change.pk), "action": "approve"}, format="json")

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"] == "Request has already been reviewed"
    canvasser.refresh_from_db()
    assert canvasser.store == store
