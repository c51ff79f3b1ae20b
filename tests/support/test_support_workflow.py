import pytest

from accounts.models import User
from core.exceptions import DomainError
from stores.models import Canvasser
from support.models import SupportQuery
from support.services import (
    create_query,
    next_query_number,
    reply_as_canvasser,
    resolve_query,
    respond_as_admin,
    status_counts,
)

CANVASSER_URL = "/api/canvasser/support-query/"
ADMIN_URL = "/api/zopper-administrator/support-queries/"


@pytest.mark.django_db
def test_query_numbers_follow_highest(canvasser):
    assert next_query_number() == "Q0001"

    SupportQuery.objects.create(query_number="Q0041", canvasser=canvasser, category="OTHER", description="x")

    assert next_query_number() == "Q0042"


@pytest.mark.django_db
def test_create_query_stores_description_as_first_message(canvasser):
    query = create_query(canvasser, category="PAYMENT_INQUIRY", description="  Voucher not received  ")

    assert query.query_number == "Q0001"
    assert query.status == SupportQuery.Status.PENDING
    assert query.description == "Voucher not received"
    assert list(query.messages.values_list("message", flat=True)) == ["Voucher not received"]


@pytest.mark.django_db
def test_only_one_open_query_at_a_time(canvasser):
    create_query(canvasser, category="OTHER", description="First")

    with pytest.raises(DomainError) as excinfo:
        create_query(canvasser, category="OTHER", description="Second")

    assert excinfo.value.details == {"existingQueryNumber": "Q0001"}


@pytest.mark.django_db
@pytest.mark.parametrize(
    ("category", "description", "message"),
    [
        ("", "Help", "Category and description are required"),
        ("OTHER", "   ", "Category and description are required"),
        ("COMPLAINT", "Help", "Invalid category"),
        ("OTHER", "x" * 2501, "Description must be 500 words or less"),
    ],
)
def test_create_query_validation(canvasser, category, description, message):
    with pytest.raises(DomainError, match=message):
        create_query(canvasser, category=category, description=description)


@pytest.mark.django_db
def test_full_conversation(canvasser, admin_user):
    query = create_query(canvasser, category="TECHNICAL_ISSUE", description="App crashes")

    with pytest.raises(DomainError, match="until admin responds"):
        reply_as_canvasser(query, "Any update?")
    with pytest.raises(DomainError, match="before admin responds"):
        resolve_query(query)

    reply = respond_as_admin(query, "Please reinstall", admin_user)
    query.refresh_from_db()
    assert reply.is_from_admin is True
    assert reply.admin_name == "Zopper Admin"
    assert query.status == SupportQuery.Status.IN_PROGRESS

    reply_as_canvasser(query, "Works now, thanks")
    resolve_query(query)
    query.refresh_from_db()
    assert query.status == SupportQuery.Status.RESOLVED
    assert query.resolved_at is not None
    assert query.messages.count() == 3

    with pytest.raises(DomainError, match="resolved"):
        respond_as_admin(query, "Follow-up", admin_user)
    with pytest.raises(DomainError, match="already resolved"):
        resolve_query(query)

    # a resolved query frees the slot for a new one
    assert create_query(canvasser, category="OTHER", description="Another").query_number == "Q0002"


@pytest.mark.django_db
def test_status_counts(canvasser, admin_user):
    query = create_query(canvasser, category="OTHER", description="First")
    respond_as_admin(query, "Looking", admin_user)

    assert status_counts() == {"ALL": 1, "PENDING": 0, "IN_PROGRESS": 1, "RESOLVED": 0}


@pytest.mark.django_db
def test_canvasser_endpoints(canvasser_client):
    created = canvasser_client.post(
        CANVASSER_URL, {"category": "GENERAL_INQUIRY", "description": "How do I claim?"}, format="json"
    )
    assert created.status_code == 201
    assert created.json()["data"]["queryNumber"] == "Q0001"

    listing = canvasser_client.get(CANVASSER_URL)
    assert listing.status_code == 200
    assert listing.json()["data"]["canCreateNew"] is False
    assert len(listing.json()["data"]["queries"]) == 1

    second = canvasser_client.post(CANVASSER_URL, {"category": "OTHER", "description": "Again"}, format="json")
    assert second.status_code == 400
    assert second.json()["details"]["existingQueryNumber"] == "Q0001"

    query_id = created.json()["data"]["id"]
    early_reply = canvasser_client.post(f"{CANVASSER_URL}{query_id}/reply/", {"message": "Hello?"}, format="json")
    assert early_reply.status_code == 400


@pytest.mark.django_db
def test_canvasser_cannot_see_other_queries(canvasser_client, other_store):
    other_user = User.objects.create_user("9123456780", phone="9123456780", role=User.Role.CANVASSER)
    other = Canvasser.objects.create(user=other_user, phone="9123456780", store=other_store)
    query = create_query(other, category="OTHER", description="Mine")

    response = canvasser_client.post(f"{CANVASSER_URL}{query.pk}/resolve/")

    assert response.status_code == 404
    assert response.json()["error"] == "Query not found"


@pytest.mark.django_db
def test_admin_endpoints(api_client, admin_user, canvasser):
    query = create_query(canvasser, category="BUG_REPORT", description="Passbook shows wrong total")
    api_client.force_authenticate(user=admin_user)

    listing = api_client.get(ADMIN_URL, {"status": "pending"})
    assert listing.status_code == 200
    data = listing.json()["data"]
    assert [item["queryNumber"] for item in data["items"]] == ["Q0001"]
    assert data["statusCounts"]["PENDING"] == 1
    assert data["pagination"]["total"] == 1
    assert data["items"][0]["canvasser"]["store"]["city"] == "PALAYAMKOTTAI"

    detail = api_client.get(f"{ADMIN_URL}{query.pk}/")
    assert detail.json()["data"]["messages"][0]["message"] == "Passbook shows wrong total"

    responded = api_client.post(f"{ADMIN_URL}{query.pk}/respond/", {"message": "Fixed"}, format="json")
    assert responded.status_code == 201
    assert responded.json()["data"]["status"] == "IN_PROGRESS"

    bad_filter = api_client.get(ADMIN_URL, {"status": "closed"})
    assert bad_filter.status_code == 400

    api_client.force_authenticate(user=canvasser.user)
    resolved = api_client.post(f"{CANVASSER_URL}{query.pk}/resolve/")
    assert resolved.status_code == 200
    assert resolved.json()["data"]["status"] == "RESOLVED"
