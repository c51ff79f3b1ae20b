from decimal import Decimal

import pytest

from core.exceptions import ConflictError, DomainError, ForbiddenError, NotFoundError
from incentives.models import SpotIncentiveReport
from rewards.benepik import BenepikUnavailable
from rewards.services import (
    build_reward_payload,
    require_reward_otp,
    send_reward,
    send_rewards_bulk,
)
from rewards.tasks import reconcile_pending_balance, send_reward_task

REPORT_URL = "/api/zopper-administrator/spot-incentive-report/"


@pytest.mark.django_db
def test_reward_payload_row(make_report):
    report = make_report("SN-1", "150")

    payload = build_reward_payload([report])

    assert payload["isSms"] == "1"
    row = payload["data"][0]
    assert row["sno"] == "1"
    assert row["mobileNumber"] == "9876543210"
    assert row["emailAddress"] == "ravi@example.com"
    assert row["rewardAmount"] == "150"
    assert row["reference"] == str(report.pk)
    assert row["transactionId"].startswith(f"TXN-{report.pk}-")
    assert row["column2"] == "SN-1"


@pytest.mark.django_db
def test_send_reward_marks_report_paid(make_report, admin_user, fake_benepik):
    report = make_report("SN-1", "150")
    client = fake_benepik()

    result = send_reward(str(report.pk), client=client, actor=admin_user)

    report.refresh_from_db()
    assert result["success"] is True
    assert result["transactionId"] == report.transaction_id
    assert report.paid_at is not None
    assert report.transaction_metadata["status"] == "SENT"
    assert report.transaction_metadata["sentBy"] == str(admin_user.pk)
    assert len(client.payloads) == 1


@pytest.mark.django_db
def test_send_reward_twice_conflicts(make_report, fake_benepik):
    report = make_report("SN-1", "150")
    client = fake_benepik()
    send_reward(str(report.pk), client=client)

    with pytest.raises(ConflictError) as excinfo:
        send_reward(str(report.pk), client=client)

    assert excinfo.value.details["transactionId"]
    assert len(client.payloads) == 1


@pytest.mark.django_db
def test_send_reward_provider_unavailable(make_report, fake_benepik):
    report = make_report("SN-1", "150")

    with pytest.raises(DomainError) as excinfo:
        send_reward(str(report.pk), client=fake_benepik(error=BenepikUnavailable("timeout")))

    assert excinfo.value.status_code == 502
    report.refresh_from_db()
    assert report.transaction_id is None
    assert report.paid_at is None


@pytest.mark.django_db
def test_send_reward_rejected_by_provider(make_report, fake_benepik):
    report = make_report("SN-1", "150")
    body = {"data": {"code": 1012, "success": 0, "batchResponse": []}}

    with pytest.raises(DomainError) as excinfo:
        send_reward(str(report.pk), client=fake_benepik(body=body))

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Insufficient Balance"
    assert excinfo.value.details["code"] == 1012
    report.refresh_from_db()
    assert report.transaction_id is None


@pytest.mark.django_db
def test_send_reward_skips_zero_incentive(make_report, fake_benepik):
    report = make_report("SN-1", "0")

    with pytest.raises(DomainError, match="No incentive"):
        send_reward(str(report.pk), client=fake_benepik())


@pytest.mark.django_db
def test_send_reward_unknown_report(fake_benepik):
    with pytest.raises(NotFoundError):
        send_reward("not-a-uuid", client=fake_benepik())


@pytest.mark.django_db
def test_bulk_send_reports_each_outcome(make_report, fake_benepik):
    first = make_report("SN-1", "150")
    second = make_report("SN-2", "0")
    client = fake_benepik()
    send_reward(str(first.pk), client=client)
    third = make_report("SN-3", "100")

    result = send_rewards_bulk([str(first.pk), str(second.pk), str(third.pk), str(third.pk)], client=client)

    assert (result["sent"], result["skipped"], result["failed"]) == (1, 1, 1)
    statuses = {row["reportId"]: row["status"] for row in result["results"]}
    assert statuses == {str(first.pk): "skipped", str(second.pk): "failed", str(third.pk): "sent"}


def test_bulk_send_validates_ids():
    with pytest.raises(DomainError, match="non-empty array"):
        send_rewards_bulk([])
    with pytest.raises(DomainError, match="must be strings"):
        send_rewards_bulk([1, 2])


@pytest.mark.django_db
def test_reward_otp_gate(admin_user):
    with pytest.raises(ForbiddenError):
        require_reward_otp(admin_user)


@pytest.mark.django_db
def test_send_reward_endpoint(admin_client, make_report, benepik_http):
    report = make_report("SN-1", "150")

    response = admin_client.post(f"{REPORT_URL}{report.pk}/send-reward/")

    assert response.status_code == 200
    assert response.json()["canvasserPhone"] == "9876543210"
    assert len(benepik_http.calls) == 1

    again = admin_client.post(f"{REPORT_URL}{report.pk}/send-reward/")
    assert again.status_code == 409
    assert again.json()["error"] == "Reward already sent for this report"
    assert "transactionId" in again.json()["details"]


@pytest.mark.django_db
def test_send_reward_endpoint_denies_uat_users(api_client, uat_user, make_report):
    report = make_report("SN-1", "150")
    api_client.force_authenticate(user=uat_user)

    response = api_client.post(f"{REPORT_URL}{report.pk}/send-reward/")

    assert response.status_code == 403


@pytest.mark.django_db
def test_bulk_send_requires_verified_otp(admin_client, make_report, benepik_http):
    report = make_report("SN-1", "150")
    body = {"reportIds": [str(report.pk)]}

    blocked = admin_client.post(f"{REPORT_URL}send-reward/", body, format="json")
    assert blocked.status_code == 403
    assert blocked.json()["error"] == "OTP verification required before sending rewards"

    otp = admin_client.post(f"{REPORT_URL}send-reward-otp/").json()["otp"]
    wrong_code = "111111" if otp == "000000" else "000000"
    wrong = admin_client.post(f"{REPORT_URL}send-reward-otp/verify/", {"otp": wrong_code}, format="json")
    assert wrong.status_code == 400
    assert wrong.json()["error"] == "Invalid OTP"

    verified = admin_client.post(f"{REPORT_URL}send-reward-otp/verify/", {"otp": otp}, format="json")
    assert verified.status_code == 200

    response = admin_client.post(f"{REPORT_URL}send-reward/", body, format="json")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["data"]["sent"] == 1
    assert SpotIncentiveReport.objects.get(pk=report.pk).transaction_id


@pytest.mark.django_db
def test_send_reward_task_reports_conflicts(make_report, benepik_http):
    report = make_report("SN-1", "150")

    first = send_reward_task.apply(args=[str(report.pk)]).get()
    second = send_reward_task.apply(args=[str(report.pk)]).get()

    assert first["success"] is True
    assert second == {
        "success": False,
        "reportId": str(report.pk),
        "error": "Reward already sent for this report",
    }


@pytest.mark.django_db
def test_reconcile_pending_balance_task(make_report):
    make_report(
        "SN-1",
        "150",
        transaction_id="TXN-1",
        transaction_metadata={
            "status": "SENT",
            "benepikResponse": {
                "code": 1000,
                "success": 1,
                "batchResponse": [{"code": 1012, "success": 0}],
            },
        },
    )

    assert reconcile_pending_balance() == {"scanned": 1, "flagged": 1}
    report = SpotIncentiveReport.objects.get(serial_number="SN-1")
    assert report.payout_status == "PENDING_BALANCE"
    assert report.incentive_earned == Decimal("150")
