import hashlib
import hmac
import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from core.exceptions import DomainError
from incentives.models import SpotIncentiveReport
from rewards.services import flag_pending_balance, process_webhook, verify_webhook_signature

URL = "/api/webhooks/benepik/"
SECRET = "test-webhook-secret"


def _sign(raw):
    return hmac.new(SECRET.encode(), raw, hashlib.sha256).hexdigest()


def _event(event_type, transaction_id="TXN-1", amount="150"):
    return {
        "eventType": event_type,
        "rewardTransactionDetails": [{"transactionId": transaction_id, "rewardAmount": amount}],
    }


def _post(client, payload, signature=None):
    raw = json.dumps(payload).encode()
    headers = {}
    if signature is not False:
        headers["HTTP_X_BENEPIK_SIGNATURE"] = signature or _sign(raw)
    return client.post(URL, raw, content_type="application/json", **headers)


@pytest.fixture
def sent_report(make_report):
    return make_report(
        "SN-1",
        "150",
        paid_at=timezone.now(),
        transaction_id="TXN-1",
        transaction_metadata={"status": "SENT", "history": [{"event": "SENT", "at": "2024-06-15T10:00:00"}]},
    )


def test_signature_check():
    raw = b'{"eventType":"REWARD_PROCESSED"}'

    assert verify_webhook_signature(raw, _sign(raw), SECRET)
    assert verify_webhook_signature(raw, _sign(raw).upper(), SECRET)
    assert not verify_webhook_signature(raw, "deadbeef", SECRET)
    assert not verify_webhook_signature(raw, None, SECRET)
    assert not verify_webhook_signature(raw, _sign(raw), "")


@pytest.mark.django_db
def test_processed_event_marks_paid(sent_report):
    result = process_webhook(_event("REWARD_PROCESSED"))

    assert result["results"] == [
        {"transactionId": "TXN-1", "reportId": str(sent_report.pk), "status": "paid"}
    ]
    sent_report.refresh_from_db()
    assert sent_report.payout_status == "PAID"
    assert [entry["event"] for entry in sent_report.transaction_metadata["history"]] == [
        "SENT",
        "REWARD_PROCESSED",
    ]

    repeat = process_webhook(_event("REWARD_PROCESSED"))
    assert repeat["results"][0]["status"] == "already processed"


@pytest.mark.django_db
def test_rejected_event_clears_payout(sent_report):
    result = process_webhook(_event("REWARD_REJECTED"))

    assert result["results"][0]["status"] == "rejected"
    sent_report.refresh_from_db()
    assert sent_report.transaction_id is None
    assert sent_report.paid_at is None
    assert sent_report.transaction_metadata == {}


@pytest.mark.django_db
def test_insufficient_funds_and_validation_events(sent_report, make_report):
    make_report("SN-2", "100", transaction_id="TXN-2", transaction_metadata={"status": "SENT"})

    process_webhook(_event("INSUFFICIENT_FUNDS"))
    process_webhook(_event("REWARD_VALIDATION_FAILED", transaction_id="TXN-2"))

    assert SpotIncentiveReport.objects.get(transaction_id="TXN-1").payout_status == "PENDING_BALANCE"
    assert SpotIncentiveReport.objects.get(transaction_id="TXN-2").payout_status == "VALIDATION_FAILED"


@pytest.mark.django_db
def test_unknown_transaction_is_reported():
    result = process_webhook(_event("REWARD_PROCESSED", transaction_id="TXN-404"))

    assert result["results"] == [{"transactionId": "TXN-404", "status": "report not found"}]


def test_webhook_requires_details():
    with pytest.raises(DomainError, match="No transaction details"):
        process_webhook({"eventType": "REWARD_PROCESSED", "rewardTransactionDetails": []})


@pytest.mark.django_db
def test_webhook_endpoint_checks_signature(api_client, sent_report):
    missing = _post(api_client, _event("REWARD_PROCESSED"), signature=False)
    assert missing.status_code == 401
    assert missing.json()["error"] == "Missing signature header"

    invalid = _post(api_client, _event("REWARD_PROCESSED"), signature="0" * 64)
    assert invalid.status_code == 401
    assert invalid.json()["error"] == "Invalid signature"

    sent_report.refresh_from_db()
    assert sent_report.payout_status == "SENT"


@pytest.mark.django_db
def test_webhook_endpoint_applies_event(api_client, sent_report):
    response = _post(api_client, _event("REWARD_PROCESSED"))

    assert response.status_code == 200
    assert response.json()["message"] == "Webhook processed: REWARD_PROCESSED"
    sent_report.refresh_from_db()
    assert sent_report.payout_status == "PAID"


@pytest.mark.django_db
def test_webhook_endpoint_without_secret(api_client, settings):
    settings.BENEPIK_WEBHOOK_SECRET = ""

    response = _post(api_client, _event("REWARD_PROCESSED"))

    assert response.status_code == 500


@pytest.mark.django_db
def test_flag_pending_balance_dry_run(make_report):
    metadata = {
        "status": "SENT",
        "benepikResponse": {"data": {"code": 1000, "success": 1, "batchResponse": [{"code": 1012, "success": 0}]}},
    }
    make_report("SN-1", "150", transaction_id="TXN-1", transaction_metadata=metadata)
    make_report("SN-2", "150", transaction_id="TXN-2", transaction_metadata={"status": "SENT"})

    assert flag_pending_balance(dry_run=True) == {"scanned": 2, "flagged": 1}
    assert SpotIncentiveReport.objects.get(transaction_id="TXN-1").payout_status == "SENT"

    out = StringIO()
    call_command("flag_pending_balance", stdout=out)
    assert "Flagged 1 report(s) out of 2 scanned" in out.getvalue()
    assert SpotIncentiveReport.objects.get(transaction_id="TXN-1").payout_status == "PENDING_BALANCE"
