"""
Reward payouts for spot incentive reports.

A report is sent at most once: ``transaction_id`` is set on a successful
call and only cleared again when the provider rejects the reward through
the webhook. Status updates from the provider are recorded in
``transaction_metadata["status"]`` and ``transaction_metadata["history"]``.
"""
import hashlib
import hmac
import logging
import time

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from accounts.models import OtpCode
from accounts.services import has_recent_reward_otp, issue_otp, normalize_phone, verify_otp
from core.exceptions import ConflictError, DomainError, ForbiddenError, NotFoundError
from core.formatting import format_dmy
from core.lookups import find_by_pk
from incentives.models import SpotIncentiveReport

from .benepik import (
    INSUFFICIENT_BALANCE_CODE,
    SUCCESS_CODE,
    BenepikClient,
    BenepikUnavailable,
    error_message,
    is_success,
    unwrap_response,
)

logger = logging.getLogger("spotincentive")

Status = SpotIncentiveReport.PayoutStatus

EVENT_PROCESSED = "REWARD_PROCESSED"
EVENT_REJECTED = "REWARD_REJECTED"
EVENT_INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
EVENT_VALIDATION_FAILED = "REWARD_VALIDATION_FAILED"


def _reports_queryset():
    return SpotIncentiveReport.objects.select_related("canvasser", "store", "sku", "plan")


# =========================================================================
# Payload
# =========================================================================

def _transaction_id(report):
    return f"TXN-{report.pk}-{int(time.time() * 1000)}"


def build_reward_row(report, sno=1):
    canvasser = report.canvasser
    return {
        "sno": str(sno),
        "userName": canvasser.full_name or "Canvasser",
        "emailAddress": canvasser.email or "",
        "countryCode": "+91",
        "mobileNumber": canvasser.phone,
        "rewardAmount": str(int(report.incentive_earned)),
        "personalMessage": "",
        "messageFrom": "",
        "ccEmailAddress": "",
        "bccEmailAddress": "",
        "reference": str(report.pk),
        "mailer": "1058",
        "certificateId": "",
        "transactionId": _transaction_id(report),
        "entityId": "1063",
        "column1": report.store.name,
        "column2": report.serial_number,
        "column3": report.plan.plan_type,
        "column4": format_dmy(report.date_of_sale),
        "column5": report.sku.category,
    }


def build_reward_payload(reports):
    return {
        "source": "0",
        "isSms": "1",
        "isWhatsApp": "0",
        "isEmail": "0",
        "data": [build_reward_row(report, index) for index, report in enumerate(reports, start=1)],
    }


def _ensure_sendable(report):
    if report.transaction_id:
        raise ConflictError(
            "Reward already sent for this report",
            details={"transactionId": report.transaction_id},
        )
    if not report.canvasser.phone:
        raise DomainError("Canvasser phone number is missing for this report")
    if report.incentive_earned <= 0:
        raise DomainError("No incentive to pay for this report")


# =========================================================================
# Sending
# =========================================================================

def send_reward(report_id, *, client=None, actor=None) -> dict:
    """Pay out one report through Benepik.

    The row is locked for the duration of the call so that two admins
    cannot send the same report twice.
    """
    client = client or BenepikClient()
    with transaction.atomic():
        report = find_by_pk(_reports_queryset().select_for_update(of=("self",)), report_id)
        if report is None:
            raise NotFoundError("Report not found")
        _ensure_sendable(report)

        payload = build_reward_payload([report])
        try:
            http_status, body = client.send_rewards(payload)
        except BenepikUnavailable as exc:
            raise DomainError(
                "Benepik service unavailable",
                status_code=502,
                details={"reason": str(exc)},
            ) from exc

        if not is_success(http_status, body):
            inner = unwrap_response(body)
            logger.warning(
                "Reward for report %s rejected: HTTP %s code %s",
                report.pk,
                http_status,
                inner.get("code"),
            )
            raise DomainError(
                error_message(http_status, inner),
                details={
                    "code": inner.get("code") or http_status,
                    "httpStatus": http_status,
                    "batchResponse": inner.get("batchResponse"),
                },
            )

        row = payload["data"][0]
        now = timezone.now()
        report.paid_at = now
        report.transaction_id = row["transactionId"]
        report.transaction_metadata = {
            "payload": row,
            "benepikResponse": body,
            "sentAt": now.isoformat(),
            "sentBy": str(actor.pk) if actor is not None else None,
            "status": Status.SENT,
            "history": [{"event": "SENT", "at": now.isoformat()}],
        }
        report.save(update_fields=["paid_at", "transaction_id", "transaction_metadata", "updated_at"])

    logger.info("Reward %s sent for report %s (%s)", report.transaction_id, report.pk, report.canvasser.phone)
    return {
        "success": True,
        "message": "Reward sent successfully",
        "reportId": str(report.pk),
        "transactionId": report.transaction_id,
        "canvasserPhone": report.canvasser.phone,
        "rewardAmount": row["rewardAmount"],
    }


def send_rewards_bulk(report_ids, *, client=None, actor=None) -> dict:
    """Send every eligible report in *report_ids*, one call per report."""
    if not isinstance(report_ids, list) or not report_ids:
        raise DomainError("reportIds must be a non-empty array")
    if not all(isinstance(report_id, str) for report_id in report_ids):
        raise DomainError("All reportIds must be strings")

    client = client or BenepikClient()
    results = []
    counts = {"sent": 0, "skipped": 0, "failed": 0}
    for report_id in dict.fromkeys(report_ids):
        try:
            outcome = send_reward(report_id, client=client, actor=actor)
        except ConflictError as exc:
            counts["skipped"] += 1
            results.append({"reportId": report_id, "status": "skipped", "error": exc.message})
        except DomainError as exc:
            counts["failed"] += 1
            results.append({"reportId": report_id, "status": "failed", "error": exc.message})
        else:
            counts["sent"] += 1
            results.append({"reportId": report_id, "status": "sent", "transactionId": outcome["transactionId"]})

    logger.info("Bulk reward send: %(sent)d sent, %(skipped)d skipped, %(failed)d failed", counts)
    return {**counts, "results": results}


# =========================================================================
# OTP gate for bulk sends
# =========================================================================

def _admin_phone(user):
    if not user.phone:
        raise DomainError("No phone number on your profile. Add one to receive the OTP.")
    return normalize_phone(user.phone)


def send_reward_otp(user) -> dict:
    otp = issue_otp(_admin_phone(user), OtpCode.Purpose.REWARD)
    data = {"success": True, "message": "OTP sent successfully"}
    if getattr(settings, "OTP_DEBUG_RETURN_CODE", False):
        data["otp"] = otp.code
    return data


def verify_reward_otp(user, code) -> dict:
    if not code:
        raise DomainError("OTP is required")
    verify_otp(_admin_phone(user), code, OtpCode.Purpose.REWARD)
    return {"success": True, "message": "OTP verified successfully"}


def require_reward_otp(user):
    if getattr(settings, "REWARD_OTP_REQUIRED", True) and not has_recent_reward_otp(user):
        raise ForbiddenError("OTP verification required before sending rewards")


# =========================================================================
# Webhook
# =========================================================================

def verify_webhook_signature(raw_body: bytes, signature, secret) -> bool:
    if not signature or not secret:
        return False
    expected = hmac.new(secret.encode(), raw_body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, str(signature).strip().lower())


def _batch_entries(metadata):
    response = unwrap_response((metadata or {}).get("benepikResponse"))
    return response.get("batchResponse") or []


def _is_finalized(report):
    metadata = report.transaction_metadata or {}
    if metadata.get("status") != Status.PAID:
        return False
    return any(
        entry.get("code") == SUCCESS_CODE and entry.get("success") == 1
        for entry in _batch_entries(metadata)
        if isinstance(entry, dict)
    )


def _apply_event(report, event, detail, now):
    metadata = dict(report.transaction_metadata or {})
    history = list(metadata.get("history") or [])
    history.append({"event": event, "at": now.isoformat()})

    if event == EVENT_REJECTED:
        report.transaction_id = None
        report.transaction_metadata = {}
        report.paid_at = None
        report.save(update_fields=["transaction_id", "transaction_metadata", "paid_at", "updated_at"])
        return "rejected"

    metadata["history"] = history
    metadata["webhookEventType"] = event
    metadata["webhookProcessedAt"] = now.isoformat()
    update_fields = ["transaction_metadata", "updated_at"]

    if event == EVENT_PROCESSED:
        metadata["status"] = Status.PAID
        metadata["benepikResponse"] = {
            "success": True,
            "data": {
                "code": SUCCESS_CODE,
                "success": 1,
                "message": "Reward processed successfully",
                "batchResponse": [
                    {
                        "code": SUCCESS_CODE,
                        "success": 1,
                        "message": "Reward processed successfully",
                        "txns": [
                            {
                                "transactionId": report.transaction_id,
                                "rewardAmount": detail.get("rewardAmount"),
                            }
                        ],
                    }
                ],
            },
        }
        report.paid_at = now
        update_fields.append("paid_at")
        outcome = "paid"
    elif event == EVENT_INSUFFICIENT_FUNDS:
        metadata["status"] = Status.PENDING_BALANCE
        outcome = "pending_balance"
    elif event == EVENT_VALIDATION_FAILED:
        metadata["status"] = Status.VALIDATION_FAILED
        outcome = "validation_failed"
    else:
        logger.warning("Unknown Benepik event %s for report %s", event, report.pk)
        outcome = "recorded"

    report.transaction_metadata = metadata
    report.save(update_fields=update_fields)
    return outcome


def process_webhook(payload) -> dict:
    """Apply a Benepik status callback to the matching reports."""
    if not isinstance(payload, dict):
        raise DomainError("Invalid payload")
    event = payload.get("eventType") or ""
    details = payload.get("rewardTransactionDetails") or []
    if not isinstance(details, list) or not details:
        raise DomainError("No transaction details")

    now = timezone.now()
    results = []
    with transaction.atomic():
        for detail in details:
            if not isinstance(detail, dict):
                continue
            transaction_id = detail.get("transactionId")
            entry = {"transactionId": transaction_id}
            report = (
                SpotIncentiveReport.objects.select_for_update()
                .filter(transaction_id=transaction_id)
                .first()
                if transaction_id
                else None
            )
            if report is None:
                logger.warning("Benepik webhook %s: no report for transaction %s", event, transaction_id)
                results.append({**entry, "status": "report not found"})
                continue
            entry["reportId"] = str(report.pk)
            if _is_finalized(report):
                results.append({**entry, "status": "already processed"})
                continue
            results.append({**entry, "status": _apply_event(report, event, detail, now)})

    logger.info("Benepik webhook %s processed for %d transaction(s)", event, len(results))
    return {"success": True, "message": f"Webhook processed: {event}", "results": results}


# =========================================================================
# Pending balance reconciliation
# =========================================================================

def _has_pending_balance(metadata):
    response = unwrap_response((metadata or {}).get("benepikResponse"))
    if response.get("code") != SUCCESS_CODE:
        return False
    return any(
        isinstance(entry, dict)
        and entry.get("code") == INSUFFICIENT_BALANCE_CODE
        and entry.get("success") == 0
        for entry in response.get("batchResponse") or []
    )


def flag_pending_balance(*, dry_run=False) -> dict:
    """Mark sent reports whose batch entry reported insufficient balance."""
    scanned = flagged = 0
    now = timezone.now()
    candidates = SpotIncentiveReport.objects.filter(transaction_id__isnull=False)
    for report in candidates.iterator():
        scanned += 1
        metadata = report.transaction_metadata or {}
        if metadata.get("status") == Status.PENDING_BALANCE or not _has_pending_balance(metadata):
            continue
        flagged += 1
        if dry_run:
            continue
        metadata["status"] = Status.PENDING_BALANCE
        metadata.setdefault("history", []).append({"event": "PENDING_BALANCE", "at": now.isoformat()})
        report.transaction_metadata = metadata
        report.save(update_fields=["transaction_metadata", "updated_at"])

    logger.info("Pending balance scan: %d scanned, %d flagged", scanned, flagged)
    return {"scanned": scanned, "flagged": flagged}
