"""Sale submission and campaign services."""
from __future__ import annotations

import logging
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from catalog.models import Plan, ProductSKU
from catalog.services import mr_incentive_for
from core.exceptions import ConflictError, DomainError, ForbiddenError, NotFoundError
from core.lookups import find_by_pk

from .models import SpotIncentiveCampaign, SpotIncentiveReport

logger = logging.getLogger("spotincentive")


def parse_sale_date(value):
    """Accept ``YYYY-MM-DD`` or an ISO datetime; default to now."""
    if value in (None, ""):
        return timezone.now()
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value))
        if parsed is None:
            day = parse_date(str(value))
            if day is None:
                raise DomainError("Invalid dateOfSale. Use YYYY-MM-DD.")
            parsed = datetime.combine(day, time(12, 0))
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _resolve_device(device_id):
    """Look a SKU up by id, falling back to its category short code."""
    device = find_by_pk(ProductSKU, device_id)
    if device is None:
        category = ProductSKU.category_for_code(str(device_id))
        device = ProductSKU.objects.filter(category=category).order_by("created_at").first()
    if device is None:
        raise NotFoundError("Device category not found in database")
    return device


def find_running_campaign(*, store, sku, plan, at=None):
    return (
        SpotIncentiveCampaign.objects.running(at)
        .filter(store=store, sku=sku, plan=plan)
        .order_by("-start_date")
        .first()
    )


def active_campaigns_for_store(store):
    return (
        SpotIncentiveCampaign.objects.running()
        .filter(store=store)
        .select_related("sku", "plan")
        .order_by("end_date")
    )


def compute_incentive(*, device, plan, store, invoice_price=None, at=None):
    """Return ``(amount, campaign)`` for one sale.

    The base is the MR band incentive for the invoice price when one is
    given, else the plan's configured incentive. A running campaign on the
    same store, SKU and plan adds its bonus on top.
    """
    if invoice_price is not None:
        base = mr_incentive_for(device.category, invoice_price, plan.tenure)
    else:
        base = plan.incentive_amount or Decimal("0")

    campaign = find_running_campaign(store=store, sku=device, plan=plan, at=at)
    bonus = campaign.bonus_for(plan.price) if campaign else Decimal("0")
    amount = (Decimal(base) + bonus).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return amount, campaign


def submit_sale(profile, data: dict) -> SpotIncentiveReport:
    """Record a sale for the canvasser *profile*.

    The store always comes from the profile; client-sent phone or store ids
    are only compared against it to detect tampering.
    """
    store = profile.store
    if store is None:
        raise DomainError("No store assigned to your profile. Please complete onboarding.")

    client_phone = data.get("clientSecPhone") or data.get("clientCanvasserPhone")
    if client_phone and str(client_phone) != profile.phone:
        raise ForbiddenError("Security violation: phone mismatch detected. Please logout and login again.")
    client_store = data.get("clientStoreId")
    if client_store and str(client_store) != str(store.pk):
        raise ForbiddenError("Security violation: Store ID mismatch detected. Please logout and login again.")

    device_id = data.get("deviceId")
    plan_id = data.get("planId")
    serial = str(data.get("serialNumber") or data.get("imei") or "").strip()
    if not device_id or not plan_id or not serial:
        raise DomainError("All fields are required: deviceId, planId, serialNumber")

    if SpotIncentiveReport.objects.filter(serial_number=serial).exists():
        raise ConflictError("This Serial Number has already been submitted")

    device = _resolve_device(device_id)
    plan = find_by_pk(Plan.objects.select_related("sku"), plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")
    if plan.sku_id != device.pk and plan.sku.category == device.category:
        device = plan.sku

    invoice_price = data.get("invoicePrice")
    if invoice_price not in (None, ""):
        try:
            invoice_price = Decimal(str(invoice_price))
        except InvalidOperation:
            raise DomainError("Invalid invoice price")
        if invoice_price <= 0:
            raise DomainError("Invalid invoice price")
    else:
        invoice_price = None

    sale_date = parse_sale_date(data.get("dateOfSale"))
    amount, campaign = compute_incentive(
        device=device, plan=plan, store=store, invoice_price=invoice_price
    )

    try:
        with transaction.atomic():
            report = SpotIncentiveReport.objects.create(
                canvasser=profile,
                store=store,
                sku=device,
                plan=plan,
                serial_number=serial,
                invoice_price=invoice_price,
                incentive_earned=amount,
                is_campaign_active=campaign is not None,
                date_of_sale=sale_date,
                customer_name=str(data.get("customerName") or "").strip(),
                customer_phone=str(data.get("customerPhone") or "").strip(),
            )
    except IntegrityError:
        raise ConflictError("This Serial Number has already been submitted")

    logger.info(
        "Sale %s submitted by %s at %s: incentive %s%s",
        serial,
        profile.phone,
        store.name,
        amount,
        " (campaign)" if campaign else "",
    )
    return report
