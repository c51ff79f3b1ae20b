"""Service functions for stores, canvasser profiles and store change requests."""
from __future__ import annotations

import logging
import re

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core.exceptions import DomainError, NotFoundError
from core.lookups import find_by_pk

from .models import Canvasser, Store, StoreChangeRequest

logger = logging.getLogger("spotincentive")

STORE_LABEL_RE = re.compile(r"^(?P<name>.+?)\s*-\s*\((?P<code>\d+)\)$")
CITY_RE = re.compile(r"^([A-Z\s]+?)(?:\s+\d+|\s*-|\s*$)")
DEFAULT_CITY = "Tamil Nadu"


# =========================================================================
# Store master data
# =========================================================================

def parse_store_label(label: str) -> dict:
    """Split a showroom label such as ``"PALAYAMKOTTAI - (1302)"``.

    Returns ``{"name", "code", "city"}``. The full label is kept as the store
    name; the city is guessed from the leading upper-case words.
    """
    label = (label or "").strip()
    match = STORE_LABEL_RE.match(label)
    if not match:
        return {"name": label, "code": None, "city": DEFAULT_CITY}

    city_match = CITY_RE.match(match.group("name").strip())
    return {
        "name": label,
        "code": match.group("code"),
        "city": city_match.group(1).strip() if city_match else DEFAULT_CITY,
    }


def upsert_stores(labels, default_canvassers: int = 1) -> dict:
    """Create or update stores from showroom labels.

    Stores are matched by code when the label carries one, otherwise by
    name. Returns ``{"created": int, "updated": int, "skipped": int}``.
    """
    created = updated = skipped = 0
    with transaction.atomic():
        for label in labels:
            parsed = parse_store_label(str(label) if label is not None else "")
            if not parsed["name"]:
                skipped += 1
                continue

            lookup = {"code": parsed["code"]} if parsed["code"] else {"name": parsed["name"]}
            store, was_created = Store.objects.update_or_create(
                **lookup,
                defaults={
                    "name": parsed["name"],
                    "city": parsed["city"],
                },
            )
            if was_created:
                if not store.number_of_canvassers:
                    store.number_of_canvassers = default_canvassers
                    store.save(update_fields=["number_of_canvassers", "updated_at"])
                created += 1
            else:
                updated += 1

    logger.info("Store import: %d created, %d updated, %d skipped", created, updated, skipped)
    return {"created": created, "updated": updated, "skipped": skipped}


def search_stores(*, search: str = "", city: str = "", limit: int = 100):
    queryset = Store.objects.all()
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(city__icontains=search))
    if city:
        queryset = queryset.filter(city__iexact=city)
    return queryset.order_by("name")[:limit]


def distinct_cities() -> list[str]:
    return list(
        Store.objects.exclude(city="")
        .order_by("city")
        .values_list("city", flat=True)
        .distinct()
    )


# =========================================================================
# Canvasser profile
# =========================================================================

def get_canvasser_for_user(user) -> Canvasser:
    """Return the canvasser profile of *user*, looked up by phone as fallback."""
    profile = (
        Canvasser.objects.select_related("store")
        .filter(user=user)
        .first()
    )
    if profile is None and user.username:
        profile = Canvasser.objects.select_related("store").filter(phone=user.username).first()
    if profile is None:
        raise NotFoundError("Canvasser profile not found. Please complete onboarding first.")
    return profile


def update_canvasser_profile(profile: Canvasser, data: dict) -> Canvasser:
    fields = []
    for key in ("full_name", "email", "employee_id", "agency"):
        if key in data and data[key] is not None:
            setattr(profile, key, str(data[key]).strip())
            fields.append(key)
    if not fields:
        raise DomainError("No profile fields to update")
    profile.save(update_fields=fields + ["updated_at"])

    if "full_name" in fields and profile.user_id:
        profile.user.full_name = profile.full_name
        profile.user.save(update_fields=["full_name"])
    return profile


# =========================================================================
# Store change requests
# =========================================================================

def request_store_change(profile: Canvasser, store_ids, reason: str = "") -> StoreChangeRequest:
    """Open a store change request for *profile*.

    Exactly one target store must be given, and only one request may be
    pending at a time.
    """
    if not isinstance(store_ids, (list, tuple)) or len(store_ids) != 1:
        raise DomainError("Please select exactly one store")

    if profile.store_change_requests.filter(status=StoreChangeRequest.Status.PENDING).exists():
        raise DomainError("You already have a pending store change request")

    store = find_by_pk(Store, store_ids[0])
    if store is None:
        raise NotFoundError("Store not found")

    change_request = StoreChangeRequest.objects.create(
        canvasser=profile,
        current_store=profile.store,
        requested_store=store,
        reason=(reason or "").strip(),
    )
    logger.info("Store change request %s opened by %s", change_request.pk, profile.phone)
    return change_request


def review_store_change(change_request: StoreChangeRequest, *, action: str, reviewer, notes: str = "") -> StoreChangeRequest:
    """Approve or reject a pending request. Approval moves the canvasser."""
    if action not in ("approve", "reject"):
        raise DomainError("Invalid action. Use 'approve' or 'reject'.")

    with transaction.atomic():
        change_request = (
            StoreChangeRequest.objects.select_for_update(of=("self",))
            .select_related("canvasser", "requested_store")
            .get(pk=change_request.pk)
        )
        if change_request.status != StoreChangeRequest.Status.PENDING:
            raise DomainError("Request has already been reviewed")

        change_request.status = (
            StoreChangeRequest.Status.APPROVED if action == "approve" else StoreChangeRequest.Status.REJECTED
        )
        change_request.review_notes = (notes or "").strip()
        change_request.reviewed_by = reviewer
        change_request.reviewed_at = timezone.now()
        change_request.save(
            update_fields=["status", "review_notes", "reviewed_by", "reviewed_at", "updated_at"]
        )

        if action == "approve":
            profile = change_request.canvasser
            profile.store = change_request.requested_store
            profile.save(update_fields=["store", "updated_at"])

    logger.info(
        "Store change request %s %s by %s",
        change_request.pk,
        change_request.status,
        getattr(reviewer, "username", "system"),
    )
    return change_request
