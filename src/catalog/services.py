"""
Service functions for the catalog app.

Covers the spot incentive band lookup, plan discovery by appliance price and
the import of the MR price list spreadsheet using openpyxl.
"""
import logging
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction
from django.db.models import Q

from core.exceptions import DomainError, NotFoundError
from core.export import open_workbook

from .models import MRIncentive, Plan, ProductSKU, parse_price_range

logger = logging.getLogger("spotincentive")

VALID_TENURES = (1, 2, 3, 4)

# Spreadsheet row that groups small appliances under one set of bands.
GROUPED_CATEGORY_LABEL = "Air Cooler, Dishwasher, Chest Freezer, Microwave, Oven"
GROUPED_CATEGORIES = ["Air Cooler", "Dishwasher", "Chest Freezer", "Microwave Oven", "Qube"]
CATEGORY_ALIASES = {
    "AC": "Air Conditioner",
}

# Column index of the current ("yellow") incentive for 1..4 year plans.
INCENTIVE_COLUMNS = {1: 4, 2: 7, 3: 10, 4: 13}


def _to_decimal(value):
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value).replace(",", "").replace("₹", "").strip())
    except InvalidOperation:
        return None


def _whole(value):
    return (value or Decimal("0")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def whole_rupees(price):
    """Drop the paise from *price*; bands are defined on whole rupees."""
    return Decimal(price).quantize(Decimal("1"), rounding=ROUND_DOWN)


# =========================================================================
# Band lookup
# =========================================================================

def find_band(category, price):
    """Return the MR band covering *price* for *category*, or ``None``."""
    return (
        MRIncentive.objects.filter(category=category, min_price__lte=price)
        .filter(Q(max_price__gte=price) | Q(max_price__isnull=True))
        .order_by("min_price")
        .first()
    )


def tenure_label(tenure):
    return f"{tenure} Year{'s' if tenure > 1 else ''}"


def calculate_spot_incentive(category, invoice_price, tenure) -> dict:
    """Incentive preview for a sale that has not been submitted yet.

    Raises :class:`DomainError` for bad input and :class:`NotFoundError`
    (carrying ``incentive: 0``) when no band covers the price.
    """
    if not category or invoice_price in (None, "") or tenure in (None, ""):
        raise DomainError("Missing required fields: category, invoicePrice, tenure")
    try:
        tenure = int(tenure)
    except (TypeError, ValueError):
        raise DomainError("Invalid tenure. Must be 1, 2, 3, or 4 years")
    if tenure not in VALID_TENURES:
        raise DomainError("Invalid tenure. Must be 1, 2, 3, or 4 years")

    price = _to_decimal(invoice_price)
    if price is None or price <= 0:
        raise DomainError("Invalid invoice price")
    price = whole_rupees(price)

    band = find_band(category, price)
    if band is None:
        raise NotFoundError(
            f"No incentive plan found for {category} at price ₹{price}",
            details={"incentive": 0},
        )

    return {
        "incentive": int(_whole(band.incentive_for_tenure(tenure))),
        "details": {
            "category": band.category,
            "priceRange": band.price_range_label,
            "tenure": tenure_label(tenure),
            "invoicePrice": int(price),
        },
    }


def mr_incentive_for(category, price, tenure):
    """Band incentive for a sale, ``Decimal("0")`` when nothing matches."""
    if price is None or tenure not in VALID_TENURES:
        return Decimal("0")
    band = find_band(category, whole_rupees(price))
    if band is None:
        return Decimal("0")
    return band.incentive_for_tenure(tenure)


# =========================================================================
# Devices and plans
# =========================================================================

def device_categories() -> list[dict]:
    """One entry per SKU category, with a representative SKU id."""
    seen = {}
    for sku in ProductSKU.objects.order_by("category", "created_at"):
        seen.setdefault(sku.category, sku)
    return [
        {"id": str(sku.pk), "category": category, "modelName": sku.model_name or category}
        for category, sku in seen.items()
    ]


def plans_for_price(category, price) -> list[Plan]:
    """Plans of *category* whose appliance price range covers *price*."""
    category = ProductSKU.category_for_code(category)
    value = _to_decimal(price)
    if not category or value is None:
        raise DomainError("Invalid category or price")
    if not ProductSKU.objects.filter(category=category).exists():
        raise NotFoundError("Category not found")

    plans = Plan.objects.filter(sku__category=category).select_related("sku").order_by("plan_type", "price")
    return [plan for plan in plans if plan.covers_price(value)]


# =========================================================================
# MR price list import
# =========================================================================

def parse_mr_rows(rows) -> list[dict]:
    """Turn price-list rows (header excluded) into band dicts.

    The category cell is carried forward across blank cells, and the grouped
    small-appliance row expands into one band per appliance.
    """
    bands = []
    current_category = None
    for row in rows:
        cells = list(row or ())
        if not any(cell not in (None, "") for cell in cells):
            continue
        cells += [None] * (14 - len(cells))

        if cells[0] not in (None, ""):
            current_category = str(cells[0]).strip()
        if current_category is None or cells[1] in (None, ""):
            continue

        label = str(cells[1]).strip()
        bounds = parse_price_range(label)
        if bounds is None:
            logger.warning("Could not parse price range %r", label)
            continue

        if current_category == GROUPED_CATEGORY_LABEL:
            categories = GROUPED_CATEGORIES
        else:
            categories = [CATEGORY_ALIASES.get(current_category, current_category)]

        incentives = {
            tenure: _whole(_to_decimal(cells[index])) for tenure, index in INCENTIVE_COLUMNS.items()
        }
        for category in categories:
            bands.append(
                {
                    "category": category,
                    "price_range": label,
                    "min_price": bounds[0],
                    "max_price": bounds[1],
                    "incentive_1_yr": incentives[1],
                    "incentive_2_yr": incentives[2],
                    "incentive_3_yr": incentives[3],
                    "incentive_4_yr": incentives[4],
                }
            )
    return bands


def import_mr_incentives_from_excel(file, *, flush=False) -> dict:
    """Load MR bands from the first sheet of an ``.xlsx`` price list."""
    wb = open_workbook(file)
    ws = wb.worksheets[0]
    bands = parse_mr_rows(ws.iter_rows(min_row=2, values_only=True))
    wb.close()

    created = updated = 0
    with transaction.atomic():
        if flush:
            MRIncentive.objects.all().delete()
        for band in bands:
            _, was_created = MRIncentive.objects.update_or_create(
                category=band["category"],
                min_price=band["min_price"],
                defaults=band,
            )
            if was_created:
                created += 1
            else:
                updated += 1

    logger.info("MR incentive import: %d created, %d updated", created, updated)
    return {"created": created, "updated": updated, "bands": len(bands)}


def sync_plan_incentives() -> dict:
    """Copy band incentives onto ``Plan.incentive_amount``.

    The band is looked up with the plan's SKU category and model price; plans
    without a tenure or without a priced SKU are skipped.
    """
    updated = skipped = 0
    for plan in Plan.objects.select_related("sku"):
        tenure = plan.tenure
        price = plan.sku.model_price
        if tenure is None or price is None:
            skipped += 1
            continue
        band = find_band(plan.sku.category, whole_rupees(price))
        if band is None:
            skipped += 1
            continue
        amount = band.incentive_for_tenure(tenure)
        if plan.incentive_amount != amount:
            plan.incentive_amount = amount
            plan.save(update_fields=["incentive_amount", "updated_at"])
            updated += 1

    logger.info("Plan incentives synced: %d updated, %d skipped", updated, skipped)
    return {"updated": updated, "skipped": skipped}
