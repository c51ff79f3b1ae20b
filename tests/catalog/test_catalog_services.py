from decimal import Decimal
from io import BytesIO

import openpyxl
import pytest

from catalog.models import MRIncentive, Plan, ProductSKU, parse_price_range, tenure_from_plan_type
from catalog.services import (
    calculate_spot_incentive,
    import_mr_incentives_from_excel,
    mr_incentive_for,
    parse_mr_rows,
    plans_for_price,
    sync_plan_incentives,
)
from core.exceptions import DomainError, NotFoundError


def test_tenure_from_plan_type():
    assert tenure_from_plan_type("EXTENDED_WARRANTY_3_YR") == 3
    assert tenure_from_plan_type("SCREEN_PROTECT") is None


def test_parse_price_range():
    assert parse_price_range("10,000-20,000") == (Decimal("10000"), Decimal("20000"))
    assert parse_price_range("40000+") == (Decimal("40000"), None)
    assert parse_price_range("cheap") is None


@pytest.mark.django_db
def test_calculate_spot_incentive_uses_band(band):
    result = calculate_spot_incentive("Refrigerator", "25000", 2)

    assert result["incentive"] == 80
    assert result["details"]["tenure"] == "2 Years"
    assert result["details"]["invoicePrice"] == 25000


@pytest.mark.django_db
def test_calculate_spot_incentive_open_ended_band():
    MRIncentive.objects.create(
        category="Refrigerator",
        min_price=Decimal("30001"),
        incentive_1_yr=Decimal("60"),
    )

    assert calculate_spot_incentive("Refrigerator", 95000, 1)["incentive"] == 60


@pytest.mark.django_db
@pytest.mark.parametrize(
    "category, price, tenure, message",
    [
        ("", "1000", 1, "Missing required fields"),
        ("Refrigerator", "1000", 5, "Invalid tenure"),
        ("Refrigerator", "-5", 1, "Invalid invoice price"),
    ],
)
def test_calculate_spot_incentive_validation(band, category, price, tenure, message):
    with pytest.raises(DomainError, match=message):
        calculate_spot_incentive(category, price, tenure)


@pytest.mark.django_db
def test_calculate_spot_incentive_without_band(band):
    with pytest.raises(NotFoundError) as excinfo:
        calculate_spot_incentive("Refrigerator", "5000", 1)

    assert excinfo.value.details == {"incentive": 0}


@pytest.mark.django_db
def test_fractional_price_on_band_edge_stays_in_lower_band():
    MRIncentive.objects.create(
        category="Refrigerator", min_price=Decimal("5000"), max_price=Decimal("15000"), incentive_2_yr=Decimal("40")
    )
    MRIncentive.objects.create(
        category="Refrigerator", min_price=Decimal("15001"), max_price=Decimal("20000"), incentive_2_yr=Decimal("60")
    )

    preview = calculate_spot_incentive("Refrigerator", "15000.6", 2)

    assert preview["incentive"] == 40
    assert preview["details"]["invoicePrice"] == 15000
    assert preview["details"]["priceRange"] == "₹5,000 - ₹15,000"
    assert mr_incentive_for("Refrigerator", Decimal("15000.6"), 2) == Decimal("40")


@pytest.mark.django_db
def test_plans_for_price_filters_on_range(sku, plan):
    Plan.objects.create(sku=sku, plan_type="EXTENDED_WARRANTY_1_YR", price_range="40001+")

    plans = plans_for_price("REF", "25000")

    assert [p.pk for p in plans] == [plan.pk]


@pytest.mark.django_db
def test_plans_for_price_unknown_category(sku):
    with pytest.raises(NotFoundError):
        plans_for_price("Television", "25000")


def test_parse_mr_rows_carries_category_and_expands_group():
    rows = [
        ("Refrigerator", "10000-20000", None, None, 40, None, None, 80, None, None, 120, None, None, 160),
        (None, "20001+", None, None, 50, None, None, 100, None, None, 150, None, None, 200),
        ("Air Cooler, Dishwasher, Chest Freezer, Microwave, Oven", "0-10000", None, None, 10),
        (None, None, None),
    ]

    bands = parse_mr_rows(rows)

    assert [b["category"] for b in bands[:2]] == ["Refrigerator", "Refrigerator"]
    assert bands[1]["max_price"] is None
    assert bands[1]["incentive_4_yr"] == Decimal("200")
    assert [b["category"] for b in bands[2:]] == [
        "Air Cooler", "Dishwasher", "Chest Freezer", "Microwave Oven", "Qube",
    ]
    assert bands[2]["incentive_2_yr"] == Decimal("0")


@pytest.mark.django_db
def test_import_mr_incentives_from_excel_is_idempotent():
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["Category", "Price Range"] + [f"c{i}" for i in range(12)])
    ws.append(["AC", "20000-40000", None, None, 75, None, None, 150, None, None, 225, None, None, 300])
    buffer = BytesIO()
    wb.save(buffer)

    buffer.seek(0)
    first = import_mr_incentives_from_excel(buffer)
    buffer.seek(0)
    second = import_mr_incentives_from_excel(buffer)

    assert first == {"created": 1, "updated": 0, "bands": 1}
    assert second == {"created": 0, "updated": 1, "bands": 1}
    band = MRIncentive.objects.get()
    assert band.category == "Air Conditioner"
    assert band.incentive_3_yr == Decimal("225")


@pytest.mark.django_db
def test_sync_plan_incentives_copies_band_amount(band, plan, sku):
    Plan.objects.create(sku=sku, plan_type="SCREEN_PROTECT")
    unpriced = ProductSKU.objects.create(category="Refrigerator")
    Plan.objects.create(sku=unpriced, plan_type="EXTENDED_WARRANTY_1_YR")

    result = sync_plan_incentives()

    plan.refresh_from_db()
    assert plan.incentive_amount == Decimal("80")
    assert result == {"updated": 1, "skipped": 2}
