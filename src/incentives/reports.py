"""Read-side aggregations: canvasser passbook, admin report and leaderboard."""
from __future__ import annotations

import calendar
import uuid
from collections import OrderedDict
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.dateparse import parse_date

from catalog.models import tenure_from_plan_type
from core.exceptions import DomainError
from core.formatting import (
    financial_year_label,
    financial_year_start,
    format_dmy,
    format_inr,
)

from .models import SpotIncentiveCampaign, SpotIncentiveReport

ZERO = Decimal("0")
FY_HISTORY = 5


def _money(value):
    return int(value or 0)


def _ew_counts():
    """Conditional counts of 1..4 year plans, for ``annotate``."""
    return {
        f"ew{tenure}": Count("id", filter=Q(plan__plan_type__contains=f"{tenure}_YR"))
        for tenure in (1, 2, 3, 4)
    }


def _local_date(value):
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    return value


# =========================================================================
# Canvasser passbook
# =========================================================================

def build_passbook(profile, today=None) -> dict:
    """Everything the canvasser passbook screen shows."""
    today = today or timezone.localdate()
    reports = list(
        SpotIncentiveReport.objects.filter(canvasser=profile)
        .select_related("plan", "sku", "store")
        .order_by("-date_of_sale")
    )

    transactions = []
    daily = OrderedDict()
    total_earned = total_paid = ZERO

    for report in reports:
        sale_day = _local_date(report.date_of_sale)
        earned = report.incentive_earned or ZERO
        total_earned += earned
        if report.paid_at:
            total_paid += earned

        transactions.append(
            {
                "id": str(report.pk),
                "date": format_dmy(sale_day),
                "deviceName": report.sku.category,
                "planName": report.plan.plan_type.replace("_", " "),
                "planType": report.plan.plan_type,
                "serialNumber": report.serial_number,
                "incentive": format_inr(earned) if earned > 0 else "-",
                "incentiveAmount": _money(earned),
                "voucherCode": report.voucher_code or "N/A",
                "isPaid": report.is_paid,
                "paidAt": format_dmy(_local_date(report.paid_at)) if report.paid_at else None,
                "status": report.status_label,
                "isCampaignActive": report.is_campaign_active,
                "storeName": report.store.name,
                "storeCity": report.store.city,
            }
        )

        bucket = daily.setdefault(
            sale_day,
            {"date": format_dmy(sale_day), "ew1": 0, "ew2": 0, "ew3": 0, "ew4": 0, "units": 0, "incentive": 0},
        )
        bucket["units"] += 1
        bucket["incentive"] += _money(earned)
        tenure = tenure_from_plan_type(report.plan.plan_type)
        if tenure:
            bucket[f"ew{tenure}"] += 1

    store = profile.store
    return {
        "canvasser": {
            "id": str(profile.pk),
            "fullName": profile.full_name,
            "phone": profile.phone,
            "employeeId": profile.employee_id,
        },
        "store": {
            "id": str(store.pk) if store else None,
            "name": store.name if store else None,
            "city": store.city if store else None,
            "numberOfCanvasser": store.number_of_canvassers if store else 1,
        },
        "transactions": transactions,
        "salesSummary": [daily[key] for key in sorted(daily, reverse=True)],
        "summary": {
            "totalUnits": len(reports),
            "totalEarned": _money(total_earned),
            "paid": _money(total_paid),
            "pending": _money(total_earned - total_paid),
            "activeCampaignUnits": sum(1 for r in reports if r.is_campaign_active),
        },
        "fyStats": financial_year_stats(reports, today),
    }


def financial_year_stats(reports, today) -> dict:
    """Units and amounts for the current and previous four financial years."""
    current_start = financial_year_start(today)
    stats = OrderedDict()
    for offset in range(FY_HISTORY):
        start = date(current_start.year - offset, 4, 1)
        end = date(start.year + 1, 3, 31)
        units = 0
        earned = paid = ZERO
        for report in reports:
            if start <= _local_date(report.date_of_sale) <= end:
                units += 1
                earned += report.incentive_earned or ZERO
                if report.paid_at:
                    paid += report.incentive_earned or ZERO
        stats[financial_year_label(start)] = {
            "units": str(units),
            "totalEarned": format_inr(earned),
            "paid": format_inr(paid),
            "net": format_inr(earned - paid),
        }
    return stats


# =========================================================================
# Admin spot incentive report
# =========================================================================

def _day_bound(value, *, end=False):
    day = parse_date(value) if isinstance(value, str) else value
    if day is None:
        raise DomainError("Invalid date. Use YYYY-MM-DD.")
    moment = datetime.combine(day, time.max if end else time.min)
    return timezone.make_aware(moment)


def filter_reports(params):
    """Apply the admin report filters found in *params* (a QueryDict or dict)."""
    queryset = SpotIncentiveReport.objects.select_related("canvasser", "store", "sku", "plan")

    store_id = params.get("storeId")
    if store_id and store_id != "all":
        try:
            queryset = queryset.filter(store_id=uuid.UUID(str(store_id)))
        except ValueError:
            raise DomainError("Invalid storeId")

    plan_type = params.get("planType")
    if plan_type and plan_type != "all":
        queryset = queryset.filter(plan__plan_type=plan_type)

    payment_status = (params.get("paymentStatus") or "all").lower()
    if payment_status == "paid":
        queryset = queryset.filter(paid_at__isnull=False)
    elif payment_status == "unpaid":
        queryset = queryset.filter(paid_at__isnull=True)

    if params.get("startDate"):
        queryset = queryset.filter(date_of_sale__gte=_day_bound(params["startDate"]))
    if params.get("endDate"):
        queryset = queryset.filter(date_of_sale__lte=_day_bound(params["endDate"], end=True))

    search = (params.get("search") or "").strip()
    if search:
        queryset = queryset.filter(
            Q(canvasser__full_name__icontains=search)
            | Q(canvasser__phone__icontains=search)
            | Q(serial_number__icontains=search)
            | Q(store__name__icontains=search)
        )
    return queryset.order_by("-date_of_sale")


def report_summary(queryset) -> dict:
    totals = queryset.aggregate(
        total=Count("id"),
        incentive=Coalesce(Sum("incentive_earned"), ZERO),
        paid=Coalesce(Sum("incentive_earned", filter=Q(paid_at__isnull=False)), ZERO),
        stores=Count("store", distinct=True),
        canvassers=Count("canvasser", distinct=True),
    )
    return {
        "totalReports": totals["total"],
        "totalIncentive": _money(totals["incentive"]),
        "paidIncentive": _money(totals["paid"]),
        "unpaidIncentive": _money(totals["incentive"] - totals["paid"]),
        "activeStores": totals["stores"],
        "activeCanvassers": totals["canvassers"],
    }


def report_filter_options() -> dict:
    from catalog.models import Plan
    from stores.models import Store

    return {
        "stores": [
            {"id": str(pk), "name": name, "city": city}
            for pk, name, city in Store.objects.order_by("name").values_list("id", "name", "city")
        ],
        "planTypes": list(
            Plan.objects.order_by("plan_type").values_list("plan_type", flat=True).distinct()
        ),
    }


def report_row(report) -> dict:
    canvasser = report.canvasser
    return {
        "id": str(report.pk),
        "dateOfSale": format_dmy(_local_date(report.date_of_sale)),
        "serialNumber": report.serial_number,
        "canvasserName": canvasser.full_name or "N/A",
        "canvasserPhone": canvasser.phone,
        "employeeId": canvasser.employee_id,
        "storeId": str(report.store_id),
        "storeName": report.store.name,
        "storeCity": report.store.city,
        "deviceCategory": report.sku.category,
        "deviceName": report.sku.model_name or report.sku.category,
        "planType": report.plan.plan_type,
        "planPrice": _money(report.plan.price),
        "invoicePrice": _money(report.invoice_price) if report.invoice_price is not None else None,
        "incentiveEarned": _money(report.incentive_earned),
        "isCampaignActive": report.is_campaign_active,
        "isPaid": report.is_paid,
        "paidAt": report.paid_at.isoformat() if report.paid_at else None,
        "voucherCode": report.voucher_code or None,
        "transactionId": report.transaction_id,
        "payoutStatus": report.payout_status,
    }


EXPORT_HEADERS = [
    "Date of Sale",
    "Serial Number",
    "Canvasser",
    "Phone",
    "Employee ID",
    "Store",
    "City",
    "Category",
    "Plan Type",
    "Plan Price",
    "Incentive",
    "Paid",
    "Voucher Code",
    "Transaction ID",
]


def export_rows(queryset):
    for report in queryset.iterator():
        row = report_row(report)
        yield [
            row["dateOfSale"],
            row["serialNumber"],
            row["canvasserName"],
            row["canvasserPhone"],
            row["employeeId"],
            row["storeName"],
            row["storeCity"],
            row["deviceCategory"],
            row["planType"],
            row["planPrice"],
            row["incentiveEarned"],
            "Yes" if row["isPaid"] else "No",
            row["voucherCode"] or "",
            row["transactionId"] or "",
        ]


# =========================================================================
# Leaderboard
# =========================================================================

def resolve_period(period="month", month=None, year=None, now=None):
    """Return ``(start, end)`` datetimes for a leaderboard period."""
    now = now or timezone.now()
    if month and year:
        try:
            month, year = int(month), int(year)
        except (TypeError, ValueError):
            raise DomainError("Invalid month or year")
        # MINYEAR and MAXYEAR overflow when shifted to UTC
        if not 1 <= month <= 12 or not MINYEAR < year < MAXYEAR:
            raise DomainError("Invalid month or year")
        last_day = calendar.monthrange(year, month)[1]
        start = timezone.make_aware(datetime(year, month, 1))
        end = timezone.make_aware(datetime.combine(date(year, month, last_day), time.max))
        return start, end

    if period == "week":
        return now - timedelta(days=7), now
    if period == "all":
        return None, now
    local_now = timezone.localtime(now)
    start = local_now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, now


def _ranked(rows, limit, build):
    return [dict(rank=index, **build(row)) for index, row in enumerate(rows[:limit], start=1)]


def _amount_label(value):
    return format_inr(value) if value and value > 0 else "-"


def build_leaderboard(*, period="month", month=None, year=None, limit=10) -> dict:
    start, end = resolve_period(period, month, year)
    queryset = SpotIncentiveReport.objects.filter(date_of_sale__lte=end)
    if start is not None:
        queryset = queryset.filter(date_of_sale__gte=start)

    totals = {"totalSales": Count("id"), "totalIncentiveValue": Coalesce(Sum("incentive_earned"), ZERO)}

    stores = list(
        queryset.values("store_id", "store__name", "store__city")
        .annotate(**totals, **_ew_counts())
        .order_by("-totalIncentiveValue", "-totalSales")
    )
    canvassers = list(
        queryset.values("canvasser_id", "canvasser__full_name", "canvasser__employee_id", "canvasser__phone")
        .annotate(**totals, **_ew_counts())
        .order_by("-totalIncentiveValue", "-totalSales")
    )
    devices = list(
        queryset.values("sku_id", "sku__category", "sku__model_name")
        .annotate(**totals)
        .order_by("-totalIncentiveValue", "-totalSales")
    )
    plans = list(
        queryset.values("plan_id", "plan__plan_type", "plan__price")
        .annotate(**totals)
        .order_by("-totalIncentiveValue", "-totalSales")
    )

    def ew(row):
        return {key: row[key] for key in ("ew1", "ew2", "ew3", "ew4")}

    return {
        "stores": _ranked(stores, limit, lambda row: {
            "storeId": str(row["store_id"]),
            "storeName": row["store__name"],
            "city": row["store__city"],
            "totalSales": row["totalSales"],
            "totalIncentive": _amount_label(row["totalIncentiveValue"]),
            "totalIncentiveAmount": _money(row["totalIncentiveValue"]),
            **ew(row),
        }),
        "canvassers": _ranked(canvassers, limit, lambda row: {
            "canvasserId": str(row["canvasser_id"]),
            "canvasserName": row["canvasser__full_name"] or "Unknown",
            "identifier": row["canvasser__employee_id"] or row["canvasser__phone"],
            "totalSales": row["totalSales"],
            "totalIncentive": _amount_label(row["totalIncentiveValue"]),
            "totalIncentiveAmount": _money(row["totalIncentiveValue"]),
            **ew(row),
        }),
        "devices": _ranked(devices, limit, lambda row: {
            "deviceId": str(row["sku_id"]),
            "deviceName": row["sku__model_name"] or row["sku__category"],
            "category": row["sku__category"],
            "totalSales": row["totalSales"],
            "totalIncentive": _amount_label(row["totalIncentiveValue"]),
            "totalIncentiveAmount": _money(row["totalIncentiveValue"]),
        }),
        "plans": _ranked(plans, limit, lambda row: {
            "planId": str(row["plan_id"]),
            "planType": row["plan__plan_type"],
            "planPrice": _amount_label(row["plan__price"]),
            "totalSales": row["totalSales"],
            "totalIncentive": _amount_label(row["totalIncentiveValue"]),
            "totalIncentiveAmount": _money(row["totalIncentiveValue"]),
        }),
        "period": period if not (month and year) else f"{int(year):04d}-{int(month):02d}",
        "activeCampaignsCount": SpotIncentiveCampaign.objects.running().count(),
        "totalSalesReports": queryset.count(),
    }
