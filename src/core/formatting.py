"""Display helpers for Indian locale amounts and dates."""
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

RUPEE = "₹"


def group_indian(number):
    """Group an integer the en-IN way: ``1234567`` -> ``"12,34,567"``."""
    sign = "-" if number < 0 else ""
    digits = str(abs(int(number)))
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups) + "," + tail


def format_inr(amount):
    """``1234.4`` -> ``"₹1,234"``. Amounts are shown in whole rupees."""
    value = Decimal(str(amount or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{RUPEE}{group_indian(value)}"


def format_dmy(value, sep="-"):
    """Render a date or datetime as ``dd-mm-yyyy``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        return str(value)
    return value.strftime(f"%d{sep}%m{sep}%Y")


def financial_year_start(day):
    """First day of the April-March financial year containing *day*."""
    year = day.year if day.month >= 4 else day.year - 1
    return date(year, 4, 1)


def financial_year_label(start):
    """``date(2024, 4, 1)`` -> ``"FY-25"`` (named after the year it ends)."""
    return f"FY-{(start.year + 1) % 100:02d}"
