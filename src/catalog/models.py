"""Models for the catalog app (appliance SKUs, warranty plans, incentive bands)."""
import re
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Product SKU
# ---------------------------------------------------------------------------

class ProductSKU(TimeStampedModel):
    """Appliance model sold in stores (refrigerator, washing machine, ...)."""

    CATEGORY_CODES = {
        "REF": "Refrigerator",
        "WM": "Washing Machine",
        "AC": "Air Conditioner",
        "MW": "Microwave Oven",
        "DW": "Dishwasher",
        "CF": "Chest Freezer",
        "QB": "Qube",
    }

    category = models.CharField("category", max_length=120, db_index=True)
    model_name = models.CharField("model name", max_length=255, blank=True, default="")
    model_price = models.DecimalField(
        "model price", max_digits=12, decimal_places=2, null=True, blank=True
    )

    class Meta:
        verbose_name = "product SKU"
        verbose_name_plural = "product SKUs"
        ordering = ["category", "model_name"]

    def __str__(self):
        return f"{self.category} - {self.model_name}" if self.model_name else self.category

    @classmethod
    def category_for_code(cls, code):
        """Map a short code such as ``REF`` to its category name."""
        return cls.CATEGORY_CODES.get(code, code)


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------

class Plan(TimeStampedModel):
    """Extended warranty plan sold on top of an appliance."""

    TENURE_RE = re.compile(r"([1-4])_YR")

    sku = models.ForeignKey(
        ProductSKU,
        on_delete=models.CASCADE,
        related_name="plans",
        verbose_name="SKU",
    )
    plan_type = models.CharField("plan type", max_length=64, db_index=True)
    price = models.DecimalField("price", max_digits=12, decimal_places=2, default=Decimal("0"))
    price_range = models.CharField(
        "appliance price range",
        max_length=50,
        blank=True,
        default="",
        help_text='Either "min-max" or "min+".',
    )
    incentive_amount = models.DecimalField(
        "incentive amount", max_digits=12, decimal_places=2, default=Decimal("0")
    )

    class Meta:
        verbose_name = "plan"
        verbose_name_plural = "plans"
        ordering = ["sku__category", "plan_type"]

    def __str__(self):
        return f"{self.plan_type} ({self.sku})"

    @property
    def tenure(self):
        return tenure_from_plan_type(self.plan_type)

    def covers_price(self, price):
        """True when *price* falls inside ``price_range``."""
        bounds = parse_price_range(self.price_range)
        if bounds is None:
            return False
        low, high = bounds
        return price >= low and (high is None or price <= high)


def tenure_from_plan_type(plan_type):
    """``"EXTENDED_WARRANTY_2_YR"`` -> ``2``; ``None`` when no tenure is encoded."""
    match = Plan.TENURE_RE.search(plan_type or "")
    return int(match.group(1)) if match else None


def parse_price_range(value):
    """Parse ``"10000-20000"`` or ``"40000+"`` into ``(low, high)`` decimals."""
    text = (value or "").replace(",", "").replace(" ", "")
    if not text:
        return None
    try:
        if text.endswith("+"):
            return Decimal(text[:-1]), None
        low, high = text.split("-", 1)
        return Decimal(low), Decimal(high)
    except (ArithmeticError, ValueError):
        return None


# ---------------------------------------------------------------------------
# MR incentive price bands
# ---------------------------------------------------------------------------

class MRIncentive(TimeStampedModel):
    """Spot incentive paid per tenure for an appliance category and price band.

    A band matches a price when ``min_price <= price`` and either
    ``max_price >= price`` or ``max_price`` is empty (open-ended band).
    """

    category = models.CharField("category", max_length=120, db_index=True)
    min_price = models.DecimalField("min price", max_digits=12, decimal_places=2)
    max_price = models.DecimalField("max price", max_digits=12, decimal_places=2, null=True, blank=True)
    price_range = models.CharField("price range label", max_length=80, blank=True, default="")
    incentive_1_yr = models.DecimalField("1 year incentive", max_digits=10, decimal_places=2, default=Decimal("0"))
    incentive_2_yr = models.DecimalField("2 year incentive", max_digits=10, decimal_places=2, default=Decimal("0"))
    incentive_3_yr = models.DecimalField("3 year incentive", max_digits=10, decimal_places=2, default=Decimal("0"))
    incentive_4_yr = models.DecimalField("4 year incentive", max_digits=10, decimal_places=2, default=Decimal("0"))

    class Meta:
        verbose_name = "MR incentive band"
        verbose_name_plural = "MR incentive bands"
        ordering = ["category", "min_price"]
        constraints = [
            models.UniqueConstraint(fields=["category", "min_price"], name="uniq_mr_band_category_min"),
        ]

    def __str__(self):
        return f"{self.category}: {self.price_range_label}"

    def clean(self):
        if self.max_price is not None and self.max_price < self.min_price:
            raise ValidationError("Max price must be greater than or equal to min price.")

    @property
    def price_range_label(self):
        if self.price_range:
            return self.price_range
        low = f"₹{int(self.min_price):,}"
        if self.max_price is None:
            return f"{low}+"
        return f"{low} - ₹{int(self.max_price):,}"

    def incentive_for_tenure(self, tenure):
        if tenure not in (1, 2, 3, 4):
            raise ValueError("Tenure must be between 1 and 4 years")
        return getattr(self, f"incentive_{tenure}_yr")
