"""Models for spot incentive campaigns and submitted sales reports."""
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class SpotIncentiveCampaignQuerySet(models.QuerySet):
    def running(self, at=None):
        """Active campaigns whose date window contains *at* (default: now)."""
        at = at or timezone.now()
        return self.filter(active=True, start_date__lte=at, end_date__gte=at)


class SpotIncentiveCampaign(TimeStampedModel):
    """Time-boxed bonus on a (store, SKU, plan) combination."""

    class IncentiveType(models.TextChoices):
        FIXED = "FIXED", "Fixed amount"
        PERCENTAGE = "PERCENTAGE", "Percentage of plan price"

    store = models.ForeignKey(
        "stores.Store",
        on_delete=models.CASCADE,
        related_name="campaigns",
        verbose_name="store",
    )
    sku = models.ForeignKey(
        "catalog.ProductSKU",
        on_delete=models.CASCADE,
        related_name="campaigns",
        verbose_name="SKU",
    )
    plan = models.ForeignKey(
        "catalog.Plan",
        on_delete=models.CASCADE,
        related_name="campaigns",
        verbose_name="plan",
    )
    incentive_type = models.CharField(
        "incentive type",
        max_length=16,
        choices=IncentiveType.choices,
        default=IncentiveType.FIXED,
    )
    incentive_value = models.DecimalField("incentive value", max_digits=10, decimal_places=2)
    start_date = models.DateTimeField("start date")
    end_date = models.DateTimeField("end date")
    active = models.BooleanField("active", default=True, db_index=True)

    objects = SpotIncentiveCampaignQuerySet.as_manager()

    class Meta:
        verbose_name = "spot incentive campaign"
        verbose_name_plural = "spot incentive campaigns"
        ordering = ["-start_date"]

    def __str__(self):
        return f"{self.store} / {self.plan} ({self.get_incentive_type_display()} {self.incentive_value})"

    def clean(self):
        if self.end_date and self.start_date and self.end_date < self.start_date:
            raise ValidationError("End date must be after start date.")
        if self.incentive_type == self.IncentiveType.PERCENTAGE and self.incentive_value > 100:
            raise ValidationError("A percentage incentive cannot exceed 100.")

    def bonus_for(self, plan_price):
        """Bonus earned on one sale, rounded to a whole rupee."""
        if self.incentive_type == self.IncentiveType.PERCENTAGE:
            amount = Decimal(plan_price or 0) * self.incentive_value / Decimal("100")
        else:
            amount = self.incentive_value
        return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


class SpotIncentiveReport(TimeStampedModel):
    """A sale submitted by a canvasser and the incentive it earned.

    Payment state lives on the row itself: ``transaction_id`` is set once
    the payout has been sent to the rewards provider, ``paid_at`` once it is
    confirmed (or a voucher code was issued).
    """

    class PayoutStatus(models.TextChoices):
        SENT = "SENT", "Sent"
        PAID = "PAID", "Paid"
        PENDING_BALANCE = "PENDING_BALANCE", "Pending balance"
        VALIDATION_FAILED = "VALIDATION_FAILED", "Validation failed"

    canvasser = models.ForeignKey(
        "stores.Canvasser",
        on_delete=models.PROTECT,
        related_name="reports",
        verbose_name="canvasser",
    )
    store = models.ForeignKey(
        "stores.Store",
        on_delete=models.PROTECT,
        related_name="reports",
        verbose_name="store",
    )
    sku = models.ForeignKey(
        "catalog.ProductSKU",
        on_delete=models.PROTECT,
        related_name="reports",
        verbose_name="SKU",
    )
    plan = models.ForeignKey(
        "catalog.Plan",
        on_delete=models.PROTECT,
        related_name="reports",
        verbose_name="plan",
    )
    serial_number = models.CharField("serial number", max_length=100, unique=True)
    invoice_price = models.DecimalField(
        "invoice price", max_digits=12, decimal_places=2, null=True, blank=True
    )
    incentive_earned = models.DecimalField(
        "incentive earned", max_digits=10, decimal_places=2, default=Decimal("0")
    )
    is_campaign_active = models.BooleanField("campaign active", default=False)
    date_of_sale = models.DateTimeField("date of sale", default=timezone.now, db_index=True)
    customer_name = models.CharField("customer name", max_length=200, blank=True, default="")
    customer_phone = models.CharField("customer phone", max_length=20, blank=True, default="")
    paid_at = models.DateTimeField("paid at", null=True, blank=True, db_index=True)
    voucher_code = models.CharField("voucher code", max_length=100, blank=True, default="", db_index=True)
    transaction_id = models.CharField(
        "transaction id", max_length=100, unique=True, null=True, blank=True
    )
    transaction_metadata = models.JSONField("transaction metadata", default=dict, blank=True)

    class Meta:
        verbose_name = "spot incentive report"
        verbose_name_plural = "spot incentive reports"
        ordering = ["-date_of_sale"]

    def __str__(self):
        return f"{self.serial_number} ({self.canvasser})"

    @property
    def is_paid(self):
        return self.paid_at is not None

    @property
    def payout_status(self):
        return (self.transaction_metadata or {}).get("status")

    @property
    def status_label(self):
        if self.voucher_code:
            return "Voucher Issued"
        if self.paid_at:
            return "Paid"
        return "Pending"
