"""Models for the stores app."""
import re

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class Store(TimeStampedModel):
    """Retail outlet where canvassers sell extended-warranty plans."""

    name = models.CharField("name", max_length=255, db_index=True)
    code = models.CharField("code", max_length=50, unique=True, null=True, blank=True)
    city = models.CharField("city", max_length=120, blank=True, default="", db_index=True)
    number_of_canvassers = models.PositiveIntegerField("number of canvassers", default=0)

    class Meta:
        verbose_name = "store"
        verbose_name_plural = "stores"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})" if self.code else self.name


# ---------------------------------------------------------------------------
# Canvasser profile
# ---------------------------------------------------------------------------

class Canvasser(TimeStampedModel):
    """Field agent profile, keyed by phone number.

    Profiles can be loaded before the agent's first login; ``user`` is linked
    when the phone number completes an OTP login.
    """

    EMPLOYEE_ID_PREFIX = "CANV-"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="canvasser_profile",
        verbose_name="user",
    )
    phone = models.CharField("phone", max_length=20, unique=True)
    full_name = models.CharField("full name", max_length=200, blank=True, default="")
    employee_id = models.CharField("employee id", max_length=50, blank=True, default="", db_index=True)
    email = models.EmailField("email", blank=True, default="")
    agency = models.CharField("agency", max_length=200, blank=True, default="")
    store = models.ForeignKey(
        Store,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="canvassers",
        verbose_name="store",
    )
    kyc_info = models.JSONField("KYC info", default=dict, blank=True)

    class Meta:
        verbose_name = "canvasser"
        verbose_name_plural = "canvassers"
        ordering = ["full_name", "phone"]

    def __str__(self):
        return self.full_name or self.phone

    def save(self, *args, **kwargs):
        if not self.employee_id:
            self.employee_id = self._next_employee_id()
        super().save(*args, **kwargs)

    @classmethod
    def _next_employee_id(cls):
        pattern = re.compile(rf"^{re.escape(cls.EMPLOYEE_ID_PREFIX)}(\d+)$")
        highest = 0
        for value in cls.objects.filter(employee_id__startswith=cls.EMPLOYEE_ID_PREFIX).values_list(
            "employee_id", flat=True
        ):
            match = pattern.match(value)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{cls.EMPLOYEE_ID_PREFIX}{highest + 1:04d}"


# ---------------------------------------------------------------------------
# Store change requests
# ---------------------------------------------------------------------------

class StoreChangeRequest(TimeStampedModel):
    """A canvasser's request to be moved to another store."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    canvasser = models.ForeignKey(
        Canvasser,
        on_delete=models.CASCADE,
        related_name="store_change_requests",
        verbose_name="canvasser",
    )
    current_store = models.ForeignKey(
        Store,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="current store",
    )
    requested_store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="incoming_change_requests",
        verbose_name="requested store",
    )
    reason = models.TextField("reason", blank=True, default="")
    status = models.CharField(
        "status",
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    review_notes = models.TextField("review notes", blank=True, default="")
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="reviewed by",
    )
    reviewed_at = models.DateTimeField("reviewed at", null=True, blank=True)

    class Meta:
        verbose_name = "store change request"
        verbose_name_plural = "store change requests"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.canvasser} -> {self.requested_store} ({self.status})"
