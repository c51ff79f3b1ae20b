"""Support tickets raised by canvassers and answered by administrators."""
from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class SupportQuery(TimeStampedModel):
    """A help request. Only one open (pending or in progress) query per canvasser."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        IN_PROGRESS = "IN_PROGRESS", "In progress"
        RESOLVED = "RESOLVED", "Resolved"

    class Category(models.TextChoices):
        TECHNICAL_ISSUE = "TECHNICAL_ISSUE", "Technical Issue"
        ACCOUNT_PROBLEM = "ACCOUNT_PROBLEM", "Account Problem"
        PAYMENT_INQUIRY = "PAYMENT_INQUIRY", "Payment Inquiry"
        TRAINING_SUPPORT = "TRAINING_SUPPORT", "Training Support"
        GENERAL_INQUIRY = "GENERAL_INQUIRY", "General Inquiry"
        BUG_REPORT = "BUG_REPORT", "Bug Report"
        FEATURE_REQUEST = "FEATURE_REQUEST", "Feature Request"
        OTHER = "OTHER", "Other"

    OPEN_STATUSES = (Status.PENDING, Status.IN_PROGRESS)
    MAX_DESCRIPTION_LENGTH = 2500

    query_number = models.CharField("query number", max_length=16, unique=True)
    canvasser = models.ForeignKey(
        "stores.Canvasser",
        on_delete=models.CASCADE,
        related_name="support_queries",
        verbose_name="canvasser",
    )
    category = models.CharField("category", max_length=32, choices=Category.choices)
    description = models.TextField("description", max_length=MAX_DESCRIPTION_LENGTH)
    status = models.CharField(
        "status",
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    resolved_at = models.DateTimeField("resolved at", null=True, blank=True)

    class Meta:
        verbose_name = "support query"
        verbose_name_plural = "support queries"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.query_number} ({self.get_status_display()})"

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES


class SupportQueryMessage(TimeStampedModel):
    query = models.ForeignKey(
        SupportQuery,
        on_delete=models.CASCADE,
        related_name="messages",
        verbose_name="query",
    )
    is_from_admin = models.BooleanField("from admin", default=False)
    admin_name = models.CharField("admin name", max_length=150, blank=True, default="")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="author",
    )
    message = models.TextField("message")

    class Meta:
        verbose_name = "support message"
        verbose_name_plural = "support messages"
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.query.query_number}: {self.message[:40]}"
