"""Claim procedure documents shown to canvassers."""
from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class ClaimProcedurePDF(TimeStampedModel):
    """A PDF stored in the database together with its metadata."""

    title = models.CharField("title", max_length=255)
    description = models.TextField("description", blank=True, default="")
    category = models.CharField("category", max_length=64, default="GENERAL")
    file_name = models.CharField("file name", max_length=255)
    file_size = models.PositiveIntegerField("file size")
    content = models.BinaryField("content")
    content_type = models.CharField("content type", max_length=100, default="application/pdf")
    is_active = models.BooleanField("active", default=True, db_index=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="uploaded by",
    )

    class Meta:
        verbose_name = "claim procedure PDF"
        verbose_name_plural = "claim procedure PDFs"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title
