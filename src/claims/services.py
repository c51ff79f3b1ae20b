"""Storage and delivery of claim procedure PDFs."""
import logging
from urllib.parse import quote

from django.db import transaction
from django.http import HttpResponse

from core.exceptions import DomainError

from .models import ClaimProcedurePDF

logger = logging.getLogger("spotincentive")

PDF_CONTENT_TYPE = "application/pdf"
METADATA_FIELDS = (
    "id", "title", "description", "category", "file_name", "file_size",
    "content_type", "is_active", "uploaded_by_id", "created_at", "updated_at",
)


def metadata_queryset():
    """PDF rows without the binary payload."""
    return ClaimProcedurePDF.objects.only(*METADATA_FIELDS)


def replace_pdf(*, content: bytes, file_name, title, description="", category="", content_type=PDF_CONTENT_TYPE, uploaded_by=None):
    """Store a new PDF and drop every existing one in the same transaction."""
    if not content or not (title or "").strip():
        raise DomainError("File and title are required")
    if content_type != PDF_CONTENT_TYPE:
        raise DomainError("Only PDF files are allowed")

    with transaction.atomic():
        removed, _ = ClaimProcedurePDF.objects.all().delete()
        pdf = ClaimProcedurePDF.objects.create(
            title=title.strip(),
            description=(description or "").strip(),
            category=(category or "").strip() or "GENERAL",
            file_name=file_name,
            file_size=len(content),
            content=content,
            content_type=content_type,
            uploaded_by=uploaded_by,
        )
    logger.info("Claim procedure PDF %r uploaded (%d bytes, replaced %d)", pdf.file_name, pdf.file_size, removed)
    return pdf


def replace_pdf_from_upload(upload, *, title, description="", category="", uploaded_by=None):
    if upload is None:
        raise DomainError("File and title are required")
    return replace_pdf(
        content=upload.read(),
        file_name=upload.name,
        title=title,
        description=description,
        category=category,
        content_type=getattr(upload, "content_type", "") or "",
        uploaded_by=uploaded_by,
    )


def toggle_active(pdf: ClaimProcedurePDF) -> ClaimProcedurePDF:
    pdf.is_active = not pdf.is_active
    pdf.save(update_fields=["is_active", "updated_at"])
    return pdf


def pdf_response(pdf: ClaimProcedurePDF, *, inline=False) -> HttpResponse:
    disposition = "inline" if inline else "attachment"
    response = HttpResponse(bytes(pdf.content), content_type=pdf.content_type or PDF_CONTENT_TYPE)
    response["Content-Disposition"] = f"{disposition}; filename*=UTF-8''{quote(pdf.file_name)}"
    response["Content-Length"] = str(pdf.file_size)
    return response
