"""Bulk voucher assignment from an uploaded spreadsheet."""
import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import DomainError
from core.export import open_workbook

from .models import SpotIncentiveReport

logger = logging.getLogger("spotincentive")

SERIAL_HEADER = "Serial Number"
VOUCHER_HEADER = "Voucher Code"


def _cell_text(value):
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _read_rows(file):
    filename = getattr(file, "name", "") or ""
    if not filename.lower().endswith(".xlsx"):
        raise DomainError("Invalid file type. Please upload an Excel file (.xlsx)")

    wb = open_workbook(file)
    try:
        rows = list(wb.worksheets[0].iter_rows(values_only=True))
    finally:
        wb.close()

    rows = [row for row in rows if any(cell not in (None, "") for cell in row)]
    if len(rows) < 2:
        raise DomainError("Excel file is empty. Please add data and try again.")

    header = [_cell_text(cell) for cell in rows[0]]
    if SERIAL_HEADER not in header or VOUCHER_HEADER not in header:
        raise DomainError(
            f'Excel file must contain "{SERIAL_HEADER}" and "{VOUCHER_HEADER}" columns'
        )
    serial_idx = header.index(SERIAL_HEADER)
    voucher_idx = header.index(VOUCHER_HEADER)

    parsed = []
    for offset, row in enumerate(rows[1:], start=2):
        cells = list(row) + [None] * (len(header) - len(row))
        parsed.append((offset, _cell_text(cells[serial_idx]), _cell_text(cells[voucher_idx])))
    return parsed


def process_voucher_workbook(file) -> dict:
    """Assign voucher codes to sales by serial number.

    Each row lands in exactly one bucket: ``success`` (voucher stored and
    the sale marked paid), ``notFound`` or ``failed``.
    """
    rows = _read_rows(file)
    success, not_found, failed = [], [], []
    now = timezone.now()

    with transaction.atomic():
        for row_number, serial, voucher in rows:
            entry = {"row": row_number, "serialNumber": serial, "voucherCode": voucher}
            if not serial or not voucher:
                failed.append({**entry, "reason": "Missing Serial Number or Voucher Code in Excel row"})
                continue

            report = (
                SpotIncentiveReport.objects.select_for_update()
                .filter(serial_number=serial)
                .first()
            )
            if report is None:
                not_found.append({**entry, "reason": "Serial Number not found in database"})
                continue

            clash = (
                SpotIncentiveReport.objects.filter(voucher_code=voucher)
                .exclude(pk=report.pk)
                .values_list("serial_number", flat=True)
                .first()
            )
            if clash:
                failed.append(
                    {**entry, "reason": f"Voucher code already assigned to another sale (Serial: {clash})"}
                )
                continue

            report.voucher_code = voucher
            report.paid_at = now
            report.save(update_fields=["voucher_code", "paid_at", "updated_at"])
            success.append(entry)

    logger.info(
        "Voucher import: %d updated, %d not found, %d failed",
        len(success),
        len(not_found),
        len(failed),
    )
    return {
        "total": len(rows),
        "updated": len(success),
        "notFound": len(not_found),
        "failed": len(failed),
        "details": {"success": success, "notFound": not_found, "failed": failed},
    }
