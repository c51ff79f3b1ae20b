"""Spreadsheet import and export utilities."""
import zipfile
from io import BytesIO

import openpyxl
from django.http import HttpResponse
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from .exceptions import DomainError

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def open_workbook(file):
    """Open an uploaded ``.xlsx`` read-only, raising :class:`DomainError` if it is not one."""
    try:
        return openpyxl.load_workbook(file, read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, OSError, ValueError, KeyError) as exc:
        raise DomainError("Could not read the Excel file") from exc


def rows_to_xlsx_response(headers, rows, filename, sheet_title="Report"):
    """Build an ``.xlsx`` download from a header list and an iterable of rows.

    Args:
        headers: column labels written on the first row.
        rows: iterable of sequences, one per data row, in header order.
        filename: download filename (without extension).
        sheet_title: title of the single worksheet.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")

    for col_num, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_num, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")

    widths = [len(str(header)) for header in headers]
    for row_num, row in enumerate(rows, start=2):
        for col_num, value in enumerate(row, 1):
            ws.cell(row=row_num, column=col_num, value=value)
            if value is not None and col_num <= len(widths):
                widths[col_num - 1] = max(widths[col_num - 1], len(str(value)))

    for col_num, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col_num)].width = min(width + 4, 50)

    buffer = BytesIO()
    wb.save(buffer)

    response = HttpResponse(buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{filename}.xlsx"'
    return response
