from io import BytesIO

import openpyxl
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from core.exceptions import DomainError
from incentives.models import SpotIncentiveReport
from incentives.vouchers import process_voucher_workbook

URL = "/api/zopper-administrator/process-voucher-excel/"


def _workbook(rows, header=("Serial Number", "Voucher Code"), name="vouchers.xlsx"):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(list(header))
    for row in rows:
        ws.append(list(row))
    buffer = BytesIO()
    wb.save(buffer)
    return SimpleUploadedFile(name, buffer.getvalue())


@pytest.mark.django_db
def test_voucher_import_buckets_every_row(make_report):
    make_report("SN-1")
    make_report("SN-2")
    make_report("SN-3")

    result = process_voucher_workbook(
        _workbook(
            [
                ("SN-1", "VC-1"),
                ("SN-404", "VC-2"),
                ("SN-2", None),
                ("SN-3", "VC-1"),
            ]
        )
    )

    assert result["total"] == 4
    assert result["updated"] == 1
    assert result["notFound"] == 1
    assert result["failed"] == 2
    assert result["details"]["notFound"][0]["row"] == 3
    assert "SN-1" in result["details"]["failed"][1]["reason"]

    paid = SpotIncentiveReport.objects.get(serial_number="SN-1")
    assert paid.voucher_code == "VC-1"
    assert paid.paid_at is not None
    assert SpotIncentiveReport.objects.get(serial_number="SN-3").paid_at is None


@pytest.mark.django_db
def test_voucher_import_reads_numeric_serials(make_report):
    make_report("123456")

    result = process_voucher_workbook(_workbook([(123456, "VC-9")]))

    assert result["updated"] == 1


def test_voucher_import_requires_headers():
    with pytest.raises(DomainError, match="must contain"):
        process_voucher_workbook(_workbook([("SN-1", "VC-1")], header=("Serial", "Code")))


def test_voucher_import_rejects_empty_sheet():
    with pytest.raises(DomainError, match="empty"):
        process_voucher_workbook(_workbook([]))


@pytest.mark.django_db
def test_voucher_endpoint(admin_client, make_report):
    make_report("SN-1")

    response = admin_client.post(URL, {"file": _workbook([("SN-1", "VC-1")])}, format="multipart")

    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"total": 1, "updated": 1, "notFound": 0, "failed": 0}
    assert body["details"]["success"][0]["voucherCode"] == "VC-1"


@pytest.mark.django_db
def test_voucher_endpoint_rejects_non_excel(admin_client):
    upload = SimpleUploadedFile("vouchers.csv", b"Serial Number,Voucher Code\nSN-1,VC-1\n")

    response = admin_client.post(URL, {"file": upload}, format="multipart")

    assert response.status_code == 400
    assert "xlsx" in response.json()["error"]


@pytest.mark.django_db
def test_voucher_endpoint_rejects_corrupt_workbook(admin_client):
    upload = SimpleUploadedFile("vouchers.xlsx", b"not a zip archive")

    response = admin_client.post(URL, {"file": upload}, format="multipart")

    assert response.status_code == 400
    assert response.json()["error"] == "Could not read the Excel file"


@pytest.mark.django_db
def test_voucher_endpoint_requires_file(admin_client):
    response = admin_client.post(URL, {}, format="multipart")

    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"


@pytest.mark.django_db
def test_voucher_endpoint_denies_uat_users(api_client, uat_user):
    api_client.force_authenticate(user=uat_user)

    response = api_client.post(URL, {"file": _workbook([("SN-1", "VC-1")])}, format="multipart")

    assert response.status_code == 403
