"""Unit tests for the openpyxl workbook writer."""

import io
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import load_workbook

from remittance.export.standard import StandardTemplateExporter
from remittance.export.upload import UploadTemplateExporter
from remittance.export.writer import WorkbookWriter
from remittance.pipeline.ledger import Ledger
from remittance.pipeline.models import NormalizedRecord


@pytest.fixture
def ledger() -> Ledger:
    return Ledger.finalize(
        [
            NormalizedRecord(
                company_name="Acme Corp",
                payment_date=date(2025, 2, 10),
                payment_period="Jan-25",
                receipt_number="R1",
                tax_type="PAYE",
                amount=Decimal("1234.5"),
            ),
            NormalizedRecord(
                company_name="Acme Corp",
                payment_date=date(2024, 7, 3),
                payment_period="Jun-24",
                receipt_number="R2",
                tax_type="VAT",
                amount=Decimal("100"),
            ),
        ]
    )


def test_write_upload_schedule(tmp_path: Path, ledger: Ledger) -> None:
    """Test the upload template round-trips through an .xlsx file."""
    artifact = UploadTemplateExporter().export(ledger)

    path = WorkbookWriter().write(artifact, tmp_path / "out")

    assert path == tmp_path / "out" / "Lagos_State_Upload_Schedule.xlsx"
    workbook = load_workbook(path)
    assert workbook.sheetnames == ["Upload"]
    sheet = workbook["Upload"]
    assert [cell.value for cell in sheet[1]] == [
        "REVENUE ITEM",
        "DATE OF PAYMENT",
        "AMOUNT PAID",
        "RECEIPT NUMBER",
        "PERIOD OF PAYMENT",
    ]
    assert sheet["B2"].value == datetime(2024, 7, 3)
    assert sheet["B2"].number_format == "dd/mm/yyyy"
    assert sheet["C3"].value == pytest.approx(1234.5)
    assert sheet["E3"].value == "JANUARY"
    assert sheet.column_dimensions["A"].width == 30
    assert sheet["A1"].font.bold is False


def test_write_standard_schedule_styles(ledger: Ledger) -> None:
    """Test styles are applied without changing values."""
    artifact = StandardTemplateExporter().export(ledger)

    content = WorkbookWriter().to_bytes(artifact)

    workbook = load_workbook(io.BytesIO(content))
    assert workbook.sheetnames == ["Remittance 2024", "Remittance 2025"]
    sheet = workbook["Remittance 2025"]
    assert sheet["A1"].value == "Acme Corp"
    assert sheet["A1"].font.bold is True
    assert sheet["A1"].font.sz == 14
    assert sheet["A3"].value is None
    assert sheet["A4"].fill.fgColor.rgb.endswith("EEEEEE")
    assert sheet["A4"].border.left.style == "thin"
    assert sheet["A5"].value == datetime(2025, 2, 10)
    assert sheet["A5"].alignment.horizontal == "center"
    assert sheet["E5"].number_format == "#,##0.00"
    assert sheet["D7"].value == "Total"
    assert sheet["E7"].value == pytest.approx(1234.5)
    assert sheet["E7"].border.bottom.style == "double"
    assert sheet["A7"].value is None
    assert sheet.column_dimensions["C"].width == 30


def test_default_sheet_removed(ledger: Ledger) -> None:
    """Test only artifact sheets end up in the workbook."""
    workbook = WorkbookWriter().render(UploadTemplateExporter().export(ledger))

    assert "Sheet" not in workbook.sheetnames
