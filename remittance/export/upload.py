"""Upload template: the flat sheet ingested by the Lagos State revenue portal.

The header text and column order are what the portal expects; do not change
them.
"""

from remittance.export.artifact import DATE_FORMAT, Artifact, Cell, CellFormat, Sheet
from remittance.export.base import Exporter
from remittance.export.classifier import ClassifiedRow

UPLOAD_HEADERS = (
    "REVENUE ITEM",
    "DATE OF PAYMENT",
    "AMOUNT PAID",
    "RECEIPT NUMBER",
    "PERIOD OF PAYMENT",
)
UPLOAD_COLUMN_WIDTHS = [30, 15, 15, 25, 20]
UPLOAD_SHEET_TITLE = "Upload"
UPLOAD_BASENAME = "Lagos_State_Upload_Schedule"

_DATE_CELL = CellFormat(number_format=DATE_FORMAT)


class UploadTemplateExporter(Exporter):
    """Single unstyled sheet, one row per receipt in payment-date order."""

    @property
    def mode(self) -> str:
        return "upload"

    def build(self, rows: list[ClassifiedRow]) -> Artifact:
        sheet = Sheet(title=UPLOAD_SHEET_TITLE, column_widths=list(UPLOAD_COLUMN_WIDTHS))
        sheet.append(*(Cell(header) for header in UPLOAD_HEADERS))

        # Ledgers are already sorted; re-asserting the order is a no-op for them
        for row in sorted(rows, key=lambda r: r.record.payment_date):
            record = row.record
            sheet.append(
                Cell(row.display_tax_type),
                Cell(record.payment_date, _DATE_CELL),
                Cell(record.amount),
                Cell(record.receipt_number),
                Cell(row.period_value),
            )

        return Artifact(basename=UPLOAD_BASENAME, sheets=[sheet])
