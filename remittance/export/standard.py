"""Standard template: one styled remittance sheet per year, with totals.

Sheet layout (1-based rows):

    1      dominant company of the year
    2      REMITTANCE SCHEDULE FOR {year}
    3      (blank)
    4      column headers
    5..    one row per receipt, payment-date order
    +1     (blank)
    +2     Total
"""

from collections.abc import Iterable
from decimal import Decimal

from remittance.export.artifact import (
    AMOUNT_FORMAT,
    DATE_FORMAT,
    Artifact,
    Cell,
    CellFormat,
    Sheet,
)
from remittance.export.base import Exporter
from remittance.export.classifier import ClassifiedRow
from remittance.export.filename import dominant_company, standard_schedule_basename

STANDARD_HEADERS = ("PAYMENT DATE", "PERIOD", "RECEIPT NUMBER", "TAX TYPE", "AMOUNT")
STANDARD_COLUMN_WIDTHS = [15, 12, 30, 30, 20]
DEFAULT_TITLE_COMPANY = "NASD PLC"
FIRST_DATA_ROW = 5

TITLE_FORMAT = CellFormat(bold=True, font_size=14)
SUBTITLE_FORMAT = CellFormat(bold=True, font_size=12)
HEADER_FORMAT = CellFormat(
    bold=True, font_size=11, border="thin", fill="EEEEEE", horizontal="center"
)
DATA_FORMAT = CellFormat(font_size=11, border="thin")
DATE_DATA_FORMAT = CellFormat(
    font_size=11, border="thin", number_format=DATE_FORMAT, horizontal="center"
)
AMOUNT_DATA_FORMAT = CellFormat(font_size=11, border="thin", number_format=AMOUNT_FORMAT)
TOTAL_LABEL_FORMAT = CellFormat(bold=True)
TOTAL_AMOUNT_FORMAT = CellFormat(bold=True, number_format=AMOUNT_FORMAT, bottom_border="double")


def bucket_by_year(rows: Iterable[ClassifiedRow]) -> dict[str, list[ClassifiedRow]]:
    """Group rows by year bucket.

    Numeric years come first in ascending order, then any other bucket
    ("Unknown") in the order it was first seen.
    """
    buckets: dict[str, list[ClassifiedRow]] = {}
    for row in rows:
        buckets.setdefault(row.year_bucket, []).append(row)

    numeric = sorted((year for year in buckets if year.isdigit()), key=int)
    other = [year for year in buckets if not year.isdigit()]
    return {year: buckets[year] for year in numeric + other}


class StandardTemplateExporter(Exporter):
    """Year-bucketed, bordered schedule used as a submission attachment."""

    @property
    def mode(self) -> str:
        return "standard"

    def build(self, rows: list[ClassifiedRow]) -> Artifact:
        sheets = [
            self._build_year_sheet(year, year_rows)
            for year, year_rows in bucket_by_year(rows).items()
        ]
        return Artifact(basename=standard_schedule_basename(rows), sheets=sheets)

    def _build_year_sheet(self, year: str, rows: list[ClassifiedRow]) -> Sheet:
        rows = sorted(rows, key=lambda r: r.record.payment_date)
        title = dominant_company((row.record.company_name for row in rows), DEFAULT_TITLE_COMPANY)
        total = sum((row.record.amount for row in rows), Decimal("0"))

        sheet = Sheet(title=f"Remittance {year}", column_widths=list(STANDARD_COLUMN_WIDTHS))
        sheet.append(Cell(title, TITLE_FORMAT))
        sheet.append(Cell(f"REMITTANCE SCHEDULE FOR {year}", SUBTITLE_FORMAT))
        sheet.append_blank()
        sheet.append(*(Cell(header, HEADER_FORMAT) for header in STANDARD_HEADERS))

        for row in rows:
            record = row.record
            sheet.append(
                Cell(record.payment_date, DATE_DATA_FORMAT),
                Cell(record.payment_period, DATA_FORMAT),
                Cell(record.receipt_number, DATA_FORMAT),
                Cell(record.tax_type, DATA_FORMAT),
                Cell(record.amount, AMOUNT_DATA_FORMAT),
            )

        sheet.append_blank()
        sheet.append(
            Cell(None),
            Cell(None),
            Cell(None),
            Cell("Total", TOTAL_LABEL_FORMAT),
            Cell(total, TOTAL_AMOUNT_FORMAT),
        )
        return sheet
