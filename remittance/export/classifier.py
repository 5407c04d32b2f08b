"""Tax-type and period classification applied at export time.

Nothing here is stored on the ledger: each export recomputes the view it
needs from the NormalizedRecord, so template-specific rules (the PAYE display
override, month-versus-year periods) never leak into the ledger.
"""

import re
from dataclasses import dataclass

from remittance.pipeline.models import NormalizedRecord

# Priority order matters: first matching family wins
TAX_CODE_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("WHT", ("WHT", "WITHHOLDING")),
    ("VAT", ("VAT", "VALUE ADDED")),
    ("PAYE", ("PAYE", "PAY AS YOU EARN")),
    ("CIT", ("CIT", "COMPANY INCOME")),
    ("EDT", ("EDT", "EDUCATION")),
)
FALLBACK_TAX_CODE = "TAX"

# Generic portal labels that mean PAYE on the upload template
_PAYE_LABELS_EXACT = frozenset({"REVENUE PAYMENT", "REVENUE RECEIPT"})
_PAYE_LABEL_CONTAINED = "LAGOS REVENUE PAYMENT"

MONTH_NAMES = {
    "jan": "JANUARY",
    "feb": "FEBRUARY",
    "mar": "MARCH",
    "apr": "APRIL",
    "may": "MAY",
    "jun": "JUNE",
    "jul": "JULY",
    "aug": "AUGUST",
    "sep": "SEPTEMBER",
    "oct": "OCTOBER",
    "nov": "NOVEMBER",
    "dec": "DECEMBER",
}
_MONTH_NAMES_BY_NUMBER = tuple(MONTH_NAMES.values())

UNKNOWN_YEAR = "Unknown"
_TRAILING_YEAR = re.compile(r"(\d{2,4})$")


@dataclass(frozen=True)
class ClassifiedRow:
    """Export-time view of a ledger record."""

    record: NormalizedRecord
    canonical_tax_type: str
    display_tax_type: str
    period_value: str
    year_bucket: str


def canonical_tax_type(tax_type: str) -> str:
    """Map a free-text tax type to WHT, VAT, PAYE, CIT, EDT or TAX."""
    upper = tax_type.upper()
    for code, needles in TAX_CODE_RULES:
        if any(needle in upper for needle in needles):
            return code
    return FALLBACK_TAX_CODE


def display_tax_type(tax_type: str) -> str:
    """Tax type as shown on the upload template."""
    upper = tax_type.upper()
    if _PAYE_LABEL_CONTAINED in upper or upper in _PAYE_LABELS_EXACT:
        return "PAYE"
    return tax_type


def _expand_year(year: str) -> str:
    return f"20{year}" if len(year) == 2 else year


def period_value(record: NormalizedRecord, shown_tax_type: str | None = None) -> str:
    """PERIOD OF PAYMENT cell: full month name for PAYE, 4-digit year otherwise.

    Args:
        record: Ledger record
        shown_tax_type: Tax type after the display override; computed if omitted
    """
    if shown_tax_type is None:
        shown_tax_type = display_tax_type(record.tax_type)
    is_paye = "PAYE" in shown_tax_type.upper()

    parts = record.payment_period.split("-")
    if len(parts) == 2:
        month, year = parts
        if is_paye:
            return MONTH_NAMES.get(month.lower(), month.upper())
        return _expand_year(year)

    # Unparseable period: fall back to the payment date itself
    if is_paye:
        return _MONTH_NAMES_BY_NUMBER[record.payment_date.month - 1]
    return str(record.payment_date.year)


def year_bucket(payment_period: str | None) -> str:
    """Year a record is filed under on the standard template."""
    if not payment_period:
        return UNKNOWN_YEAR
    match = _TRAILING_YEAR.search(payment_period)
    if match is None:
        return UNKNOWN_YEAR
    return _expand_year(match.group(1))


def classify(record: NormalizedRecord) -> ClassifiedRow:
    shown = display_tax_type(record.tax_type)
    return ClassifiedRow(
        record=record,
        canonical_tax_type=canonical_tax_type(record.tax_type),
        display_tax_type=shown,
        period_value=period_value(record, shown),
        year_bucket=year_bucket(record.payment_period),
    )
