"""Field normalization for raw receipt extractions.

Turns an untrusted RawExtraction into a NormalizedRecord:

- payment_period is derived from payment_date when the service left it out
  (the month before the payment, e.g. a payment on 2024-01-15 covers "Dec-23")
- payment_date is parsed into a calendar date; the DD/MM/YYYY display form is
  always computed from it
- company_name and receipt_number are mandatory
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from remittance.extraction.schema import RawExtraction
from remittance.pipeline.models import NormalizedRecord
from remittance.shared.errors import InvalidExtraction

logger = logging.getLogger(__name__)

# English abbreviations, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

_DAY_FIRST_FORMATS = ("%d/%m/%Y", "%d-%m-%Y")


def parse_payment_date(value: str | None) -> date | None:
    """Parse an extracted payment date.

    Accepts ISO dates (with or without a time part) and day-first
    DD/MM/YYYY as printed on receipts.

    Returns:
        The calendar date, or None if the value is absent or unparseable
    """
    if value is None or not value.strip():
        return None
    text = value.strip()

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    for fmt in _DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def previous_month_period(payment_date: date) -> str:
    """Format the month before payment_date as Mon-YY."""
    if payment_date.month == 1:
        year, month = payment_date.year - 1, 12
    else:
        year, month = payment_date.year, payment_date.month - 1
    return f"{MONTH_ABBREVIATIONS[month - 1]}-{year % 100:02d}"


def normalize_extraction(raw: RawExtraction) -> NormalizedRecord:
    """Normalize one raw extraction.

    Args:
        raw: Fields returned by the extraction service

    Returns:
        NormalizedRecord ready for deduplication

    Raises:
        InvalidExtraction: If a required field is missing or unusable
    """
    company_name = (raw.company_name or "").strip()
    if not company_name:
        raise InvalidExtraction("AI did not return valid data: company name missing.")

    receipt_number = (raw.receipt_number or "").strip()
    if not receipt_number:
        raise InvalidExtraction("AI did not return valid data: receipt number missing.")

    payment_date = parse_payment_date(raw.payment_date)
    if payment_date is None:
        raise InvalidExtraction(
            f"AI did not return a usable payment date: {raw.payment_date!r}.",
            details={"receipt_number": receipt_number},
        )

    payment_period = (raw.payment_period or "").strip()
    if not payment_period:
        payment_period = previous_month_period(payment_date)
        logger.debug(f"Derived payment period {payment_period} for receipt {receipt_number}")

    amount = raw.amount
    if amount is None:
        logger.warning(f"No amount extracted for receipt {receipt_number}; recording 0")
        amount = Decimal("0")
    elif amount < 0:
        raise InvalidExtraction(
            f"Negative amount {amount} on receipt {receipt_number}.",
            details={"receipt_number": receipt_number},
        )

    return NormalizedRecord(
        company_name=company_name,
        payment_date=payment_date,
        payment_period=payment_period,
        receipt_number=receipt_number,
        tax_type=raw.tax_type or "",
        amount=amount,
    )
