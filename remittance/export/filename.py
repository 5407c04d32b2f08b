"""Filename synthesis for standard schedules.

    {dominant company}_{sorted tax codes}_Schedule

e.g. "Acme_Corp_PAYE_VAT_Schedule" for a ledger mostly paid by "Acme Corp!"
covering PAYE and VAT receipts.
"""

import re
from collections import Counter
from collections.abc import Iterable

from remittance.export.classifier import ClassifiedRow

DEFAULT_COMPANY = "Unknown_Company"
NO_TAX_TYPES_TOKEN = "Remittance"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\s]")
_WHITESPACE_RUN = re.compile(r"\s+")


def dominant_company(names: Iterable[str], default: str) -> str:
    """Most frequent non-empty name; ties go to the name seen first."""
    counts = Counter(name for name in names if name)
    if not counts:
        return default
    # most_common keeps first-encountered order among equal counts
    return counts.most_common(1)[0][0]


def sanitize_company_name(name: str) -> str:
    """Keep ASCII letters, digits and whitespace; join words with underscores."""
    cleaned = _UNSAFE_CHARS.sub("", name).strip()
    return _WHITESPACE_RUN.sub("_", cleaned)


def tax_codes_token(rows: Iterable[ClassifiedRow]) -> str:
    codes = {row.canonical_tax_type for row in rows if row.record.tax_type}
    return "_".join(sorted(codes)) or NO_TAX_TYPES_TOKEN


def standard_schedule_basename(rows: list[ClassifiedRow]) -> str:
    """Filename (without extension) for a standard schedule over rows."""
    company = dominant_company((row.record.company_name for row in rows), DEFAULT_COMPANY)
    return f"{sanitize_company_name(company)}_{tax_codes_token(rows)}_Schedule"
