"""Data models flowing through the receipt batch pipeline."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


@dataclass(frozen=True)
class Document:
    """One input file of a batch.

    Attributes:
        filename: Original file name, used in diagnostics
        content: Raw file bytes
        media_type: MIME type reported by the caller
    """

    filename: str
    content: bytes
    media_type: str

    @property
    def size(self) -> int:
        return len(self.content)


class NormalizedRecord(BaseModel):
    """Canonical receipt record admitted to a ledger.

    payment_date_display is computed from payment_date and cannot be supplied.
    """

    model_config = ConfigDict(frozen=True)

    company_name: str = Field(..., min_length=1, description="Paying company, trimmed")
    payment_date: date = Field(..., description="Date the payment was made")
    payment_period: str = Field(..., min_length=1, description="Covered period, Mon-YY")
    receipt_number: str = Field(..., min_length=1, description="Receipt identifier, trimmed")
    tax_type: str = Field("", description="Tax type as extracted")
    amount: Decimal = Field(..., ge=0, description="Amount paid")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def payment_date_display(self) -> str:
        return self.payment_date.strftime("%d/%m/%Y")

    @property
    def identity_key(self) -> str:
        """Receipt identity: trimmed receipt number and amount."""
        return f"{self.receipt_number.strip()}-{format_amount(self.amount)}"


def format_amount(amount: Decimal) -> str:
    """Render an amount without trailing fractional zeros (950.00 -> '950')."""
    normalized = amount.normalize()
    return format(normalized, "f")


class Diagnostic(BaseModel):
    """Per-document outcome message.

    Attributes:
        level: success, warning or error
        text: Human-readable message
        filename: Document the message is about
    """

    level: Literal["success", "warning", "error"]
    text: str
    filename: str
