"""Receipt data models for structured extraction.

RawExtraction mirrors the field set requested from the extraction service.
Every field is optional: the request schema marks them required, but the
service still omits or mangles them in practice.
"""

import re
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Characters tolerated around a printed amount ("N 1,250.00", "₦950")
_AMOUNT_NOISE = re.compile(r"[^\d.\-]")


class RawExtraction(BaseModel):
    """Untrusted receipt fields as returned by the extraction service."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    company_name: str | None = Field(None, alias="companyName", description="Paying company")
    payment_date: str | None = Field(
        None, alias="paymentDate", description="Payment date, ISO YYYY-MM-DD"
    )
    payment_period: str | None = Field(
        None, alias="paymentPeriod", description="Covered period, Mon-YY"
    )
    receipt_number: str | None = Field(
        None, alias="receiptNumber", description="Transaction/receipt identifier"
    )
    tax_type: str | None = Field(None, alias="taxType", description="Specific tax name")
    amount: Decimal | None = Field(None, description="Final total paid")

    @field_validator("amount", mode="before")
    @classmethod
    def _strip_amount_noise(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = _AMOUNT_NOISE.sub("", value)
            return cleaned or None
        return value


# Function-calling schema sent with every extraction request
RECEIPT_FUNCTION_NAME = "extract_receipt_data"

RECEIPT_FUNCTION_SCHEMA: dict[str, Any] = {
    "name": RECEIPT_FUNCTION_NAME,
    "description": "Extract structured payment receipt data from a scanned receipt",
    "parameters": {
        "type": "object",
        "properties": {
            "companyName": {"type": "string"},
            "paymentDate": {"type": "string", "description": "Date in YYYY-MM-DD format"},
            "paymentPeriod": {
                "type": "string",
                "description": "Period in Mon-YY format (e.g., Jan-25)",
            },
            "receiptNumber": {"type": "string"},
            "taxType": {"type": "string"},
            "amount": {"type": "number"},
        },
        "required": [
            "companyName",
            "paymentDate",
            "paymentPeriod",
            "receiptNumber",
            "taxType",
            "amount",
        ],
    },
}
