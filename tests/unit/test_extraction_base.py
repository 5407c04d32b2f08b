"""Unit tests for extraction base classes and the raw receipt schema.

Tests cover:
- Abstract base class enforcement
- ExtractionResult variants and unwrap()
- RawExtraction alias handling and amount coercion
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from remittance.extraction.base import ExtractionProvider, ExtractionResult
from remittance.extraction.schema import RECEIPT_FUNCTION_SCHEMA, RawExtraction
from remittance.shared.config import Settings
from remittance.shared.errors import SchemaError, ServiceError


def test_extraction_result_ok_unwraps() -> None:
    """Test successful result returns its extraction."""
    raw = RawExtraction(companyName="Acme Corp", receiptNumber="R-1")

    result = ExtractionResult.ok(raw, provider="test")

    assert result.success is True
    assert result.error is None
    assert result.error_kind is None
    assert result.unwrap() is raw


def test_extraction_result_service_failure_raises_service_error() -> None:
    """Test service failures unwrap to ServiceError."""
    result = ExtractionResult.service_failure("timeout", provider="test")

    assert result.success is False
    assert result.error_kind == "service"
    with pytest.raises(ServiceError, match="timeout"):
        result.unwrap()


def test_extraction_result_schema_failure_raises_schema_error() -> None:
    """Test schema failures unwrap to SchemaError."""
    result = ExtractionResult.schema_failure("not JSON", provider="test")

    with pytest.raises(SchemaError, match="not JSON"):
        result.unwrap()


def test_raw_extraction_accepts_camel_case_keys() -> None:
    """Test that service keys map onto the model fields."""
    raw = RawExtraction.model_validate(
        {
            "companyName": "Acme Corp",
            "paymentDate": "2025-01-21",
            "paymentPeriod": "Dec-24",
            "receiptNumber": "TXN-001",
            "taxType": "PAYE",
            "amount": 950,
            "confidence": 0.9,  # unknown keys are ignored
        }
    )

    assert raw.company_name == "Acme Corp"
    assert raw.payment_date == "2025-01-21"
    assert raw.payment_period == "Dec-24"
    assert raw.receipt_number == "TXN-001"
    assert raw.tax_type == "PAYE"
    assert raw.amount == Decimal("950")


def test_raw_extraction_all_fields_optional() -> None:
    """Test that an empty response still validates."""
    raw = RawExtraction.model_validate({})

    assert raw.company_name is None
    assert raw.amount is None


def test_raw_extraction_coerces_numeric_receipt_number() -> None:
    """Test numeric receipt numbers become strings."""
    raw = RawExtraction.model_validate({"receiptNumber": 123456})

    assert raw.receipt_number == "123456"


def test_raw_extraction_strips_amount_formatting() -> None:
    """Test printed amounts with separators and currency marks parse."""
    raw = RawExtraction.model_validate({"amount": "₦1,250.50"})

    assert raw.amount == Decimal("1250.50")


def test_raw_extraction_rejects_non_numeric_amount() -> None:
    """Test that an amount without digits fails validation."""
    with pytest.raises(ValidationError):
        RawExtraction.model_validate({"amount": "1.2.3"})


def test_function_schema_requires_every_field() -> None:
    """Test the request schema asks for exactly the receipt fields."""
    parameters = RECEIPT_FUNCTION_SCHEMA["parameters"]

    assert set(parameters["properties"]) == {
        "companyName",
        "paymentDate",
        "paymentPeriod",
        "receiptNumber",
        "taxType",
        "amount",
    }
    assert set(parameters["required"]) == set(parameters["properties"])


def test_extraction_provider_is_abstract() -> None:
    """Test that ExtractionProvider cannot be instantiated directly."""
    with pytest.raises(TypeError, match="Can't instantiate abstract class"):
        ExtractionProvider(Settings(_env_file=None))  # type: ignore[abstract]


def test_extraction_provider_requires_implementation() -> None:
    """Test that concrete providers must implement all abstract methods."""

    class IncompleteProvider(ExtractionProvider):
        def extract_receipt_fields(self, content: bytes, media_type: str) -> ExtractionResult:
            return ExtractionResult.service_failure("Not implemented", provider="incomplete")

        def is_available(self) -> bool:
            return True

        # Missing: provider_name property

    with pytest.raises(TypeError, match="Can't instantiate abstract class"):
        IncompleteProvider(Settings(_env_file=None))  # type: ignore[abstract]
