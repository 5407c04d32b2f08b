"""Exception hierarchy for the remittance pipeline.

Per-document errors (validation, extraction, normalization, duplicates) are
caught by the batch orchestrator and turned into diagnostics; they never abort
a batch. Only ServiceUnavailable (raised before any document is touched) and
ExportPrecondition (raised by an export request) reach the caller.

Example:
    try:
        artifact = create_exporter("standard").export(ledger)
    except ExportPrecondition as e:
        logger.error(f"Export refused: {e}")
"""

from typing import Any


class RemittanceError(Exception):
    """Base exception for all remittance pipeline errors.

    Attributes:
        message: Human-readable error description
        details: Additional context (filename, receipt number, ...)
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class DocumentValidationError(RemittanceError):
    """Document rejected before extraction (too large or unsupported type)."""


class ServiceError(RemittanceError):
    """Extraction call failed (transport, timeout, quota)."""


class ServiceUnavailable(ServiceError):
    """No extraction client is configured; the batch cannot start."""


class SchemaError(RemittanceError):
    """Extraction response could not be parsed into the receipt field set."""


class InvalidExtraction(RemittanceError):
    """A required field is missing or unusable after normalization."""


class DuplicateReceipt(RemittanceError):
    """Receipt already admitted earlier in the same batch."""


class ExportPrecondition(RemittanceError):
    """Export requested with an empty ledger or an unknown template mode."""
