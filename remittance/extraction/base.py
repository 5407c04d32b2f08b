"""Abstract base class for receipt extraction services.

Enables switching between extraction providers while keeping one result
contract: a successful RawExtraction, or a failure tagged as a service error
(transport, timeout, quota) or a schema error (unusable response).

Based on Strategy Pattern:
https://refactoring.guru/design-patterns/strategy/python
"""

from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel

from remittance.extraction.schema import RawExtraction
from remittance.shared.config import Settings
from remittance.shared.errors import RemittanceError, SchemaError, ServiceError

# Media types a provider must accept
SUPPORTED_MEDIA_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "application/pdf"})


class ExtractionResult(BaseModel):
    """Result of extraction operation.

    Attributes:
        raw: Extracted receipt fields or None if extraction failed
        success: Whether operation succeeded
        error: Error message if operation failed
        error_kind: 'service' for call failures, 'schema' for unusable responses
        provider: Name of provider that performed extraction (e.g., 'openai')
    """

    raw: RawExtraction | None
    success: bool
    error: str | None = None
    error_kind: Literal["service", "schema"] | None = None
    provider: str

    @classmethod
    def ok(cls, raw: RawExtraction, provider: str) -> "ExtractionResult":
        return cls(raw=raw, success=True, provider=provider)

    @classmethod
    def service_failure(cls, error: str, provider: str) -> "ExtractionResult":
        return cls(raw=None, success=False, error=error, error_kind="service", provider=provider)

    @classmethod
    def schema_failure(cls, error: str, provider: str) -> "ExtractionResult":
        return cls(raw=None, success=False, error=error, error_kind="schema", provider=provider)

    def unwrap(self) -> RawExtraction:
        """Return the extraction or raise the matching pipeline error.

        Raises:
            SchemaError: If the response could not be parsed
            ServiceError: If the call itself failed
        """
        if self.success and self.raw is not None:
            return self.raw
        error_cls: type[RemittanceError] = (
            SchemaError if self.error_kind == "schema" else ServiceError
        )
        raise error_cls(
            self.error or "AI did not return valid data.", details={"provider": self.provider}
        )


class ExtractionProvider(ABC):
    """Abstract base class for receipt extraction providers.

    All extraction services must implement this interface so the batch
    orchestrator can stay provider-agnostic.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize provider with settings.

        Args:
            settings: Application settings
        """
        self.settings = settings

    @abstractmethod
    def extract_receipt_fields(self, content: bytes, media_type: str) -> ExtractionResult:
        """Extract structured receipt data from a document.

        Args:
            content: Raw document bytes (image or PDF)
            media_type: MIME type of the document

        Returns:
            ExtractionResult with raw receipt fields or a tagged failure
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is available/configured.

        Returns:
            True if provider can be used, False otherwise
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get provider name for logging/metrics.

        Returns:
            Provider identifier (e.g., 'openai')
        """
        pass
