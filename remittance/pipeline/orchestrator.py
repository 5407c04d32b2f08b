"""Batch orchestration: documents in, ledger and diagnostics out.

For every document, in input order:
1. Reject oversize files and unsupported media types (warning)
2. Call the extraction provider (error on service or schema failure)
3. Normalize the raw fields (error on InvalidExtraction)
4. Deduplicate (warning on duplicates, success otherwise)

Each document yields exactly one Diagnostic. Nothing in per-document
processing aborts the batch; an unavailable provider fails it up front.
"""

import logging
import time
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from remittance.extraction.base import (
    SUPPORTED_MEDIA_TYPES,
    ExtractionProvider,
    ExtractionResult,
)
from remittance.pipeline.dedup import Deduplicator
from remittance.pipeline.ledger import Ledger
from remittance.pipeline.models import Diagnostic, Document, NormalizedRecord
from remittance.pipeline.normalizer import normalize_extraction
from remittance.shared.config import Settings
from remittance.shared.errors import (
    DocumentValidationError,
    DuplicateReceipt,
    InvalidExtraction,
    SchemaError,
    ServiceError,
    ServiceUnavailable,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"success": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


@dataclass
class BatchResult:
    """Outcome of one batch run.

    Attributes:
        ledger: Deduplicated receipts sorted by payment date
        diagnostics: One message per input document, in input order
        extraction_seconds: Duration of each extraction service call
    """

    ledger: Ledger
    diagnostics: list[Diagnostic] = field(default_factory=list)
    extraction_seconds: list[float] = field(default_factory=list)

    def count(self, level: str) -> int:
        return sum(1 for diagnostic in self.diagnostics if diagnostic.level == level)


class BatchSession:
    """Mutable state of a single batch run.

    Created fresh by every process_batch() call and discarded afterwards;
    nothing is shared between batches.
    """

    def __init__(self) -> None:
        self.deduplicator = Deduplicator()
        self.accepted: list[NormalizedRecord] = []
        self.diagnostics: list[Diagnostic] = []
        self.extraction_seconds: list[float] = []

    def admit(self, record: NormalizedRecord, filename: str) -> None:
        """Append a record unless its identity was already admitted.

        Raises:
            DuplicateReceipt: If the receipt was seen earlier in this batch
        """
        if not self.deduplicator.admit(record):
            raise DuplicateReceipt(
                f"Duplicate Receipt skipped: {record.receipt_number} in {filename}",
                details={"identity_key": record.identity_key},
            )
        self.accepted.append(record)

    def report(self, level: str, text: str, filename: str) -> None:
        logger.log(_LOG_LEVELS[level], text)
        self.diagnostics.append(Diagnostic(level=level, text=text, filename=filename))  # type: ignore[arg-type]

    def finish(self) -> BatchResult:
        return BatchResult(
            ledger=Ledger.finalize(self.accepted),
            diagnostics=self.diagnostics,
            extraction_seconds=self.extraction_seconds,
        )


ExtractionOutcome = ExtractionResult | DocumentValidationError

# Outcome plus the service call duration (None when the call was never made)
TimedOutcome = tuple[ExtractionOutcome, float | None]


class ReceiptBatchProcessor:
    """Runs receipt batches against an extraction provider."""

    def __init__(self, settings: Settings, extraction_service: ExtractionProvider) -> None:
        """Initialize batch processor.

        Args:
            settings: Application settings (size limit, concurrency)
            extraction_service: Provider used for every document
        """
        self.settings = settings
        self.extraction_service = extraction_service

    def process_batch(self, documents: Sequence[Document]) -> BatchResult:
        """Process documents into a ledger.

        Args:
            documents: Input files, in the order diagnostics are reported

        Returns:
            BatchResult with the sorted ledger and one diagnostic per document

        Raises:
            ServiceUnavailable: If the extraction provider is not configured
        """
        if not self.extraction_service.is_available():
            raise ServiceUnavailable(
                "AI client not initialized.",
                details={"provider": self.extraction_service.provider_name},
            )

        logger.info(
            f"Processing batch of {len(documents)} documents "
            f"with provider {self.extraction_service.provider_name}"
        )
        session = BatchSession()
        for document, (outcome, seconds) in zip(documents, self._extract_all(documents)):
            if seconds is not None:
                session.extraction_seconds.append(seconds)
            self._consume(session, document, outcome)

        result = session.finish()
        logger.info(
            f"Batch complete: {len(result.ledger)} receipts accepted, "
            f"{result.count('warning')} warnings, {result.count('error')} errors"
        )
        return result

    def _extract_all(self, documents: Sequence[Document]) -> Iterator[TimedOutcome]:
        """Yield one extraction outcome per document, in input order."""
        workers = self.settings.extraction_max_concurrency
        if workers <= 1 or len(documents) <= 1:
            for document in documents:
                yield self._extract_one(document)
            return

        # map() hands results back in submission order
        with ThreadPoolExecutor(max_workers=workers) as pool:
            yield from pool.map(self._extract_one, documents)

    def _extract_one(self, document: Document) -> TimedOutcome:
        try:
            media_type = self._validate(document)
        except DocumentValidationError as e:
            return e, None

        start_time = time.time()
        try:
            outcome = self.extraction_service.extract_receipt_fields(document.content, media_type)
        except Exception as e:
            logger.exception(f"Extraction provider raised for {document.filename}")
            outcome = ExtractionResult.service_failure(
                str(e), self.extraction_service.provider_name
            )
        return outcome, time.time() - start_time

    def _validate(self, document: Document) -> str:
        """Check size and media type before any service call.

        Returns:
            The normalized media type

        Raises:
            DocumentValidationError: If the document must be skipped
        """
        if document.size > self.settings.max_document_bytes:
            raise DocumentValidationError(
                f"File skipped (too large): {document.filename}",
                details={"size": document.size},
            )

        media_type = document.media_type.split(";")[0].strip().lower()
        if media_type not in SUPPORTED_MEDIA_TYPES:
            raise DocumentValidationError(
                f"Skipped: {document.filename}. Scanner accepts PNG, JPG, WebP, or PDF.",
                details={"media_type": document.media_type},
            )
        return media_type

    def _consume(
        self, session: BatchSession, document: Document, outcome: ExtractionOutcome
    ) -> None:
        """Turn one extraction outcome into exactly one diagnostic."""
        name = document.filename
        try:
            if isinstance(outcome, DocumentValidationError):
                raise outcome
            record = normalize_extraction(outcome.unwrap())
            session.admit(record, name)
        except (DocumentValidationError, DuplicateReceipt) as e:
            session.report("warning", str(e), name)
        except (ServiceError, SchemaError, InvalidExtraction) as e:
            session.report("error", f"Failed to process file: {name}. {e}", name)
        else:
            session.report("success", f"Successfully processed: {name}", name)
