"""Abstract base class for schedule exporters.

Every template implements export(ledger) -> Artifact. The base class owns
the shared preconditions and the per-export classification pass.
"""

import logging
from abc import ABC, abstractmethod

from remittance.export.artifact import Artifact
from remittance.export.classifier import ClassifiedRow, classify
from remittance.pipeline.ledger import Ledger
from remittance.shared.errors import ExportPrecondition

logger = logging.getLogger(__name__)


class Exporter(ABC):
    """Serializes a finalized ledger into a spreadsheet artifact."""

    @property
    @abstractmethod
    def mode(self) -> str:
        """Template identifier ('upload' or 'standard')."""
        pass

    def export(self, ledger: Ledger) -> Artifact:
        """Build the artifact for a ledger.

        Args:
            ledger: Finalized batch ledger (left untouched)

        Returns:
            Artifact describing sheets, cells and filename

        Raises:
            ExportPrecondition: If the ledger has no records
        """
        if ledger.is_empty():
            raise ExportPrecondition(
                "No receipts to export: the ledger is empty.", details={"mode": self.mode}
            )

        rows = [classify(record) for record in ledger]
        artifact = self.build(rows)
        logger.info(
            f"Built {self.mode} schedule {artifact.filename} "
            f"({len(rows)} rows, {len(artifact.sheets)} sheets)"
        )
        return artifact

    @abstractmethod
    def build(self, rows: list[ClassifiedRow]) -> Artifact:
        """Lay out classified rows; rows is never empty."""
        pass
