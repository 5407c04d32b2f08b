"""Per-batch receipt deduplication.

A receipt is identified by its trimmed receipt number and amount only.
The first occurrence in a batch wins; later ones are rejected whatever
their company, date or tax type.
"""

from remittance.pipeline.models import NormalizedRecord


class Deduplicator:
    """Identity set for one batch run."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def admit(self, record: NormalizedRecord) -> bool:
        """Record the receipt's identity.

        Returns:
            True if this is the first occurrence, False for a duplicate
        """
        key = record.identity_key
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __len__(self) -> int:
        return len(self._seen)
