"""Ledger assembly: the accepted receipts of a batch in payment-date order."""

from collections.abc import Iterable, Iterator, Sequence

from remittance.pipeline.models import NormalizedRecord


def sort_by_payment_date(records: Iterable[NormalizedRecord]) -> list[NormalizedRecord]:
    """Stable ascending sort on payment_date; equal dates keep their order."""
    return sorted(records, key=lambda record: record.payment_date)


class Ledger(Sequence[NormalizedRecord]):
    """Read-only, chronologically ordered receipt records of one batch.

    Build it with Ledger.finalize(); the constructor trusts its input order.
    """

    def __init__(self, records: Iterable[NormalizedRecord] = ()) -> None:
        self._records: tuple[NormalizedRecord, ...] = tuple(records)

    @classmethod
    def finalize(cls, accepted: Iterable[NormalizedRecord]) -> "Ledger":
        """Sort accepted records by payment date and freeze them."""
        return cls(sort_by_payment_date(accepted))

    @property
    def records(self) -> tuple[NormalizedRecord, ...]:
        return self._records

    def is_empty(self) -> bool:
        return not self._records

    def __getitem__(self, index):  # type: ignore[no-untyped-def]
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[NormalizedRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"Ledger({len(self._records)} records)"
