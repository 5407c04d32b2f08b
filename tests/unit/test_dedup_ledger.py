"""Unit tests for receipt deduplication and ledger assembly."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from remittance.pipeline.dedup import Deduplicator
from remittance.pipeline.ledger import Ledger
from remittance.pipeline.models import NormalizedRecord, format_amount


def make_record(
    receipt: str = "TXN-001",
    amount: str = "950",
    payment_date: date = date(2025, 1, 21),
    company: str = "Acme Corp",
    tax_type: str = "PAYE",
    period: str = "Dec-24",
) -> NormalizedRecord:
    return NormalizedRecord(
        company_name=company,
        payment_date=payment_date,
        payment_period=period,
        receipt_number=receipt,
        tax_type=tax_type,
        amount=Decimal(amount),
    )


class TestIdentityKey:
    def test_identity_key_format(self) -> None:
        assert make_record(receipt="TXN-001", amount="950").identity_key == "TXN-001-950"

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [("950", "950"), ("950.00", "950"), ("950.50", "950.5"), ("1E+3", "1000"), ("0", "0")],
    )
    def test_format_amount_drops_trailing_zeros(self, amount: str, expected: str) -> None:
        assert format_amount(Decimal(amount)) == expected


class TestDeduplicator:
    def test_first_occurrence_admitted(self) -> None:
        dedup = Deduplicator()

        assert dedup.admit(make_record()) is True
        assert len(dedup) == 1

    def test_same_receipt_and_amount_rejected_despite_other_fields(self) -> None:
        dedup = Deduplicator()
        dedup.admit(make_record(company="Acme Corp", tax_type="PAYE"))

        duplicate = make_record(
            company="Other Ltd",
            tax_type="VAT",
            payment_date=date(2023, 5, 5),
            period="Apr-23",
        )
        assert dedup.admit(duplicate) is False

    def test_equal_amounts_in_different_notation_are_duplicates(self) -> None:
        dedup = Deduplicator()
        dedup.admit(make_record(amount="950"))

        assert dedup.admit(make_record(amount="950.00")) is False

    def test_different_amount_admitted(self) -> None:
        dedup = Deduplicator()
        dedup.admit(make_record(amount="950"))

        assert dedup.admit(make_record(amount="951")) is True

    def test_different_receipt_admitted(self) -> None:
        dedup = Deduplicator()
        dedup.admit(make_record(receipt="TXN-001"))

        assert dedup.admit(make_record(receipt="TXN-002")) is True

    def test_fresh_instances_share_nothing(self) -> None:
        Deduplicator().admit(make_record())

        assert Deduplicator().admit(make_record()) is True


class TestLedger:
    def test_finalize_sorts_by_payment_date(self) -> None:
        records = [
            make_record(receipt="C", payment_date=date(2025, 3, 1)),
            make_record(receipt="A", payment_date=date(2024, 12, 31)),
            make_record(receipt="B", payment_date=date(2025, 1, 15)),
        ]

        ledger = Ledger.finalize(records)

        assert [r.receipt_number for r in ledger] == ["A", "B", "C"]

    def test_finalize_is_stable_on_equal_dates(self) -> None:
        same_day = date(2025, 2, 10)
        records = [
            make_record(receipt="late", payment_date=date(2025, 3, 1)),
            make_record(receipt="first", payment_date=same_day),
            make_record(receipt="second", payment_date=same_day),
            make_record(receipt="third", payment_date=same_day),
        ]

        ledger = Ledger.finalize(records)

        assert [r.receipt_number for r in ledger] == ["first", "second", "third", "late"]
        dates = [r.payment_date for r in ledger]
        assert dates == sorted(dates)

    def test_ledger_is_read_only_sequence(self) -> None:
        ledger = Ledger.finalize([make_record()])

        assert len(ledger) == 1
        assert ledger[0].receipt_number == "TXN-001"
        assert isinstance(ledger.records, tuple)
        assert not ledger.is_empty()
        assert Ledger().is_empty()

    def test_records_are_immutable(self) -> None:
        record = make_record()

        with pytest.raises(ValidationError):
            record.amount = Decimal("1")  # type: ignore[misc]

    def test_negative_amount_rejected_by_model(self) -> None:
        with pytest.raises(ValidationError):
            make_record(amount="-1")
