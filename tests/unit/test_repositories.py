"""Unit tests for the database-to-domain boundary"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from ledger_desk.domain.exceptions import InvalidLedgerEntryError, LedgerFetchError
from ledger_desk.domain.models import EntryType, ReferenceType
from ledger_desk.infrastructure.database.models import LedgerEntryRecord
from ledger_desk.infrastructure.database.repositories import (
    LedgerRepository,
    StaffPaymentRepository,
    TransactionRepository,
    ledger_entry_from_row,
)


def test_fetch_is_scoped_to_user(db: Session, seeded: dict):
    entries = LedgerRepository(db).fetch_ledger_entries(1)

    assert len(entries) == 3
    assert all(e.reference_id != "INV-9" for e in entries)


def test_fetch_date_range(db: Session, seeded: dict):
    today = seeded["today"]
    entries = LedgerRepository(db).fetch_ledger_entries(1, today.replace(day=1), today)

    assert {e.entry_type for e in entries} == {EntryType.INCOME, EntryType.EXPENSE}
    income = next(e for e in entries if e.entry_type is EntryType.INCOME)
    assert income.client_name == "Acme Traders"
    assert income.reference_type is ReferenceType.CLIENT_TRANSACTION
    expense = next(e for e in entries if e.entry_type is EntryType.EXPENSE)
    assert expense.staff_name == "Ravi Menon"


def test_row_with_both_references_is_rejected():
    row = LedgerEntryRecord(id=5, entry_date=date(2024, 5, 1), entry_type="income", amount=Decimal("1"),
                            description="x", reference_id="R", reference_type="client_transaction",
                            client_id=1, staff_id=2)
    with pytest.raises(InvalidLedgerEntryError):
        ledger_entry_from_row(row)


def test_row_with_unknown_entry_type_is_rejected():
    row = LedgerEntryRecord(id=6, entry_date=date(2024, 5, 1), entry_type="refund", amount=Decimal("1"),
                            description="x", reference_id="R", reference_type="staff_payment", staff_id=2)
    with pytest.raises(InvalidLedgerEntryError):
        ledger_entry_from_row(row)


def test_row_with_missing_amount_reads_as_zero():
    row = LedgerEntryRecord(id=7, entry_date=date(2024, 5, 1), entry_type="expense", amount=None,
                            description="x", reference_id="R", reference_type="staff_payment", staff_id=2)
    assert ledger_entry_from_row(row).amount == Decimal("0")


def test_invalid_row_becomes_fetch_error(db: Session, seeded: dict):
    db.add(LedgerEntryRecord(created_by=1, entry_date=seeded["today"], entry_type="income", amount=Decimal("5"),
                             description="bad", reference_id="X", reference_type="staff_payment",
                             client_id=seeded["acme_id"]))
    db.commit()

    with pytest.raises(LedgerFetchError):
        LedgerRepository(db).fetch_ledger_entries(1)


def test_store_failure_becomes_fetch_error(db: Session, monkeypatch):
    def fail(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("server closed the connection"))

    monkeypatch.setattr(db, "query", fail)

    with pytest.raises(LedgerFetchError, match="OperationalError"):
        LedgerRepository(db).fetch_ledger_entries(1)


def test_transaction_with_client(db: Session, seeded: dict):
    transaction, client = TransactionRepository(db).get_transaction_with_client(1, seeded["invoice_pk"])

    assert transaction.id == "INV-1001"
    assert transaction.total_amount == Decimal("1000.00")
    assert transaction.line_items[0].tax_rate == Decimal("10")
    assert client.address == "4 Harbour Lane\nKochi"


def test_transaction_outside_scope_is_hidden(db: Session, seeded: dict):
    assert TransactionRepository(db).get_transaction_with_client(2, seeded["invoice_pk"]) is None


def test_staff_payments_scoped(db: Session, seeded: dict):
    repo = StaffPaymentRepository(db)

    assert len(repo.list_payments(1, seeded["staff_id"])) == 2
    assert repo.list_payments(2, seeded["staff_id"]) is None
