"""Data access layer - converts ORM rows into domain records"""

from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from ledger_desk.infrastructure.database.models import (
    Client,
    LedgerEntryRecord,
    Staff,
    StaffPaymentRecord,
    TransactionRecord,
)
from ledger_desk.domain.exceptions import InvalidLedgerEntryError, LedgerFetchError
from ledger_desk.domain.ledger import to_amount
from ledger_desk.domain.models import (
    ClientInfo,
    EntryType,
    LedgerEntry,
    LineItem,
    ReferenceType,
    StaffPayment,
    Transaction,
)


def ledger_entry_from_row(row: LedgerEntryRecord) -> LedgerEntry:
    """
    Validate one ledger row and convert it to a LedgerEntry.

    Raises:
        InvalidLedgerEntryError: unknown entry/reference type, or the
            client/staff reference does not match reference_type
    """
    try:
        entry_type = EntryType(row.entry_type)
        reference_type = ReferenceType(row.reference_type)
    except ValueError as e:
        raise InvalidLedgerEntryError(f"Ledger entry {row.id}: {e}") from e

    if reference_type is ReferenceType.CLIENT_TRANSACTION:
        valid = row.client_id is not None and row.staff_id is None
    else:
        valid = row.staff_id is not None and row.client_id is None
    if not valid:
        raise InvalidLedgerEntryError(
            f"Ledger entry {row.id}: {reference_type.value} must reference exactly one "
            f"{'client' if reference_type is ReferenceType.CLIENT_TRANSACTION else 'staff member'}"
        )

    return LedgerEntry(
        id=row.id,
        entry_date=row.entry_date,
        entry_type=entry_type,
        amount=to_amount(row.amount),
        description=row.description or "",
        reference_id=str(row.reference_id),
        reference_type=reference_type,
        client_id=row.client_id,
        staff_id=row.staff_id,
        client_name=row.client.name if row.client else None,
        staff_name=row.staff.name if row.staff else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def transaction_from_row(row: TransactionRecord) -> Transaction:
    items = [
        LineItem(
            description=item.description,
            quantity=to_amount(item.quantity),
            unit_price=to_amount(item.unit_price),
            tax_rate=to_amount(item.tax_rate),
            total=to_amount(item.total),
        )
        for item in row.items
    ]
    return Transaction(
        id=row.transaction_id,
        transaction_id=row.transaction_id,
        client_id=row.client_id,
        client_name=row.client.name if row.client else "",
        transaction_date=row.transaction_date,
        due_date=row.due_date,
        total_amount=to_amount(row.total_amount),
        status=row.status,
        line_items=items,
        reference_number=row.reference_number,
        notes=row.notes,
        terms=row.terms,
        payment_method=row.payment_method,
        description=items[0].description if items else "Service",
    )


def client_from_row(row: Client) -> ClientInfo:
    return ClientInfo(name=row.name, email=row.email, phone=row.phone, address=row.address)


class LedgerRepository:
    """Read-only access to ledger entries owned by one user"""

    def __init__(self, db: Session):
        self.db = db

    def fetch_ledger_entries(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[LedgerEntry]:
        """
        Fetch ledger entries for a user, optionally within [start, end].

        Raises:
            LedgerFetchError: database failure or a row failing validation
        """
        try:
            query = (
                self.db.query(LedgerEntryRecord)
                .options(selectinload(LedgerEntryRecord.client), selectinload(LedgerEntryRecord.staff))
                .filter(LedgerEntryRecord.created_by == user_id)
            )
            if start is not None:
                query = query.filter(LedgerEntryRecord.entry_date >= start)
            if end is not None:
                query = query.filter(LedgerEntryRecord.entry_date <= end)
            rows = query.order_by(LedgerEntryRecord.entry_date.desc(), LedgerEntryRecord.id.desc()).all()
            return [ledger_entry_from_row(row) for row in rows]
        except SQLAlchemyError as e:
            raise LedgerFetchError(f"Ledger store unavailable: {e.__class__.__name__}") from e
        except InvalidLedgerEntryError as e:
            raise LedgerFetchError(str(e)) from e


class TransactionRepository:
    """Client transactions scoped to the owning user's clients"""

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, user_id: int):
        return (
            self.db.query(TransactionRecord)
            .join(Client, TransactionRecord.client_id == Client.id)
            .options(selectinload(TransactionRecord.items), selectinload(TransactionRecord.client))
            .filter(Client.created_by == user_id)
        )

    def get_client(self, user_id: int, client_id: int) -> Optional[Client]:
        return (
            self.db.query(Client)
            .filter(Client.id == client_id, Client.created_by == user_id)
            .first()
        )

    def get_transaction_with_client(self, user_id: int, transaction_pk: int) -> Optional[Tuple[Transaction, ClientInfo]]:
        """Fetch one transaction with its line items and billing client"""
        row = self._scoped(user_id).filter(TransactionRecord.id == transaction_pk).first()
        if row is None:
            return None
        return transaction_from_row(row), client_from_row(row.client)

    def list_client_transactions(
        self,
        user_id: int,
        client_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Transaction]:
        """Client's transactions, newest first, optionally within [start, end]"""
        query = self._scoped(user_id).filter(TransactionRecord.client_id == client_id)
        if start is not None:
            query = query.filter(TransactionRecord.transaction_date >= start)
        if end is not None:
            query = query.filter(TransactionRecord.transaction_date <= end)
        rows = query.order_by(TransactionRecord.transaction_date.desc(), TransactionRecord.id.desc()).all()
        return [transaction_from_row(row) for row in rows]


class StaffPaymentRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_payments(self, user_id: int, staff_id: int) -> Optional[List[StaffPayment]]:
        """Payments for a staff member, or None if the staff member is not the user's"""
        staff = self.db.query(Staff).filter(Staff.id == staff_id, Staff.created_by == user_id).first()
        if staff is None:
            return None

        rows = (
            self.db.query(StaffPaymentRecord)
            .filter(StaffPaymentRecord.staff_id == staff_id)
            .order_by(StaffPaymentRecord.payment_date.desc())
            .all()
        )
        return [
            StaffPayment(
                id=row.id,
                staff_id=row.staff_id,
                amount=to_amount(row.amount),
                payment_date=row.payment_date,
                description=row.description,
            )
            for row in rows
        ]
