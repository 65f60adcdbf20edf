"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ledger_desk.api.main import create_app
from ledger_desk.infrastructure.database.models import (
    Base,
    Client,
    LedgerEntryRecord,
    Staff,
    StaffPaymentRecord,
    TransactionItem,
    TransactionRecord,
    User,
)
from ledger_desk.infrastructure.database.session import get_db
from ledger_desk.domain.models import (
    ClientInfo,
    EntryType,
    LedgerEntry,
    LineItem,
    ReferenceType,
    Transaction,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def seeded(db: Session) -> dict:
    """
    Two users; user 1 owns a client, a staff member, two invoices and ledger
    entries for this month and two years ago. User 2 owns one entry this month.
    """
    today = date.today()
    owner = User(id=1, email="owner@example.com", role="admin")
    other = User(id=2, email="other@example.com", role="admin")
    db.add_all([owner, other])
    db.flush()

    acme = Client(created_by=1, name="Acme Traders", email="accounts@acme.example", phone="0484 200 100",
                  address="4 Harbour Lane\nKochi")
    rival = Client(created_by=2, name="Rival Co", email="hello@rival.example")
    ravi = Staff(created_by=1, name="Ravi Menon", position="Designer", salary=Decimal("30000"))
    db.add_all([acme, rival, ravi])
    db.flush()

    invoice = TransactionRecord(
        transaction_id="INV-1001",
        client_id=acme.id,
        transaction_date=today,
        due_date=today + timedelta(days=14),
        total_amount=Decimal("1000.00"),
        status="paid",
        reference_number="PO-77",
        notes="Payment received with thanks.",
    )
    invoice.items = [
        TransactionItem(description="Design", quantity=Decimal("2"), unit_price=Decimal("400"),
                        tax_rate=Decimal("10"), total=Decimal("880")),
    ]
    bare = TransactionRecord(
        transaction_id="INV-1002",
        client_id=acme.id,
        transaction_date=today,
        due_date=today + timedelta(days=7),
        total_amount=Decimal("250.00"),
        status="pending",
    )
    db.add_all([invoice, bare])

    db.add_all([
        StaffPaymentRecord(staff_id=ravi.id, amount=Decimal("12000.00"), payment_date=today),
        StaffPaymentRecord(staff_id=ravi.id, amount=Decimal("3000.50"), payment_date=today - timedelta(days=30)),
    ])

    two_years_ago = date(today.year - 2, 6, 15)
    db.add_all([
        LedgerEntryRecord(created_by=1, entry_date=today, entry_type="income", amount=Decimal("1000.00"),
                          description="Invoice INV-1001 paid", reference_id="INV-1001",
                          reference_type="client_transaction", client_id=acme.id),
        LedgerEntryRecord(created_by=1, entry_date=today, entry_type="expense", amount=Decimal("400.00"),
                          description="Salary", reference_id="PAY-1",
                          reference_type="staff_payment", staff_id=ravi.id),
        LedgerEntryRecord(created_by=1, entry_date=two_years_ago, entry_type="income", amount=Decimal("5000.00"),
                          description="Old project", reference_id="INV-0900",
                          reference_type="client_transaction", client_id=acme.id),
        LedgerEntryRecord(created_by=2, entry_date=today, entry_type="income", amount=Decimal("999.00"),
                          description="Rival income", reference_id="INV-9",
                          reference_type="client_transaction", client_id=rival.id),
    ])
    db.commit()

    return {
        "today": today,
        "acme_id": acme.id,
        "rival_id": rival.id,
        "staff_id": ravi.id,
        "invoice_pk": invoice.id,
        "bare_pk": bare.id,
    }


def make_entry(
    entry_id: int,
    entry_date: date,
    entry_type: str,
    amount,
    description: str = "Entry",
    reference_id: str = "REF",
    client_name: str | None = None,
    staff_name: str | None = None,
) -> LedgerEntry:
    """Build a ledger entry without touching the database"""
    is_income = entry_type == "income"
    return LedgerEntry(
        id=entry_id,
        entry_date=entry_date,
        entry_type=EntryType(entry_type),
        amount=amount,
        description=description,
        reference_id=reference_id,
        reference_type=ReferenceType.CLIENT_TRANSACTION if is_income else ReferenceType.STAFF_PAYMENT,
        client_id=1 if is_income else None,
        staff_id=None if is_income else 1,
        client_name=client_name,
        staff_name=staff_name,
    )


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def sample_entries() -> List[LedgerEntry]:
    """Mixed ledger entries across two months of 2024"""
    return [
        make_entry(1, date(2024, 5, 2), "income", Decimal("1500.00"), "Website build", "INV-1", client_name="Acme"),
        make_entry(2, date(2024, 5, 9), "expense", Decimal("400.00"), "May salary", "PAY-1", staff_name="Ravi"),
        make_entry(3, date(2024, 5, 20), "income", Decimal("250.50"), "Hosting", "INV-2", client_name="Bolt"),
        make_entry(4, date(2024, 4, 28), "expense", Decimal("100.00"), "April salary", "PAY-0", staff_name="Ravi"),
    ]


@pytest.fixture
def standard_transaction() -> Transaction:
    return Transaction(
        id="INV-1001",
        transaction_id="INV-1001",
        client_id=1,
        client_name="Acme Traders",
        transaction_date=date(2024, 5, 3),
        due_date=date(2024, 5, 17),
        total_amount=Decimal("1000"),
        status="paid",
        line_items=[
            LineItem(description="Design", quantity=Decimal("2"), unit_price=Decimal("400"),
                     tax_rate=Decimal("10"), total=Decimal("880")),
        ],
    )


@pytest.fixture
def weekly_transaction() -> Transaction:
    return Transaction(
        id="WEEK-2024-05",
        transaction_id="WEEK-2024-05",
        client_id=1,
        client_name="Acme Traders",
        transaction_date=date(2024, 1, 29),
        due_date=date(2024, 2, 12),
        total_amount=Decimal("1300"),
        status="overdue",
        line_items=[
            LineItem(description="Design", product_name="Design", quantity=Decimal("2"),
                     unit_price=Decimal("400"), tax_rate=Decimal("10"), total=Decimal("880"),
                     transaction_id="INV-1001", date=date(2024, 1, 29), status="paid"),
            LineItem(description="Hosting", product_name=None, quantity=Decimal("1"),
                     unit_price=Decimal("420"), tax_rate=Decimal("0"), total=Decimal("420"),
                     transaction_id=None, date=None, status="overdue"),
        ],
    )


@pytest.fixture
def acme_client() -> ClientInfo:
    return ClientInfo(
        name="Acme Traders",
        email="accounts@acme.example",
        phone="0484 200 100",
        address="4 Harbour Lane\nKochi\nKerala",
    )
