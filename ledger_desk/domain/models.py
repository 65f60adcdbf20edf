"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ReferenceType(str, Enum):
    CLIENT_TRANSACTION = "client_transaction"
    STAFF_PAYMENT = "staff_payment"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    OVERDUE = "overdue"


class InvoiceKind(str, Enum):
    """Rendering variant, decided once per transaction"""

    STANDARD = "standard"
    WEEKLY_AGGREGATE = "weekly_aggregate"


@dataclass
class LedgerEntry:
    """One income or expense event from a client transaction or staff payment"""

    id: int
    entry_date: date
    entry_type: EntryType
    amount: Decimal
    description: str
    reference_id: str
    reference_type: ReferenceType
    client_id: Optional[int] = None
    staff_id: Optional[int] = None
    client_name: Optional[str] = None
    staff_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class MonthSummary:
    """Income/expense totals for a window; profit = income - expense"""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")


@dataclass
class YearlySummary:
    year: int
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")


@dataclass
class LineItem:
    """Billable row; total is pre-computed by whoever built the item"""

    description: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    product_name: Optional[str] = None
    transaction_id: Optional[str] = None
    date: Optional[date] = None
    status: Optional[str] = None


@dataclass
class Transaction:
    """Client invoice with resolved line items"""

    id: str
    transaction_id: str
    client_id: Optional[int]
    client_name: str
    transaction_date: Optional[date]
    due_date: Optional[date]
    total_amount: Decimal
    status: str  # draft | pending | paid | partial | overdue
    line_items: List[LineItem] = field(default_factory=list)
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    payment_method: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ClientInfo:
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass
class StaffPayment:
    id: int
    staff_id: int
    amount: Decimal
    payment_date: date
    description: Optional[str] = None
