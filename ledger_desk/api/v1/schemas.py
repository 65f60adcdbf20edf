"""Pydantic schemas for API responses"""

from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


class MonthSummarySchema(BaseModel):
    income: Decimal
    expense: Decimal
    profit: Decimal


class YearlySummarySchema(BaseModel):
    year: int
    income: Decimal
    expense: Decimal
    profit: Decimal


class LedgerEntrySchema(BaseModel):
    """Single ledger row as shown on the ledger screen"""

    id: int
    entry_date: date
    entry_type: str
    amount: Decimal
    description: str
    reference_id: str
    reference_type: str
    client_id: Optional[int] = None
    staff_id: Optional[int] = None
    client_name: Optional[str] = None
    staff_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MonthSummaryResponse(BaseModel):
    """Response for the month-window ledger endpoints"""

    success: bool
    summary: Optional[MonthSummarySchema] = None
    entries: List[LedgerEntrySchema] = []
    error: Optional[str] = None


class YearlySummaryResponse(BaseModel):
    """Response for GET /v1/ledger/yearly-summary"""

    success: bool
    summary: List[YearlySummarySchema] = []
    error: Optional[str] = None


class InvoiceResponse(BaseModel):
    """Rendered invoice as a base64 PDF data URI"""

    success: bool
    invoice_id: str
    kind: str
    pdf: str


class ClientTransactionItem(BaseModel):
    id: str
    transaction_id: str
    date: Optional[str] = None
    due_date: Optional[str] = None
    amount: Decimal
    status: str
    description: str
    reference_number: Optional[str] = None


class ClientTransactionsResponse(BaseModel):
    """Response for GET /v1/clients/{client_id}/transactions"""

    success: bool
    client_id: int
    transactions: List[ClientTransactionItem]


class StaffTotalPaidResponse(BaseModel):
    """Response for GET /v1/staff/{staff_id}/payments/total"""

    success: bool
    staff_id: int
    payment_count: int
    total_paid: Decimal
