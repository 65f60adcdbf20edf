"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from ledger_desk.infrastructure.database.session import get_db
from ledger_desk.infrastructure.database.repositories import (
    LedgerRepository,
    StaffPaymentRepository,
    TransactionRepository,
)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_repository(db: Session = Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_transaction_repository(db: Session = Depends(get_db)) -> TransactionRepository:
    return TransactionRepository(db)


def get_staff_payment_repository(db: Session = Depends(get_db)) -> StaffPaymentRepository:
    return StaffPaymentRepository(db)
