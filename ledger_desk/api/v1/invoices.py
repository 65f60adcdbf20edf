"""Invoice document endpoints - single transaction and weekly aggregate"""

import logging
import time
from datetime import date, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ledger_desk.api.dependencies import get_request_id, get_transaction_repository
from ledger_desk.api.v1.schemas import InvoiceResponse
from ledger_desk.domain.exceptions import InvoiceRenderError
from ledger_desk.domain.invoices import build_weekly_invoice, classify_invoice
from ledger_desk.domain.models import ClientInfo, Transaction
from ledger_desk.infrastructure.database.repositories import TransactionRepository, client_from_row
from ledger_desk.infrastructure.observability.logging import log_invoice_rendered
from ledger_desk.infrastructure.observability.metrics import (
    invoice_render_latency_histogram,
    record_invoice_render,
)
from ledger_desk.infrastructure.pdf.invoice_pdf import InvoicePdfBuilder
from ledger_desk.utils.date_utils import week_start

router = APIRouter()


def _render(transaction: Transaction, client: ClientInfo, request: Request, user_id: int) -> InvoiceResponse:
    """Render one invoice; any render failure means no document is returned"""
    request_id = get_request_id(request)
    kind = classify_invoice(transaction).value
    start_time = time.time()

    try:
        with invoice_render_latency_histogram.time():
            pdf = InvoicePdfBuilder(transaction, client).render()
    except InvoiceRenderError as e:
        record_invoice_render(kind, success=False)
        logging.error(f"Invoice render failed: {e}", extra={"request_id": request_id, "invoice_id": transaction.id})
        raise HTTPException(status_code=500, detail=str(e))

    size_bytes = len(pdf)
    record_invoice_render(kind, success=True, size_bytes=size_bytes)
    log_invoice_rendered(request_id, user_id, transaction.id, kind, size_bytes, (time.time() - start_time) * 1000)

    return InvoiceResponse(success=True, invoice_id=transaction.id, kind=kind, pdf=pdf)


@router.get("/transactions/{transaction_pk}/invoice", response_model=InvoiceResponse)
def transaction_invoice(
    transaction_pk: int,
    request: Request,
    user_id: int = Query(..., description="Owning user identifier"),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Render the PDF invoice for one transaction.

    Returns:
        Base64 PDF data URI, ready to use as a download link
    """
    found = repo.get_transaction_with_client(user_id, transaction_pk)
    if found is None:
        raise HTTPException(status_code=404, detail="Transaction not found")

    transaction, client = found
    return _render(transaction, client, request, user_id)


@router.get("/clients/{client_id}/weekly-invoice", response_model=InvoiceResponse)
def weekly_invoice(
    client_id: int,
    request: Request,
    user_id: int = Query(..., description="Owning user identifier"),
    week_of: Optional[date] = Query(None, description="Any day in the week to bill; defaults to today"),
    repo: TransactionRepository = Depends(get_transaction_repository),
):
    """Roll a client's transactions for one week into a single weekly invoice"""
    client = repo.get_client(user_id, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")

    start = week_start(week_of or date.today())
    transactions = repo.list_client_transactions(user_id, client_id, start, start + timedelta(days=6))
    if not transactions:
        raise HTTPException(status_code=404, detail="No transactions in the selected week")

    invoice = build_weekly_invoice(client.id, client.name, transactions, start)
    return _render(invoice, client_from_row(client), request, user_id)
