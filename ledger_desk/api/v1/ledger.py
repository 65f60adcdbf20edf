"""GET /v1/ledger/* - Ledger summaries and month views"""

import time
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ledger_desk.api.dependencies import get_ledger_repository, get_request_id
from ledger_desk.api.v1.schemas import (
    LedgerEntrySchema,
    MonthSummaryResponse,
    MonthSummarySchema,
    YearlySummaryResponse,
    YearlySummarySchema,
)
from ledger_desk.domain.models import LedgerEntry
from ledger_desk.infrastructure.database.repositories import LedgerRepository
from ledger_desk.infrastructure.observability.logging import log_ledger_summary
from ledger_desk.infrastructure.observability.metrics import ledger_summary_counter
from ledger_desk.services.ledger_actions import (
    MonthResult,
    get_current_month_summary,
    get_ledger_yearly_summary,
    get_month_summary,
    search_ledger,
)

router = APIRouter()


def _entry_schema(entry: LedgerEntry) -> LedgerEntrySchema:
    return LedgerEntrySchema(
        id=entry.id,
        entry_date=entry.entry_date,
        entry_type=entry.entry_type.value,
        amount=entry.amount,
        description=entry.description,
        reference_id=entry.reference_id,
        reference_type=entry.reference_type.value,
        client_id=entry.client_id,
        staff_id=entry.staff_id,
        client_name=entry.client_name,
        staff_name=entry.staff_name,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def _month_response(result: MonthResult, window: str, request: Request, user_id: int, start_time: float):
    if not result.success:
        body = MonthSummaryResponse(success=False, error=result.error)
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))

    summary = result.summary
    ledger_summary_counter.labels(window=window).inc()
    log_ledger_summary(
        get_request_id(request),
        user_id,
        window,
        len(result.entries),
        summary.income,
        summary.expense,
        (time.time() - start_time) * 1000,
    )
    return MonthSummaryResponse(
        success=True,
        summary=MonthSummarySchema(income=summary.income, expense=summary.expense, profit=summary.profit),
        entries=[_entry_schema(e) for e in result.entries],
    )


@router.get("/ledger/current-month", response_model=MonthSummaryResponse)
def current_month_summary(
    request: Request,
    user_id: int = Query(..., description="Owning user identifier"),
    repo: LedgerRepository = Depends(get_ledger_repository),
):
    """
    Income, expense and profit for the current calendar month.

    Returns:
        Totals plus the month's ledger entries, newest first
    """
    start_time = time.time()
    result = get_current_month_summary(repo, user_id)
    return _month_response(result, "current_month", request, user_id, start_time)


@router.get("/ledger/month", response_model=MonthSummaryResponse)
def month_summary(
    request: Request,
    user_id: int = Query(..., description="Owning user identifier"),
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    repo: LedgerRepository = Depends(get_ledger_repository),
):
    """Totals and entries for an arbitrary month"""
    start_time = time.time()
    result = get_month_summary(repo, user_id, year, month)
    return _month_response(result, "month", request, user_id, start_time)


@router.get("/ledger/entries", response_model=MonthSummaryResponse)
def search_entries(
    request: Request,
    user_id: int = Query(..., description="Owning user identifier"),
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    search: str = Query("", description="Matches description, client, staff or reference id"),
    repo: LedgerRepository = Depends(get_ledger_repository),
):
    """Month entries filtered by free text, with totals of the matches"""
    start_time = time.time()
    result = search_ledger(repo, user_id, year, month, search)
    return _month_response(result, "search", request, user_id, start_time)


@router.get("/ledger/yearly-summary", response_model=YearlySummaryResponse)
def yearly_summary(
    user_id: int = Query(..., description="Owning user identifier"),
    repo: LedgerRepository = Depends(get_ledger_repository),
):
    """
    Per-year totals for the trailing five years, oldest first.

    Years without entries are included with zero totals.
    """
    result = get_ledger_yearly_summary(repo, user_id)
    if not result.success:
        body = YearlySummaryResponse(success=False, error=result.error)
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))

    ledger_summary_counter.labels(window="yearly").inc()
    return YearlySummaryResponse(
        success=True,
        summary=[
            YearlySummarySchema(year=s.year, income=s.income, expense=s.expense, profit=s.profit)
            for s in result.summary
        ],
    )
