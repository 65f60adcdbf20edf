"""Ledger read actions - fetch, aggregate, and report failures as results"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Protocol
from ledger_desk.config import settings
from ledger_desk.domain.exceptions import LedgerFetchError
from ledger_desk.domain.ledger import entries_in_month, filter_entries, summarize_month, summarize_years
from ledger_desk.domain.models import LedgerEntry, MonthSummary, YearlySummary
from ledger_desk.infrastructure.observability.metrics import ledger_fetch_failures_counter
from ledger_desk.utils.date_utils import month_bounds, year_window


class LedgerSource(Protocol):
    def fetch_ledger_entries(
        self, user_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[LedgerEntry]: ...


@dataclass
class MonthResult:
    success: bool
    summary: Optional[MonthSummary] = None
    entries: List[LedgerEntry] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class YearlyResult:
    success: bool
    summary: List[YearlySummary] = field(default_factory=list)
    error: Optional[str] = None


def _fetch_failed(user_id: int, action: str, error: LedgerFetchError) -> str:
    ledger_fetch_failures_counter.inc()
    logging.error(f"Ledger fetch failed: {error}", extra={"user_id": user_id, "action": action})
    return f"Failed to fetch ledger data: {error}"


def get_month_summary(source: LedgerSource, user_id: int, year: int, month: int) -> MonthResult:
    """Entries and totals for one calendar month"""
    start, end = month_bounds(year, month)
    try:
        fetched = source.fetch_ledger_entries(user_id, start, end)
    except LedgerFetchError as e:
        return MonthResult(success=False, error=_fetch_failed(user_id, "month_summary", e))

    # Totals only ever cover the requested month, whatever the source returns
    entries = entries_in_month(fetched, year, month)
    return MonthResult(success=True, summary=summarize_month(entries), entries=entries)


def get_current_month_summary(source: LedgerSource, user_id: int, today: Optional[date] = None) -> MonthResult:
    today = today or date.today()
    return get_month_summary(source, user_id, today.year, today.month)


def get_ledger_yearly_summary(source: LedgerSource, user_id: int, today: Optional[date] = None) -> YearlyResult:
    """
    Income, expense and profit per year for the trailing window.

    Years without entries are reported with zero totals so the result always
    has one summary per year of the window.
    """
    today = today or date.today()
    window = settings.ledger_year_window
    first_year = year_window(today.year, window)[0]
    try:
        entries = source.fetch_ledger_entries(user_id, date(first_year, 1, 1), date(today.year, 12, 31))
    except LedgerFetchError as e:
        return YearlyResult(success=False, error=_fetch_failed(user_id, "yearly_summary", e))

    return YearlyResult(success=True, summary=summarize_years(entries, today.year, window))


def search_ledger(
    source: LedgerSource,
    user_id: int,
    year: int,
    month: int,
    search: str = "",
) -> MonthResult:
    """Month entries narrowed by free-text search, with totals of what matched"""
    result = get_month_summary(source, user_id, year, month)
    if not result.success:
        return result

    matched = filter_entries(result.entries, year=year, month=month, search=search)
    return MonthResult(success=True, summary=summarize_month(matched), entries=matched)
