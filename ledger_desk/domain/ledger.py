"""Ledger aggregation - income/expense summaries derived from ledger entries"""

from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional
from ledger_desk.domain.models import EntryType, LedgerEntry, MonthSummary, YearlySummary
from ledger_desk.utils.date_utils import year_window

ZERO = Decimal("0")


def to_amount(value: Any) -> Decimal:
    """
    Coerce a raw monetary value to Decimal.

    Anything that is not a finite number (None, "", "n/a", NaN, Infinity)
    counts as zero so that totals stay defined.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def sum_amounts(values: Iterable[Any]) -> Decimal:
    return sum((to_amount(v) for v in values), ZERO)


def entries_in_month(entries: Iterable[LedgerEntry], year: int, month: int) -> List[LedgerEntry]:
    """Entries whose entry_date falls in the given calendar month, order preserved"""
    return [e for e in entries if e.entry_date.year == year and e.entry_date.month == month]


def summarize_month(entries: Iterable[LedgerEntry]) -> MonthSummary:
    """
    Sum entry amounts by entry type.

    Entries are never modified; profit is always income - expense.
    """
    income = ZERO
    expense = ZERO
    for entry in entries:
        if entry.entry_type == EntryType.INCOME:
            income += to_amount(entry.amount)
        else:
            expense += to_amount(entry.amount)

    return MonthSummary(income=income, expense=expense, profit=income - expense)


def summarize_years(
    entries: Iterable[LedgerEntry],
    current_year: int,
    window: int = 5,
) -> List[YearlySummary]:
    """
    Group entries by calendar year over the trailing window.

    Always returns exactly `window` summaries sorted by year, with zeroes for
    years that have no entries. Entries outside the window are ignored.
    """
    years = year_window(current_year, window)
    buckets: Dict[int, List[LedgerEntry]] = defaultdict(list)
    for entry in entries:
        buckets[entry.entry_date.year].append(entry)

    summaries = []
    for year in years:
        totals = summarize_month(buckets.get(year, []))
        summaries.append(
            YearlySummary(year=year, income=totals.income, expense=totals.expense, profit=totals.profit)
        )
    return summaries


def _matches_search(entry: LedgerEntry, needle: str) -> bool:
    haystacks = [entry.description, entry.client_name, entry.staff_name, entry.reference_id]
    return any(h and needle in h.lower() for h in haystacks)


def filter_entries(
    entries: Iterable[LedgerEntry],
    year: Optional[int] = None,
    month: Optional[int] = None,
    search: str = "",
) -> List[LedgerEntry]:
    """
    Order-preserving filter by year, month and free-text search.

    Search matches description, client name, staff name and reference id,
    case-insensitively. Blank search matches everything.
    """
    result = list(entries)
    if year is not None:
        result = [e for e in result if e.entry_date.year == year]
    if month is not None:
        result = [e for e in result if e.entry_date.month == month]

    needle = (search or "").strip().lower()
    if needle:
        result = [e for e in result if _matches_search(e, needle)]

    return result


def total_paid(amounts: Iterable[Any]) -> Decimal:
    """Total of staff payment amounts; malformed amounts count as zero"""
    return sum_amounts(amounts)
