"""Invoice layout decisions - table contents, totals and status colors.

Everything here is pure and drawing-agnostic; the PDF renderer consumes
these structures and only decides where ink goes on the page.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional
from ledger_desk.domain.ledger import ZERO, sum_amounts, to_amount
from ledger_desk.domain.models import InvoiceKind, InvoiceStatus, LineItem, Transaction
from ledger_desk.utils.date_utils import format_display_date, week_start

WEEKLY_PREFIX = "WEEK-"

TEXT_COLOR = "#333333"
STATUS_GREEN = "#22c55e"
STATUS_AMBER = "#f59e0b"
STATUS_RED = "#ef4444"
STATUS_GRAY = "#6b7280"
STATUS_BLUE = "#3b82f6"

WEEKLY_HEADERS = ["Transaction ID", "Date", "Description", "Status", "Amount"]
STANDARD_HEADERS = ["Item", "Quantity", "Unit Price", "Tax", "Amount"]

# Column widths in mm; the standard layout gives the item column 80mm and
# shares the rest of the 182mm table width evenly.
WEEKLY_COLUMN_WIDTHS = [40.0, 30.0, 50.0, 25.0, 40.0]
STANDARD_COLUMN_WIDTHS = [80.0, 25.5, 25.5, 25.5, 25.5]
WEEKLY_ALIGNMENTS = ["LEFT", "LEFT", "LEFT", "CENTER", "RIGHT"]
STANDARD_ALIGNMENTS = ["LEFT", "CENTER", "RIGHT", "CENTER", "RIGHT"]


@dataclass
class LineItemsTable:
    headers: List[str]
    rows: List[List[str]]
    column_widths: List[float]
    alignments: List[str]


@dataclass
class TotalsBlock:
    subtotal: str
    total: str
    tax: Optional[str] = None


def classify_invoice(transaction: Transaction) -> InvoiceKind:
    """Weekly aggregates are recognised by their WEEK- identifier prefix"""
    if str(transaction.id).startswith(WEEKLY_PREFIX):
        return InvoiceKind.WEEKLY_AGGREGATE
    return InvoiceKind.STANDARD


def parse_status(status: Optional[str]) -> Optional[InvoiceStatus]:
    try:
        return InvoiceStatus(status)
    except ValueError:
        return None


def status_color(status: Optional[str]) -> str:
    """Hex color for a transaction status; unknown statuses use the text color"""
    parsed = parse_status(status)
    if parsed is InvoiceStatus.PAID:
        return STATUS_GREEN
    elif parsed is InvoiceStatus.PENDING:
        return STATUS_AMBER
    elif parsed is InvoiceStatus.OVERDUE:
        return STATUS_RED
    elif parsed is InvoiceStatus.DRAFT:
        return STATUS_GRAY
    elif parsed is InvoiceStatus.PARTIAL:
        return STATUS_BLUE
    else:
        return TEXT_COLOR


def status_label(status: Optional[str]) -> str:
    return f"Status: {(status or '').upper()}"


def plain_number(value) -> str:
    """Format an amount without padding: 1000.00 -> '1000', 12.50 -> '12.5'"""
    amount = to_amount(value)
    if amount == 0:
        return "0"
    return format(amount.normalize(), "f")


def money(value, currency: str) -> str:
    return f"{currency} {plain_number(value)}"


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def _weekly_row(item: LineItem, currency: str) -> List[str]:
    return [
        item.transaction_id or "-",
        format_display_date(item.date),
        item.product_name or "Service",
        _capitalize_first(item.status) if item.status else "-",
        money(item.total, currency),
    ]


def _standard_row(item: LineItem, currency: str) -> List[str]:
    return [
        item.description,
        plain_number(item.quantity),
        money(item.unit_price, currency),
        f"{plain_number(item.tax_rate)}%",
        money(item.total, currency),
    ]


def build_line_items_table(transaction: Transaction, currency: str, kind: Optional[InvoiceKind] = None) -> LineItemsTable:
    """
    Build the line-items table for an invoice.

    Rows come from, in order of precedence:
    - weekly invoice with items: one row per rolled-up transaction
    - any invoice with items: item, quantity, unit price, tax, amount
    - no items: a single row made from the transaction itself

    Headers and column geometry follow the invoice kind.
    """
    kind = kind or classify_invoice(transaction)
    weekly = kind is InvoiceKind.WEEKLY_AGGREGATE
    items = transaction.line_items or []

    if weekly and items:
        rows = [_weekly_row(item, currency) for item in items]
    elif items:
        rows = [_standard_row(item, currency) for item in items]
    else:
        amount = money(transaction.total_amount, currency)
        rows = [[transaction.description or "", "1", amount, "0%", amount]]

    return LineItemsTable(
        headers=list(WEEKLY_HEADERS if weekly else STANDARD_HEADERS),
        rows=rows,
        column_widths=list(WEEKLY_COLUMN_WIDTHS if weekly else STANDARD_COLUMN_WIDTHS),
        alignments=list(WEEKLY_ALIGNMENTS if weekly else STANDARD_ALIGNMENTS),
    )


def total_tax(items: Iterable[LineItem]) -> Decimal:
    """Sum of unit_price * quantity * tax_rate / 100 over all items"""
    tax = ZERO
    for item in items:
        tax += to_amount(item.unit_price) * to_amount(item.quantity) * to_amount(item.tax_rate) / 100
    return tax


def compute_totals(transaction: Transaction, currency: str, kind: Optional[InvoiceKind] = None) -> TotalsBlock:
    """
    Subtotal, optional tax and grand total lines.

    Subtotal and total both echo total_amount as stored; the tax line is
    informational and only shown for itemized standard invoices.
    """
    kind = kind or classify_invoice(transaction)
    block = TotalsBlock(
        subtotal=money(transaction.total_amount, currency),
        total=money(transaction.total_amount, currency),
    )

    if transaction.line_items and kind is InvoiceKind.STANDARD:
        tax = total_tax(transaction.line_items)
        if tax > 0:
            block.tax = plain_number(tax)

    return block


def _aggregate_status(statuses: List[str]) -> str:
    if statuses and all(s == InvoiceStatus.PAID.value for s in statuses):
        return InvoiceStatus.PAID.value
    if any(s == InvoiceStatus.OVERDUE.value for s in statuses):
        return InvoiceStatus.OVERDUE.value
    if any(s in (InvoiceStatus.PAID.value, InvoiceStatus.PARTIAL.value) for s in statuses):
        return InvoiceStatus.PARTIAL.value
    if statuses and all(s == InvoiceStatus.DRAFT.value for s in statuses):
        return InvoiceStatus.DRAFT.value
    return InvoiceStatus.PENDING.value


def build_weekly_invoice(
    client_id: Optional[int],
    client_name: str,
    transactions: List[Transaction],
    week_of: date,
) -> Transaction:
    """
    Roll a client's transactions for one ISO week into a single invoice.

    Each underlying transaction becomes one line item carrying its own id,
    date, first product description and status. The aggregate status is
    paid only when everything is paid.
    """
    start = week_start(week_of)
    iso_year, iso_week, _ = start.isocalendar()
    ordered = sorted(transactions, key=lambda t: (t.transaction_date or start, t.transaction_id))

    items = []
    for txn in ordered:
        product = txn.line_items[0].description if txn.line_items else txn.description
        items.append(
            LineItem(
                description=product or "Service",
                product_name=product or "Service",
                quantity=Decimal("1"),
                unit_price=to_amount(txn.total_amount),
                total=to_amount(txn.total_amount),
                transaction_id=txn.transaction_id,
                date=txn.transaction_date,
                status=txn.status,
            )
        )

    due_dates = [t.due_date for t in ordered if t.due_date is not None]
    return Transaction(
        id=f"{WEEKLY_PREFIX}{iso_year}-{iso_week:02d}",
        transaction_id=f"{WEEKLY_PREFIX}{iso_year}-{iso_week:02d}",
        client_id=client_id,
        client_name=client_name,
        transaction_date=start,
        due_date=max(due_dates) if due_dates else start + timedelta(days=6),
        total_amount=sum_amounts(t.total_amount for t in ordered),
        status=_aggregate_status([t.status for t in ordered]),
        line_items=items,
        description=f"Transactions for week {iso_week:02d} of {iso_year}",
    )
