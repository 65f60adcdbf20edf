"""Fixed-layout invoice PDF rendering using reportlab.

Coordinates are millimetres measured from the top-left corner of an A4 page,
and converted to reportlab's bottom-left point space only when drawing.
"""

import base64
import io
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from ledger_desk.config import settings
from ledger_desk.domain.exceptions import InvoiceRenderError, TableRenderError
from ledger_desk.domain.invoices import (
    TEXT_COLOR,
    LineItemsTable,
    build_line_items_table,
    classify_invoice,
    compute_totals,
    status_color,
    status_label,
)
from ledger_desk.domain.models import ClientInfo, InvoiceKind, Transaction
from ledger_desk.utils.date_utils import format_display_date

PAGE_WIDTH, PAGE_HEIGHT = A4

LEFT_X = 20
RIGHT_X = 190
CENTER_X = 105
LABEL_X = 150
PAGE_TOP_Y = 20
CONTENT_BOTTOM_Y = 272  # footer starts at 280
LINE_HEIGHT = 5

TABLE_START_Y = 100
TABLE_LEFT_X = 14
TABLE_WIDTH = 182
POST_TABLE_GAP = 10
NOTES_MAX_WIDTH = 170

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
PRIMARY_COLOR = "#3A86FF"
HEADER_FILL = colors.Color(58 / 255, 134 / 255, 255 / 255)
GRID_COLOR = "#c8c8c8"

DATA_URI_PREFIX = "data:application/pdf;base64,"


@dataclass
class Issuer:
    name: str
    address: str
    city: str
    phone: str
    email: str
    website: str

    @classmethod
    def from_settings(cls) -> "Issuer":
        return cls(
            name=settings.issuer_name,
            address=settings.issuer_address,
            city=settings.issuer_city,
            phone=settings.issuer_phone,
            email=settings.issuer_email,
            website=settings.issuer_website,
        )


def draw_text(
    c: canvas.Canvas,
    text,
    x: float,
    y: float,
    size: int = 10,
    bold: bool = False,
    color: str = TEXT_COLOR,
    align: str = "left",
) -> None:
    """Draw one line of text with its baseline at (x, y) in top-based mm"""
    text = "" if text is None else str(text)
    c.saveState()
    c.setFont(FONT_BOLD if bold else FONT, size)
    c.setFillColor(colors.HexColor(color))
    x_pt = x * mm
    y_pt = PAGE_HEIGHT - y * mm
    if align == "right":
        c.drawRightString(x_pt, y_pt, text)
    elif align == "center":
        c.drawCentredString(x_pt, y_pt, text)
    else:
        c.drawString(x_pt, y_pt, text)
    c.restoreState()


def format_generated_on(day: date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


class FooterCanvas(canvas.Canvas):
    """Canvas that defers footers until the total page count is known"""

    def __init__(self, *args, generated_on: Optional[date] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self.generated_on = generated_on or date.today()
        self.page_count = 0

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        # Restoring a saved page state also restores its stale page_count
        page_count = len(self._saved_page_states)
        for page_number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            self.draw_footer(page_number, page_count)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)
        self.page_count = page_count

    def draw_footer(self, page_number: int, page_count: int) -> None:
        draw_text(self, f"Page {page_number} of {page_count}", RIGHT_X, 287, size=8, align="right")
        draw_text(self, "Thank you for your business!", CENTER_X, 280, size=10, align="center")
        draw_text(
            self,
            f"Generated on {format_generated_on(self.generated_on)}",
            CENTER_X,
            285,
            size=8,
            align="center",
        )


class InvoicePdfBuilder:
    """
    Lays out one invoice on a fresh canvas and serializes it.

    The builder is single use: call render() once. After rendering,
    final_y holds the cursor below the line-items table and page_count the
    number of pages produced. page_compression is handed to reportlab as-is;
    None keeps its configured default.
    """

    def __init__(
        self,
        transaction: Transaction,
        client: ClientInfo,
        issuer: Optional[Issuer] = None,
        currency: Optional[str] = None,
        generated_on: Optional[date] = None,
        table_factory: Optional[Callable[..., Table]] = Table,
        page_compression: Optional[int] = None,
    ):
        self.transaction = transaction
        self.client = client
        self.issuer = issuer or Issuer.from_settings()
        self.currency = currency or settings.currency_prefix
        self.generated_on = generated_on
        self.table_factory = table_factory
        self.page_compression = page_compression
        self.kind = classify_invoice(transaction)
        self.final_y: Optional[float] = None
        self.page_count = 0
        self._buffer = io.BytesIO()
        self._canvas: Optional[FooterCanvas] = None

    def render(self) -> str:
        """
        Render the invoice and return it as a base64 PDF data URI.

        Raises:
            TableRenderError: table support is missing or the table failed
            InvoiceRenderError: any other failure while building the document
        """
        try:
            if not callable(self.table_factory):
                raise TableRenderError("Table rendering is not available. Check the reportlab installation.")

            self._canvas = FooterCanvas(
                self._buffer,
                pagesize=A4,
                invariant=1,
                pageCompression=self.page_compression,
                generated_on=self.generated_on,
            )
            self._set_properties()
            self._draw_header()
            self._draw_bill_to()
            self._draw_references()

            table = build_line_items_table(self.transaction, self.currency, self.kind)
            self.final_y = self._draw_table(table)

            anchor = self._draw_totals(self.final_y)
            self._draw_notes(anchor)

            self._canvas.showPage()
            self._canvas.save()
            self.page_count = self._canvas.page_count
        except InvoiceRenderError:
            raise
        except Exception as e:
            raise InvoiceRenderError(f"PDF content generation failed: {e}") from e

        payload = base64.b64encode(self._buffer.getvalue()).decode("ascii")
        return DATA_URI_PREFIX + payload

    def _text(self, text, x: float, y: float, **options) -> None:
        draw_text(self._canvas, text, x, y, **options)

    def _new_page(self) -> None:
        self._canvas.showPage()

    def _set_properties(self) -> None:
        c = self._canvas
        c.setTitle(f"Invoice {self.transaction.id}")
        c.setSubject("Invoice")
        c.setAuthor(self.issuer.name)
        c.setKeywords("invoice, payment")
        c.setCreator(self.issuer.name)

    def _draw_header(self) -> None:
        issuer = self.issuer
        self._text(issuer.name, LEFT_X, 20, size=20, bold=True, color=PRIMARY_COLOR)
        self._text(issuer.address, LEFT_X, 27)
        self._text(issuer.city, LEFT_X, 32)
        self._text(issuer.phone, LEFT_X, 37)
        self._text(issuer.email, LEFT_X, 42)
        self._text(issuer.website, LEFT_X, 47)

        title = "WEEKLY INVOICE" if self.kind is InvoiceKind.WEEKLY_AGGREGATE else "INVOICE"
        txn = self.transaction
        self._text(title, RIGHT_X, 20, size=20, bold=True, color=PRIMARY_COLOR, align="right")
        self._text(f"#{txn.id}", RIGHT_X, 27, size=12, align="right")
        self._text(
            status_label(txn.status), RIGHT_X, 34, size=12, bold=True, color=status_color(txn.status), align="right"
        )
        self._text(f"Date: {format_display_date(txn.transaction_date)}", RIGHT_X, 42, align="right")
        self._text(f"Due Date: {format_display_date(txn.due_date)}", RIGHT_X, 47, align="right")

    def _draw_bill_to(self) -> None:
        client = self.client
        self._text("Bill To:", LEFT_X, 60, size=12, bold=True)
        self._text(client.name, LEFT_X, 67)
        self._text(client.email, LEFT_X, 72)
        if client.phone:
            self._text(client.phone, LEFT_X, 77)
        if client.address:
            for index, line in enumerate(client.address.split("\n")):
                self._text(line, LEFT_X, 82 + index * LINE_HEIGHT)

    def _draw_references(self) -> None:
        txn = self.transaction
        if txn.reference_number:
            self._text(f"Reference: {txn.reference_number}", RIGHT_X, 60, align="right")
        if txn.payment_method:
            self._text(f"Payment Method: {txn.payment_method}", RIGHT_X, 65, align="right")

    def _table_style(self, table: LineItemsTable) -> TableStyle:
        commands = [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor(GRID_COLOR)),
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
            ("FONTNAME", (0, 1), (-1, -1), FONT),
            ("TEXTCOLOR", (0, 1), (-1, -1), colors.HexColor(TEXT_COLOR)),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 5),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
            ("LEFTPADDING", (0, 0), (-1, -1), 5),
            ("RIGHTPADDING", (0, 0), (-1, -1), 5),
        ]
        for column, alignment in enumerate(table.alignments):
            commands.append(("ALIGN", (column, 0), (column, -1), alignment))
        return TableStyle(commands)

    def _draw_table(self, table: LineItemsTable) -> float:
        """Draw the table from TABLE_START_Y, splitting across pages; return final_y"""
        if not table.rows:
            self._text("No line items to display.", LEFT_X, TABLE_START_Y)
            return TABLE_START_Y + POST_TABLE_GAP

        try:
            flowable = self.table_factory(
                [table.headers] + table.rows,
                colWidths=[width * mm for width in table.column_widths],
                repeatRows=1,
            )
            flowable.setStyle(self._table_style(table))

            y = TABLE_START_Y
            while flowable is not None:
                available = (CONTENT_BOTTOM_Y - y) * mm
                _, height = flowable.wrapOn(self._canvas, TABLE_WIDTH * mm, available)
                if height <= available:
                    flowable.drawOn(self._canvas, TABLE_LEFT_X * mm, PAGE_HEIGHT - y * mm - height)
                    y += height / mm
                    break

                parts = flowable.split(TABLE_WIDTH * mm, available)
                if len(parts) < 2:
                    if y == PAGE_TOP_Y:
                        raise TableRenderError("Failed to generate PDF table: a row does not fit on one page")
                    self._new_page()
                    y = PAGE_TOP_Y
                    continue

                head, flowable = parts[0], parts[1]
                _, head_height = head.wrapOn(self._canvas, TABLE_WIDTH * mm, available)
                head.drawOn(self._canvas, TABLE_LEFT_X * mm, PAGE_HEIGHT - y * mm - head_height)
                self._new_page()
                y = PAGE_TOP_Y
        except TableRenderError:
            raise
        except Exception as e:
            raise TableRenderError(f"Failed to generate PDF table: {e}") from e

        return y + POST_TABLE_GAP

    def _draw_totals(self, final_y: float) -> float:
        """Draw subtotal, tax, total and status lines; return the y they were anchored at"""
        # Totals and status occupy final_y .. final_y + 25
        if final_y + 25 > CONTENT_BOTTOM_Y:
            self._new_page()
            final_y = PAGE_TOP_Y

        totals = compute_totals(self.transaction, self.currency, self.kind)
        self._text("Subtotal:", LABEL_X, final_y, align="right")
        self._text(totals.subtotal, RIGHT_X, final_y, align="right")

        if totals.tax is not None:
            self._text("Tax:", LABEL_X, final_y + 7, align="right")
            self._text(totals.tax, RIGHT_X, final_y + 7, align="right")

        self._text("Total:", LABEL_X, final_y + 15, size=12, bold=True, align="right")
        self._text(totals.total, RIGHT_X, final_y + 15, size=12, bold=True, align="right")

        status = self.transaction.status
        self._text(status_label(status), RIGHT_X, final_y + 25, size=12, bold=True, color=status_color(status), align="right")
        return final_y

    def _draw_notes(self, anchor_y: float) -> None:
        notes = self.transaction.notes
        if not notes:
            return

        notes_y = anchor_y + 35
        if notes_y + 7 > CONTENT_BOTTOM_Y:
            self._new_page()
            notes_y = PAGE_TOP_Y
        self._text("Notes:", LEFT_X, notes_y, size=11, bold=True)

        y = notes_y + 7
        for line in simpleSplit(notes, FONT, 10, NOTES_MAX_WIDTH * mm):
            if y > CONTENT_BOTTOM_Y:
                self._new_page()
                y = PAGE_TOP_Y
            self._text(line, LEFT_X, y)
            y += LINE_HEIGHT


def generate_invoice_pdf(
    transaction: Transaction,
    client: ClientInfo,
    generated_on: Optional[date] = None,
) -> str:
    """Render an invoice to a `data:application/pdf;base64,...` string"""
    return InvoicePdfBuilder(transaction, client, generated_on=generated_on).render()
