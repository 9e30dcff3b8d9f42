"""
Single-page invoice PDF rendering
"""

from datetime import date
from io import BytesIO
from typing import Any, Iterable, Mapping, Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from kadi.services.totals import to_number

# ─── PALETTE ───
BASE = HexColor("#0f172a")
ACCENT = HexColor("#f97316")
GREY_MEDIUM = HexColor("#475569")
GREY_LIGHT = HexColor("#e2e8f0")
ROW_RULE = HexColor("#f1f5f9")
FOOTER = HexColor("#94a3b8")
BG_SOFT = HexColor("#f9fafb")

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

W, H = A4
MARGIN = 48
CONTENT_W = W - 2 * MARGIN

# Table columns, as offsets from the left margin
COL_DESC = 0
COL_QTY = 250
COL_UNIT = 300
COL_TOTAL = 410
ROW_STEP = 25

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_issue_date(value: Optional[date]) -> str:
    """DD Mon YYYY, independent of the process locale"""
    if value is None:
        return "-"
    return f"{value.day:02d} {MONTHS[value.month - 1]} {value.year}"


def format_money(value: Any, currency: Optional[str]) -> str:
    return f"{to_number(value):.2f} {currency or 'USD'}"


def _attr(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _item_value(item: Any, *names: str) -> Any:
    for name in names:
        value = _attr(item, name)
        if value is not None:
            return value
    return None


def _client_lines(client: Any) -> Iterable[str]:
    for field in ("contact_name", "email", "phone", "address"):
        value = _attr(client, field)
        if value:
            yield str(value)


class InvoicePdf:
    """Draws one invoice on a single A4 page; y values are measured from the top"""

    def __init__(self, buffer: BytesIO, title: str):
        self.c = canvas.Canvas(buffer, pagesize=A4)
        self.c.setTitle(title)

    def text(self, x: float, top: float, value: str, font: str = REGULAR_FONT, size: float = 11, color=BASE):
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        self.c.drawString(x, H - top, value)

    def right_text(self, x: float, top: float, value: str, font: str = REGULAR_FONT, size: float = 11, color=BASE):
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        self.c.drawRightString(x, H - top, value)

    def centred_text(self, x: float, top: float, value: str, font: str = REGULAR_FONT, size: float = 11, color=BASE):
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        self.c.drawCentredString(x, H - top, value)

    def rule(self, top: float, color=GREY_LIGHT):
        self.c.setStrokeColor(color)
        self.c.setLineWidth(0.8)
        self.c.line(MARGIN, H - top, MARGIN + CONTENT_W, H - top)

    def save(self):
        self.c.showPage()
        self.c.save()


def render_invoice_pdf(
    invoice: Any,
    client: Any = None,
    *,
    company_name: Optional[str] = None,
    tagline: Optional[str] = None,
) -> bytes:
    """Render an invoice and its client to PDF bytes.

    Everything lands on one page: invoices with more rows than fit simply run
    off the bottom.
    """
    brand = company_name or "Kadi"
    tagline = tagline if tagline is not None else "Facturation simple pour PME"
    currency = _attr(invoice, "currency") or "USD"
    number = _attr(invoice, "invoice_number") or ""
    client = client if client is not None else _attr(invoice, "client")

    buffer = BytesIO()
    pdf = InvoicePdf(buffer, title=f"Facture {number}")
    right_edge = MARGIN + CONTENT_W

    # ─── HEADER ───
    pdf.text(MARGIN, 70, brand, font=BOLD_FONT, size=26)
    if tagline:
        pdf.text(MARGIN, 88, tagline, size=11, color=GREY_MEDIUM)
    pdf.right_text(right_edge, 60, f"Émise le {format_issue_date(_attr(invoice, 'issue_date'))}", color=GREY_MEDIUM)
    pdf.right_text(right_edge, 76, f"Facture {number}", font=BOLD_FONT, color=ACCENT)
    pdf.rule(100)

    # ─── CLIENT BLOCK ───
    lines = list(_client_lines(client))
    block_top = 120
    block_height = max(80, 40 + (len(lines) + 2) * 16)
    pdf.c.setFillColor(BG_SOFT)
    pdf.c.roundRect(MARGIN, H - block_top - block_height, CONTENT_W, block_height, 10, stroke=0, fill=1)

    y = block_top + 28
    pdf.text(MARGIN + 20, y, "Facturé à :", font=BOLD_FONT, size=12, color=GREY_MEDIUM)
    y += 16
    pdf.text(MARGIN + 20, y, str(_attr(client, "company_name") or "-"), font=BOLD_FONT, size=12)
    for line in lines:
        y += 16
        pdf.text(MARGIN + 20, y, line)

    # ─── TABLE ───
    table_top = block_top + block_height + 36
    pdf.text(MARGIN + COL_DESC, table_top, "Description", font=BOLD_FONT, color=GREY_MEDIUM)
    pdf.centred_text(MARGIN + COL_QTY + 25, table_top, "Quantité", font=BOLD_FONT, color=GREY_MEDIUM)
    pdf.right_text(MARGIN + COL_UNIT + 100, table_top, "Prix unitaire", font=BOLD_FONT, color=GREY_MEDIUM)
    pdf.right_text(MARGIN + COL_TOTAL + 100, table_top, "Total", font=BOLD_FONT, color=GREY_MEDIUM)
    header_rule = table_top + 8
    pdf.rule(header_rule)

    y = header_rule
    for item in _attr(invoice, "items") or []:
        y += ROW_STEP
        quantity = to_number(_item_value(item, "quantity"))
        unit_price = to_number(_item_value(item, "unitPrice", "unit_price"))
        description = str(_item_value(item, "description") or "-")

        pdf.text(MARGIN + COL_DESC, y, description[:45])
        pdf.centred_text(MARGIN + COL_QTY + 25, y, f"{quantity:g}" if quantity else "-")
        pdf.right_text(MARGIN + COL_UNIT + 100, y, format_money(unit_price, currency))
        pdf.right_text(MARGIN + COL_TOTAL + 100, y, format_money(quantity * unit_price, currency))
        pdf.rule(y + 8, color=ROW_RULE)

    # ─── TOTAL ───
    y += 40
    pdf.right_text(right_edge, y, "Total", color=GREY_MEDIUM)
    y += 18
    pdf.right_text(right_edge, y, format_money(_attr(invoice, "total_amount"), currency), font=BOLD_FONT, size=14)

    # ─── NOTES ───
    notes = _attr(invoice, "notes")
    if notes:
        y += 36
        pdf.text(MARGIN, y, "Notes", font=BOLD_FONT, size=12, color=GREY_MEDIUM)
        for line in str(notes).splitlines():
            y += 14
            pdf.text(MARGIN, y, line, size=10.5)

    # ─── FOOTER ───
    footer_top = H - MARGIN - 22
    pdf.rule(footer_top)
    pdf.centred_text(W / 2, footer_top + 14, f"Généré automatiquement par {brand}", size=9.5, color=FOOTER)

    pdf.save()
    return buffer.getvalue()
