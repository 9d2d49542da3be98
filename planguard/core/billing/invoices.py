"""Invoice archive - billing history and printable invoice artifacts"""
from __future__ import annotations

import html
import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors

from planguard.core.billing.cooldown import utcnow
from planguard.enums import InvoiceFormat
from planguard.schemas.billing import Invoice


logger = logging.getLogger(__name__)

# Invoices are already settled; tax is shown as a fixed zero line
TAX_RATE = Decimal("0")
CENT = Decimal("0.01")

CURRENCY_SYMBOLS: Dict[str, str] = {"USD": "$", "EUR": "€", "GBP": "£"}

MEDIA_TYPES: Dict[InvoiceFormat, str] = {
    InvoiceFormat.HTML: "text/html; charset=utf-8",
    InvoiceFormat.PDF: "application/pdf",
}

HTML_STYLE = """
body { font-family: 'Inter', system-ui, sans-serif; padding: 40px; color: #111; }
h1 { font-size: 24px; margin-bottom: 4px; }
p { margin: 0 0 10px; }
table { width: 100%; border-collapse: collapse; margin-top: 20px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #f4f4f4; }
td.amount, th.amount { text-align: right; }
footer { margin-top: 40px; font-size: 12px; color: #666; }
"""


@dataclass(frozen=True)
class LineItem:
    description: str
    period: str
    amount: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class InvoiceArtifact:
    """Rendered invoice, not yet written anywhere"""

    filename: str
    media_type: str
    content: bytes


def format_money(amount: Decimal, currency: str) -> str:
    """Render an amount with its currency symbol (or ISO code)"""
    value = f"{amount.quantize(CENT, rounding=ROUND_HALF_UP):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{value}"
    return f"{currency.upper()} {value}"


def format_date(value: datetime) -> str:
    return value.strftime("%b %d, %Y")


# Path separators and control characters, plus those Windows forbids in names
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


def invoice_filename(invoice: Invoice, fmt: InvoiceFormat) -> str:
    """Single path component naming the artifact, whatever the invoice number holds"""
    number = _UNSAFE_FILENAME_CHARS.sub("-", invoice.invoice_number.strip())
    return f"invoice-{number}.{fmt.value}"


def line_items(invoice: Invoice) -> List[LineItem]:
    """The single subscription line of an invoice"""
    return [
        LineItem(
            description=f"{invoice.plan_name} Subscription",
            period=f"{format_date(invoice.billing_start)} to {format_date(invoice.billing_end)}",
            amount=invoice.amount.quantize(CENT, rounding=ROUND_HALF_UP),
        )
    ]


def totals(invoice: Invoice) -> InvoiceTotals:
    """Subtotal, fixed 0% tax and grand total (always equal to the subtotal)"""
    subtotal = sum((item.amount for item in line_items(invoice)), Decimal("0"))
    tax = (subtotal * TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return InvoiceTotals(
        subtotal=subtotal,
        tax_rate=TAX_RATE,
        tax=tax,
        grand_total=subtotal + tax,
    )


def _generated_label(generated_at: datetime) -> str:
    return generated_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _tax_label(rate: Decimal) -> str:
    return f"Tax ({rate * 100:.0f}%)"


def render_html(
    invoice: Invoice,
    customer_name: str,
    customer_email: Optional[str],
    issuer: str,
    generated_at: datetime,
) -> str:
    """Standalone HTML invoice; only the footer depends on generated_at"""
    esc = html.escape
    currency = invoice.currency
    items = line_items(invoice)
    summary = totals(invoice)

    rows = "\n".join(
        "<tr>"
        f"<td>{esc(item.description)}</td>"
        f"<td>{esc(item.period)}</td>"
        f'<td class="amount">{esc(format_money(item.amount, currency))}</td>'
        "</tr>"
        for item in items
    )
    email_line = f"<p>{esc(customer_email)}</p>" if customer_email else ""
    stamp = _generated_label(generated_at)

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Invoice {esc(invoice.invoice_number)}</title>
<style>{HTML_STYLE}</style>
</head>
<body>
<header>
<h1>Invoice {esc(invoice.invoice_number)}</h1>
<p>Issued {esc(format_date(invoice.created_at))}</p>
<p>Status: {esc(invoice.status.upper())}</p>
</header>
<section class="parties">
<h2>Billed to</h2>
<p>{esc(customer_name)}</p>
{email_line}
</section>
<table class="line-items">
<thead><tr><th>Description</th><th>Billing period</th><th class="amount">Amount</th></tr></thead>
<tbody>
{rows}
</tbody>
</table>
<table class="totals">
<tr><td>Subtotal</td><td class="amount">{esc(format_money(summary.subtotal, currency))}</td></tr>
<tr><td>{esc(_tax_label(summary.tax_rate))}</td><td class="amount">{esc(format_money(summary.tax, currency))}</td></tr>
<tr><th>Total</th><th class="amount">{esc(format_money(summary.grand_total, currency))}</th></tr>
</table>
<footer>
<p>Issued by {esc(issuer)}. Document generated {esc(stamp)}.</p>
</footer>
</body>
</html>
"""


def _para(text: str, style) -> Paragraph:
    return Paragraph(html.escape(text), style)


def render_pdf(
    invoice: Invoice,
    customer_name: str,
    customer_email: Optional[str],
    issuer: str,
    generated_at: datetime,
) -> bytes:
    """PDF invoice; reportlab runs in invariant mode so output is reproducible"""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"Invoice {invoice.invoice_number}",
        author=issuer,
        invariant=1,
    )
    styles = getSampleStyleSheet()
    currency = invoice.currency
    summary = totals(invoice)

    story = [
        _para(f"Invoice {invoice.invoice_number}", styles["Title"]),
        _para(f"Issued {format_date(invoice.created_at)}", styles["Normal"]),
        _para(f"Status: {invoice.status.upper()}", styles["Normal"]),
        Spacer(1, 12),
        _para("Billed to", styles["Heading2"]),
        _para(customer_name, styles["Normal"]),
    ]
    if customer_email:
        story.append(_para(customer_email, styles["Normal"]))
    story.append(Spacer(1, 12))

    item_rows = [["Description", "Billing period", "Amount"]]
    for item in line_items(invoice):
        item_rows.append([item.description, item.period, format_money(item.amount, currency)])
    item_table = Table(item_rows, colWidths=[180, 200, 90])
    item_table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (2, 0), (2, -1), "RIGHT"),
    ]))
    story.append(item_table)
    story.append(Spacer(1, 12))

    totals_table = Table(
        [
            ["Subtotal", format_money(summary.subtotal, currency)],
            [_tax_label(summary.tax_rate), format_money(summary.tax, currency)],
            ["Total", format_money(summary.grand_total, currency)],
        ],
        colWidths=[380, 90],
    )
    totals_table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("FONTNAME", (0, 2), (-1, 2), "Helvetica-Bold"),
        ("LINEABOVE", (0, 2), (-1, 2), 0.5, colors.black),
    ]))
    story.append(totals_table)
    story.append(Spacer(1, 24))
    story.append(_para(
        f"Issued by {issuer}. Document generated {_generated_label(generated_at)}.",
        styles["Italic"],
    ))

    doc.build(story)
    return buffer.getvalue()


class InvoiceArchive:
    """
    Billing history for the current session.

    Rendering never touches storage; ``download`` is the only write path.
    """

    def __init__(self, invoices: Optional[Iterable[Invoice]] = None, issuer: str = "PlanGuard Billing"):
        self.invoices: List[Invoice] = list(invoices or [])
        self.issuer = issuer

    def replace(self, invoices: Iterable[Invoice]) -> None:
        """Swap in a freshly fetched invoice list"""
        self.invoices = list(invoices)

    def find(self, invoice_number: str) -> Optional[Invoice]:
        for invoice in self.invoices:
            if invoice.invoice_number == invoice_number:
                return invoice
        return None

    def latest(self) -> Optional[Invoice]:
        if not self.invoices:
            return None
        return max(self.invoices, key=lambda inv: inv.created_at)

    def member_since(self) -> Optional[datetime]:
        """Earliest invoice date, used as the account's start date"""
        if not self.invoices:
            return None
        return min(inv.created_at for inv in self.invoices)

    def render(
        self,
        invoice: Invoice,
        customer_name: str,
        customer_email: Optional[str] = None,
        fmt: Union[InvoiceFormat, str] = InvoiceFormat.HTML,
        generated_at: Optional[datetime] = None,
    ) -> InvoiceArtifact:
        """
        Render one invoice into a self-contained document.

        Args:
            invoice: Invoice to render
            customer_name: Payer display name
            customer_email: Optional payer email
            fmt: html or pdf
            generated_at: Footer timestamp, defaults to now

        Returns:
            InvoiceArtifact with filename invoice-{invoiceNumber}.{ext}
        """
        fmt = InvoiceFormat(fmt)
        generated_at = generated_at or utcnow()

        if fmt == InvoiceFormat.PDF:
            content = render_pdf(invoice, customer_name, customer_email, self.issuer, generated_at)
        else:
            content = render_html(
                invoice, customer_name, customer_email, self.issuer, generated_at
            ).encode("utf-8")

        return InvoiceArtifact(
            filename=invoice_filename(invoice, fmt),
            media_type=MEDIA_TYPES[fmt],
            content=content,
        )

    @staticmethod
    def download(artifact: InvoiceArtifact, directory: Union[str, Path]) -> Path:
        """Write a rendered artifact into a directory and return its path"""
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / artifact.filename
        path.write_bytes(artifact.content)
        logger.info(f"Saved invoice artifact {path}")
        return path
