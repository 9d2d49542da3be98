"""Unit tests for the invoice archive"""
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from planguard.core.billing.invoices import (
    InvoiceArchive,
    format_money,
    invoice_filename,
    line_items,
    totals,
)
from planguard.enums import InvoiceFormat

FOOTER = re.compile(r"<footer>.*?</footer>", re.S)


class TestInvoiceMath:
    """Tests for line items and totals"""

    def test_single_subscription_line(self, sample_invoice):
        """Test the subscription line and its billing period"""
        items = line_items(sample_invoice)

        assert len(items) == 1
        assert items[0].description == "Pro Subscription"
        assert items[0].period == "Feb 01, 2025 to Mar 01, 2025"
        assert items[0].amount == Decimal("39.00")

    def test_grand_total_equals_subtotal(self, sample_invoice):
        """Test tax is a fixed zero line"""
        summary = totals(sample_invoice)

        assert summary.subtotal == Decimal("39.00")
        assert summary.tax == Decimal("0.00")
        assert summary.grand_total == summary.subtotal

    def test_format_money(self):
        """Test currency rendering"""
        assert format_money(Decimal("1234.5"), "usd") == "$1,234.50"
        assert format_money(Decimal("10"), "CHF") == "CHF 10.00"

    def test_filename(self, sample_invoice):
        """Test artifact naming"""
        assert invoice_filename(sample_invoice, InvoiceFormat.PDF) == "invoice-INV-2025-0042.pdf"

    @pytest.mark.parametrize("number, expected", [
        ("INV/2025/001", "invoice-INV-2025-001.html"),
        ("../../etc/passwd", "invoice-..-..-etc-passwd.html"),
        ("C:\\temp\\x", "invoice-C--temp-x.html"),
        ("INV-\u20ac-1", "invoice-INV-\u20ac-1.html"),
    ])
    def test_filename_is_one_path_component(self, sample_invoice, number, expected):
        """Test separators and reserved characters never reach the filename"""
        invoice = sample_invoice.model_copy(update={"invoice_number": number})

        assert invoice_filename(invoice, InvoiceFormat.HTML) == expected


class TestRenderHtml:
    """Tests for the HTML artifact"""

    def test_contents(self, sample_invoice):
        """Test the document carries the invoice and the payer"""
        archive = InvoiceArchive(issuer="Acme Billing")
        artifact = archive.render(sample_invoice, "Ada Lovelace", "ada@example.com")
        page = artifact.content.decode("utf-8")

        assert artifact.filename == "invoice-INV-2025-0042.html"
        assert artifact.media_type.startswith("text/html")
        assert "Invoice INV-2025-0042" in page
        assert "Ada Lovelace" in page
        assert "ada@example.com" in page
        assert "Pro Subscription" in page
        assert "Tax (0%)" in page
        assert "$39.00" in page
        assert "Acme Billing" in page

    def test_payer_is_escaped(self, sample_invoice):
        """Test user-supplied text cannot inject markup"""
        artifact = InvoiceArchive().render(sample_invoice, "<script>x</script>")
        page = artifact.content.decode("utf-8")

        assert "<script>x</script>" not in page
        assert "&lt;script&gt;" in page

    def test_idempotent_except_footer(self, sample_invoice):
        """Test re-rendering differs only in the generated timestamp"""
        archive = InvoiceArchive()
        first = archive.render(
            sample_invoice, "Ada", generated_at=datetime(2025, 3, 1, tzinfo=timezone.utc)
        ).content.decode("utf-8")
        second = archive.render(
            sample_invoice, "Ada", generated_at=datetime(2025, 3, 1, tzinfo=timezone.utc) + timedelta(days=3)
        ).content.decode("utf-8")

        assert first != second
        assert FOOTER.sub("", first) == FOOTER.sub("", second)


class TestRenderPdf:
    """Tests for the PDF artifact"""

    def test_pdf_artifact(self, sample_invoice):
        """Test a PDF document is produced"""
        artifact = InvoiceArchive().render(sample_invoice, "Ada", fmt="pdf")

        assert artifact.filename == "invoice-INV-2025-0042.pdf"
        assert artifact.media_type == "application/pdf"
        assert artifact.content.startswith(b"%PDF")

    def test_pdf_is_reproducible(self, sample_invoice):
        """Test identical inputs give identical bytes"""
        generated_at = datetime(2025, 3, 1, tzinfo=timezone.utc)
        archive = InvoiceArchive()

        first = archive.render(sample_invoice, "Ada", fmt=InvoiceFormat.PDF, generated_at=generated_at)
        second = archive.render(sample_invoice, "Ada", fmt=InvoiceFormat.PDF, generated_at=generated_at)

        assert first.content == second.content

    def test_unknown_format_rejected(self, sample_invoice):
        """Test only html and pdf are supported"""
        with pytest.raises(ValueError):
            InvoiceArchive().render(sample_invoice, "Ada", fmt="docx")


class TestInvoiceArchive:
    """Tests for billing history lookups and downloads"""

    def test_lookups(self, sample_invoice):
        """Test find, latest and member_since"""
        older = sample_invoice.model_copy(update={
            "invoice_number": "INV-2024-0001",
            "created_at": datetime(2024, 12, 1, tzinfo=timezone.utc),
        })
        archive = InvoiceArchive([older, sample_invoice])

        assert archive.find("INV-2025-0042") == sample_invoice
        assert archive.find("missing") is None
        assert archive.latest() == sample_invoice
        assert archive.member_since() == datetime(2024, 12, 1, tzinfo=timezone.utc)

    def test_empty_history(self):
        """Test an empty history"""
        archive = InvoiceArchive()

        assert archive.latest() is None
        assert archive.member_since() is None

    def test_download_writes_file(self, sample_invoice, tmp_path):
        """Test download is the only write path"""
        artifact = InvoiceArchive().render(sample_invoice, "Ada")

        path = InvoiceArchive.download(artifact, tmp_path / "out")

        assert path == tmp_path / "out" / "invoice-INV-2025-0042.html"
        assert path.read_bytes() == artifact.content

    def test_download_stays_in_directory(self, sample_invoice, tmp_path):
        """Test an invoice number with separators is written inside the target"""
        invoice = sample_invoice.model_copy(update={"invoice_number": "../INV/7"})
        artifact = InvoiceArchive().render(invoice, "Ada")

        path = InvoiceArchive.download(artifact, tmp_path / "out")

        assert path.parent == tmp_path / "out"
        assert path.name == "invoice-..-INV-7.html"
