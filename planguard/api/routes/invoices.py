"""Invoice artifact routes"""
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from planguard.api.dependencies import get_api_client, get_invoice_archive
from planguard.core.billing.invoices import InvoiceArchive, InvoiceArtifact
from planguard.core.config import settings
from planguard.enums import InvoiceFormat
from planguard.schemas.billing import InvoiceRenderRequest
from planguard.services.api_client import DashboardApiClient
from planguard.utils.responses import get_or_404

router = APIRouter(prefix="/invoices", tags=["invoices"])
logger = logging.getLogger(__name__)


def content_disposition(filename: str) -> str:
    """Attachment header; non-ASCII names go through RFC 5987 encoding"""
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename*=utf-8''{quoted}"


def _attachment(artifact: InvoiceArtifact) -> Response:
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )


@router.post("/render")
async def render_invoice(
    payload: InvoiceRenderRequest,
    format: Optional[InvoiceFormat] = Query(None, description="html or pdf"),
    archive: InvoiceArchive = Depends(get_invoice_archive),
):
    """Render a supplied invoice record into a downloadable document"""
    artifact = archive.render(
        payload.invoice,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email,
        fmt=format or settings.invoice_default_format,
    )
    return _attachment(artifact)


@router.get("/{invoice_number}/download")
async def download_invoice(
    invoice_number: str,
    customer_name: str = Query(..., min_length=1),
    customer_email: Optional[str] = Query(None),
    format: Optional[InvoiceFormat] = Query(None, description="html or pdf"),
    client: DashboardApiClient = Depends(get_api_client),
    archive: InvoiceArchive = Depends(get_invoice_archive),
):
    """
    Look up an invoice in the billing history and return it as an attachment.

    Returns 404 if the invoice is not in the history, 502 if the history
    cannot be read.
    """
    archive.replace(await client.fetch_invoices())
    invoice = get_or_404(archive.find(invoice_number), "Invoice", invoice_number)
    artifact = archive.render(
        invoice,
        customer_name=customer_name,
        customer_email=customer_email,
        fmt=format or settings.invoice_default_format,
    )
    logger.info(f"Serving {artifact.filename}")
    return _attachment(artifact)
