"""FastAPI dependency injection for PlanGuard services"""
from typing import AsyncGenerator, Optional

from fastapi import Header

from planguard.core.billing.invoices import InvoiceArchive
from planguard.core.config import settings
from planguard.services.api_client import DashboardApiClient


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


async def get_api_client(
    authorization: Optional[str] = Header(None),
) -> AsyncGenerator[DashboardApiClient, None]:
    """Dashboard API client forwarding the caller's bearer token"""
    async with DashboardApiClient(token=_bearer_token(authorization)) as client:
        yield client


def get_invoice_archive() -> InvoiceArchive:
    """Get invoice archive instance"""
    return InvoiceArchive(issuer=settings.invoice_issuer_name)
