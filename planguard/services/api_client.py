"""Async client for the remote dashboard API"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from planguard.core.config import settings
from planguard.exceptions import ApiClientError
from planguard.schemas.billing import DevCreditLedger, DevCreditsPayload, Invoice, InvoicesPayload
from planguard.schemas.dashboard import (
    ActivityEntry,
    ActivityPayload,
    ChangelogEntry,
    ChangelogPayload,
    ActiveRequestsPayload,
    SupportUsage,
)
from planguard.schemas.support import SupportRequestCreate, ChangeRequestCreate


logger = logging.getLogger(__name__)


class DashboardApiClient:
    """
    Reads credits, activity, changelog, invoices and requests from the
    dashboard API, and forwards support/change submissions.

    Every failure (transport, non-2xx, unparseable body) surfaces as
    ApiClientError; deciding how to degrade is the caller's job.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def open(self) -> None:
        if self.client is not None:
            return
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=headers,
            transport=self.transport,
        )

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        if self.client is None:
            await self.open()

        try:
            response = await self.client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"Dashboard API {method} {endpoint} failed: {e}")
            raise ApiClientError(f"Network error: {e}", endpoint=endpoint) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = "API request failed"
            if isinstance(data, dict):
                message = data.get("message") or data.get("error") or message
            logger.warning(f"Dashboard API {method} {endpoint} returned {response.status_code}: {message}")
            raise ApiClientError(message, endpoint=endpoint, status_code=response.status_code)

        if not isinstance(data, dict):
            raise ApiClientError("Unexpected response body", endpoint=endpoint, status_code=response.status_code)
        return data

    def _parse(self, endpoint: str, parse):
        try:
            return parse()
        except PydanticValidationError as e:
            raise ApiClientError(f"Malformed response: {e.error_count()} invalid field(s)", endpoint=endpoint) from e

    async def fetch_dev_credits(self) -> DevCreditLedger:
        """
        Fetch the developer-credit ledger.

        Returns:
            DevCreditLedger with consumption logs

        Raises:
            ApiClientError: If the request fails or the body has no usable summary
        """
        endpoint = "/dashboard/dev-credits"
        data = await self._request("GET", endpoint)
        payload = self._parse(endpoint, lambda: DevCreditsPayload.model_validate(data))
        return payload.to_ledger()

    async def fetch_recent_activity(self, limit: int = 5) -> List[ActivityEntry]:
        endpoint = "/dashboard/activity"
        data = await self._request("GET", endpoint, params={"limit": limit})
        return self._parse(endpoint, lambda: ActivityPayload.model_validate(data)).activity

    async def fetch_changelog(self, limit: int = 3) -> List[ChangelogEntry]:
        endpoint = "/dashboard/changelog"
        data = await self._request("GET", endpoint, params={"limit": limit})
        return self._parse(endpoint, lambda: ChangelogPayload.model_validate(data)).entries

    async def fetch_invoices(self) -> List[Invoice]:
        endpoint = "/dashboard/invoices"
        data = await self._request("GET", endpoint)
        return self._parse(endpoint, lambda: InvoicesPayload.model_validate(data)).invoices

    async def fetch_active_requests(self) -> ActiveRequestsPayload:
        """Active requests plus the next support-ticket eligibility instant"""
        endpoint = "/dashboard/requests"
        data = await self._request("GET", endpoint)
        return self._parse(endpoint, lambda: ActiveRequestsPayload.model_validate(data))

    async def fetch_support_usage(self) -> SupportUsage:
        endpoint = "/stats/support-usage"
        data = await self._request("GET", endpoint)
        return self._parse(endpoint, lambda: SupportUsage.model_validate(data))

    async def submit_support_request(self, request: SupportRequestCreate) -> str:
        """
        Submit a support ticket to the request tracker.

        Returns:
            Acknowledgement message

        Raises:
            ApiClientError: If the tracker rejects or cannot be reached
        """
        data = await self._request("POST", "/forms/support", json=request.model_dump())
        return data.get("message", "Support request submitted")

    async def submit_change_request(self, request: ChangeRequestCreate) -> str:
        data = await self._request("POST", "/forms/request-change", json=request.model_dump(exclude_none=True))
        return data.get("message", "Change request submitted")
