"""Pytest configuration and shared fixtures"""
import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Tuple, Union

import httpx
import pytest

from planguard.schemas.billing import Invoice
from planguard.services.api_client import DashboardApiClient

TEST_API_BASE_URL = "http://dashboard.test/api"

# path -> (status, body) or an exception instance raised by the transport
RouteTable = Dict[str, Union[Tuple[int, Any], Exception]]


def build_transport(routes: RouteTable, calls: list = None) -> httpx.MockTransport:
    """MockTransport answering by URL path (relative to the API base)"""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        if calls is not None:
            calls.append(request)
        answer = routes.get(path)
        if answer is None:
            return httpx.Response(404, json={"message": f"No route {path}"})
        if isinstance(answer, Exception):
            raise answer
        status_code, body = answer
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, content=json.dumps(body), headers={"Content-Type": "application/json"})
        return httpx.Response(status_code, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def fixed_now():
    """A fixed evaluation instant"""
    return datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_invoice():
    """A settled pro invoice"""
    return Invoice(
        id="inv_1",
        invoice_number="INV-2025-0042",
        amount=Decimal("39.00"),
        currency="USD",
        status="paid",
        plan_name="Pro",
        billing_start=datetime(2025, 2, 1, tzinfo=timezone.utc),
        billing_end=datetime(2025, 3, 1, tzinfo=timezone.utc),
        created_at=datetime(2025, 2, 1, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def invoice_payload():
    """Invoice records as the dashboard API reports them (camelCase)"""
    return [
        {
            "id": "inv_1",
            "invoiceNumber": "INV-2025-0042",
            "amount": "39.00",
            "currency": "USD",
            "status": "paid",
            "planName": "Pro",
            "billingStart": "2025-02-01T00:00:00Z",
            "billingEnd": "2025-03-01T00:00:00Z",
            "createdAt": "2025-02-01T09:30:00Z",
        },
        {
            "id": "inv_0",
            "invoiceNumber": "INV-2025-0007",
            "amount": "29.00",
            "currency": "USD",
            "status": "paid",
            "planName": "Pro",
            "billingStart": "2025-01-01T00:00:00Z",
            "billingEnd": "2025-02-01T00:00:00Z",
            "createdAt": "2025-01-01T09:30:00Z",
        },
    ]


@pytest.fixture
def dashboard_routes(invoice_payload) -> RouteTable:
    """A healthy dashboard API"""
    return {
        "/dashboard/dev-credits": (200, {
            "summary": {"usedHours": 1.5, "totalHours": 3},
            "logs": [{
                "id": "log_1",
                "title": "Fix checkout",
                "hoursUsed": 1.5,
                "status": "completed",
                "category": "bugfix",
                "createdAt": "2025-03-01T10:00:00Z",
            }],
        }),
        "/dashboard/activity": (200, {"activity": [
            {"id": "a1", "action": "login", "createdAt": "2025-03-09T08:00:00Z"},
        ]}),
        "/dashboard/changelog": (200, {"entries": [
            {"id": "c1", "title": "Faster reports", "version": "2.4.0", "createdAt": "2025-03-01T00:00:00Z"},
        ]}),
        "/dashboard/invoices": (200, {"invoices": invoice_payload}),
        "/dashboard/requests": (200, {
            "requests": [{
                "id": "r1",
                "title": "Site down",
                "status": "in_progress",
                "type": "support",
                "createdAt": "2025-03-10T11:00:00Z",
            }],
            "nextTicketAt": "2025-03-10T13:00:00Z",
        }),
        "/stats/support-usage": (200, {
            "requestCount": 2,
            "requestLimit": 10,
            "nextResetAt": "2025-03-17T00:00:00Z",
        }),
        "/forms/support": (200, {"message": "Support request received"}),
        "/forms/request-change": (200, {"message": "Change request received"}),
    }


@pytest.fixture
def make_client() -> Callable[..., DashboardApiClient]:
    """Factory for API clients backed by a MockTransport"""

    def factory(routes: RouteTable, calls: list = None) -> DashboardApiClient:
        return DashboardApiClient(
            base_url=TEST_API_BASE_URL,
            token="test-token",
            timeout=5.0,
            transport=build_transport(routes, calls),
        )

    return factory
