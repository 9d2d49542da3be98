"""Unit tests for the dashboard session service"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from planguard.enums import PlanTier, SubmissionOutcome
from planguard.exceptions import ApiClientError, InvalidTierError, SubmissionRejectedError
from planguard.schemas.dashboard import ActivityEntry, ActiveRequestsPayload, SupportUsage
from planguard.schemas.support import ChangeRequestCreate, SupportRequestCreate
from planguard.services.dashboard_service import DashboardService, RequestGenerations

NEXT_TICKET_AT = datetime(2025, 3, 10, 13, 0, tzinfo=timezone.utc)


def _support_request():
    return SupportRequestCreate(name="Ada", issue="Checkout is broken", specialist_id="ops-1")


class TestRequestGenerations:
    """Tests for last-issued-wins tagging"""

    def test_only_latest_is_current(self):
        """Test an older tag stops being current once a newer one is issued"""
        generations = RequestGenerations()
        first = generations.issue("activity")
        second = generations.issue("activity")

        assert generations.is_current("activity", first) is False
        assert generations.is_current("activity", second) is True
        assert generations.latest("activity") == 2

    def test_resources_are_independent(self):
        """Test tags are per resource"""
        generations = RequestGenerations()
        activity = generations.issue("activity")
        generations.issue("changelog")

        assert generations.is_current("activity", activity) is True


class TestDashboardLoad:
    """Tests for loading the dashboard"""

    @pytest.mark.asyncio
    async def test_load_populates_every_section(self, make_client, dashboard_routes):
        """Test a healthy API fills the whole session"""
        async with make_client(dashboard_routes) as client:
            service = DashboardService(client, tier="pro")
            state = await service.load()

        assert state.plan.id == PlanTier.PRO
        assert state.credits.balance.remaining_hours == 1.5
        assert state.credits.balance.percent == 50.0
        assert len(state.activity) == 1
        assert len(state.changelog) == 1
        assert len(state.invoices.invoices) == 2
        assert len(state.active_requests) == 1
        assert state.cooldown.next_eligible_at == NEXT_TICKET_AT
        assert state.usage_count == 2

    @pytest.mark.asyncio
    async def test_unknown_tier_rejected(self, make_client, dashboard_routes):
        """Test an unknown tier fails before any fetch"""
        async with make_client(dashboard_routes) as client:
            with pytest.raises(InvalidTierError):
                DashboardService(client, tier="gold")

    @pytest.mark.asyncio
    async def test_partial_failure_degrades(self, make_client, dashboard_routes, caplog):
        """Test failed sections degrade while the rest load"""
        routes = dict(dashboard_routes)
        routes["/dashboard/activity"] = (500, {"message": "down"})
        routes["/dashboard/dev-credits"] = (500, {"message": "down"})

        async with make_client(routes) as client:
            service = DashboardService(client, tier="enterprise")
            state = await service.load()

        assert state.activity == []
        assert state.credits.balance.remaining_hours == 15
        assert state.credits.balance.percent == 100.0
        assert len(state.changelog) == 1
        assert len(state.invoices.invoices) == 2
        codes = {getattr(r, "error_code", None) for r in caplog.records}
        assert {"FETCH_001", "FETCH_002"} <= codes

    @pytest.mark.asyncio
    async def test_misshapen_bodies_degrade(self, make_client, dashboard_routes):
        """Test 200 bodies with wrongly typed envelopes degrade like failed reads"""
        routes = dict(dashboard_routes)
        routes["/dashboard/activity"] = (200, {"activity": 5})
        routes["/dashboard/dev-credits"] = (200, {"summary": [1, 2]})
        routes["/dashboard/invoices"] = (200, {"invoices": "none"})

        async with make_client(routes) as client:
            service = DashboardService(client, tier="pro")
            state = await service.load()

        assert state.activity == []
        assert state.invoices.invoices == []
        assert state.credits.balance.remaining_hours == 3
        assert state.credits.balance.percent == 100.0
        assert len(state.changelog) == 1

    @pytest.mark.asyncio
    async def test_failed_requests_keep_cooldown(self, make_client, dashboard_routes):
        """Test a failed requests read empties the list but keeps the cooldown"""
        async with make_client(dashboard_routes) as client:
            service = DashboardService(client, tier="pro")
            await service.load()

        routes = dict(dashboard_routes)
        routes["/dashboard/requests"] = (502, {"message": "tracker down"})
        async with make_client(routes) as client:
            service.client = client
            await service.refresh_requests()

        assert service.state.active_requests == []
        assert service.state.cooldown.next_eligible_at == NEXT_TICKET_AT

    @pytest.mark.asyncio
    async def test_failed_usage_keeps_counter(self, make_client, dashboard_routes):
        """Test a failed usage read leaves the counter alone"""
        async with make_client(dashboard_routes) as client:
            service = DashboardService(client, tier="free")
            await service.refresh_usage()

        routes = dict(dashboard_routes)
        routes["/stats/support-usage"] = (500, {})
        async with make_client(routes) as client:
            service.client = client
            await service.refresh_usage()

        assert service.state.usage_count == 2

    @pytest.mark.asyncio
    async def test_plan_change_updates_fallback(self, make_client, dashboard_routes):
        """Test switching plans re-resolves entitlements and the credit fallback"""
        routes = dict(dashboard_routes)
        routes["/dashboard/dev-credits"] = (500, {})
        async with make_client(routes) as client:
            service = DashboardService(client, tier="pro")
            await service.load(tier="enterprise")

        assert service.state.plan.name == "Enterprise"
        assert service.state.credits.balance.remaining_hours == 15


class _SlowActivityClient:
    """Client whose activity reads resolve in a caller-chosen order"""

    def __init__(self):
        self.pending = []

    async def fetch_recent_activity(self, limit):
        release = asyncio.Event()
        entry = ActivityEntry(
            id=f"a{len(self.pending)}",
            action=f"call-{len(self.pending)}",
            created_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
        )
        self.pending.append(release)
        await release.wait()
        return [entry]


class TestLastIssuedWins:
    """Tests for out-of-order responses"""

    @pytest.mark.asyncio
    async def test_older_response_discarded(self):
        """Test a response arriving after a newer request's response is dropped"""
        client = _SlowActivityClient()
        service = DashboardService(client, tier="free")

        first = asyncio.create_task(service.refresh_activity())
        second = asyncio.create_task(service.refresh_activity())
        await asyncio.sleep(0)

        client.pending[1].set()
        assert await second is True
        client.pending[0].set()
        assert await first is False

        assert [entry.action for entry in service.state.activity] == ["call-1"]


class _TrackerClient:
    """In-memory request tracker"""

    def __init__(self, count=0, next_ticket_at=None, fail_submit=False):
        self.count = count
        self.next_ticket_at = next_ticket_at
        self.fail_submit = fail_submit
        self.submitted = []

    async def fetch_active_requests(self):
        return ActiveRequestsPayload(requests=[], next_ticket_at=self.next_ticket_at)

    async def fetch_support_usage(self):
        return SupportUsage(request_count=self.count, request_limit=10)

    async def submit_support_request(self, request):
        if self.fail_submit:
            raise ApiClientError("Specialist unavailable", endpoint="/forms/support", status_code=409)
        self.submitted.append(request)
        self.count += 1
        self.next_ticket_at = datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc)
        return "Support request received"

    async def submit_change_request(self, request):
        self.submitted.append(request)
        return "Change request received"


class TestSubmission:
    """Tests for gated submissions"""

    @pytest.mark.asyncio
    async def test_submit_refreshes_tracker_state(self, fixed_now):
        """Test a successful submission adopts the tracker's new cooldown"""
        client = _TrackerClient(count=3)
        service = DashboardService(client, tier="free")
        await service.refresh_usage()

        message = await service.submit_support_request(_support_request(), now=fixed_now)

        assert message == "Support request received"
        assert service.state.usage_count == 4
        assert service.state.cooldown.next_eligible_at == datetime(2025, 3, 10, 14, 0, tzinfo=timezone.utc)
        assert service.submission_decision(fixed_now).outcome == SubmissionOutcome.ON_COOLDOWN

    @pytest.mark.asyncio
    async def test_cooldown_blocks_submission(self, fixed_now):
        """Test nothing is sent while on cooldown"""
        client = _TrackerClient(next_ticket_at=fixed_now + timedelta(minutes=30))
        service = DashboardService(client, tier="pro")
        await service.refresh_requests()

        with pytest.raises(SubmissionRejectedError) as exc_info:
            await service.submit_support_request(_support_request(), now=fixed_now)

        assert exc_info.value.error_code.code == "SUBMIT_002"
        assert client.submitted == []

    @pytest.mark.asyncio
    async def test_limit_blocks_submission(self, fixed_now):
        """Test the free tier's limit blocks both request kinds"""
        client = _TrackerClient(count=10)
        service = DashboardService(client, tier="free")
        await service.refresh_usage()

        with pytest.raises(SubmissionRejectedError):
            await service.submit_support_request(_support_request(), now=fixed_now)
        with pytest.raises(SubmissionRejectedError):
            await service.submit_change_request(ChangeRequestCreate(title="New page", description="About us"))

        assert client.submitted == []

    @pytest.mark.asyncio
    async def test_change_request_ignores_cooldown(self, fixed_now):
        """Test change requests are gated by the limit only"""
        client = _TrackerClient(next_ticket_at=datetime(2099, 1, 1, tzinfo=timezone.utc))
        service = DashboardService(client, tier="pro")
        await service.refresh_requests()

        message = await service.submit_change_request(ChangeRequestCreate(title="New page", description="About us"))

        assert message == "Change request received"

    @pytest.mark.asyncio
    async def test_tracker_rejection_propagates(self, fixed_now):
        """Test a tracker error is raised to the caller"""
        service = DashboardService(_TrackerClient(fail_submit=True), tier="pro")

        with pytest.raises(ApiClientError) as exc_info:
            await service.submit_support_request(_support_request(), now=fixed_now)

        assert str(exc_info.value) == "Specialist unavailable"


class TestSnapshot:
    """Tests for the aggregated view"""

    @pytest.mark.asyncio
    async def test_snapshot(self, make_client, dashboard_routes, fixed_now):
        """Test the snapshot mirrors session state and the gate"""
        async with make_client(dashboard_routes) as client:
            service = DashboardService(client, tier="pro", has_addon=True)
            await service.load()

        snapshot = service.snapshot(fixed_now)

        assert snapshot.plan.price == 39
        assert snapshot.credit_balance.remaining_hours == 1.5
        assert snapshot.member_since == datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc)
        assert snapshot.next_ticket_at == NEXT_TICKET_AT
        assert snapshot.submission.allowed is False
        assert snapshot.submission.outcome == SubmissionOutcome.ON_COOLDOWN
        assert snapshot.submission.cooldown_display == "01:00:00"
        assert snapshot.requests_remaining is None

    @pytest.mark.asyncio
    async def test_snapshot_requests_remaining(self, make_client, dashboard_routes, fixed_now):
        """Test a capped plan reports what is left of its window"""
        async with make_client(dashboard_routes) as client:
            service = DashboardService(client, tier="free")
            await service.load()

        assert service.snapshot(fixed_now).requests_remaining == 8
