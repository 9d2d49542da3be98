"""
Dashboard Service - session state for the plan dashboard.

Owns the mutable view of one signed-in session: the resolved plan, the
credit ledger, billing history, activity, changelog, tracked requests, the
support counter and the ticket cooldown. Remote reads run concurrently and
each one writes only its own slice of state. A read that fails degrades to a
safe default; a read that was superseded by a newer one for the same
resource is dropped.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from planguard.core.billing import cooldown
from planguard.core.billing.cooldown import CooldownClock
from planguard.core.billing.credits import CreditLedgerView
from planguard.core.billing.entitlements import parse_tier, resolve_features
from planguard.core.billing.invoices import InvoiceArchive
from planguard.core.billing.submission import SubmissionDecision, evaluate
from planguard.core.billing.usage import UsageCounter, counter_for, remaining_requests
from planguard.core.config import settings
from planguard.decision.error_codes import ErrorCode, ErrorCodeDictionary
from planguard.enums import PlanTier
from planguard.exceptions import ApiClientError
from planguard.schemas.billing import CreditBalanceResponse
from planguard.schemas.dashboard import (
    ActivityEntry,
    ChangelogEntry,
    ActiveRequest,
    DashboardSnapshot,
)
from planguard.schemas.plans import PlanFeatures
from planguard.schemas.support import SupportRequestCreate, ChangeRequestCreate, SubmissionDecisionResponse
from planguard.services.api_client import DashboardApiClient


logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestGenerations:
    """
    Monotonic per-resource request tags.

    A response is applied only if its tag is still the latest one issued for
    its resource, so the last request issued wins over the last to arrive.
    """

    def __init__(self):
        self._latest: Dict[str, int] = {}

    def issue(self, resource: str) -> int:
        generation = self._latest.get(resource, 0) + 1
        self._latest[resource] = generation
        return generation

    def is_current(self, resource: str, generation: int) -> bool:
        return self._latest.get(resource, 0) == generation

    def latest(self, resource: str) -> int:
        return self._latest.get(resource, 0)


@dataclass
class DashboardState:
    """Mutable session view; replaced piecewise as fetches land"""

    tier: PlanTier
    has_addon: bool
    plan: PlanFeatures
    credits: CreditLedgerView
    invoices: InvoiceArchive
    cooldown: CooldownClock = field(default_factory=CooldownClock)
    activity: List[ActivityEntry] = field(default_factory=list)
    changelog: List[ChangelogEntry] = field(default_factory=list)
    active_requests: List[ActiveRequest] = field(default_factory=list)
    usage_count: int = 0

    @property
    def usage(self) -> UsageCounter:
        return counter_for(self.plan, self.usage_count)


class DashboardService:
    """
    Service for the plan dashboard.

    This service encapsulates:
    - Plan resolution on tier/add-on change
    - Concurrent, individually degraded remote reads
    - Support submission gating
    """

    def __init__(
        self,
        client: DashboardApiClient,
        tier: Union[str, PlanTier] = PlanTier.FREE,
        has_addon: bool = False,
        activity_limit: Optional[int] = None,
        changelog_limit: Optional[int] = None,
        issuer: Optional[str] = None,
    ):
        """
        Initialize dashboard service.

        Args:
            client: Remote dashboard API client
            tier: Initial plan tier
            has_addon: Whether the 24x7 add-on is active
            activity_limit: Recent activity entries to fetch
            changelog_limit: Changelog entries to fetch
            issuer: Name printed on invoice artifacts
        """
        self.client = client
        self.activity_limit = activity_limit or settings.activity_limit
        self.changelog_limit = changelog_limit or settings.changelog_limit
        self.generations = RequestGenerations()

        plan_key = parse_tier(tier)
        plan = resolve_features(plan_key, has_addon)
        self.state = DashboardState(
            tier=plan_key,
            has_addon=has_addon,
            plan=plan,
            credits=CreditLedgerView(fallback_total=plan.free_dev_credit_hours),
            invoices=InvoiceArchive(issuer=issuer or settings.invoice_issuer_name),
        )

    def set_plan(self, tier: Union[str, PlanTier], has_addon: bool) -> PlanFeatures:
        """
        Re-resolve entitlements after a tier or add-on change.

        Raises:
            InvalidTierError: If the tier is not recognized
        """
        plan_key = parse_tier(tier)
        plan = resolve_features(plan_key, has_addon)
        self.state.tier = plan_key
        self.state.has_addon = has_addon
        self.state.plan = plan
        self.state.credits.set_fallback_total(plan.free_dev_credit_hours)
        logger.info(f"Resolved plan {plan_key.value} (24x7 add-on: {has_addon})")
        return plan

    async def load(
        self,
        tier: Optional[Union[str, PlanTier]] = None,
        has_addon: Optional[bool] = None,
    ) -> DashboardState:
        """
        Resolve the plan (when given) and issue every remote read concurrently.

        Reads complete in any order; partial failure leaves the other
        sections intact.
        """
        if tier is not None:
            self.set_plan(tier, self.state.has_addon if has_addon is None else has_addon)
        elif has_addon is not None:
            self.set_plan(self.state.tier, has_addon)

        await asyncio.gather(
            self.refresh_credits(),
            self.refresh_activity(),
            self.refresh_changelog(),
            self.refresh_invoices(),
            self.refresh_requests(),
            self.refresh_usage(),
        )
        return self.state

    async def _read(
        self,
        resource: str,
        fetch: Callable[[], Awaitable[T]],
        error_code: ErrorCode,
        apply: Callable[[T], None],
        degrade: Optional[Callable[[], None]] = None,
    ) -> bool:
        """Run one tagged read; returns True when its outcome was applied"""
        generation = self.generations.issue(resource)
        try:
            result = await fetch()
        except ApiClientError as e:
            if not self.generations.is_current(resource, generation):
                return False
            logger.warning(
                f"{error_code.message}: {e}",
                extra={"error_code": error_code.code},
            )
            if degrade is not None:
                degrade()
            return True

        if not self.generations.is_current(resource, generation):
            logger.debug(
                f"Discarding stale {resource} response "
                f"(generation {generation}, latest {self.generations.latest(resource)})"
            )
            return False

        apply(result)
        return True

    async def refresh_credits(self) -> CreditBalanceResponse:
        """Explicit credits refresh; the previous balance stays visible meanwhile"""
        generation = self.generations.issue("credits")
        balance = await self.state.credits.refresh(
            self.client.fetch_dev_credits,
            is_current=lambda: self.generations.is_current("credits", generation),
        )
        return CreditBalanceResponse.model_validate(balance)

    async def refresh_activity(self) -> bool:
        return await self._read(
            "activity",
            lambda: self.client.fetch_recent_activity(self.activity_limit),
            ErrorCodeDictionary.FETCH_002,
            apply=lambda entries: setattr(self.state, "activity", entries),
            degrade=lambda: setattr(self.state, "activity", []),
        )

    async def refresh_changelog(self) -> bool:
        return await self._read(
            "changelog",
            lambda: self.client.fetch_changelog(self.changelog_limit),
            ErrorCodeDictionary.FETCH_003,
            apply=lambda entries: setattr(self.state, "changelog", entries),
            degrade=lambda: setattr(self.state, "changelog", []),
        )

    async def refresh_invoices(self) -> bool:
        return await self._read(
            "invoices",
            self.client.fetch_invoices,
            ErrorCodeDictionary.FETCH_004,
            apply=self.state.invoices.replace,
            degrade=lambda: self.state.invoices.replace([]),
        )

    async def refresh_requests(self) -> bool:
        def apply(payload):
            self.state.active_requests = list(payload.requests)
            if payload.next_ticket_at is not None:
                self.state.cooldown.update(payload.next_ticket_at)

        # Cooldown unchanged on failure
        return await self._read(
            "requests",
            self.client.fetch_active_requests,
            ErrorCodeDictionary.FETCH_005,
            apply=apply,
            degrade=lambda: setattr(self.state, "active_requests", []),
        )

    async def refresh_usage(self) -> bool:
        return await self._read(
            "usage",
            self.client.fetch_support_usage,
            ErrorCodeDictionary.FETCH_006,
            apply=lambda usage: setattr(self.state, "usage_count", usage.request_count),
        )

    def submission_decision(self, now: Optional[datetime] = None) -> SubmissionDecision:
        """Gate for the support-request action, recomputed on every tick"""
        return evaluate(self.state.usage, self.state.cooldown.next_eligible_at, now)

    async def submit_support_request(
        self,
        request: SupportRequestCreate,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Submit a support ticket if the gate allows it.

        Raises:
            SubmissionRejectedError: Limit reached or on cooldown
            ApiClientError: The tracker refused or was unreachable
        """
        self.submission_decision(now).raise_for_refusal()
        message = await self.client.submit_support_request(request)
        logger.info(f"Support request submitted to specialist {request.specialist_id}")

        # The tracker owns the new cooldown and count
        await asyncio.gather(self.refresh_requests(), self.refresh_usage())
        return message

    async def submit_change_request(self, request: ChangeRequestCreate) -> str:
        """
        Submit a change request; gated by the usage limit only.

        Raises:
            SubmissionRejectedError: Limit reached
            ApiClientError: The tracker refused or was unreachable
        """
        evaluate(self.state.usage, None).raise_for_refusal()
        message = await self.client.submit_change_request(request)
        await asyncio.gather(self.refresh_requests(), self.refresh_usage())
        return message

    def snapshot(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        """Aggregate the session into one renderable view"""
        now = now or cooldown.utcnow()
        decision = self.submission_decision(now)
        return DashboardSnapshot(
            plan=self.state.plan,
            credits=self.state.credits.ledger,
            credit_balance=CreditBalanceResponse.model_validate(self.state.credits.balance),
            activity=self.state.activity,
            changelog=self.state.changelog,
            invoices=self.state.invoices.invoices,
            active_requests=self.state.active_requests,
            next_ticket_at=self.state.cooldown.next_eligible_at,
            requests_remaining=remaining_requests(self.state.usage),
            member_since=self.state.invoices.member_since(),
            submission=SubmissionDecisionResponse.model_validate(decision),
        )
