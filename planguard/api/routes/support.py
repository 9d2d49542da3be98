"""Support and change request routes"""
import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query

from planguard.api.dependencies import get_api_client
from planguard.core.billing.submission import evaluate
from planguard.core.billing.usage import UsageCounter
from planguard.schemas.support import (
    EligibilityRequest,
    SubmissionDecisionResponse,
    SupportRequestCreate,
    ChangeRequestCreate,
)
from planguard.services.api_client import DashboardApiClient
from planguard.services.dashboard_service import DashboardService
from planguard.utils.responses import format_success_response

router = APIRouter(prefix="/support", tags=["support"])


@router.post("/eligibility", response_model=SubmissionDecisionResponse)
async def check_submission_eligibility(payload: EligibilityRequest):
    """
    Evaluate the usage limit and ticket cooldown for a new support request.

    A refusal is returned as data (allowed=false), not as an error.
    """
    try:
        counter = UsageCounter(count=payload.count, limit=payload.limit)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    decision = evaluate(counter, payload.next_eligible_at, payload.now)
    return SubmissionDecisionResponse.model_validate(decision)


async def _session(client: DashboardApiClient, tier: str, has_addon: bool) -> DashboardService:
    service = DashboardService(client, tier=tier, has_addon=has_addon)
    await asyncio.gather(service.refresh_requests(), service.refresh_usage())
    return service


@router.post("/requests")
async def submit_support_request(
    payload: SupportRequestCreate,
    tier: str = Query(..., description="Current plan tier"),
    has_addon: bool = Query(False),
    client: DashboardApiClient = Depends(get_api_client),
):
    """
    Submit a support ticket after gating it against the tracker's state.

    Returns 429 when the limit is reached or tickets are on cooldown, 502 if
    the tracker rejects the submission.
    """
    service = await _session(client, tier, has_addon)
    message = await service.submit_support_request(payload)
    return format_success_response(
        message,
        data={"next_ticket_at": service.state.cooldown.next_eligible_at},
    )


@router.post("/change-requests")
async def submit_change_request(
    payload: ChangeRequestCreate,
    tier: str = Query(..., description="Current plan tier"),
    has_addon: bool = Query(False),
    client: DashboardApiClient = Depends(get_api_client),
):
    """Submit a change request; refused with 429 once the usage limit is reached"""
    service = await _session(client, tier, has_addon)
    message = await service.submit_change_request(payload)
    return format_success_response(message)
