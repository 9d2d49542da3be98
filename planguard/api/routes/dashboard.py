"""Dashboard aggregation route"""
from fastapi import APIRouter, Depends, Query

from planguard.api.dependencies import get_api_client
from planguard.schemas.dashboard import DashboardSnapshot
from planguard.services.api_client import DashboardApiClient
from planguard.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSnapshot, response_model_by_alias=False)
async def get_dashboard(
    tier: str = Query(..., description="Current plan tier"),
    has_addon: bool = Query(False, description="24x7 support add-on active"),
    client: DashboardApiClient = Depends(get_api_client),
):
    """
    Everything the plan dashboard shows for the caller's session.

    Remote sections that cannot be read come back empty (or, for credits,
    as the plan allowance); only an unknown tier fails the request.
    """
    service = DashboardService(client, tier=tier, has_addon=has_addon)
    await service.load()
    return service.snapshot()
