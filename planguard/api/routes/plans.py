"""Plan catalog routes"""
from fastapi import APIRouter, Query

from planguard.core.billing.entitlements import resolve_features, get_minimum_plan, FEATURE_MATRIX
from planguard.schemas.plans import PlanFeatures, MinimumPlanResponse
from planguard.utils.responses import not_found

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("/{tier}", response_model=PlanFeatures)
async def get_plan_features(
    tier: str,
    has_addon: bool = Query(False, description="24x7 support add-on active"),
):
    """
    Resolve the entitlements for a tier and add-on flag.

    Returns:
        PlanFeatures; 422 if the tier is not recognized
    """
    return resolve_features(tier, has_addon)


@router.get("/features/{feature}/minimum-plan", response_model=MinimumPlanResponse)
async def get_feature_minimum_plan(feature: str):
    """Lowest tier granting a feature (for upgrade prompts)"""
    if feature not in FEATURE_MATRIX:
        raise not_found("Feature", feature)
    return MinimumPlanResponse(feature=feature, minimum_plan=get_minimum_plan(feature))
