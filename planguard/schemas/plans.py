"""Pydantic schemas for resolved plan entitlements"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Union

from planguard.enums import PlanTier, PriorityTier


UNLIMITED = "unlimited"

RequestLimit = Union[int, Literal["unlimited"]]


class PlanFeatures(BaseModel):
    """Fully resolved entitlements for one (tier, add-on) pair"""
    id: PlanTier
    name: str
    price: int = Field(..., ge=0, description="Monthly price in whole dollars")
    price_display: str
    request_limit: RequestLimit = Field(..., description="Requests per week")
    response_time_business: str
    response_time_off_hours: str
    channels: List[str]
    ai_capability: str
    priority_tier: PriorityTier
    health_check_enabled: bool
    security_audit_enabled: bool
    uptime_monitoring_enabled: bool
    dedicated_engineer_enabled: bool
    true_24x7_support_enabled: bool
    free_dev_credit_hours: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    @property
    def is_unlimited(self) -> bool:
        return self.request_limit == UNLIMITED


class MinimumPlanResponse(BaseModel):
    """Lowest tier granting a feature"""
    feature: str
    minimum_plan: PlanTier
