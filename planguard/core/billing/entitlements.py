"""Plan catalog - resolves a tier plus add-ons into concrete entitlements"""
import logging
from typing import Any, Dict, List, Union

from planguard.enums import PlanTier, PriorityTier
from planguard.exceptions import InvalidTierError
from planguard.schemas.plans import PlanFeatures, UNLIMITED


logger = logging.getLogger(__name__)

# Monthly surcharge for the 24x7 support add-on on pro
PRO_ADDON_SURCHARGE = 10

TIER_ORDER: List[PlanTier] = [PlanTier.FREE, PlanTier.PRO, PlanTier.ENTERPRISE]


# Plan definitions
class PlanEntitlements:
    """Plan entitlements configuration"""

    FREE = {
        "name": "Free",
        "price": 0,
        "request_limit": 10,
        "response_time_business": "Up to 4 hours",
        "response_time_off_hours": "Next Business Day",
        "channels": ["Dashboard Only"],
        "ai_capability": "Basic",
        "priority_tier": PriorityTier.NORMAL,
        "health_check_enabled": False,
        "security_audit_enabled": False,
        "uptime_monitoring_enabled": False,
        "dedicated_engineer_enabled": False,
        "true_24x7_support_enabled": False,
        "free_dev_credit_hours": 0,
    }

    PRO = {
        **FREE,
        "name": "Pro",
        "price": 29,
        "request_limit": UNLIMITED,
        "response_time_business": "Under 40 minutes",
        "response_time_off_hours": "Under 4 hours",
        "channels": ["Dashboard", "Email", "WhatsApp"],
        "ai_capability": "Full Power",
        "priority_tier": PriorityTier.HIGH,
        "health_check_enabled": True,
        "security_audit_enabled": True,
        "uptime_monitoring_enabled": True,
        "free_dev_credit_hours": 3,
    }

    # Applied on top of PRO when the 24x7 add-on is active
    PRO_24X7_ADDON = {
        "price": PRO["price"] + PRO_ADDON_SURCHARGE,
        "response_time_off_hours": "Under 1 hour",
        "true_24x7_support_enabled": True,
    }

    ENTERPRISE = {
        **PRO,
        "name": "Enterprise",
        "price": 99,
        "response_time_business": "Under 15 minutes",
        "response_time_off_hours": "Under 1 hour",
        "channels": ["Dashboard", "Email", "WhatsApp", "Slack", "Phone"],
        "ai_capability": "Full + Custom Training",
        "priority_tier": PriorityTier.HIGHEST,
        "dedicated_engineer_enabled": True,
        "true_24x7_support_enabled": True,  # Add-on already included
        "free_dev_credit_hours": 15,
    }


# Feature → Plan Matrix (Canonical)
FEATURE_MATRIX: Dict[str, List[str]] = {
    "health_check": ["pro", "enterprise"],
    "security_audit": ["pro", "enterprise"],
    "uptime_monitoring": ["pro", "enterprise"],
    "unlimited_requests": ["pro", "enterprise"],
    "dev_credits": ["pro", "enterprise"],
    "true_24x7_support": ["enterprise"],  # pro only with the add-on
    "dedicated_engineer": ["enterprise"],
    "slack_channel": ["enterprise"],
    "phone_channel": ["enterprise"],
}


def parse_tier(value: Union[str, PlanTier]) -> PlanTier:
    """
    Parse a tier value reported by the billing system.

    Args:
        value: Tier string (case-insensitive) or PlanTier

    Returns:
        PlanTier

    Raises:
        InvalidTierError: If the value is not a known tier
    """
    if isinstance(value, PlanTier):
        return value
    if isinstance(value, str):
        try:
            return PlanTier(value.strip().lower())
        except ValueError:
            pass
    logger.error(f"Rejecting unrecognized plan tier {value!r}", extra={"error_code": "TIER_001"})
    raise InvalidTierError(value)


def get_plan_entitlements(tier: Union[str, PlanTier], has_addon: bool = False) -> Dict[str, Any]:
    """Get the raw entitlement table for a tier, with add-ons applied"""
    plan_key = parse_tier(tier)

    if plan_key == PlanTier.ENTERPRISE:
        return dict(PlanEntitlements.ENTERPRISE)
    if plan_key == PlanTier.PRO:
        if has_addon:
            return {**PlanEntitlements.PRO, **PlanEntitlements.PRO_24X7_ADDON}
        return dict(PlanEntitlements.PRO)
    return dict(PlanEntitlements.FREE)


def format_price(price: int) -> str:
    """Render a whole-dollar monthly price the way the billing pages show it"""
    return f"${price:,.2f}"


def resolve_features(tier: Union[str, PlanTier], has_addon: bool = False) -> PlanFeatures:
    """
    Resolve the complete feature descriptor for a tier and add-on flag.

    The add-on only changes pro (price and off-hours SLA); enterprise already
    includes 24x7 support and free cannot buy it.

    Args:
        tier: Plan tier
        has_addon: Whether the 24x7 support add-on is active

    Returns:
        PlanFeatures

    Raises:
        InvalidTierError: If the tier is not recognized
    """
    plan_key = parse_tier(tier)
    table = get_plan_entitlements(plan_key, has_addon)

    return PlanFeatures(
        id=plan_key,
        price_display=format_price(table["price"]),
        **{**table, "channels": list(table["channels"])},
    )


def get_minimum_plan(feature: str) -> PlanTier:
    """
    Get minimum plan required for a feature.

    Args:
        feature: Feature name from FEATURE_MATRIX

    Returns:
        Lowest PlanTier granting the feature
    """
    allowed_plans = FEATURE_MATRIX.get(feature, [])

    for plan in TIER_ORDER:
        if plan.value in allowed_plans:
            return plan

    return PlanTier.ENTERPRISE  # Default to highest if not found


def has_feature(tier: Union[str, PlanTier], has_addon: bool, feature: str) -> bool:
    """
    Check whether a tier (with add-on) grants a feature.

    Args:
        tier: Plan tier
        has_addon: Whether the 24x7 support add-on is active
        feature: Feature name from FEATURE_MATRIX

    Returns:
        True if the feature is granted
    """
    plan_key = parse_tier(tier)
    if feature == "true_24x7_support":
        return resolve_features(plan_key, has_addon).true_24x7_support_enabled
    return plan_key.value in FEATURE_MATRIX.get(feature, [])
