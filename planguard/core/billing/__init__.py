"""Billing & entitlement modules"""
from planguard.core.billing.entitlements import (
    PlanEntitlements,
    FEATURE_MATRIX,
    PRO_ADDON_SURCHARGE,
    parse_tier,
    get_plan_entitlements,
    resolve_features,
    get_minimum_plan,
    has_feature,
)
from planguard.core.billing.usage import UsageCounter, can_submit, remaining_requests, counter_for
from planguard.core.billing.cooldown import CooldownClock, Countdown
from planguard.core.billing.credits import CreditBalance, CreditLedgerView
from planguard.core.billing.invoices import InvoiceArchive, InvoiceArtifact
from planguard.core.billing.submission import SubmissionDecision, evaluate

__all__ = [
    "PlanEntitlements",
    "FEATURE_MATRIX",
    "PRO_ADDON_SURCHARGE",
    "parse_tier",
    "get_plan_entitlements",
    "resolve_features",
    "get_minimum_plan",
    "has_feature",
    "UsageCounter",
    "can_submit",
    "remaining_requests",
    "counter_for",
    "CooldownClock",
    "Countdown",
    "CreditBalance",
    "CreditLedgerView",
    "InvoiceArchive",
    "InvoiceArtifact",
    "SubmissionDecision",
    "evaluate",
]
