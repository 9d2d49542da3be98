"""Pydantic schemas for API requests and responses"""
from planguard.schemas.plans import PlanFeatures, MinimumPlanResponse, UNLIMITED
from planguard.schemas.billing import (
    Invoice,
    DevCreditLog,
    DevCreditLedger,
    CreditSummary,
    DevCreditsPayload,
    InvoicesPayload,
    CreditBalanceRequest,
    CreditBalanceResponse,
    InvoiceRenderRequest,
)
from planguard.schemas.support import (
    SupportRequestCreate,
    ChangeRequestCreate,
    EligibilityRequest,
    SubmissionDecisionResponse,
)
from planguard.schemas.dashboard import (
    ActivityEntry,
    ChangelogEntry,
    ActivityPayload,
    ChangelogPayload,
    ActiveRequest,
    ActiveRequestsPayload,
    SupportUsage,
    DashboardSnapshot,
)

__all__ = [
    "PlanFeatures",
    "MinimumPlanResponse",
    "UNLIMITED",
    "Invoice",
    "DevCreditLog",
    "DevCreditLedger",
    "CreditSummary",
    "DevCreditsPayload",
    "InvoicesPayload",
    "CreditBalanceRequest",
    "CreditBalanceResponse",
    "InvoiceRenderRequest",
    "SupportRequestCreate",
    "ChangeRequestCreate",
    "EligibilityRequest",
    "SubmissionDecisionResponse",
    "ActivityEntry",
    "ChangelogEntry",
    "ActivityPayload",
    "ChangelogPayload",
    "ActiveRequest",
    "ActiveRequestsPayload",
    "SupportUsage",
    "DashboardSnapshot",
]
