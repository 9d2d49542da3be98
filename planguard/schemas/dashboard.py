"""Pydantic schemas for dashboard projections and the aggregated session view"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
from datetime import datetime

from planguard.enums import RequestStatus, RequestType
from planguard.schemas.billing import RemoteModel, Invoice, DevCreditLedger, CreditBalanceResponse
from planguard.schemas.plans import PlanFeatures
from planguard.schemas.support import SubmissionDecisionResponse


class ActivityEntry(RemoteModel):
    """Recent account activity"""
    id: str
    action: str
    description: str = ""
    created_at: datetime


class ChangelogEntry(RemoteModel):
    """Product changelog entry"""
    id: str
    title: str
    description: str = ""
    version: str
    created_at: datetime


class ActivityPayload(RemoteModel):
    """Body of GET /dashboard/activity"""
    activity: List[ActivityEntry] = Field(default_factory=list)

    @field_validator("activity", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class ChangelogPayload(RemoteModel):
    """Body of GET /dashboard/changelog"""
    entries: List[ChangelogEntry] = Field(default_factory=list)

    @field_validator("entries", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class ActiveRequest(RemoteModel):
    """Read-only projection of a tracked support/change request"""
    id: str
    title: str
    description: str = ""
    status: RequestStatus
    type: RequestType
    created_at: datetime


class ActiveRequestsPayload(RemoteModel):
    """Active requests plus the tracker's support-ticket cooldown"""
    requests: List[ActiveRequest] = Field(default_factory=list)
    next_ticket_at: Optional[datetime] = None

    @field_validator("requests", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class SupportUsage(RemoteModel):
    """Rolling support-request counter reported by the tracker"""
    request_count: int = Field(..., ge=0)
    request_limit: Union[int, str]
    next_reset_at: Optional[datetime] = None


class DashboardSnapshot(BaseModel):
    """Everything the plan dashboard renders for one session"""
    plan: PlanFeatures
    credits: Optional[DevCreditLedger] = None
    credit_balance: CreditBalanceResponse
    activity: List[ActivityEntry] = Field(default_factory=list)
    changelog: List[ChangelogEntry] = Field(default_factory=list)
    invoices: List[Invoice] = Field(default_factory=list)
    active_requests: List[ActiveRequest] = Field(default_factory=list)
    next_ticket_at: Optional[datetime] = None
    requests_remaining: Optional[int] = Field(None, description="None when the plan is unlimited")
    member_since: Optional[datetime] = None
    submission: SubmissionDecisionResponse
