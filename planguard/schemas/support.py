"""Pydantic schemas for support/change request submission"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Union
from datetime import datetime

from planguard.enums import SubmissionOutcome


class SupportRequestCreate(BaseModel):
    """Support ticket form fields sent to the request tracker"""
    name: str = Field(..., min_length=1, max_length=200)
    issue: str = Field(..., min_length=1, description="Description of the problem")
    specialist_id: str = Field(..., min_length=1, description="Chosen support specialist")

    @field_validator("name", "issue", "specialist_id")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Reject blank values"""
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v


class ChangeRequestCreate(BaseModel):
    """Change request form fields sent to the request tracker"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    priority: Optional[str] = None


class EligibilityRequest(BaseModel):
    """Request model for evaluating whether a support ticket may be submitted"""
    count: int = Field(..., ge=0, description="Requests submitted in the current window")
    limit: Union[int, str] = Field(..., description="Numeric limit or 'unlimited'")
    next_eligible_at: Optional[datetime] = Field(None, description="Cooldown expiry, if any")
    now: Optional[datetime] = Field(None, description="Evaluation instant, defaults to server time")


class SubmissionDecisionResponse(BaseModel):
    """Whether a new request may be submitted, and why not"""
    allowed: bool
    outcome: SubmissionOutcome
    message: str
    cooldown_remaining_seconds: Optional[int] = None
    cooldown_display: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
