"""Pydantic schemas for billing records reported by the remote API"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class RemoteModel(BaseModel):
    """Base for payloads exchanged with the dashboard API (camelCase on the wire)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Invoice(RemoteModel):
    """Settled invoice; never mutated by the engine"""
    id: str
    invoice_number: str
    amount: Decimal = Field(..., description="Decimal amount in currency units")
    currency: str = "USD"
    status: str
    plan_name: str
    billing_start: datetime
    billing_end: datetime
    created_at: datetime


class DevCreditLog(RemoteModel):
    """One unit of developer-credit consumption"""
    id: str
    title: str
    description: str = ""
    hours_used: float
    status: str
    category: str
    created_at: datetime


class DevCreditLedger(RemoteModel):
    """Used/total developer-credit hours as reported by the billing source"""
    used_hours: float = Field(..., ge=0)
    total_hours: float = Field(..., ge=0)
    logs: List[DevCreditLog] = Field(default_factory=list)


class CreditSummary(RemoteModel):
    """Used/total hours block of the dev-credits response"""
    used_hours: float = Field(..., ge=0)
    total_hours: float = Field(..., ge=0)


class DevCreditsPayload(RemoteModel):
    """Body of GET /dashboard/dev-credits"""
    summary: CreditSummary
    logs: List[DevCreditLog] = Field(default_factory=list)

    @field_validator("logs", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v

    def to_ledger(self) -> DevCreditLedger:
        return DevCreditLedger(
            used_hours=self.summary.used_hours,
            total_hours=self.summary.total_hours,
            logs=self.logs,
        )


class InvoicesPayload(RemoteModel):
    """Body of GET /dashboard/invoices"""
    invoices: List[Invoice] = Field(default_factory=list)

    @field_validator("invoices", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class CreditBalanceRequest(BaseModel):
    """Request model for computing a displayable credit balance"""
    ledger: Optional[DevCreditLedger] = Field(None, description="Omit when the remote read failed")
    fallback_total: float = Field(..., ge=0, description="Tier allowance used when no ledger is known")


class CreditBalanceResponse(BaseModel):
    """Remaining developer-credit hours and percentage"""
    remaining_hours: float
    percent: float

    model_config = ConfigDict(from_attributes=True)


class InvoiceRenderRequest(BaseModel):
    """Request model for rendering an invoice artifact"""
    invoice: Invoice
    customer_name: str = Field(..., min_length=1)
    customer_email: Optional[str] = None
