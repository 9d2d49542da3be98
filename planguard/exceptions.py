"""Custom exceptions for the PlanGuard entitlement engine"""
from typing import Optional, Dict, Any

from planguard.decision.error_codes import ErrorCode, ErrorCodeDictionary


class GovernanceError(Exception):
    """Base exception for entitlement-related errors"""

    def __init__(
        self,
        error_code: ErrorCode,
        entity_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.entity_id = entity_id
        self.context = context or {}
        super().__init__(error_code.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "code": self.error_code.code,
            "message": self.error_code.message,
            "doctrine_reference": self.error_code.doctrine_reference,
            "remediation_steps": self.error_code.remediation_steps,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "context": self.context,
        }


class InvalidTierError(GovernanceError):
    """Exception raised when an unrecognized tier reaches the plan catalog"""

    def __init__(self, tier: Any):
        super().__init__(
            ErrorCodeDictionary.TIER_001.with_message(f"Unrecognized plan tier: {tier!r}"),
            entity_id=str(tier),
            context={"tier": str(tier)},
        )
        self.tier = tier


class SubmissionRejectedError(GovernanceError):
    """Exception raised when a support request is refused by the gate"""
    pass


class ApiClientError(Exception):
    """Remote dashboard API call failed (transport error or non-2xx status)"""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message)
