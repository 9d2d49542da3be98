"""Error Code Dictionary - Standardized error responses with policy references."""
from dataclasses import dataclass
from typing import ClassVar, Dict, List

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ErrorCode:
    """
    Standardized error code with policy reference and remediation.

    Attributes:
        code: Unique error code identifier (e.g., TIER_001)
        message: Human-readable error message
        doctrine_reference: Reference to violated policy/rule
        remediation_steps: List of steps to resolve the error
        severity: Error severity level
    """

    code: str
    message: str
    doctrine_reference: str
    remediation_steps: List[str]
    severity: str = ErrorSeverity.ERROR.value

    def to_dict(self) -> Dict[str, str]:
        """Convert error code to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "doctrine_reference": self.doctrine_reference,
            "remediation_steps": self.remediation_steps,
            "severity": self.severity,
        }

    def with_message(self, message: str) -> "ErrorCode":
        """Copy of this code carrying a more specific message."""
        return ErrorCode(
            code=self.code,
            message=message,
            doctrine_reference=self.doctrine_reference,
            remediation_steps=list(self.remediation_steps),
            severity=self.severity,
        )


class ErrorCodeDictionary:
    """
    Error catalog for the entitlement engine.

    Tier errors are hard failures. Fetch errors are warnings: the dashboard
    degrades to a safe default and keeps running. Submission errors describe
    an expected, user-visible refusal.
    """

    # Plan catalog (TIER_*)
    TIER_001: ClassVar[ErrorCode] = ErrorCode(
        code="TIER_001",
        message="Unrecognized plan tier",
        doctrine_reference="ENTITLEMENT-001: Tiers are free, pro or enterprise",
        remediation_steps=[
            "Check the tier value reported by the billing system",
            "Use one of: free, pro, enterprise",
        ],
    )

    # Degraded remote reads (FETCH_*)
    FETCH_001: ClassVar[ErrorCode] = ErrorCode(
        code="FETCH_001",
        message="Developer credits unavailable, showing plan allowance",
        doctrine_reference="DEGRADE-001: Credits fall back to the tier allowance",
        remediation_steps=["Retry with an explicit credits refresh"],
        severity=ErrorSeverity.WARNING.value,
    )

    FETCH_002: ClassVar[ErrorCode] = ErrorCode(
        code="FETCH_002",
        message="Recent activity unavailable",
        doctrine_reference="DEGRADE-002: Lists fall back to empty",
        remediation_steps=["Reload the dashboard"],
        severity=ErrorSeverity.WARNING.value,
    )

    FETCH_003: ClassVar[ErrorCode] = ErrorCode(
        code="FETCH_003",
        message="Changelog unavailable",
        doctrine_reference="DEGRADE-002: Lists fall back to empty",
        remediation_steps=["Reload the dashboard"],
        severity=ErrorSeverity.WARNING.value,
    )

    FETCH_004: ClassVar[ErrorCode] = ErrorCode(
        code="FETCH_004",
        message="Billing history unavailable",
        doctrine_reference="DEGRADE-002: Lists fall back to empty",
        remediation_steps=["Reload the dashboard"],
        severity=ErrorSeverity.WARNING.value,
    )

    FETCH_005: ClassVar[ErrorCode] = ErrorCode(
        code="FETCH_005",
        message="Active requests unavailable, cooldown left unchanged",
        doctrine_reference="DEGRADE-003: Cooldown is never cleared by a failed read",
        remediation_steps=["Reload the dashboard"],
        severity=ErrorSeverity.WARNING.value,
    )

    FETCH_006: ClassVar[ErrorCode] = ErrorCode(
        code="FETCH_006",
        message="Support usage unavailable, counter left unchanged",
        doctrine_reference="DEGRADE-003: Counters are never reset by a failed read",
        remediation_steps=["Reload the dashboard"],
        severity=ErrorSeverity.WARNING.value,
    )

    # Submission gating (SUBMIT_*)
    SUBMIT_001: ClassVar[ErrorCode] = ErrorCode(
        code="SUBMIT_001",
        message="Request limit reached",
        doctrine_reference="USAGE-001: count >= limit rejects new requests",
        remediation_steps=[
            "Wait for the weekly limit to reset",
            "Upgrade to pro for unlimited requests",
        ],
    )

    SUBMIT_002: ClassVar[ErrorCode] = ErrorCode(
        code="SUBMIT_002",
        message="Support tickets are on cooldown",
        doctrine_reference="USAGE-002: One support ticket per cooldown window",
        remediation_steps=["Wait until the cooldown elapses"],
    )
