"""Submission gate - combines the usage limit and the ticket cooldown"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from planguard.core.billing import cooldown
from planguard.core.billing.cooldown import Countdown
from planguard.core.billing.usage import UsageCounter, can_submit
from planguard.decision.error_codes import ErrorCodeDictionary
from planguard.enums import SubmissionOutcome
from planguard.exceptions import SubmissionRejectedError


@dataclass(frozen=True)
class SubmissionDecision:
    """
    User-visible answer to "may I file another request?".

    A refusal is an expected state, not a failure; ``raise_for_refusal``
    turns it into an exception for callers that must stop an action.
    """

    allowed: bool
    outcome: SubmissionOutcome
    message: str
    cooldown: Optional[Countdown] = None

    @property
    def cooldown_remaining_seconds(self) -> Optional[int]:
        if self.cooldown is None:
            return None
        return self.cooldown.hours * 3600 + self.cooldown.minutes * 60 + self.cooldown.seconds

    @property
    def cooldown_display(self) -> Optional[str]:
        return str(self.cooldown) if self.cooldown is not None else None

    def raise_for_refusal(self) -> None:
        if self.allowed:
            return
        if self.outcome == SubmissionOutcome.LIMIT_REACHED:
            error_code = ErrorCodeDictionary.SUBMIT_001
        else:
            error_code = ErrorCodeDictionary.SUBMIT_002.with_message(self.message)
        raise SubmissionRejectedError(
            error_code,
            context={
                "outcome": self.outcome.value,
                "cooldown_remaining_seconds": self.cooldown_remaining_seconds,
            },
        )


def evaluate(
    counter: UsageCounter,
    next_eligible_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> SubmissionDecision:
    """
    Decide whether a new support request may be submitted.

    The usage limit is checked first: a counter at its limit is refused as
    "limit reached" whatever the cooldown says.

    Args:
        counter: Rolling usage counter
        next_eligible_at: Cooldown expiry, or None
        now: Evaluation instant, defaults to the current UTC time

    Returns:
        SubmissionDecision
    """
    now = now or cooldown.utcnow()

    if not can_submit(counter):
        return SubmissionDecision(
            allowed=False,
            outcome=SubmissionOutcome.LIMIT_REACHED,
            message="Limit reached",
        )

    delta = cooldown.remaining(now, next_eligible_at)
    if delta is not None:
        countdown = cooldown.decompose(delta)
        return SubmissionDecision(
            allowed=False,
            outcome=SubmissionOutcome.ON_COOLDOWN,
            message=f"On cooldown ({countdown})",
            cooldown=countdown,
        )

    return SubmissionDecision(
        allowed=True,
        outcome=SubmissionOutcome.ALLOWED,
        message="Submit Request",
    )
