"""Usage governor - gates new requests against a rolling weekly limit"""
from dataclasses import dataclass
from typing import Optional, Union

from planguard.schemas.plans import PlanFeatures, UNLIMITED


@dataclass(frozen=True)
class UsageCounter:
    """
    Rolling request counter compared against a tier-derived limit.

    The count may exceed a numeric limit; it is reported, never capped.
    """

    count: int
    limit: Union[int, str]

    def __post_init__(self):
        if self.count < 0:
            raise ValueError("count must be >= 0")
        if isinstance(self.limit, str):
            if self.limit.strip().lower() != UNLIMITED:
                raise ValueError(f"limit must be numeric or '{UNLIMITED}', got {self.limit!r}")
            object.__setattr__(self, "limit", UNLIMITED)

    @property
    def is_unlimited(self) -> bool:
        return self.limit == UNLIMITED


def can_submit(counter: UsageCounter) -> bool:
    """
    Check whether another request may be submitted.

    A counter sitting exactly on its limit is the first rejected attempt.

    Args:
        counter: Current usage counter

    Returns:
        True if the limit is unlimited or count < limit
    """
    if counter.is_unlimited:
        return True
    return counter.count < counter.limit


def remaining_requests(counter: UsageCounter) -> Optional[int]:
    """Requests left in the current window, None when unlimited"""
    if counter.is_unlimited:
        return None
    return max(0, counter.limit - counter.count)


def counter_for(features: PlanFeatures, count: int) -> UsageCounter:
    """Build a counter for a resolved plan"""
    return UsageCounter(count=count, limit=features.request_limit)
