"""Cooldown clock - time left before the next support ticket may be filed.

The clock owns no timer. The host re-evaluates it once per second with the
current instant; the first evaluation at or past the expiry reports the
cooldown as cleared, without waiting for the tracker to refresh.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class Countdown:
    """Remaining cooldown split into whole hours, minutes and seconds"""

    hours: int
    minutes: int
    seconds: int

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def remaining(now: datetime, next_eligible_at: Optional[datetime]) -> Optional[timedelta]:
    """
    Compute the time left until the cooldown expires.

    Args:
        now: Current instant (naive values are treated as UTC)
        next_eligible_at: Cooldown expiry, or None when no cooldown is set

    Returns:
        Positive timedelta, or None when inactive or already elapsed
    """
    if next_eligible_at is None:
        return None

    delta = _as_utc(next_eligible_at) - _as_utc(now)
    if delta <= timedelta(0):
        return None
    return delta


def is_active(now: datetime, next_eligible_at: Optional[datetime]) -> bool:
    return remaining(now, next_eligible_at) is not None


def decompose(delta: timedelta) -> Countdown:
    """Split a duration into hours/minutes/seconds; sub-second parts are dropped"""
    total_seconds = int(delta.total_seconds())
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return Countdown(hours=hours, minutes=minutes, seconds=seconds)


def format_countdown(now: datetime, next_eligible_at: Optional[datetime]) -> Optional[str]:
    """HH:MM:SS while the cooldown is active, None otherwise"""
    delta = remaining(now, next_eligible_at)
    if delta is None:
        return None
    return str(decompose(delta))


class CooldownClock:
    """
    Tracks the last known cooldown expiry for a session.

    ``tick`` is called by the host's one-second scheduler; it never clears
    ``next_eligible_at`` itself, so the caller decides when to reconcile with
    the tracker.
    """

    def __init__(self, next_eligible_at: Optional[datetime] = None):
        self.next_eligible_at = next_eligible_at

    def update(self, next_eligible_at: Optional[datetime]) -> None:
        """Adopt a newer expiry reported by the request tracker"""
        self.next_eligible_at = next_eligible_at

    def remaining(self, now: datetime) -> Optional[timedelta]:
        return remaining(now, self.next_eligible_at)

    def tick(self, now: datetime) -> Optional[Countdown]:
        """Countdown for this tick, None once elapsed"""
        delta = self.remaining(now)
        return decompose(delta) if delta is not None else None

    def is_elapsed(self, now: datetime) -> bool:
        return self.remaining(now) is None
