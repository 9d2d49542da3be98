"""Developer credit ledger - remaining hours derived from the billing source"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from planguard.decision.error_codes import ErrorCodeDictionary
from planguard.exceptions import ApiClientError
from planguard.schemas.billing import DevCreditLedger


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreditBalance:
    """Displayable developer-credit balance"""

    remaining_hours: float
    percent: float


def remaining(ledger: Optional[DevCreditLedger], fallback_total: float) -> CreditBalance:
    """
    Reconcile a used/total pair into a remaining balance.

    Values are trusted from the billing source; an over-consumed ledger is
    clamped to zero for display. A ledger with no hours at all reads as full.

    Args:
        ledger: Remote ledger, or None when it has not been fetched
        fallback_total: Tier allowance shown while no ledger is known

    Returns:
        CreditBalance
    """
    if ledger is None:
        return CreditBalance(remaining_hours=fallback_total, percent=100.0)

    remaining_hours = max(0.0, ledger.total_hours - ledger.used_hours)
    if ledger.total_hours > 0:
        percent = remaining_hours / ledger.total_hours * 100
    else:
        percent = 100.0
    return CreditBalance(remaining_hours=remaining_hours, percent=percent)


def fallback_ledger(total_hours: float) -> DevCreditLedger:
    """Optimistic placeholder used when the remote read fails"""
    return DevCreditLedger(used_hours=0, total_hours=total_hours, logs=[])


class CreditLedgerView:
    """
    Session view of the developer-credit ledger.

    Holds the last good ledger so a refresh never flickers to an empty
    state; a failed refresh reverts to the tier fallback and is logged.
    """

    def __init__(self, fallback_total: float, ledger: Optional[DevCreditLedger] = None):
        self.fallback_total = fallback_total
        self.ledger = ledger
        self._in_flight = 0

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def balance(self) -> CreditBalance:
        return remaining(self.ledger, self.fallback_total)

    def set_fallback_total(self, fallback_total: float) -> None:
        """Adopt a new tier allowance (plan changed)"""
        self.fallback_total = fallback_total

    def apply(self, ledger: Optional[DevCreditLedger]) -> None:
        """Store a fetched ledger; None means the read failed"""
        self.ledger = ledger if ledger is not None else fallback_ledger(self.fallback_total)

    async def refresh(
        self,
        fetch: Callable[[], Awaitable[DevCreditLedger]],
        is_current: Optional[Callable[[], bool]] = None,
    ) -> CreditBalance:
        """
        Re-fetch the ledger; the previous value stays readable until it resolves.

        Args:
            fetch: Coroutine function reading the remote ledger
            is_current: Checked once the fetch resolves; when it returns False
                a newer refresh was issued and this result is discarded

        Returns:
            Balance after the refresh
        """
        self._in_flight += 1
        try:
            ledger = await fetch()
        except ApiClientError as e:
            logger.warning(
                f"{ErrorCodeDictionary.FETCH_001.message}: {e}",
                extra={"error_code": ErrorCodeDictionary.FETCH_001.code},
            )
            ledger = None
        finally:
            self._in_flight -= 1

        if is_current is not None and not is_current():
            logger.debug("Discarding stale developer-credit response")
            return self.balance

        self.apply(ledger)
        return self.balance
