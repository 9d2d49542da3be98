"""Developer credit routes"""
from fastapi import APIRouter

from planguard.core.billing.credits import remaining
from planguard.schemas.billing import CreditBalanceRequest, CreditBalanceResponse

router = APIRouter(prefix="/credits", tags=["credits"])


@router.post("/balance", response_model=CreditBalanceResponse)
async def get_credit_balance(payload: CreditBalanceRequest):
    """
    Remaining developer-credit hours and percentage.

    Without a ledger the tier allowance is reported at 100%.
    """
    return CreditBalanceResponse.model_validate(remaining(payload.ledger, payload.fallback_total))
