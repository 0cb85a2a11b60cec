"""/v1/customers - per-customer credit views"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from credit_service.api.dependencies import get_credit_service
from credit_service.api.v1.schemas import CreditDailyBalanceResponse, CreditResponse, OverdueResponse
from credit_service.domain.models import CreditType
from credit_service.services.credits import CreditService

router = APIRouter()


@router.get("/customers/{customer_id}/credits", response_model=List[CreditResponse])
def get_customer_credits(
    customer_id: str,
    credit_type: Optional[CreditType] = Query(None),
    service: CreditService = Depends(get_credit_service),
):
    """Credits owned by a customer; 404 when there are none"""
    return service.get_credits_by_customer(customer_id, credit_type)


@router.get("/customers/{customer_id}/credits/daily-balances", response_model=List[CreditDailyBalanceResponse])
async def get_customer_daily_balances(customer_id: str, service: CreditService = Depends(get_credit_service)):
    """
    Day-by-day balance trail of every credit of the customer for the current month.

    Balances are rebuilt backwards from the current outstanding balance and
    this month's transactions. If the transaction service is down, each
    trail is flat at the current balance.
    """
    return await service.get_customer_daily_balances(customer_id)


@router.get("/customers/{customer_id}/overdue", response_model=OverdueResponse)
def get_customer_overdue(customer_id: str, service: CreditService = Depends(get_credit_service)):
    return OverdueResponse(customer_id=customer_id, has_overdue_credits=service.has_overdue_credits(customer_id))
