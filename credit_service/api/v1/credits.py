"""/v1/credits - credit lifecycle and balance operation endpoints"""

import inspect
import logging
import time
from typing import Any, Callable, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from credit_service.api.dependencies import get_credit_service, get_request_id
from credit_service.api.v1.schemas import (
    ConsumptionRequest,
    CreditBalanceResponse,
    CreditRequestSchema,
    CreditResponse,
    DebitCardBalanceResponse,
    PaymentRequest,
    ThirdPartyPaymentRequest,
)
from credit_service.config import settings
from credit_service.domain.exceptions import ConflictError, DomainException
from credit_service.domain.models import CreditType
from credit_service.infrastructure.database.session import get_db
from credit_service.infrastructure.observability.logging import log_credit_operation
from credit_service.infrastructure.observability.metrics import credit_created_counter, record_balance_operation
from credit_service.services.credits import CreditService

router = APIRouter()

BALANCE_OPERATIONS = {"payment", "consumption", "third_party_payment"}


def _finish(request_id: str, credit_id: str, operation: str, outcome: str, start_time: float, reason: Optional[str] = None):
    if operation in BALANCE_OPERATIONS:
        record_balance_operation(operation, outcome)
    log_credit_operation(
        request_id=request_id,
        credit_id=credit_id,
        operation=operation,
        outcome=outcome,
        duration_ms=(time.time() - start_time) * 1000,
        reason=reason,
    )


async def run_write(db: Session, request_id: str, credit_id: str, operation: str, action: Callable[[], Any]):
    """
    Run one read-modify-write and commit it.

    A ConflictError rolls the session back and re-runs the whole action, up
    to settings.conflict_max_retries times, before it is surfaced as 409.
    """
    start_time = time.time()
    attempt = 0
    while True:
        attempt += 1
        try:
            result = action()
            if inspect.isawaitable(result):
                result = await result
            db.commit()
        except ConflictError as e:
            db.rollback()
            if attempt <= settings.conflict_max_retries:
                logging.warning(
                    "Concurrent modification, retrying",
                    extra={"request_id": request_id, "credit_id": credit_id, "attempt": attempt},
                )
                continue
            _finish(request_id, credit_id, operation, "conflict", start_time, str(e))
            raise
        except DomainException as e:
            db.rollback()
            _finish(request_id, credit_id, operation, "rejected", start_time, str(e))
            raise
        except Exception:
            db.rollback()
            raise

        _finish(request_id, getattr(result, "id", credit_id), operation, "ok", start_time)
        return result


@router.get("/credits", response_model=List[CreditResponse])
def list_credits(
    customer_id: Optional[str] = Query(None),
    credit_type: Optional[CreditType] = Query(None),
    service: CreditService = Depends(get_credit_service),
):
    """List credits, optionally filtered by customer and type"""
    return service.list_credits(customer_id, credit_type)


@router.post("/credits", response_model=CreditResponse, status_code=201)
async def create_credit(
    request_body: CreditRequestSchema,
    request: Request,
    db: Session = Depends(get_db),
    service: CreditService = Depends(get_credit_service),
):
    """
    Create a loan, credit card or debit card.

    Customer rules, the overdue-debt gate and product rules are checked
    before anything is written; debit cards also have their accounts
    verified against the account service.
    """
    credit_request = request_body.to_domain()
    record = await run_write(
        db, get_request_id(request), "", "create", lambda: service.create_credit(credit_request)
    )
    credit_created_counter.labels(credit_type=record.credit_type.value).inc()
    return record


@router.get("/credits/{credit_id}", response_model=CreditResponse)
def get_credit(credit_id: str, service: CreditService = Depends(get_credit_service)):
    return service.get_credit(credit_id)


@router.put("/credits/{credit_id}", response_model=CreditResponse)
async def update_credit(
    credit_id: str,
    request_body: CreditRequestSchema,
    request: Request,
    db: Session = Depends(get_db),
    service: CreditService = Depends(get_credit_service),
):
    """Administrative update of descriptive fields; balances and status are kept"""
    credit_request = request_body.to_domain()
    return await run_write(
        db, get_request_id(request), credit_id, "update", lambda: service.update_credit(credit_id, credit_request)
    )


@router.delete("/credits/{credit_id}", status_code=204)
async def delete_credit(
    credit_id: str,
    request: Request,
    db: Session = Depends(get_db),
    service: CreditService = Depends(get_credit_service),
):
    await run_write(db, get_request_id(request), credit_id, "delete", lambda: service.delete_credit(credit_id))
    return Response(status_code=204)


@router.get("/credits/{credit_id}/balance", response_model=CreditBalanceResponse)
def get_credit_balance(credit_id: str, service: CreditService = Depends(get_credit_service)):
    return service.get_credit_balance(credit_id)


@router.post("/credits/{credit_id}/payments", response_model=CreditResponse)
async def make_payment(
    credit_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: CreditService = Depends(get_credit_service),
):
    """Apply a payment from the credit's owner"""
    return await run_write(
        db, get_request_id(request), credit_id, "payment", lambda: service.make_payment(credit_id, request_body.amount)
    )


@router.post("/credits/{credit_id}/consumptions", response_model=CreditResponse)
async def charge_consumption(
    credit_id: str,
    request_body: ConsumptionRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: CreditService = Depends(get_credit_service),
):
    """Charge a purchase to a credit card"""
    return await run_write(
        db,
        get_request_id(request),
        credit_id,
        "consumption",
        lambda: service.charge_consumption(credit_id, request_body.amount, request_body.merchant),
    )


@router.post("/credits/{credit_id}/third-party-payments", response_model=CreditResponse)
async def make_third_party_payment(
    credit_id: str,
    request_body: ThirdPartyPaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: CreditService = Depends(get_credit_service),
):
    """Apply a payment made by another customer; the payer must exist"""
    return await run_write(
        db,
        get_request_id(request),
        credit_id,
        "third_party_payment",
        lambda: service.make_third_party_payment(credit_id, request_body.amount, request_body.payer_customer_id),
    )


@router.get("/credits/{credit_id}/debit-card/main-account-balance", response_model=DebitCardBalanceResponse)
async def get_debit_card_main_account_balance(credit_id: str, service: CreditService = Depends(get_credit_service)):
    return await service.get_debit_card_main_account_balance(credit_id)
