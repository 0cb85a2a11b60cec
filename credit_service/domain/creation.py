"""Initial state of a new credit and administrative updates"""

import uuid
from dataclasses import replace
from datetime import date, datetime

from credit_service.domain.exceptions import ValidationError
from credit_service.domain.models import (
    ACCOUNT_ACTIVE,
    ZERO,
    AssociatedAccount,
    CardStatus,
    CreditRecord,
    CreditRequest,
    CreditStatus,
    CreditType,
)

DEBIT_CARD_VALIDITY_YEARS = 3


def add_years(start: date, years: int) -> date:
    """Same calendar day ``years`` later; 29 February falls back to 28 February"""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def build_credit_record(request: CreditRequest, now: datetime, credit_id: str | None = None) -> CreditRecord:
    """
    Build the initial record for a validated request.

    - Credit card: no debt, whole limit available
    - Debit card: no debt or credit, 3-year expiry, card starts INACTIVE
    - Loans: whole principal outstanding, one remaining payment per month of term
    """
    today = now.date()
    common = dict(
        id=credit_id or uuid.uuid4().hex,
        credit_number=request.credit_number,
        credit_type=request.credit_type,
        customer_id=request.customer_id,
        status=CreditStatus.ACTIVE,
        interest_rate=request.interest_rate if request.interest_rate is not None else ZERO,
        created_at=now,
        updated_at=now,
        due_date=request.due_date,
    )

    if request.credit_type == CreditType.CREDIT_CARD:
        return CreditRecord(
            **common,
            outstanding_balance=ZERO,
            credit_limit=request.credit_limit,
            available_credit=request.credit_limit,
            amount=request.amount,
        )

    if request.credit_type == CreditType.DEBIT_CARD:
        associated = [
            AssociatedAccount(
                account_id=acc.account_id,
                sequence_order=acc.sequence_order,
                associated_at=acc.associated_at or today,
                status=acc.status or ACCOUNT_ACTIVE,
            )
            for acc in request.associated_accounts
        ]
        return CreditRecord(
            **{**common, "interest_rate": ZERO},
            outstanding_balance=ZERO,
            available_credit=ZERO,
            amount=ZERO,
            main_account_id=request.main_account_id,
            associated_accounts=associated,
            daily_withdrawal_limit=request.daily_withdrawal_limit,
            daily_purchase_limit=request.daily_purchase_limit,
            card_brand=request.card_brand,
            card_status=CardStatus.INACTIVE,
            expiration_date=add_years(today, DEBIT_CARD_VALIDITY_YEARS),
        )

    return CreditRecord(
        **common,
        amount=request.amount,
        outstanding_balance=request.amount if request.amount is not None else ZERO,
        available_credit=ZERO,
        term_months=request.term_months,
        monthly_payment=request.monthly_payment,
        remaining_payments=request.term_months,
    )


def apply_admin_update(existing: CreditRecord, request: CreditRequest, now: datetime) -> CreditRecord:
    """
    Replace descriptive fields while keeping balances, status and identity.

    Credit card limits may change, but never below the current debt; the
    available credit follows the new limit.
    """
    if request.credit_type != existing.credit_type:
        raise ValidationError("The credit type of an existing credit cannot be changed")

    available_credit = existing.available_credit
    if existing.credit_type == CreditType.CREDIT_CARD:
        if request.credit_limit is None or request.credit_limit < existing.outstanding_balance:
            raise ValidationError("Credit limit cannot be lower than the outstanding balance")
        available_credit = request.credit_limit - existing.outstanding_balance

    if existing.credit_type == CreditType.DEBIT_CARD:
        # debit cards keep their zeroed credit fields
        return replace(
            existing,
            credit_number=request.credit_number,
            due_date=request.due_date,
            main_account_id=request.main_account_id,
            associated_accounts=list(request.associated_accounts),
            daily_withdrawal_limit=request.daily_withdrawal_limit,
            daily_purchase_limit=request.daily_purchase_limit,
            card_brand=request.card_brand,
            updated_at=now,
        )

    return replace(
        existing,
        credit_number=request.credit_number,
        due_date=request.due_date,
        amount=request.amount,
        interest_rate=request.interest_rate if request.interest_rate is not None else existing.interest_rate,
        credit_limit=request.credit_limit,
        available_credit=available_credit,
        term_months=request.term_months,
        monthly_payment=request.monthly_payment,
        updated_at=now,
    )
