"""Balance mutations: payments, card consumptions and third-party payments"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from credit_service.domain.exceptions import InvalidState, ValidationError
from credit_service.domain.models import CENTS, CreditRecord, CreditStatus, CreditType


def _require_active(record: CreditRecord, operation: str) -> None:
    if record.status != CreditStatus.ACTIVE:
        raise InvalidState(f"Cannot apply {operation} to a credit in status {record.status.value}")


def _require_positive(amount: Decimal, operation: str) -> None:
    if amount <= 0:
        raise ValidationError(f"{operation.capitalize()} amount must be greater than 0")
    if amount != amount.quantize(CENTS):
        raise ValidationError(f"{operation.capitalize()} amount cannot have more than two decimal places")


def apply_payment(record: CreditRecord, amount: Decimal, now: datetime) -> CreditRecord:
    """
    Owner payment against the outstanding balance.

    - Credit cards get the amount back as available credit
    - Loans consume one remaining payment per payment made
    - A credit with nothing left to pay becomes PAID
    """
    _require_active(record, "payment")
    _require_positive(amount, "payment")
    if amount > record.outstanding_balance:
        raise ValidationError("Payment amount exceeds outstanding balance")

    outstanding = record.outstanding_balance - amount
    available_credit = record.available_credit
    remaining_payments = record.remaining_payments

    if record.credit_type == CreditType.CREDIT_CARD:
        available_credit = record.available_credit + amount
    elif record.credit_type.is_loan:
        remaining_payments = max((remaining_payments or 0) - 1, 0)

    return replace(
        record,
        outstanding_balance=outstanding,
        available_credit=available_credit,
        remaining_payments=remaining_payments,
        status=CreditStatus.PAID if outstanding <= 0 else record.status,
        updated_at=now,
    )


def apply_consumption(record: CreditRecord, amount: Decimal, merchant: str | None, now: datetime) -> CreditRecord:
    """Charge a purchase to a credit card, moving available credit into debt"""
    if record.credit_type != CreditType.CREDIT_CARD:
        raise ValidationError("Consumption can only be charged to credit cards")
    _require_active(record, "consumption")
    _require_positive(amount, "consumption")
    if amount > record.available_credit:
        raise ValidationError("Consumption amount exceeds available credit")

    return replace(
        record,
        outstanding_balance=record.outstanding_balance + amount,
        available_credit=record.available_credit - amount,
        updated_at=now,
    )


def apply_third_party_payment(record: CreditRecord, amount: Decimal, now: datetime) -> CreditRecord:
    """
    Payment made by a customer other than the owner.

    The payer's existence is checked by the caller before this runs. Unlike
    an owner payment, a loan paid off in full drops straight to zero remaining
    payments, and the counter is never decremented below zero.
    """
    _require_active(record, "third party payment")
    if amount > record.outstanding_balance:
        raise ValidationError(
            f"Payment amount ({amount:.2f}) exceeds outstanding balance ({record.outstanding_balance:.2f})"
        )
    _require_positive(amount, "payment")

    outstanding = record.outstanding_balance - amount
    available_credit = record.available_credit
    remaining_payments = record.remaining_payments

    if record.credit_type == CreditType.CREDIT_CARD:
        available_credit = record.available_credit + amount

    if record.credit_type.is_loan:
        if outstanding <= 0:
            remaining_payments = 0
        elif remaining_payments is not None and remaining_payments > 0:
            remaining_payments -= 1

    return replace(
        record,
        outstanding_balance=outstanding,
        available_credit=available_credit,
        remaining_payments=remaining_payments,
        status=CreditStatus.PAID if outstanding <= 0 else record.status,
        updated_at=now,
    )
