"""Balance sufficiency answers for inquiries from other subsystems"""

from decimal import Decimal
from typing import Optional

from credit_service.domain.models import ZERO, CreditRecord, CreditStatus, ValidationResult

CREDIT_NOT_FOUND = "credit not found"


def evaluate_credit_for_transaction(record: Optional[CreditRecord], required_amount: Decimal) -> ValidationResult:
    """
    Decide whether a credit can cover ``required_amount``.

    - Unknown credit: invalid, never an exception
    - Cards: headroom is the available credit
    - Loans: no headroom, only a zero amount is acceptable
    """
    if record is None:
        return ValidationResult(is_valid=False, reason=CREDIT_NOT_FOUND, available_balance=ZERO)

    if record.credit_type.is_card:
        available = record.available_credit if record.available_credit is not None else ZERO
    else:
        available = ZERO

    if record.status != CreditStatus.ACTIVE:
        return ValidationResult(
            is_valid=False,
            reason=f"credit is not active ({record.status.value})",
            available_balance=available,
        )

    if required_amount <= available:
        return ValidationResult(is_valid=True, reason=None, available_balance=available)

    if record.credit_type.is_loan:
        reason = "loans have no available balance for transactions"
    else:
        reason = f"insufficient available balance: required {required_amount:.2f}, available {available:.2f}"
    return ValidationResult(is_valid=False, reason=reason, available_balance=available)
