"""Unit tests for balance sufficiency inquiries"""

from datetime import datetime
from decimal import Decimal
from credit_service.domain.inquiry import CREDIT_NOT_FOUND, evaluate_credit_for_transaction
from credit_service.domain.models import CreditRecord, CreditStatus, CreditType

CREATED = datetime(2024, 3, 1)


def card(available: str, status: CreditStatus = CreditStatus.ACTIVE) -> CreditRecord:
    return CreditRecord(
        id="card-1",
        credit_number="CC-0000000001",
        credit_type=CreditType.CREDIT_CARD,
        customer_id="cust-personal",
        status=status,
        outstanding_balance=Decimal("1000") - Decimal(available),
        interest_rate=Decimal("35"),
        created_at=CREATED,
        updated_at=CREATED,
        credit_limit=Decimal("1000"),
        available_credit=Decimal(available),
    )


def test_unknown_credit_is_invalid_not_an_error():
    result = evaluate_credit_for_transaction(None, Decimal("10"))

    assert result.is_valid is False
    assert result.reason == CREDIT_NOT_FOUND
    assert result.available_balance == Decimal("0")


def test_card_with_enough_headroom_is_valid():
    result = evaluate_credit_for_transaction(card("400"), Decimal("400"))

    assert result.is_valid is True
    assert result.reason is None
    assert result.available_balance == Decimal("400")


def test_card_short_of_headroom_reports_amounts():
    result = evaluate_credit_for_transaction(card("400"), Decimal("400.01"))

    assert result.is_valid is False
    assert result.reason == "insufficient available balance: required 400.01, available 400.00"


def test_inactive_card_is_invalid():
    result = evaluate_credit_for_transaction(card("400", status=CreditStatus.BLOCKED), Decimal("1"))

    assert result.is_valid is False
    assert "not active" in result.reason


def test_loan_has_no_transaction_headroom():
    loan = CreditRecord(
        id="loan-1",
        credit_number="LN-0000000001",
        credit_type=CreditType.BUSINESS_LOAN,
        customer_id="cust-business",
        status=CreditStatus.ACTIVE,
        outstanding_balance=Decimal("5000"),
        interest_rate=Decimal("10"),
        created_at=CREATED,
        updated_at=CREATED,
        amount=Decimal("5000"),
        term_months=6,
        remaining_payments=6,
    )

    result = evaluate_credit_for_transaction(loan, Decimal("1"))

    assert result.is_valid is False
    assert result.reason == "loans have no available balance for transactions"
    assert result.available_balance == Decimal("0")
