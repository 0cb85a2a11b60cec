"""Unit tests for daily balance reconstruction"""

from datetime import date, datetime
from decimal import Decimal
from credit_service.domain.ledger import (
    build_credit_daily_balance,
    calculate_daily_average,
    group_transactions_by_day,
    reconstruct_daily_balances,
    reverse_day,
)
from credit_service.domain.models import CreditRecord, CreditStatus, CreditType, DailyBalance, Transaction

TODAY = date(2024, 3, 3)


def txn(type_: str, amount: str, when: str | None) -> Transaction:
    return Transaction(type=type_, amount=Decimal(amount), transaction_date=when)


def test_reconstruct_payment_and_consumption_trail():
    """
    Outstanding 500 today; a 200 payment on the 2nd and a 100 consumption on the 3rd.

    Closing balances walk backward: 3rd -500, 2nd -400 (before the
    consumption), 1st -600 (before the payment).
    """
    transactions = [
        txn("PAYMENT", "200", "2024-03-02T10:15:00"),
        txn("CONSUMPTION", "100", "2024-03-03T08:00:00"),
    ]

    balances = reconstruct_daily_balances(Decimal("500"), datetime(2024, 2, 1), transactions, TODAY)

    assert [b.date for b in balances] == [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]
    assert [b.balance for b in balances] == [Decimal("-600"), Decimal("-400"), Decimal("-500")]
    assert [b.transactions_count for b in balances] == [0, 1, 1]


def test_reconstruct_is_idempotent():
    transactions = [txn("PAYMENT", "50", "2024-03-02"), txn("CARD_CONSUMPTION", "20", "2024-03-01")]

    first = reconstruct_daily_balances(Decimal("300"), datetime(2024, 1, 1), transactions, TODAY)
    second = reconstruct_daily_balances(Decimal("300"), datetime(2024, 1, 1), transactions, TODAY)

    assert first == second


def test_days_before_creation_report_zero():
    transactions = [txn("PAYMENT", "100", "2024-03-01")]

    balances = reconstruct_daily_balances(Decimal("900"), datetime(2024, 3, 2, 16, 30), transactions, TODAY)

    assert balances[0] == DailyBalance(date=date(2024, 3, 1), balance=Decimal("0"), transactions_count=0)
    assert balances[1].balance == Decimal("-900")
    assert balances[2].balance == Decimal("-900")


def test_first_of_month_yields_single_day():
    balances = reconstruct_daily_balances(Decimal("10"), datetime(2023, 12, 1), [], date(2024, 3, 1))

    assert balances == [DailyBalance(date=date(2024, 3, 1), balance=Decimal("-10"), transactions_count=0)]


def test_transactions_with_unusable_dates_are_dropped():
    transactions = [txn("PAYMENT", "100", None), txn("PAYMENT", "100", "garbage"), txn("PAYMENT", "100", "2024-3")]

    assert group_transactions_by_day(transactions) == {}
    balances = reconstruct_daily_balances(Decimal("250"), datetime(2024, 1, 1), transactions, TODAY)
    assert all(b.balance == Decimal("-250") for b in balances)


def test_unknown_transaction_types_counted_but_not_applied():
    assert reverse_day(Decimal("-100"), [txn("FEE", "30", "2024-03-03")]) == Decimal("-100")

    balances = reconstruct_daily_balances(
        Decimal("100"), datetime(2024, 1, 1), [txn("FEE", "30", "2024-03-03")], TODAY
    )
    assert balances[-1].transactions_count == 1
    assert balances[0].balance == Decimal("-100")


def test_reverse_day_signs():
    assert reverse_day(Decimal("-400"), [txn("THIRD_PARTY_PAYMENT", "200", None)]) == Decimal("-600")
    assert reverse_day(Decimal("-400"), [txn("CONSUMPTION", "100", None)]) == Decimal("-300")


def test_daily_average_rounds_half_up_to_cents():
    balances = [
        DailyBalance(date=date(2024, 3, 1), balance=Decimal("-0.01"), transactions_count=0),
        DailyBalance(date=date(2024, 3, 2), balance=Decimal("-0.02"), transactions_count=0),
    ]

    # -0.015 rounds away from zero
    assert calculate_daily_average(balances) == Decimal("-0.02")
    assert calculate_daily_average([]) == Decimal("0")


def test_build_credit_daily_balance_summary():
    record = CreditRecord(
        id="card-1",
        credit_number="CC-0000000001",
        credit_type=CreditType.CREDIT_CARD,
        customer_id="cust-personal",
        status=CreditStatus.ACTIVE,
        outstanding_balance=Decimal("500"),
        interest_rate=Decimal("35"),
        created_at=datetime(2024, 2, 1),
        updated_at=datetime(2024, 3, 3),
        credit_limit=Decimal("1000"),
        available_credit=Decimal("500"),
    )
    transactions = [
        txn("PAYMENT", "200", "2024-03-02T10:15:00"),
        txn("CONSUMPTION", "100", "2024-03-03T08:00:00"),
    ]

    summary = build_credit_daily_balance(record, transactions, TODAY)

    assert summary.credit_id == "card-1"
    assert summary.current_balance == Decimal("-500")
    assert summary.daily_average == Decimal("-500.00")
    assert len(summary.daily_balances) == 3


def test_mid_month_card_with_one_consumption():
    """Created on the 10th, 50 consumed on the 15th, 200 outstanding on the 20th"""
    transactions = [txn("CONSUMPTION", "50", "2024-03-15T14:00:00")]

    balances = reconstruct_daily_balances(Decimal("200"), datetime(2024, 3, 10, 9, 0), transactions, date(2024, 3, 20))
    by_day = {b.date.day: b.balance for b in balances}

    assert len(balances) == 20
    assert all(by_day[day] == Decimal("0") for day in range(1, 10))
    assert all(by_day[day] == Decimal("-150") for day in range(10, 15))
    assert all(by_day[day] == Decimal("-200") for day in range(15, 21))
    assert balances[14].transactions_count == 1
