"""Daily balance reconstruction - derives the month's balance trail from current balance and transactions"""

from collections import defaultdict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from credit_service.domain.models import (
    CENTS,
    CONSUMPTION_TRANSACTION_TYPES,
    PAYMENT_TRANSACTION_TYPES,
    ZERO,
    CreditDailyBalance,
    CreditRecord,
    DailyBalance,
    Transaction,
)
from credit_service.utils.date_utils import generate_date_range, parse_day, start_of_month


def group_transactions_by_day(transactions: List[Transaction]) -> Dict[date, List[Transaction]]:
    """Bucket transactions by calendar day, dropping those without a usable date"""
    by_day: Dict[date, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        day = parse_day(txn.transaction_date)
        if day is not None:
            by_day[day].append(txn)
    return by_day


def reverse_day(closing_balance: Decimal, day_transactions: List[Transaction]) -> Decimal:
    """
    Opening balance of a day, given its closing balance.

    Balances are signed (negative = debt). A payment made the debt smaller, so
    before it the balance was lower; a consumption made it larger, so before it
    the balance was higher.
    """
    opening = closing_balance
    for txn in day_transactions:
        if txn.type in PAYMENT_TRANSACTION_TYPES:
            opening -= txn.amount
        elif txn.type in CONSUMPTION_TRANSACTION_TYPES:
            opening += txn.amount
    return opening


def reconstruct_daily_balances(
    outstanding_balance: Decimal,
    created_at: Optional[datetime],
    transactions: List[Transaction],
    today: date,
) -> List[DailyBalance]:
    """
    Rebuild closing balances for every day of the current month up to today.

    Requirements:
    - Walk backward from today's balance (-outstanding) to the 1st of the month
    - Each day reports its closing balance and its transaction count
    - Days before the credit existed report 0 and do not move the running balance
    - Output ascending by date

    The result depends only on the arguments, so repeated calls agree.
    """
    creation_date = created_at.date() if created_at is not None else today
    by_day = group_transactions_by_day(transactions)

    running_balance = -outstanding_balance
    daily_balances: List[DailyBalance] = []

    for day in reversed(generate_date_range(start_of_month(today), today)):
        if day < creation_date:
            daily_balances.append(DailyBalance(date=day, balance=ZERO, transactions_count=0))
            continue

        day_transactions = by_day.get(day, [])
        daily_balances.append(
            DailyBalance(date=day, balance=running_balance, transactions_count=len(day_transactions))
        )
        running_balance = reverse_day(running_balance, day_transactions)

    daily_balances.reverse()
    return daily_balances


def calculate_daily_average(daily_balances: List[DailyBalance]) -> Decimal:
    if not daily_balances:
        return ZERO
    total = sum((b.balance for b in daily_balances), ZERO)
    return (total / len(daily_balances)).quantize(CENTS, rounding=ROUND_HALF_UP)


def build_credit_daily_balance(
    record: CreditRecord,
    transactions: List[Transaction],
    today: date,
) -> CreditDailyBalance:
    """Daily trail plus summary figures for one credit"""
    daily_balances = reconstruct_daily_balances(record.outstanding_balance, record.created_at, transactions, today)
    return CreditDailyBalance(
        credit_id=record.id,
        credit_number=record.credit_number,
        credit_type=record.credit_type,
        customer_id=record.customer_id,
        current_balance=-record.outstanding_balance,
        daily_average=calculate_daily_average(daily_balances),
        daily_balances=daily_balances,
    )
