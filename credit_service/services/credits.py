"""Credit service - orchestrates domain rules, the credit store and collaborator lookups"""

import logging
from decimal import Decimal
from typing import List, Optional

from credit_service.config import settings
from credit_service.domain.balance import apply_consumption, apply_payment, apply_third_party_payment
from credit_service.domain.clock import Clock, SystemClock
from credit_service.domain.creation import apply_admin_update, build_credit_record
from credit_service.domain.exceptions import NotFound, ValidationError
from credit_service.domain.inquiry import evaluate_credit_for_transaction
from credit_service.domain.ledger import build_credit_daily_balance
from credit_service.domain.models import (
    CREDIT_PRODUCT_TYPE,
    CreditBalance,
    CreditDailyBalance,
    CreditRecord,
    CreditRequest,
    CreditType,
    DebitCardBalance,
    ValidationResult,
)
from credit_service.domain.ports import AccountDirectory, CreditStore, CustomerDirectory, TransactionHistory
from credit_service.domain.validation import validate_credit_request


class CreditService:
    """
    Credit lifecycle operations.

    Every mutation is one read-modify-write: load the record, apply a pure
    domain function, save with the version that was read. A ConflictError
    from the store is propagated; retrying is the caller's decision.
    """

    def __init__(
        self,
        store: CreditStore,
        customers: CustomerDirectory,
        accounts: AccountDirectory,
        transactions: TransactionHistory,
        clock: Clock | None = None,
    ):
        self.store = store
        self.customers = customers
        self.accounts = accounts
        self.transactions = transactions
        self.clock = clock or SystemClock()

    def _load(self, credit_id: str) -> CreditRecord:
        record = self.store.get(credit_id)
        if record is None:
            raise NotFound(f"Credit not found with id: {credit_id}")
        return record

    # Queries

    def list_credits(self, customer_id: Optional[str] = None, credit_type: Optional[CreditType] = None) -> List[CreditRecord]:
        if customer_id is not None:
            return self.store.query_by_customer(customer_id, credit_type)
        return self.store.list_all(credit_type)

    def get_credit(self, credit_id: str) -> CreditRecord:
        return self._load(credit_id)

    def get_credits_by_customer(self, customer_id: str, credit_type: Optional[CreditType] = None) -> List[CreditRecord]:
        credits = self.store.query_by_customer(customer_id, credit_type)
        if not credits:
            suffix = f" with type: {credit_type.value}" if credit_type else ""
            raise NotFound(f"No credits found for customer: {customer_id}{suffix}")
        return credits

    def get_credit_balance(self, credit_id: str) -> CreditBalance:
        record = self._load(credit_id)
        return CreditBalance(
            credit_id=record.id,
            credit_number=record.credit_number,
            credit_type=record.credit_type,
            status=record.status,
            outstanding_balance=record.outstanding_balance,
            available_credit=record.available_credit,
            credit_limit=record.credit_limit,
        )

    def has_overdue_credits(self, customer_id: str) -> bool:
        return self.store.query_active_overdue(customer_id, self.clock.today())

    # Lifecycle

    async def create_credit(self, request: CreditRequest) -> CreditRecord:
        logging.info(
            "Creating credit",
            extra={"customer_id": request.customer_id, "credit_type": request.credit_type.value},
        )
        validated = await validate_credit_request(
            request,
            store=self.store,
            customers=self.customers,
            accounts=self.accounts,
            today=self.clock.today(),
        )
        record = build_credit_record(validated, self.clock.now())
        saved = self.store.save(record, expected_version=None)

        logging.info(
            "Credit created",
            extra={"credit_id": saved.id, "credit_type": saved.credit_type.value},
        )
        if saved.credit_type == CreditType.DEBIT_CARD:
            logging.info(
                "Debit card created",
                extra={
                    "credit_id": saved.id,
                    "main_account_id": saved.main_account_id,
                    "daily_withdrawal_limit": str(saved.daily_withdrawal_limit),
                    "daily_purchase_limit": str(saved.daily_purchase_limit),
                },
            )
        return saved

    def update_credit(self, credit_id: str, request: CreditRequest) -> CreditRecord:
        existing = self._load(credit_id)
        updated = apply_admin_update(existing, request, self.clock.now())
        return self.store.save(updated, expected_version=existing.version)

    def delete_credit(self, credit_id: str) -> None:
        if not self.store.delete(credit_id):
            raise NotFound(f"Credit not found with id: {credit_id}")
        logging.info("Credit deleted", extra={"credit_id": credit_id})

    # Balance operations

    def make_payment(self, credit_id: str, amount: Decimal) -> CreditRecord:
        record = self._load(credit_id)
        updated = apply_payment(record, amount, self.clock.now())
        saved = self.store.save(updated, expected_version=record.version)
        if saved.status != record.status:
            logging.info("Credit fully paid", extra={"credit_id": credit_id})
        return saved

    def charge_consumption(self, credit_id: str, amount: Decimal, merchant: Optional[str] = None) -> CreditRecord:
        record = self._load(credit_id)
        updated = apply_consumption(record, amount, merchant, self.clock.now())
        logging.debug("Consumption charged", extra={"credit_id": credit_id, "merchant": merchant})
        return self.store.save(updated, expected_version=record.version)

    async def make_third_party_payment(self, credit_id: str, amount: Decimal, payer_customer_id: str) -> CreditRecord:
        record = self._load(credit_id)
        updated = apply_third_party_payment(record, amount, self.clock.now())

        if not await self.customers.customer_exists(payer_customer_id):
            raise NotFound(f"Payer customer not found: {payer_customer_id}")

        return self.store.save(updated, expected_version=record.version)

    # Derived views

    async def get_customer_daily_balances(self, customer_id: str) -> List[CreditDailyBalance]:
        today = self.clock.today()
        results = []
        for record in self.store.query_by_customer(customer_id):
            transactions = await self.transactions.list_for_product_current_month(record.id, CREDIT_PRODUCT_TYPE)
            results.append(build_credit_daily_balance(record, transactions, today))
        return results

    def validate_credit_for_transaction(self, credit_id: str, required_amount: Decimal) -> ValidationResult:
        return evaluate_credit_for_transaction(self.store.get(credit_id), required_amount)

    async def get_debit_card_main_account_balance(self, card_id: str) -> DebitCardBalance:
        record = self.store.get(card_id)
        if record is None:
            raise NotFound(f"Debit card not found with id: {card_id}")
        if record.credit_type != CreditType.DEBIT_CARD:
            raise ValidationError(f"Product is not a debit card. Type: {record.credit_type.value}")
        if not record.main_account_id:
            raise ValidationError("Debit card has no main account associated")

        account = await self.accounts.get_account(record.main_account_id)
        if account is None:
            raise NotFound(f"Main account not found: {record.main_account_id}")

        # settled balance is not available from the account service
        return DebitCardBalance(
            card_id=record.id,
            card_number=record.credit_number,
            card_status=record.card_status,
            main_account_id=record.main_account_id,
            account_number=account.account_number,
            account_type=account.account_type,
            current_balance=account.balance,
            available_balance=account.balance,
            currency=settings.default_currency,
            last_updated=self.clock.now(),
        )
