"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from credit_service.domain.exceptions import ValidationError

ZERO = Decimal("0")
CENTS = Decimal("0.01")


class CreditType(str, Enum):
    PERSONAL_LOAN = "PERSONAL_LOAN"
    BUSINESS_LOAN = "BUSINESS_LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"

    @property
    def is_loan(self) -> bool:
        return self in (CreditType.PERSONAL_LOAN, CreditType.BUSINESS_LOAN)

    @property
    def is_card(self) -> bool:
        return self in (CreditType.CREDIT_CARD, CreditType.DEBIT_CARD)


class CreditStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"
    PAID = "PAID"
    DELINQUENT = "DELINQUENT"


class CardBrand(str, Enum):
    VISA = "VISA"
    MASTERCARD = "MASTERCARD"


class CardStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"
    REPORTED_STOLEN = "REPORTED_STOLEN"
    EXPIRED = "EXPIRED"


# Customer types returned by the customer directory
PERSONAL = "PERSONAL"
PERSONAL_VIP = "PERSONAL_VIP"
BUSINESS = "BUSINESS"
PERSONAL_CUSTOMER_TYPES = frozenset({PERSONAL, PERSONAL_VIP})

# Product type used when querying the transaction history service
CREDIT_PRODUCT_TYPE = "CREDIT"

# Account status reported by the account directory
ACCOUNT_ACTIVE = "ACTIVE"

# Transaction types as reported by the transaction history service
PAYMENT_TRANSACTION_TYPES = frozenset({"PAYMENT", "CREDIT_PAYMENT", "THIRD_PARTY_PAYMENT"})
CONSUMPTION_TRANSACTION_TYPES = frozenset({"CONSUMPTION", "CARD_CONSUMPTION"})


def _positive(value) -> bool:
    return value is not None and value > 0


@dataclass
class AssociatedAccount:
    """Secondary bank account linked to a debit card"""

    account_id: str
    sequence_order: int
    associated_at: Optional[date] = None
    status: Optional[str] = None


@dataclass
class CreditRequest:
    """Creation or administrative update request (no id, status or balances)"""

    credit_number: str
    credit_type: CreditType
    customer_id: str
    due_date: Optional[date] = None
    amount: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None
    credit_limit: Optional[Decimal] = None
    term_months: Optional[int] = None
    monthly_payment: Optional[Decimal] = None
    main_account_id: Optional[str] = None
    associated_accounts: List[AssociatedAccount] = field(default_factory=list)
    daily_withdrawal_limit: Optional[Decimal] = None
    daily_purchase_limit: Optional[Decimal] = None
    card_brand: Optional[CardBrand] = None


@dataclass
class CreditRecord:
    """
    Persisted state of one credit product.

    The per-type field sets are enforced on construction, so every
    ``dataclasses.replace`` made by a balance operation is re-checked.
    """

    id: str
    credit_number: str
    credit_type: CreditType
    customer_id: str
    status: CreditStatus
    outstanding_balance: Decimal
    interest_rate: Decimal
    created_at: datetime
    updated_at: datetime
    due_date: Optional[date] = None
    amount: Optional[Decimal] = None
    credit_limit: Optional[Decimal] = None
    available_credit: Optional[Decimal] = None
    term_months: Optional[int] = None
    monthly_payment: Optional[Decimal] = None
    remaining_payments: Optional[int] = None
    main_account_id: Optional[str] = None
    associated_accounts: List[AssociatedAccount] = field(default_factory=list)
    daily_withdrawal_limit: Optional[Decimal] = None
    daily_purchase_limit: Optional[Decimal] = None
    card_brand: Optional[CardBrand] = None
    card_status: Optional[CardStatus] = None
    expiration_date: Optional[date] = None
    version: int = 0

    def __post_init__(self) -> None:
        if not 10 <= len(self.credit_number) <= 20:
            raise ValidationError("creditNumber must be between 10 and 20 characters")
        if self.outstanding_balance < 0:
            raise ValidationError("Outstanding balance cannot be negative")
        if not ZERO <= self.interest_rate <= Decimal("100"):
            raise ValidationError("Interest rate must be between 0 and 100")
        if self.status == CreditStatus.PAID and self.outstanding_balance > 0:
            raise ValidationError("Only a credit with no outstanding balance can be PAID")
        if self.remaining_payments is not None and self.remaining_payments < 0:
            raise ValidationError("Remaining payments cannot be negative")

        orders = [acc.sequence_order for acc in self.associated_accounts]
        if any(order < 1 for order in orders):
            raise ValidationError("sequenceOrder must be at least 1")
        if len(orders) != len(set(orders)):
            raise ValidationError("sequenceOrder values must be unique")

        if self.credit_type.is_loan:
            if _positive(self.credit_limit):
                raise ValidationError("Loans cannot have credit limit")
            if not _positive(self.amount):
                raise ValidationError("Loans must have an amount greater than 0")
            if self.term_months is None or self.term_months < 1:
                raise ValidationError("Loans must have a term in months greater than 0")
        else:
            if _positive(self.term_months) or _positive(self.monthly_payment):
                raise ValidationError("Cards cannot have term months or monthly payment")

        if self.credit_type == CreditType.CREDIT_CARD:
            if not _positive(self.credit_limit):
                raise ValidationError("Credit cards must have a credit limit greater than 0")
            if self.available_credit is None or self.available_credit < 0:
                raise ValidationError("Available credit cannot be negative")
            if self.available_credit + self.outstanding_balance != self.credit_limit:
                raise ValidationError("Available credit and outstanding balance must add up to the credit limit")

        if self.credit_type == CreditType.DEBIT_CARD:
            if _positive(self.amount) or _positive(self.credit_limit) or self.remaining_payments:
                raise ValidationError("Debit cards cannot carry loan or credit fields")
            if not self.main_account_id:
                raise ValidationError("Debit cards require a main account")


@dataclass
class Transaction:
    """Transaction reported by the transaction history service"""

    type: str
    amount: Decimal
    transaction_date: Optional[str]  # raw ISO string, only the YYYY-MM-DD prefix is used


@dataclass
class AccountInfo:
    """Bank account as reported by the account directory"""

    id: str
    customer_id: str
    status: str
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    balance: Decimal = ZERO


@dataclass
class DailyBalance:
    """Reconstructed closing balance of one day (negative = debt)"""

    date: date
    balance: Decimal
    transactions_count: int


@dataclass
class CreditDailyBalance:
    """Daily balance trail of one credit for the current month"""

    credit_id: str
    credit_number: str
    credit_type: CreditType
    customer_id: str
    current_balance: Decimal
    daily_average: Decimal
    daily_balances: List[DailyBalance]


@dataclass
class CreditBalance:
    """Point-in-time balance view of a credit"""

    credit_id: str
    credit_number: str
    credit_type: CreditType
    status: CreditStatus
    outstanding_balance: Decimal
    available_credit: Optional[Decimal]
    credit_limit: Optional[Decimal]


@dataclass
class DebitCardBalance:
    """Main account balance behind a debit card"""

    card_id: str
    card_number: str
    card_status: Optional[CardStatus]
    main_account_id: str
    account_number: Optional[str]
    account_type: Optional[str]
    current_balance: Decimal
    available_balance: Decimal
    currency: str
    last_updated: datetime


@dataclass
class ValidationResult:
    """Answer to a balance sufficiency inquiry"""

    is_valid: bool
    reason: Optional[str]
    available_balance: Decimal
