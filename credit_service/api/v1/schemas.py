"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from credit_service.domain.models import (
    AssociatedAccount,
    CardBrand,
    CardStatus,
    CreditRequest,
    CreditStatus,
    CreditType,
)


class AssociatedAccountSchema(BaseModel):
    """Secondary account linked to a debit card"""

    model_config = ConfigDict(from_attributes=True)

    account_id: str = Field(..., min_length=1)
    sequence_order: int = Field(..., ge=1)
    associated_at: Optional[date] = None
    status: Optional[str] = None


class CreditRequestSchema(BaseModel):
    """Request body for POST /v1/credits and PUT /v1/credits/{id}"""

    credit_number: str = Field(..., min_length=10, max_length=20)
    credit_type: CreditType
    customer_id: str = Field(..., min_length=1)
    due_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    interest_rate: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    credit_limit: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    term_months: Optional[int] = Field(None, ge=0)
    monthly_payment: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    main_account_id: Optional[str] = None
    associated_accounts: List[AssociatedAccountSchema] = Field(default_factory=list)
    daily_withdrawal_limit: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    daily_purchase_limit: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    card_brand: Optional[CardBrand] = None

    def to_domain(self) -> CreditRequest:
        return CreditRequest(
            credit_number=self.credit_number,
            credit_type=self.credit_type,
            customer_id=self.customer_id,
            due_date=self.due_date,
            amount=self.amount,
            interest_rate=self.interest_rate,
            credit_limit=self.credit_limit,
            term_months=self.term_months,
            monthly_payment=self.monthly_payment,
            main_account_id=self.main_account_id,
            associated_accounts=[AssociatedAccount(**acc.model_dump()) for acc in self.associated_accounts],
            daily_withdrawal_limit=self.daily_withdrawal_limit,
            daily_purchase_limit=self.daily_purchase_limit,
            card_brand=self.card_brand,
        )


class CreditResponse(BaseModel):
    """Full credit representation"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    credit_number: str
    credit_type: CreditType
    customer_id: str
    status: CreditStatus
    amount: Optional[Decimal] = None
    outstanding_balance: Decimal
    interest_rate: Decimal
    credit_limit: Optional[Decimal] = None
    available_credit: Optional[Decimal] = None
    term_months: Optional[int] = None
    monthly_payment: Optional[Decimal] = None
    remaining_payments: Optional[int] = None
    main_account_id: Optional[str] = None
    associated_accounts: List[AssociatedAccountSchema] = Field(default_factory=list)
    daily_withdrawal_limit: Optional[Decimal] = None
    daily_purchase_limit: Optional[Decimal] = None
    card_brand: Optional[CardBrand] = None
    card_status: Optional[CardStatus] = None
    expiration_date: Optional[date] = None
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime
    version: int


class PaymentRequest(BaseModel):
    """Request body for POST /v1/credits/{id}/payments"""

    amount: Decimal = Field(..., gt=0, decimal_places=2)


class ConsumptionRequest(BaseModel):
    """Request body for POST /v1/credits/{id}/consumptions"""

    amount: Decimal = Field(..., gt=0, decimal_places=2)
    merchant: Optional[str] = None


class ThirdPartyPaymentRequest(BaseModel):
    """Request body for POST /v1/credits/{id}/third-party-payments"""

    amount: Decimal = Field(..., gt=0, decimal_places=2)
    payer_customer_id: str = Field(..., min_length=1)


class CreditBalanceResponse(BaseModel):
    """Response for GET /v1/credits/{id}/balance"""

    model_config = ConfigDict(from_attributes=True)

    credit_id: str
    credit_number: str
    credit_type: CreditType
    status: CreditStatus
    outstanding_balance: Decimal
    available_credit: Optional[Decimal] = None
    credit_limit: Optional[Decimal] = None


class DailyBalanceSchema(BaseModel):
    """Closing balance of one day (negative = debt)"""

    model_config = ConfigDict(from_attributes=True)

    date: date
    balance: Decimal
    transactions_count: int


class CreditDailyBalanceResponse(BaseModel):
    """Daily balance trail of one credit for the current month"""

    model_config = ConfigDict(from_attributes=True)

    credit_id: str
    credit_number: str
    credit_type: CreditType
    customer_id: str
    current_balance: Decimal
    daily_average: Decimal
    daily_balances: List[DailyBalanceSchema]


class DebitCardBalanceResponse(BaseModel):
    """Response for GET /v1/credits/{id}/debit-card/main-account-balance"""

    model_config = ConfigDict(from_attributes=True)

    card_id: str
    card_number: str
    card_status: Optional[CardStatus] = None
    main_account_id: str
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    current_balance: Decimal
    available_balance: Decimal
    currency: str
    last_updated: datetime


class OverdueResponse(BaseModel):
    """Response for GET /v1/customers/{customer_id}/overdue"""

    customer_id: str
    has_overdue_credits: bool
