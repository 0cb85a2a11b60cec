"""Business rule validation for credit creation requests"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from credit_service.domain.exceptions import ValidationError
from credit_service.domain.models import (
    ACCOUNT_ACTIVE,
    PERSONAL_CUSTOMER_TYPES,
    AccountInfo,
    AssociatedAccount,
    CreditRequest,
    CreditType,
)
from credit_service.domain.ports import AccountDirectory, CreditStore, CustomerDirectory


def _positive(value) -> bool:
    return value is not None and value > 0


def check_customer_rules(request: CreditRequest, customer_type: str, has_personal_loan: bool) -> None:
    """
    Customer-type restrictions.

    - Personal (and VIP personal) customers cannot hold business loans
    - Personal customers may hold at most one personal loan
    """
    if customer_type not in PERSONAL_CUSTOMER_TYPES:
        return

    if request.credit_type == CreditType.BUSINESS_LOAN:
        raise ValidationError("Personal customers cannot have business loans")

    if request.credit_type == CreditType.PERSONAL_LOAN and has_personal_loan:
        raise ValidationError("Personal customers can only have one personal loan")


def check_product_rules(request: CreditRequest) -> None:
    """Per-product field requirements and prohibitions"""
    credit_type = request.credit_type

    if credit_type == CreditType.CREDIT_CARD and not _positive(request.credit_limit):
        raise ValidationError("Credit cards must have a credit limit greater than 0")

    if credit_type.is_loan:
        if not _positive(request.term_months):
            raise ValidationError("Loans must have a term in months greater than 0")
        if _positive(request.credit_limit):
            raise ValidationError("Loans cannot have credit limit")

    if credit_type == CreditType.CREDIT_CARD:
        if _positive(request.term_months):
            raise ValidationError("Credit cards cannot have term months")
        if _positive(request.monthly_payment):
            raise ValidationError("Credit cards cannot have monthly payment")

    if credit_type == CreditType.DEBIT_CARD:
        if _positive(request.credit_limit):
            raise ValidationError("Debit cards cannot have credit limit")
        if _positive(request.term_months):
            raise ValidationError("Debit cards cannot have term months")
        if _positive(request.monthly_payment):
            raise ValidationError("Debit cards cannot have monthly payment")
        if _positive(request.amount):
            raise ValidationError("Debit cards cannot have amount (use daily limits instead)")
        if not request.main_account_id or not request.main_account_id.strip():
            raise ValidationError("Debit cards require a main account")
        if not _positive(request.daily_withdrawal_limit):
            raise ValidationError("Debit cards require a daily withdrawal limit greater than 0")
        if not _positive(request.daily_purchase_limit):
            raise ValidationError("Debit cards require a daily purchase limit greater than 0")
        if request.card_brand is None:
            raise ValidationError("Debit cards require a card brand (VISA or MASTERCARD)")


def check_associated_account_list(request: CreditRequest) -> None:
    """Structural checks on the associated accounts, before any lookup"""
    seen_orders = set()
    for associated in request.associated_accounts:
        if associated.sequence_order in seen_orders:
            raise ValidationError(f"Duplicate sequenceOrder: {associated.sequence_order}")
        seen_orders.add(associated.sequence_order)

        if associated.account_id == request.main_account_id:
            raise ValidationError("The main account cannot be listed as an associated account")


def _check_account(account: Optional[AccountInfo], account_id: str, customer_id: str, role: str) -> None:
    if account is None:
        raise ValidationError(f"The {role} account does not exist: {account_id}")
    if account.customer_id != customer_id:
        raise ValidationError(
            f"The {role} account does not belong to the customer. "
            f"Account: {account_id}, owner: {account.customer_id}, requester: {customer_id}"
        )
    if account.status != ACCOUNT_ACTIVE:
        raise ValidationError(f"The {role} account is not active. Account: {account_id}, status: {account.status}")


def check_debit_card_accounts(
    request: CreditRequest,
    main_account: Optional[AccountInfo],
    associated_accounts: List[Tuple[AssociatedAccount, Optional[AccountInfo]]],
) -> None:
    """Main and associated accounts must exist, belong to the requester and be active"""
    _check_account(main_account, request.main_account_id, request.customer_id, "main")
    for associated, account in associated_accounts:
        _check_account(account, associated.account_id, request.customer_id, "associated")


async def validate_credit_request(
    request: CreditRequest,
    *,
    store: CreditStore,
    customers: CustomerDirectory,
    accounts: AccountDirectory,
    today: date,
) -> CreditRequest:
    """
    Run every creation rule in order; the first failure wins.

    Order:
    1. Customer-type rules (business loan ban, one personal loan)
    2. Delinquency gate: no ACTIVE credit past its due date
    3. Product field rules
    4. Debit card account ownership and status

    Raises:
        NotFound: customer does not exist
        ValidationError: a business rule failed
        UpstreamUnavailable: a collaborator could not be reached
    """
    customer_type = await customers.get_customer_type(request.customer_id)
    logging.debug(
        "Validating business rules",
        extra={"customer_id": request.customer_id, "customer_type": customer_type},
    )

    has_personal_loan = False
    if customer_type in PERSONAL_CUSTOMER_TYPES and request.credit_type == CreditType.PERSONAL_LOAN:
        has_personal_loan = bool(store.query_by_customer(request.customer_id, CreditType.PERSONAL_LOAN))
    check_customer_rules(request, customer_type, has_personal_loan)

    if store.query_active_overdue(request.customer_id, today):
        logging.warning("Customer has overdue credits", extra={"customer_id": request.customer_id})
        raise ValidationError("Customer has overdue debts and cannot acquire new credit products")

    check_product_rules(request)

    if request.credit_type == CreditType.DEBIT_CARD:
        check_associated_account_list(request)
        main_account = await accounts.get_account(request.main_account_id)
        associated = [
            (assoc, await accounts.get_account(assoc.account_id)) for assoc in request.associated_accounts
        ]
        check_debit_card_accounts(request, main_account, associated)

    return request
