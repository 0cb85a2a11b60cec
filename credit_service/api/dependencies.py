"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from credit_service.domain.clock import Clock, SystemClock
from credit_service.infrastructure.clients.account import AccountClient
from credit_service.infrastructure.clients.customer import CustomerClient
from credit_service.infrastructure.clients.transaction import TransactionClient
from credit_service.infrastructure.database.repositories import CreditRepository
from credit_service.infrastructure.database.session import get_db
from credit_service.infrastructure.messaging.consumer import InquiryConsumer
from credit_service.infrastructure.messaging.publisher import ResponsePublisher
from credit_service.services.credits import CreditService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_customer_client() -> CustomerClient:
    """Provide Customer API client instance"""
    return CustomerClient()


def get_account_client() -> AccountClient:
    """Provide Account API client instance"""
    return AccountClient()


def get_transaction_client() -> TransactionClient:
    """Provide Transaction API client instance"""
    return TransactionClient()


def get_response_publisher() -> ResponsePublisher:
    """Provide inquiry response publisher instance"""
    return ResponsePublisher()


def get_clock() -> Clock:
    return SystemClock()


def get_credit_service(
    db: Session = Depends(get_db),
    customers: CustomerClient = Depends(get_customer_client),
    accounts: AccountClient = Depends(get_account_client),
    transactions: TransactionClient = Depends(get_transaction_client),
    clock: Clock = Depends(get_clock),
) -> CreditService:
    """Credit service bound to the request's database session"""
    return CreditService(
        store=CreditRepository(db),
        customers=customers,
        accounts=accounts,
        transactions=transactions,
        clock=clock,
    )


def get_inquiry_consumer(
    service: CreditService = Depends(get_credit_service),
    publisher: ResponsePublisher = Depends(get_response_publisher),
) -> InquiryConsumer:
    return InquiryConsumer(service, publisher)
