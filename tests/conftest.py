"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from decimal import Decimal
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from credit_service.api.dependencies import get_clock
from credit_service.api.main import create_app
from credit_service.domain.clock import FixedClock
from credit_service.domain.exceptions import NotFound
from credit_service.domain.models import AccountInfo, CreditRequest, CreditType, Transaction
from credit_service.infrastructure.database.models import Base
from credit_service.infrastructure.database.repositories import CreditRepository
from credit_service.infrastructure.database.session import build_engine, get_db
from credit_service.services.credits import CreditService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2024, 3, 20, 12, 0, 0)


class StubCustomerDirectory:
    """In-memory customer directory: customer id -> customer type"""

    def __init__(self, customers: Dict[str, str]):
        self.customers = customers

    async def get_customer_type(self, customer_id: str) -> str:
        if customer_id not in self.customers:
            raise NotFound(f"Customer not found with id: {customer_id}")
        return self.customers[customer_id]

    async def customer_exists(self, customer_id: str) -> bool:
        return customer_id in self.customers


class StubAccountDirectory:
    def __init__(self, accounts: Dict[str, AccountInfo]):
        self.accounts = accounts

    async def get_account(self, account_id: str) -> Optional[AccountInfo]:
        return self.accounts.get(account_id)


class StubTransactionHistory:
    """Transactions per product id; records every lookup"""

    def __init__(self, transactions: Optional[Dict[str, List[Transaction]]] = None):
        self.transactions = transactions or {}
        self.calls: List[tuple] = []

    async def list_for_product_current_month(self, product_id: str, product_type: str) -> List[Transaction]:
        self.calls.append((product_id, product_type))
        return self.transactions.get(product_id, [])


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def client(db: Session, clock: FixedClock) -> TestClient:
    """Create FastAPI test client with test database and fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)


@pytest.fixture
def customers() -> StubCustomerDirectory:
    return StubCustomerDirectory(
        {
            "cust-personal": "PERSONAL",
            "cust-vip": "PERSONAL_VIP",
            "cust-business": "BUSINESS",
            "cust-payer": "PERSONAL",
        }
    )


@pytest.fixture
def accounts() -> StubAccountDirectory:
    return StubAccountDirectory(
        {
            "acc-main": AccountInfo(
                id="acc-main",
                customer_id="cust-personal",
                status="ACTIVE",
                account_number="191-0000001",
                account_type="SAVINGS",
                balance=Decimal("1500.00"),
            ),
            "acc-second": AccountInfo(id="acc-second", customer_id="cust-personal", status="ACTIVE"),
            "acc-closed": AccountInfo(id="acc-closed", customer_id="cust-personal", status="CLOSED"),
            "acc-other": AccountInfo(id="acc-other", customer_id="cust-business", status="ACTIVE"),
        }
    )


@pytest.fixture
def transactions() -> StubTransactionHistory:
    return StubTransactionHistory()


@pytest.fixture
def repository(db: Session) -> CreditRepository:
    return CreditRepository(db)


@pytest.fixture
def service(
    repository: CreditRepository,
    customers: StubCustomerDirectory,
    accounts: StubAccountDirectory,
    transactions: StubTransactionHistory,
    clock: FixedClock,
) -> CreditService:
    return CreditService(repository, customers, accounts, transactions, clock)


@pytest.fixture
def personal_loan_request() -> CreditRequest:
    return CreditRequest(
        credit_number="LN-0000000001",
        credit_type=CreditType.PERSONAL_LOAN,
        customer_id="cust-personal",
        amount=Decimal("10000.00"),
        interest_rate=Decimal("12.50"),
        term_months=12,
        monthly_payment=Decimal("890.00"),
    )


@pytest.fixture
def credit_card_request() -> CreditRequest:
    return CreditRequest(
        credit_number="CC-0000000001",
        credit_type=CreditType.CREDIT_CARD,
        customer_id="cust-personal",
        interest_rate=Decimal("35.00"),
        credit_limit=Decimal("5000.00"),
    )
