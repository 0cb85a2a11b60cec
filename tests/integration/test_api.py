"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from credit_service.config import settings
from credit_service.domain.exceptions import ConflictError, NotFound
from credit_service.domain.models import AccountInfo

CUSTOMER_TYPE = "credit_service.infrastructure.clients.customer.CustomerClient.get_customer_type"
CUSTOMER_EXISTS = "credit_service.infrastructure.clients.customer.CustomerClient.customer_exists"
GET_ACCOUNT = "credit_service.infrastructure.clients.account.AccountClient.get_account"
TRANSACTIONS = "credit_service.infrastructure.clients.transaction.TransactionClient.list_for_product_current_month"
PUBLISH = "credit_service.infrastructure.messaging.publisher.ResponsePublisher.publish"

CARD_BODY = {
    "credit_number": "CC-0000000001",
    "credit_type": "CREDIT_CARD",
    "customer_id": "cust-personal",
    "interest_rate": "35.00",
    "credit_limit": "5000.00",
}

LOAN_BODY = {
    "credit_number": "LN-0000000001",
    "credit_type": "PERSONAL_LOAN",
    "customer_id": "cust-personal",
    "amount": "10000.00",
    "interest_rate": "12.50",
    "term_months": 12,
    "monthly_payment": "890.00",
}


@pytest.fixture
def card_id(client: TestClient) -> str:
    with patch(CUSTOMER_TYPE, new_callable=AsyncMock, return_value="PERSONAL"):
        response = client.post("/v1/credits", json=CARD_BODY)
    assert response.status_code == 201
    return response.json()["id"]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, card_id: str):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "credit_created_total" in response.text


@patch(CUSTOMER_TYPE, new_callable=AsyncMock)
def test_create_credit_card(mock_customer_type: AsyncMock, client: TestClient):
    """Test POST /v1/credits for a credit card"""
    mock_customer_type.return_value = "PERSONAL"

    response = client.post("/v1/credits", json=CARD_BODY)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "ACTIVE"
    assert float(data["outstanding_balance"]) == 0
    assert float(data["available_credit"]) == 5000
    assert data["version"] == 1
    assert "X-Request-ID" in response.headers


@patch(CUSTOMER_TYPE, new_callable=AsyncMock)
def test_second_personal_loan_rejected(mock_customer_type: AsyncMock, client: TestClient):
    """Test a PERSONAL customer cannot hold two personal loans"""
    mock_customer_type.return_value = "PERSONAL"

    assert client.post("/v1/credits", json=LOAN_BODY).status_code == 201
    response = client.post("/v1/credits", json={**LOAN_BODY, "credit_number": "LN-0000000002"})

    assert response.status_code == 400
    assert "one personal loan" in response.json()["detail"]


@patch(CUSTOMER_TYPE, new_callable=AsyncMock)
def test_create_for_unknown_customer(mock_customer_type: AsyncMock, client: TestClient):
    mock_customer_type.side_effect = NotFound("Customer not found with id: cust-ghost")

    response = client.post("/v1/credits", json={**CARD_BODY, "customer_id": "cust-ghost"})

    assert response.status_code == 404


def test_create_rejects_bad_credit_number(client: TestClient):
    response = client.post("/v1/credits", json={**CARD_BODY, "credit_number": "123"})

    assert response.status_code == 422


@patch(GET_ACCOUNT, new_callable=AsyncMock)
@patch(CUSTOMER_TYPE, new_callable=AsyncMock)
def test_debit_card_lifecycle(mock_customer_type: AsyncMock, mock_get_account: AsyncMock, client: TestClient):
    """Test debit card creation and main account balance lookup"""
    mock_customer_type.return_value = "PERSONAL"
    mock_get_account.return_value = AccountInfo(
        id="acc-main",
        customer_id="cust-personal",
        status="ACTIVE",
        account_number="191-0000001",
        account_type="SAVINGS",
        balance=Decimal("1500.00"),
    )

    response = client.post(
        "/v1/credits",
        json={
            "credit_number": "DC-0000000001",
            "credit_type": "DEBIT_CARD",
            "customer_id": "cust-personal",
            "main_account_id": "acc-main",
            "daily_withdrawal_limit": "1000",
            "daily_purchase_limit": "2000",
            "card_brand": "VISA",
        },
    )
    assert response.status_code == 201
    card = response.json()
    assert card["card_status"] == "INACTIVE"
    assert card["expiration_date"] == "2027-03-20"

    response = client.get(f"/v1/credits/{card['id']}/debit-card/main-account-balance")

    assert response.status_code == 200
    data = response.json()
    assert data["account_number"] == "191-0000001"
    assert data["currency"] == "PEN"
    assert float(data["available_balance"]) == 1500


def test_consumption_and_payment(client: TestClient, card_id: str):
    """Card with 1000 owed on a 5000 limit pays 300"""
    response = client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "1000", "merchant": "Grocer"})
    assert response.status_code == 200

    response = client.post(f"/v1/credits/{card_id}/payments", json={"amount": "300"})

    assert response.status_code == 200
    data = response.json()
    assert float(data["outstanding_balance"]) == 700
    assert float(data["available_credit"]) == 4300
    assert data["version"] == 3


def test_consumption_over_available_rejected(client: TestClient, card_id: str):
    client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "4500"})

    response = client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "600"})

    assert response.status_code == 400
    balance = client.get(f"/v1/credits/{card_id}/balance").json()
    assert float(balance["available_credit"]) == 500


def test_payment_on_paid_credit_conflicts(client: TestClient, card_id: str):
    client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "100"})
    client.post(f"/v1/credits/{card_id}/payments", json={"amount": "100"})

    response = client.post(f"/v1/credits/{card_id}/payments", json={"amount": "1"})

    assert response.status_code == 409
    assert "PAID" in response.json()["detail"]


def test_non_positive_payment_rejected(client: TestClient, card_id: str):
    response = client.post(f"/v1/credits/{card_id}/payments", json={"amount": "0"})

    assert response.status_code == 422


@patch(CUSTOMER_EXISTS, new_callable=AsyncMock)
def test_third_party_payment_unknown_payer(mock_exists: AsyncMock, client: TestClient, card_id: str):
    client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "800"})
    mock_exists.return_value = False

    response = client.post(
        f"/v1/credits/{card_id}/third-party-payments",
        json={"amount": "500", "payer_customer_id": "cust-ghost"},
    )

    assert response.status_code == 404
    assert float(client.get(f"/v1/credits/{card_id}").json()["outstanding_balance"]) == 800


@patch(CUSTOMER_EXISTS, new_callable=AsyncMock)
def test_third_party_payment(mock_exists: AsyncMock, client: TestClient, card_id: str):
    client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "800"})
    mock_exists.return_value = True

    response = client.post(
        f"/v1/credits/{card_id}/third-party-payments",
        json={"amount": "500", "payer_customer_id": "cust-payer"},
    )

    assert response.status_code == 200
    assert float(response.json()["outstanding_balance"]) == 300
    mock_exists.assert_awaited_once_with("cust-payer")


def test_get_update_delete(client: TestClient, card_id: str):
    assert client.get(f"/v1/credits/{card_id}").status_code == 200

    response = client.put(f"/v1/credits/{card_id}", json={**CARD_BODY, "credit_limit": "8000"})
    assert response.status_code == 200
    assert float(response.json()["available_credit"]) == 8000

    assert client.delete(f"/v1/credits/{card_id}").status_code == 204
    assert client.get(f"/v1/credits/{card_id}").status_code == 404


def test_list_and_customer_views(client: TestClient, card_id: str):
    assert [c["id"] for c in client.get("/v1/credits", params={"customer_id": "cust-personal"}).json()] == [card_id]
    assert client.get("/v1/credits", params={"credit_type": "PERSONAL_LOAN"}).json() == []

    response = client.get("/v1/customers/cust-personal/credits")
    assert response.status_code == 200
    assert len(response.json()) == 1

    assert client.get("/v1/customers/cust-nobody/credits").status_code == 404

    response = client.get("/v1/customers/cust-personal/overdue")
    assert response.json() == {"customer_id": "cust-personal", "has_overdue_credits": False}


@patch(TRANSACTIONS, new_callable=AsyncMock)
def test_daily_balances(mock_transactions: AsyncMock, client: TestClient, card_id: str):
    """Clock is fixed on 2024-03-20 and the card was created that day"""
    mock_transactions.return_value = []
    client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "250"})

    response = client.get("/v1/customers/cust-personal/credits/daily-balances")

    assert response.status_code == 200
    [trail] = response.json()
    assert trail["credit_id"] == card_id
    assert len(trail["daily_balances"]) == 20
    assert float(trail["daily_balances"][0]["balance"]) == 0
    assert float(trail["daily_balances"][-1]["balance"]) == -250
    assert float(trail["current_balance"]) == -250


@patch(PUBLISH, new_callable=AsyncMock)
def test_credit_inquiry(mock_publish: AsyncMock, client: TestClient, card_id: str):
    response = client.post(
        "/v1/credit-inquiries",
        json={"inquiryId": "inq-1", "creditId": card_id, "requiredAmount": "6000", "transactionId": "tx-1"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["isValid"] is False
    assert "insufficient available balance" in data["reason"]
    mock_publish.assert_awaited_once()


@patch(PUBLISH, new_callable=AsyncMock)
def test_credit_inquiry_unknown_credit(mock_publish: AsyncMock, client: TestClient):
    response = client.post(
        "/v1/credit-inquiries",
        json={"inquiryId": "inq-2", "creditId": "missing", "requiredAmount": "1"},
    )

    assert response.status_code == 200
    assert response.json()["reason"] == "credit not found"


def test_conflicting_writes_retried_then_409(client: TestClient, card_id: str):
    """Every save loses the version race; the API retries the whole operation, then gives up"""
    conflict = ConflictError(card_id, 1)
    with patch(
        "credit_service.infrastructure.database.repositories.CreditRepository.save", side_effect=conflict
    ) as mock_save:
        response = client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "10"})

    assert response.status_code == 409
    assert mock_save.call_count == settings.conflict_max_retries + 1
    assert float(client.get(f"/v1/credits/{card_id}").json()["outstanding_balance"]) == 0


def test_request_id_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.parametrize("path", ["consumptions", "payments"])
def test_sub_cent_amount_rejected(client: TestClient, card_id: str, path: str):
    client.post(f"/v1/credits/{card_id}/consumptions", json={"amount": "1000"})

    response = client.post(f"/v1/credits/{card_id}/{path}", json={"amount": "100.005"})

    assert response.status_code == 422
    data = client.get(f"/v1/credits/{card_id}").json()
    assert float(data["outstanding_balance"]) == 1000
    assert float(data["available_credit"]) == 4000


def test_create_rejects_sub_cent_limit(client: TestClient):
    response = client.post("/v1/credits", json={**CARD_BODY, "credit_limit": "5000.001"})

    assert response.status_code == 422
