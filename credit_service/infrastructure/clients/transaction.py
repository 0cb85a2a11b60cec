"""Transaction service HTTP client for the current month's product transactions"""

import logging
from decimal import Decimal
from typing import List

import httpx

from credit_service.config import settings
from credit_service.domain.models import CREDIT_PRODUCT_TYPE, Transaction
from credit_service.infrastructure.observability.metrics import upstream_failure_counter


class TransactionClient:
    """Client for external transaction history API"""

    service = "transaction"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.transaction_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def list_for_product_current_month(
        self, product_id: str, product_type: str = CREDIT_PRODUCT_TYPE
    ) -> List[Transaction]:
        """
        Fetch this month's transactions for a product.

        Any failure is logged and degrades to an empty list so balance
        history can still be answered from the current balance alone.
        """
        url = f"{self.base_url}/transactions/product/{product_id}/type/{product_type}/current-month"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
                return [
                    Transaction(
                        type=txn["transactionType"],
                        amount=Decimal(str(txn["amount"])),
                        transaction_date=txn.get("transactionDate"),
                    )
                    for txn in response.json()
                ]

            except (httpx.HTTPError, KeyError, ValueError, TypeError, ArithmeticError) as e:
                upstream_failure_counter.labels(service=self.service).inc()
                logging.error(
                    f"Error fetching transactions for product {product_id}: {e}",
                    extra={"product_id": product_id, "product_type": product_type},
                )
                return []
