"""Customer service HTTP client for customer type and existence lookups"""

import logging
from typing import Any, Dict, Optional

import httpx

from credit_service.config import settings
from credit_service.domain.exceptions import NotFound, UpstreamUnavailable
from credit_service.infrastructure.observability.metrics import upstream_failure_counter


class CustomerClient:
    """Client for external customer directory API"""

    service = "customer"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.customer_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _fetch_customer(self, customer_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a customer document, None when the directory answers 4xx.

        Raises:
            UpstreamUnavailable: On timeout, network errors, 5xx or invalid body
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/customers/{customer_id}")
                if response.is_client_error:
                    return None
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                upstream_failure_counter.labels(service=self.service).inc()
                raise UpstreamUnavailable(self.service, f"timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                upstream_failure_counter.labels(service=self.service).inc()
                raise UpstreamUnavailable(self.service, f"status {e.response.status_code}") from e
            except httpx.RequestError as e:
                upstream_failure_counter.labels(service=self.service).inc()
                raise UpstreamUnavailable(self.service, str(e)) from e
            except ValueError as e:
                raise UpstreamUnavailable(self.service, f"invalid customer data: {e}") from e

    async def get_customer_type(self, customer_id: str) -> str:
        """
        Customer type (PERSONAL, PERSONAL_VIP, BUSINESS, ...).

        Raises:
            NotFound: customer does not exist
            UpstreamUnavailable: directory could not be reached
        """
        customer = await self._fetch_customer(customer_id)
        if customer is None:
            raise NotFound(f"Customer not found with id: {customer_id}")

        customer_type = customer.get("customerType") or customer.get("customer_type")
        if not customer_type:
            raise UpstreamUnavailable(self.service, f"customer {customer_id} has no type")
        logging.debug("Customer type resolved", extra={"customer_id": customer_id, "customer_type": customer_type})
        return customer_type

    async def customer_exists(self, customer_id: str) -> bool:
        return await self._fetch_customer(customer_id) is not None
