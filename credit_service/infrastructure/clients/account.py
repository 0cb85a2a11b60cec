"""Account service HTTP client for account ownership and balance lookups"""

from decimal import Decimal
from typing import Optional

import httpx

from credit_service.config import settings
from credit_service.domain.exceptions import UpstreamUnavailable
from credit_service.domain.models import AccountInfo
from credit_service.infrastructure.observability.metrics import upstream_failure_counter


class AccountClient:
    """Client for external account directory API"""

    service = "account"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.account_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_account(self, account_id: str) -> Optional[AccountInfo]:
        """
        Fetch one account.

        Returns:
            AccountInfo, or None when the account does not exist (4xx)

        Raises:
            UpstreamUnavailable: On timeout, network errors, 5xx or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/accounts/{account_id}")
                if response.is_client_error:
                    return None
                response.raise_for_status()
                data = response.json()

                return AccountInfo(
                    id=data.get("id", account_id),
                    customer_id=data["customerId"],
                    status=data["status"],
                    account_number=data.get("accountNumber"),
                    account_type=data.get("accountType"),
                    balance=Decimal(str(data.get("balance", 0))),
                )

            except httpx.TimeoutException as e:
                upstream_failure_counter.labels(service=self.service).inc()
                raise UpstreamUnavailable(self.service, f"timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                upstream_failure_counter.labels(service=self.service).inc()
                raise UpstreamUnavailable(self.service, f"status {e.response.status_code}") from e
            except httpx.RequestError as e:
                upstream_failure_counter.labels(service=self.service).inc()
                raise UpstreamUnavailable(self.service, str(e)) from e
            except (KeyError, ValueError, TypeError, ArithmeticError) as e:
                raise UpstreamUnavailable(self.service, f"invalid account data: {e}") from e
