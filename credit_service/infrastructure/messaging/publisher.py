"""Inquiry response publisher with exponential backoff retry logic"""

import asyncio
import logging

import httpx

from credit_service.config import settings
from credit_service.infrastructure.messaging.events import CreditBalanceResponseEvent
from credit_service.infrastructure.observability.metrics import publish_failure_counter, publish_latency_histogram


class ResponsePublisher:
    """Delivers inquiry responses to the response channel webhook"""

    def __init__(
        self,
        response_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.response_url = response_url or settings.inquiry_response_url
        self.max_retries = settings.publish_max_retries
        self.backoff_base = settings.publish_backoff_base
        self.transport = transport

    async def publish(self, event: CreditBalanceResponseEvent) -> None:
        """
        Send an inquiry response, keyed by its inquiry id.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on 5xx errors and network failures
        - Tracks latency histogram and failure counter
        """
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with publish_latency_histogram.time():
                        response = await client.post(
                            self.response_url,
                            content=event.model_dump_json(by_alias=True),
                            headers={"Content-Type": "application/json", "X-Message-Key": event.inquiry_id},
                            timeout=10.0,
                        )
                        response.raise_for_status()
                        logging.info("Credit balance response sent", extra={"inquiry_id": event.inquiry_id})
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    publish_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logging.error(
                            f"Failed to send credit balance response: {e}",
                            extra={"inquiry_id": event.inquiry_id, "attempts": attempt},
                        )
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
