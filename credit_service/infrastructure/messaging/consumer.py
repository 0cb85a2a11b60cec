"""Credit balance inquiry consumer - answers sufficiency questions from other subsystems"""

import logging
from typing import Optional

from pydantic import ValidationError as SchemaValidationError

from credit_service.infrastructure.messaging.events import CreditBalanceInquiryEvent, CreditBalanceResponseEvent
from credit_service.infrastructure.messaging.publisher import ResponsePublisher
from credit_service.infrastructure.observability.metrics import record_inquiry
from credit_service.services.credits import CreditService


class InquiryConsumer:
    """Turns inbound inquiry messages into published responses"""

    def __init__(self, service: CreditService, publisher: ResponsePublisher):
        self.service = service
        self.publisher = publisher

    def answer(self, event: CreditBalanceInquiryEvent) -> CreditBalanceResponseEvent:
        """Evaluate an inquiry; an unknown credit is an invalid answer, not an error"""
        result = self.service.validate_credit_for_transaction(event.credit_id, event.required_amount)
        record_inquiry(result.is_valid)
        logging.info(
            "Credit balance inquiry evaluated",
            extra={
                "inquiry_id": event.inquiry_id,
                "credit_id": event.credit_id,
                "required_amount": str(event.required_amount),
                "is_valid": result.is_valid,
            },
        )
        return CreditBalanceResponseEvent(
            inquiry_id=event.inquiry_id,
            credit_id=event.credit_id,
            is_valid=result.is_valid,
            reason=result.reason,
            available_balance=result.available_balance,
            transaction_id=event.transaction_id,
        )

    async def handle_message(self, raw: str | bytes) -> Optional[CreditBalanceResponseEvent]:
        """
        Parse, answer and publish one inquiry message.

        Entry point for raw message bodies delivered by a broker or webhook
        transport. The HTTP route receives an already-validated event and
        calls `answer` directly. Malformed messages are logged and dropped (returns None); publish
        failures propagate after the publisher's own retries.
        """
        try:
            event = CreditBalanceInquiryEvent.model_validate_json(raw)
        except SchemaValidationError as e:
            logging.error(f"Discarding malformed credit balance inquiry: {e}")
            return None

        response = self.answer(event)
        await self.publisher.publish(response)
        return response
