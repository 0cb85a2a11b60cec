"""POST /v1/credit-inquiries - balance sufficiency inquiries"""

from fastapi import APIRouter, BackgroundTasks, Depends

from credit_service.api.dependencies import get_inquiry_consumer
from credit_service.infrastructure.messaging.consumer import InquiryConsumer
from credit_service.infrastructure.messaging.events import CreditBalanceInquiryEvent, CreditBalanceResponseEvent

router = APIRouter()


@router.post("/credit-inquiries", response_model=CreditBalanceResponseEvent)
async def create_credit_inquiry(
    event: CreditBalanceInquiryEvent,
    background_tasks: BackgroundTasks,
    consumer: InquiryConsumer = Depends(get_inquiry_consumer),
):
    """
    Answer whether a credit can cover a transaction amount.

    The answer is returned to the caller and also published on the
    response channel (async, non-blocking). Unknown credits get an invalid
    answer rather than a 404.
    """
    response = consumer.answer(event)
    background_tasks.add_task(consumer.publisher.publish, response)
    return response
