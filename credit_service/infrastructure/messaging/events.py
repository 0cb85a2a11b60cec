"""Pydantic event schemas exchanged on the credit balance inquiry channel"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InquiryEvent(BaseModel):
    """Base for inquiry channel events: camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreditBalanceInquiryEvent(InquiryEvent):
    """Inbound question: can this credit cover this amount?"""

    inquiry_id: str = Field(..., min_length=1)
    credit_id: str = Field(..., min_length=1)
    required_amount: Decimal
    transaction_id: Optional[str] = None
    source: Optional[str] = None
    description: Optional[str] = None


class CreditBalanceResponseEvent(InquiryEvent):
    """Outbound answer, keyed by inquiry_id at the transport layer"""

    inquiry_id: str
    credit_id: str
    is_valid: bool
    reason: Optional[str] = None
    available_balance: Decimal
    transaction_id: Optional[str] = None
