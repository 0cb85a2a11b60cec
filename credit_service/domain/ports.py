"""Interfaces of the collaborators the credit engine depends on"""

from datetime import date
from typing import List, Optional, Protocol

from credit_service.domain.models import AccountInfo, CreditRecord, CreditType, Transaction


class CreditStore(Protocol):
    def get(self, credit_id: str) -> Optional[CreditRecord]: ...

    def save(self, record: CreditRecord, expected_version: Optional[int]) -> CreditRecord:
        """Insert when expected_version is None, otherwise compare-and-swap on version"""
        ...

    def query_by_customer(self, customer_id: str, credit_type: Optional[CreditType] = None) -> List[CreditRecord]: ...

    def query_active_overdue(self, customer_id: str, as_of: date) -> bool: ...

    def list_all(self, credit_type: Optional[CreditType] = None) -> List[CreditRecord]: ...

    def delete(self, credit_id: str) -> bool: ...


class CustomerDirectory(Protocol):
    async def get_customer_type(self, customer_id: str) -> str: ...

    async def customer_exists(self, customer_id: str) -> bool: ...


class AccountDirectory(Protocol):
    async def get_account(self, account_id: str) -> Optional[AccountInfo]: ...


class TransactionHistory(Protocol):
    async def list_for_product_current_month(self, product_id: str, product_type: str) -> List[Transaction]:
        """Must return [] instead of raising when the upstream fails"""
        ...
