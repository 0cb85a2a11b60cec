"""Data access layer for credit records"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from credit_service.domain.exceptions import ConflictError, NotFound
from credit_service.domain.models import (
    AssociatedAccount,
    CardBrand,
    CardStatus,
    CreditRecord,
    CreditStatus,
    CreditType,
)
from credit_service.infrastructure.database.models import CreditRow


def _associated_to_json(accounts: List[AssociatedAccount]) -> List[Dict[str, Any]]:
    return [
        {
            "accountId": acc.account_id,
            "sequenceOrder": acc.sequence_order,
            "associatedAt": acc.associated_at.isoformat() if acc.associated_at else None,
            "status": acc.status,
        }
        for acc in accounts
    ]


def _associated_from_json(data: Optional[List[Dict[str, Any]]]) -> List[AssociatedAccount]:
    return [
        AssociatedAccount(
            account_id=item["accountId"],
            sequence_order=item["sequenceOrder"],
            associated_at=date.fromisoformat(item["associatedAt"]) if item.get("associatedAt") else None,
            status=item.get("status"),
        )
        for item in data or []
    ]


def _money(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


class CreditRepository:
    """Credit store backed by SQLAlchemy with version-checked writes"""

    def __init__(self, db: Session):
        self.db = db

    def _columns(self, record: CreditRecord) -> Dict[str, Any]:
        return {
            "credit_number": record.credit_number,
            "credit_type": record.credit_type.value,
            "customer_id": record.customer_id,
            "status": record.status.value,
            "amount": record.amount,
            "outstanding_balance": record.outstanding_balance,
            "interest_rate": record.interest_rate,
            "credit_limit": record.credit_limit,
            "available_credit": record.available_credit,
            "term_months": record.term_months,
            "monthly_payment": record.monthly_payment,
            "remaining_payments": record.remaining_payments,
            "main_account_id": record.main_account_id,
            "associated_accounts": _associated_to_json(record.associated_accounts),
            "daily_withdrawal_limit": record.daily_withdrawal_limit,
            "daily_purchase_limit": record.daily_purchase_limit,
            "card_brand": record.card_brand.value if record.card_brand else None,
            "card_status": record.card_status.value if record.card_status else None,
            "expiration_date": record.expiration_date,
            "due_date": record.due_date,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }

    def _to_record(self, row: CreditRow) -> CreditRecord:
        return CreditRecord(
            id=row.id,
            credit_number=row.credit_number,
            credit_type=CreditType(row.credit_type),
            customer_id=row.customer_id,
            status=CreditStatus(row.status),
            outstanding_balance=Decimal(row.outstanding_balance),
            interest_rate=Decimal(row.interest_rate),
            created_at=row.created_at,
            updated_at=row.updated_at,
            due_date=row.due_date,
            amount=_money(row.amount),
            credit_limit=_money(row.credit_limit),
            available_credit=_money(row.available_credit),
            term_months=row.term_months,
            monthly_payment=_money(row.monthly_payment),
            remaining_payments=row.remaining_payments,
            main_account_id=row.main_account_id,
            associated_accounts=_associated_from_json(row.associated_accounts),
            daily_withdrawal_limit=_money(row.daily_withdrawal_limit),
            daily_purchase_limit=_money(row.daily_purchase_limit),
            card_brand=CardBrand(row.card_brand) if row.card_brand else None,
            card_status=CardStatus(row.card_status) if row.card_status else None,
            expiration_date=row.expiration_date,
            version=row.version,
        )

    def get(self, credit_id: str) -> Optional[CreditRecord]:
        row = self.db.query(CreditRow).filter(CreditRow.id == credit_id).first()
        return self._to_record(row) if row else None

    def save(self, record: CreditRecord, expected_version: Optional[int]) -> CreditRecord:
        """
        Persist a credit.

        expected_version=None inserts a new row at version 1. Otherwise the
        row is only updated if it still carries expected_version.

        Raises:
            ConflictError: the row was written by someone else since it was read
            NotFound: the row no longer exists
        """
        if expected_version is None:
            self.db.add(CreditRow(id=record.id, version=1, **self._columns(record)))
            self.db.flush()  # Surface integrity errors without committing
            return replace(record, version=1)

        new_version = expected_version + 1
        updated = (
            self.db.query(CreditRow)
            .filter(CreditRow.id == record.id, CreditRow.version == expected_version)
            .update({**self._columns(record), "version": new_version}, synchronize_session="evaluate")
        )
        if updated == 0:
            if self.db.query(CreditRow.id).filter(CreditRow.id == record.id).first() is None:
                raise NotFound(f"Credit not found with id: {record.id}")
            raise ConflictError(record.id, expected_version)

        return replace(record, version=new_version)

    def query_by_customer(self, customer_id: str, credit_type: Optional[CreditType] = None) -> List[CreditRecord]:
        query = self.db.query(CreditRow).filter(CreditRow.customer_id == customer_id)
        if credit_type is not None:
            query = query.filter(CreditRow.credit_type == credit_type.value)
        return [self._to_record(row) for row in query.order_by(CreditRow.created_at).all()]

    def list_all(self, credit_type: Optional[CreditType] = None) -> List[CreditRecord]:
        query = self.db.query(CreditRow)
        if credit_type is not None:
            query = query.filter(CreditRow.credit_type == credit_type.value)
        return [self._to_record(row) for row in query.order_by(CreditRow.created_at).all()]

    def query_active_overdue(self, customer_id: str, as_of: date) -> bool:
        """True if the customer has an ACTIVE credit whose due date is before as_of"""
        overdue = (
            self.db.query(CreditRow.id)
            .filter(
                CreditRow.customer_id == customer_id,
                CreditRow.status == CreditStatus.ACTIVE.value,
                CreditRow.due_date.isnot(None),
                CreditRow.due_date < as_of,
            )
            .first()
        )
        return overdue is not None

    def delete(self, credit_id: str) -> bool:
        deleted = self.db.query(CreditRow).filter(CreditRow.id == credit_id).delete(synchronize_session="evaluate")
        return deleted > 0
