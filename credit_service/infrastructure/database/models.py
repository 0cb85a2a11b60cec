"""SQLAlchemy ORM models for credit persistence"""

from sqlalchemy import JSON, Column, Date, DateTime, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

Money = Numeric(18, 2)


class CreditRow(Base):
    """One credit product (loan, credit card or debit card)"""

    __tablename__ = "credit"

    id = Column(Text, primary_key=True)
    credit_number = Column(Text, nullable=False)
    credit_type = Column(Text, nullable=False, index=True)
    customer_id = Column(Text, nullable=False, index=True)
    status = Column(Text, nullable=False)

    amount = Column(Money, nullable=True)
    outstanding_balance = Column(Money, nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)

    # Credit card
    credit_limit = Column(Money, nullable=True)
    available_credit = Column(Money, nullable=True)

    # Loans
    term_months = Column(Integer, nullable=True)
    monthly_payment = Column(Money, nullable=True)
    remaining_payments = Column(Integer, nullable=True)

    # Debit card
    main_account_id = Column(Text, nullable=True)
    associated_accounts = Column(JSON, nullable=False, default=list)
    daily_withdrawal_limit = Column(Money, nullable=True)
    daily_purchase_limit = Column(Money, nullable=True)
    card_brand = Column(Text, nullable=True)
    card_status = Column(Text, nullable=True)
    expiration_date = Column(Date, nullable=True)

    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    # Optimistic concurrency: every write must name the version it read
    version = Column(Integer, nullable=False, default=1)
