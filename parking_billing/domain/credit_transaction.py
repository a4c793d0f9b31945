"""Credit Transaction Domain Entity

Immutable append-only audit trail of all credit account balance changes.
Each transaction records the balance before and after with its context.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String, Text
from parking_billing.domain.base import BaseModel, BigIntegerPK


class TransactionType(str, Enum):
    """Credit transaction types"""
    CHARGE = "CHARGE"                # Balance topped up
    DEDUCTION = "DEDUCTION"          # Parking fee or manual debit
    REFUND = "REFUND"                # Money returned to the account
    ADJUSTMENT = "ADJUSTMENT"        # Manual correction, signed delta
    MONTHLY_RESET = "MONTHLY_RESET"  # Balance set to an absolute value

    def apply_to(self, balance: int, amount: int) -> int:
        """Return the balance after a transaction of this type and amount."""
        if self is TransactionType.CHARGE or self is TransactionType.REFUND:
            return balance + amount
        if self is TransactionType.DEDUCTION:
            return balance - amount
        if self is TransactionType.ADJUSTMENT:
            return balance + amount
        return amount


class CreditTransaction(BaseModel, table=True):
    """
    Credit Transaction - Immutable audit trail of balance changes

    Domain Rules:
    - Transactions are immutable (append-only); only bulk administrative
      deletion removes them, followed by balance reconciliation
    - balance_after == transaction_type.apply_to(balance_before, amount)
    - reference_id links to the originating entity (parking session id,
      payment gateway ref id)

    Transaction Types:
    - CHARGE: balance + amount
    - DEDUCTION: balance - amount
    - REFUND: balance + amount
    - ADJUSTMENT: balance + amount (amount may be negative)
    - MONTHLY_RESET: balance = amount
    """

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index('ix_credit_transactions_account_created', 'account_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("credit_accounts.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to CreditAccount"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Transaction amount"
    )

    balance_before: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False),
        description="Balance before transaction"
    )

    balance_after: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False),
        description="Balance after transaction"
    )

    description: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of referenced entity (parking session, payment)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "account_id": 1,
                "transaction_type": "DEDUCTION",
                "amount": 35000,
                "balance_before": 120000,
                "balance_after": 85000,
                "description": "Parking fee",
                "reference_id": "42",
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
