"""Monthly Charge Domain Entity

One attempt of the monthly auto-charge sweep for one account.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, ForeignKey, Text
from parking_billing.domain.base import BaseModel, BigIntegerPK


class MonthlyChargeStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class MonthlyCharge(BaseModel, table=True):
    """
    Monthly Charge - Auto-charge attempt record

    Domain Rules:
    - Written PROCESSING before the charge is applied
    - COMPLETED rows reference the CHARGE transaction they produced
    - FAILED rows keep the failure message in notes
    """

    __tablename__ = "monthly_charges"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    account_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("credit_accounts.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )

    amount: int = Field(sa_column=Column(BigInteger, nullable=False))

    charge_date: datetime = Field(default_factory=datetime.utcnow)

    next_charge_date: datetime = Field()

    status: MonthlyChargeStatus = Field(default=MonthlyChargeStatus.PENDING)

    transaction_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger, ForeignKey("credit_transactions.id", ondelete="SET NULL"), nullable=True
        ),
    )

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(default_factory=datetime.utcnow)
