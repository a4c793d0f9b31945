"""Payment Domain Entity

Record of money received for a parking session.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, ForeignKey, String
from parking_billing.domain.base import BaseModel, BigIntegerPK
from parking_billing.domain.parking_session import PaymentMethod


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Payment(BaseModel, table=True):
    __tablename__ = "payments"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    session_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("parking_sessions.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )

    amount: int = Field(sa_column=Column(BigInteger, nullable=False))

    payment_method: PaymentMethod = Field()

    status: PaymentStatus = Field(default=PaymentStatus.COMPLETED)

    operator_id: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))

    reference_id: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    created_at: datetime = Field(default_factory=datetime.utcnow)
