"""Parking Session Domain Entity

One stay of a vehicle in the facility, from entry to exit.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, String
from parking_billing.domain.base import BaseModel, BigIntegerPK
from parking_billing.domain.tariff import VehicleType


class SessionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    POS = "POS"
    ONLINE = "ONLINE"
    CREDIT = "CREDIT"


class ParkingSession(BaseModel, table=True):
    """
    Parking Session - Entry to exit of one vehicle

    Domain Rules:
    - Created ACTIVE at entry with exit_time = None
    - Completed exactly once: exit_time, total_amount and payment are set together
    - CREDIT sessions reference the credit account that paid
    """

    __tablename__ = "parking_sessions"
    __table_args__ = (
        Index("ix_parking_sessions_plate_status", "plate_number", "status"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    plate_number: str = Field(sa_column=Column(String(20), nullable=False))

    vehicle_type: VehicleType = Field(default=VehicleType.CAR)

    entry_time: datetime = Field(default_factory=datetime.utcnow)

    exit_time: Optional[datetime] = Field(default=None)

    tariff_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("tariffs.id", ondelete="SET NULL"), nullable=True),
    )

    status: SessionStatus = Field(default=SessionStatus.ACTIVE)

    total_amount: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))

    paid_amount: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))

    is_paid: bool = Field(default=False)

    payment_method: Optional[PaymentMethod] = Field(default=None)

    credit_account_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger, ForeignKey("credit_accounts.id", ondelete="SET NULL"), nullable=True
        ),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
