"""Credit Account Domain Entity

Prepaid balance of a customer, charged manually, by online top-up or by the
monthly auto-charge sweep, and drawn down by parking fees.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, String
from parking_billing.domain.base import BaseModel, BigIntegerPK


class CreditAccount(BaseModel, table=True):
    """
    Credit Account - Prepaid parking balance

    Domain Rules:
    - Balance is a signed integer; it may go negative down to -credit_limit
      (or further when a deduction explicitly allows it)
    - Balance changes only together with a CreditTransaction
    - Inactive (suspended) accounts reject charges and deductions
    - Notification thresholds live in CreditAccountSettings, not here
    """

    __tablename__ = "credit_accounts"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    owner_name: str = Field(
        sa_column=Column(String(150), nullable=False),
        description="Account holder name"
    )

    phone_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(20), nullable=True),
        description="Mobile number for SMS notifications"
    )

    email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Current balance (signed)"
    )

    monthly_limit: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Spending limit per month (0 = unlimited)"
    )

    credit_limit: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Allowed negative excursion below zero"
    )

    is_active: bool = Field(default=True)

    auto_charge: bool = Field(default=False, description="Enrolled in the monthly auto-charge")

    last_charged_at: Optional[datetime] = Field(default=None)

    next_charge_date: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
