"""Credit Account Settings Domain Entity

Per-account notification thresholds, auto-charge plan and channel toggles.
"""

from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, ForeignKey
from parking_billing.domain.base import BaseModel, BigIntegerPK


class CreditAccountSettings(BaseModel, table=True):
    """
    Credit Account Settings

    Domain Rules:
    - One settings row per account
    - Threshold ladder assumes
      low_balance_threshold > warning_threshold_1 > warning_threshold_2 > critical_threshold
    - charge_day_of_month is 1..28 so every month has that day
    """

    __tablename__ = "credit_account_settings"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    account_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("credit_accounts.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
    )

    low_balance_threshold: int = Field(default=50000, sa_column=Column(BigInteger, nullable=False, default=50000))
    warning_threshold_1: int = Field(default=30000, sa_column=Column(BigInteger, nullable=False, default=30000))
    warning_threshold_2: int = Field(default=15000, sa_column=Column(BigInteger, nullable=False, default=15000))
    critical_threshold: int = Field(default=5000, sa_column=Column(BigInteger, nullable=False, default=5000))

    auto_monthly_charge: bool = Field(default=False)
    monthly_charge_amount: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    charge_day_of_month: int = Field(default=1, ge=1, le=28)

    enable_email_notifications: bool = Field(default=True)
    enable_sms_notifications: bool = Field(default=True)
    enable_in_app_notifications: bool = Field(default=True)

    suspend_on_zero_balance: bool = Field(default=False)
