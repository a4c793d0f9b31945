"""Credit Notification Domain Entity

Balance alerts and account events addressed to a credit account holder.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, String, Text
from parking_billing.domain.base import BaseModel, BigIntegerPK


class NotificationType(str, Enum):
    LOW_BALANCE = "LOW_BALANCE"
    CREDIT_LIMIT_EXCEEDED = "CREDIT_LIMIT_EXCEEDED"
    MONTHLY_CHARGE_SUCCESS = "MONTHLY_CHARGE_SUCCESS"
    MONTHLY_CHARGE_FAILED = "MONTHLY_CHARGE_FAILED"
    ACCOUNT_SUSPENDED = "ACCOUNT_SUSPENDED"
    ACCOUNT_REACTIVATED = "ACCOUNT_REACTIVATED"
    MANUAL_CHARGE = "MANUAL_CHARGE"


class NotificationSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class NotificationChannel(str, Enum):
    """Delivery channels, each gated by a CreditAccountSettings toggle"""
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "in_app"


class CreditNotification(BaseModel, table=True):
    """
    Credit Notification

    Domain Rules:
    - Created unsent; delivery sets is_sent and sent_at
    - (notification_type, severity) within the dedup window identifies a
      duplicate for the polling sweep
    """

    __tablename__ = "credit_notifications"
    __table_args__ = (
        Index("ix_credit_notifications_account_created", "account_id", "created_at"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    account_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("credit_accounts.id", ondelete="CASCADE"), nullable=False),
    )

    notification_type: NotificationType = Field()

    title: str = Field(sa_column=Column(String(255), nullable=False))

    message: str = Field(sa_column=Column(Text, nullable=False))

    severity: NotificationSeverity = Field(default=NotificationSeverity.MEDIUM)

    is_read: bool = Field(default=False)

    is_sent: bool = Field(default=False)

    sent_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)
