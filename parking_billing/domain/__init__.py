from .base import BaseModel, generate_uuid
from .tariff import Tariff, VehicleType
from .holiday import Holiday, HolidayType
from .parking_session import ParkingSession, SessionStatus, PaymentMethod
from .payment import Payment, PaymentStatus
from .credit_account import CreditAccount
from .credit_account_settings import CreditAccountSettings
from .credit_transaction import CreditTransaction, TransactionType
from .credit_notification import (
    CreditNotification,
    NotificationType,
    NotificationSeverity,
    NotificationChannel,
)
from .monthly_charge import MonthlyCharge, MonthlyChargeStatus

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Tariff",
    "VehicleType",
    "Holiday",
    "HolidayType",
    "ParkingSession",
    "SessionStatus",
    "PaymentMethod",
    "Payment",
    "PaymentStatus",
    "CreditAccount",
    "CreditAccountSettings",
    "CreditTransaction",
    "TransactionType",
    "CreditNotification",
    "NotificationType",
    "NotificationSeverity",
    "NotificationChannel",
    "MonthlyCharge",
    "MonthlyChargeStatus",
]
