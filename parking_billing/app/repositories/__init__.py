from .tariff_repository import TariffRepository
from .holiday_repository import HolidayRepository
from .parking_session_repository import ParkingSessionRepository
from .payment_repository import PaymentRepository
from .credit_account_repository import CreditAccountRepository
from .credit_account_settings_repository import CreditAccountSettingsRepository
from .credit_transaction_repository import CreditTransactionRepository
from .credit_notification_repository import CreditNotificationRepository
from .monthly_charge_repository import MonthlyChargeRepository

__all__ = [
    "TariffRepository",
    "HolidayRepository",
    "ParkingSessionRepository",
    "PaymentRepository",
    "CreditAccountRepository",
    "CreditAccountSettingsRepository",
    "CreditTransactionRepository",
    "CreditNotificationRepository",
    "MonthlyChargeRepository",
]
