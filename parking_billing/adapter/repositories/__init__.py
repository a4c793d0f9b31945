from .tariff_repository import SqlAlchemyTariffRepository
from .holiday_repository import SqlAlchemyHolidayRepository
from .parking_session_repository import SqlAlchemyParkingSessionRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .credit_account_repository import SqlAlchemyCreditAccountRepository
from .credit_account_settings_repository import SqlAlchemyCreditAccountSettingsRepository
from .credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from .credit_notification_repository import SqlAlchemyCreditNotificationRepository
from .monthly_charge_repository import SqlAlchemyMonthlyChargeRepository

__all__ = [
    "SqlAlchemyTariffRepository",
    "SqlAlchemyHolidayRepository",
    "SqlAlchemyParkingSessionRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyCreditAccountRepository",
    "SqlAlchemyCreditAccountSettingsRepository",
    "SqlAlchemyCreditTransactionRepository",
    "SqlAlchemyCreditNotificationRepository",
    "SqlAlchemyMonthlyChargeRepository",
]
