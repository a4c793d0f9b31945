from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, DeliveryReport, enabled_channels
from .payment_gateway import PaymentGateway, PaymentRequest, PaymentVerification

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "DeliveryReport",
    "enabled_channels",
    "PaymentGateway",
    "PaymentRequest",
    "PaymentVerification",
]
