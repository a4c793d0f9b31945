"""Background workers for the parking billing service"""
from .monthly_charge import MonthlyChargeWorker
from .notification_checker import NotificationCheckerWorker

__all__ = ["MonthlyChargeWorker", "NotificationCheckerWorker"]
