"""Notification Service Interface

Defines the contract for delivering credit account notifications.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable
from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_notification import CreditNotification, NotificationChannel


@dataclass
class DeliveryReport:
    """Outcome of delivering one notification"""
    delivered: list[NotificationChannel] = field(default_factory=list)
    failed: list[NotificationChannel] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.delivered) and not self.failed


class NotificationService(ABC):
    """
    Abstract notification service for credit account alerts

    Implementations can deliver notifications via:
    - Application log
    - Webhook (HTTP POST) to an SMS/email gateway
    - etc.

    Delivery failures are reported, never raised.
    """

    @abstractmethod
    async def send(
        self,
        notification: CreditNotification,
        account: CreditAccount,
        channels: Iterable[NotificationChannel],
    ) -> DeliveryReport:
        """
        Deliver a notification to the account holder

        Args:
            notification: CreditNotification to deliver
            account: Recipient account (contact details)
            channels: Channels already filtered by the account settings

        Returns:
            DeliveryReport listing delivered and failed channels
        """
        pass


def enabled_channels(
    requested: Iterable[NotificationChannel], account: CreditAccount, settings
) -> list[NotificationChannel]:
    """
    Filter requested channels by the account's toggles and contact details

    email needs an address, sms needs a phone number. Without settings all
    toggles count as enabled.
    """
    channels = []
    for channel in requested:
        if channel == NotificationChannel.EMAIL:
            if (settings is None or settings.enable_email_notifications) and account.email:
                channels.append(channel)
        elif channel == NotificationChannel.SMS:
            if (settings is None or settings.enable_sms_notifications) and account.phone_number:
                channels.append(channel)
        elif channel == NotificationChannel.IN_APP:
            if settings is None or settings.enable_in_app_notifications:
                channels.append(channel)
    return channels
