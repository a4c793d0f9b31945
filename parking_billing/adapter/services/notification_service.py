"""Notification Service Implementations

Provides concrete implementations for delivering credit notifications.
"""

import logging
from typing import Iterable, Optional
import httpx
from parking_billing.app.services.notification_service import DeliveryReport, NotificationService
from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_notification import CreditNotification, NotificationChannel

logger = logging.getLogger(__name__)


def _value(enum_or_str):
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs notifications

    Useful for development and testing, or as a fallback.
    """

    async def send(
        self,
        notification: CreditNotification,
        account: CreditAccount,
        channels: Iterable[NotificationChannel],
    ) -> DeliveryReport:
        """
        Log notification

        Returns:
            Report with every channel delivered (logging never fails)
        """
        channels = list(channels)
        logger.warning(
            f"[CREDIT NOTIFICATION] Account: {account.id}, "
            f"Type: {_value(notification.notification_type)}, "
            f"Severity: {_value(notification.severity)}, "
            f"Channels: {', '.join(c.value for c in channels)}, "
            f"Title: {notification.title}"
        )
        return DeliveryReport(delivered=channels)


class WebhookNotificationService(NotificationService):
    """
    Notification service that forwards notifications via HTTP webhook

    Sends a JSON payload with recipient contact details and channels to the
    configured URL, typically an SMS/email gateway bridge.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST notifications to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send(
        self,
        notification: CreditNotification,
        account: CreditAccount,
        channels: Iterable[NotificationChannel],
    ) -> DeliveryReport:
        """
        Send notification via webhook

        Returns:
            Report with every channel delivered if the webhook call
            succeeded, every channel failed otherwise
        """
        channels = list(channels)
        payload = {
            "type": "credit_notification",
            "notification_id": notification.id,
            "account_id": account.id,
            "owner_name": account.owner_name,
            "phone_number": account.phone_number,
            "email": account.email,
            "channels": [c.value for c in channels],
            "notification_type": _value(notification.notification_type),
            "severity": _value(notification.severity),
            "title": notification.title,
            "message": notification.message,
            "created_at": notification.created_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for notification {notification.id} to {self.webhook_url}"
                )
                return DeliveryReport(delivered=channels)
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification {notification.id}: {e}"
            )
            return DeliveryReport(failed=channels)


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple sinks (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        """
        Initialize composite notification service

        Args:
            services: List of notification services to delegate to
        """
        self.services = services

    async def send(
        self,
        notification: CreditNotification,
        account: CreditAccount,
        channels: Iterable[NotificationChannel],
    ) -> DeliveryReport:
        """
        Send notification through all configured services

        Returns:
            A channel counts as delivered if at least one service delivered
            it, failed if none did and at least one reported a failure
        """
        channels = list(channels)
        delivered: set[NotificationChannel] = set()
        failed: set[NotificationChannel] = set()

        for service in self.services:
            try:
                report = await service.send(notification, account, channels)
                delivered.update(report.delivered)
                failed.update(report.failed)
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
                failed.update(channels)

        return DeliveryReport(
            delivered=[c for c in channels if c in delivered],
            failed=[c for c in channels if c in failed and c not in delivered],
        )


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
