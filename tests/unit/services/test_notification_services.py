"""Unit tests for notification service implementations"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from parking_billing.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from parking_billing.app.services.notification_service import DeliveryReport, enabled_channels
from parking_billing.domain.credit_notification import (
    CreditNotification,
    NotificationChannel,
    NotificationSeverity,
    NotificationType,
)

WEBHOOK_URL = "https://notify.example.com/hooks/credit"


@pytest.fixture
def notification():
    return CreditNotification(
        id=11,
        account_id=7,
        notification_type=NotificationType.ACCOUNT_SUSPENDED,
        severity=NotificationSeverity.CRITICAL,
        title="حساب شما به حالت تعلیق درآمد",
        message="حساب اعتباری شما به دلیل عدم موجودی به حالت تعلیق درآمد.",
        created_at=datetime(2024, 1, 10, 8, 30),
    )


def mock_http_client(post):
    client = MagicMock()
    client.post = post
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


@pytest.mark.asyncio
class TestLoggingNotificationService:

    async def test_every_channel_delivered(self, notification, sample_account, caplog):
        service = LoggingNotificationService()

        report = await service.send(notification, sample_account, [NotificationChannel.IN_APP, NotificationChannel.SMS])

        assert report.delivered == [NotificationChannel.IN_APP, NotificationChannel.SMS]
        assert report.success is True
        assert "ACCOUNT_SUSPENDED" in caplog.text


@pytest.mark.asyncio
class TestWebhookNotificationService:

    async def test_posts_payload(self, notification, sample_account):
        """
        Given: A reachable webhook
        When: A notification is sent
        Then: Contact details, channels and content are posted as JSON
        """
        # Arrange
        response = MagicMock()
        response.raise_for_status = MagicMock()
        post = AsyncMock(return_value=response)
        service = WebhookNotificationService(WEBHOOK_URL, timeout=3.0)

        # Act
        with patch(
            "parking_billing.adapter.services.notification_service.httpx.AsyncClient",
            return_value=mock_http_client(post),
        ) as client_class:
            report = await service.send(notification, sample_account, [NotificationChannel.SMS])

        # Assert
        assert report.delivered == [NotificationChannel.SMS]
        client_class.assert_called_once_with(timeout=3.0)
        assert post.await_args.args[0] == WEBHOOK_URL
        payload = post.await_args.kwargs["json"]
        assert payload["type"] == "credit_notification"
        assert payload["notification_id"] == 11
        assert payload["phone_number"] == "09120000000"
        assert payload["channels"] == ["sms"]
        assert payload["notification_type"] == "ACCOUNT_SUSPENDED"
        assert payload["severity"] == "CRITICAL"
        assert payload["created_at"] == "2024-01-10T08:30:00"

    async def test_http_error_fails_every_channel(self, notification, sample_account):
        post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        service = WebhookNotificationService(WEBHOOK_URL)

        with patch(
            "parking_billing.adapter.services.notification_service.httpx.AsyncClient",
            return_value=mock_http_client(post),
        ):
            report = await service.send(
                notification, sample_account, [NotificationChannel.SMS, NotificationChannel.EMAIL]
            )

        assert report.delivered == []
        assert report.failed == [NotificationChannel.SMS, NotificationChannel.EMAIL]
        assert report.success is False


@pytest.mark.asyncio
class TestCompositeNotificationService:

    async def test_channel_delivered_by_any_service_counts(self, notification, sample_account):
        ok = MagicMock()
        ok.send = AsyncMock(return_value=DeliveryReport(delivered=[NotificationChannel.IN_APP]))
        broken = MagicMock()
        broken.send = AsyncMock(side_effect=RuntimeError("down"))
        service = CompositeNotificationService([ok, broken])

        report = await service.send(
            notification, sample_account, [NotificationChannel.IN_APP, NotificationChannel.SMS]
        )

        assert report.delivered == [NotificationChannel.IN_APP]
        assert report.failed == [NotificationChannel.SMS]


class TestNotificationFactory:

    def test_logging_only_without_webhook(self):
        assert isinstance(create_notification_service(), LoggingNotificationService)

    def test_composite_with_webhook(self):
        service = create_notification_service(WEBHOOK_URL)

        assert isinstance(service, CompositeNotificationService)
        assert isinstance(service.services[1], WebhookNotificationService)
        assert service.services[1].webhook_url == WEBHOOK_URL


class TestEnabledChannels:

    def test_without_settings_contact_details_decide(self, sample_account):
        sample_account.phone_number = None
        requested = [NotificationChannel.EMAIL, NotificationChannel.SMS, NotificationChannel.IN_APP]

        assert enabled_channels(requested, sample_account, None) == [
            NotificationChannel.EMAIL,
            NotificationChannel.IN_APP,
        ]

    def test_settings_toggles_are_respected(self, sample_account, sample_settings):
        sample_settings.enable_in_app_notifications = False
        sample_settings.enable_email_notifications = False
        requested = [NotificationChannel.EMAIL, NotificationChannel.SMS, NotificationChannel.IN_APP]

        assert enabled_channels(requested, sample_account, sample_settings) == [NotificationChannel.SMS]
