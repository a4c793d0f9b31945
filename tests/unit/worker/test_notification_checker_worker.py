"""Unit tests for NotificationCheckerWorker"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from parking_billing.adapter.services.notification_service import LoggingNotificationService
from parking_billing.worker.notification_checker import NotificationCheckerWorker
from parking_billing.app.use_cases.credit.dtos import NotificationCheckResultDTO, SendNotificationsResultDTO
from parking_billing.domain.credit_notification import NotificationChannel
from parking_billing.libs.result import Return


@pytest.fixture
def app_config():
    """Patched ApplicationConfig with notification settings"""
    with patch("parking_billing.worker.notification_checker.ApplicationConfig") as config:
        config.DB_URI = "sqlite+aiosqlite:///./test.db"
        config.NOTIFICATION_WEBHOOK_URL = None
        config.NOTIFICATION_DEDUP_HOURS = 24
        config.DEFAULT_NOTIFICATION_CHANNELS = ["in_app", "sms"]
        yield config


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.mark.asyncio
class TestNotificationCheckerWorker:
    """Test NotificationCheckerWorker"""

    @patch("parking_billing.worker.notification_checker.create_async_engine")
    def test_initializes_from_config(self, mock_create_engine, app_config):
        """
        Given: No arguments
        When: Worker is initialized
        Then: Logging notifier, configured dedup window and channels are used
        """
        mock_create_engine.return_value = MagicMock()

        worker = NotificationCheckerWorker()

        assert isinstance(worker.notifier, LoggingNotificationService)
        assert worker.dedup_hours == 24
        assert worker.channels == [NotificationChannel.IN_APP, NotificationChannel.SMS]

    @patch("parking_billing.worker.notification_checker.SendCreditNotifications")
    @patch("parking_billing.worker.notification_checker.CheckCreditNotifications")
    @patch("parking_billing.worker.notification_checker.create_async_engine")
    @patch("parking_billing.worker.notification_checker.sessionmaker")
    async def test_run_once_checks_without_sending(
        self, mock_sessionmaker, mock_create_engine, mock_check_class, mock_send_class, app_config, mock_session
    ):
        mock_sessionmaker.return_value = MagicMock(return_value=mock_session)
        mock_create_engine.return_value = MagicMock()
        check_summary = NotificationCheckResultDTO(processed=4, notifications_created=2, accounts_with_issues=1)
        mock_check_class.return_value.execute = AsyncMock(return_value=Return.ok(check_summary))

        worker = NotificationCheckerWorker(dedup_hours=6)
        cycle = await worker.run_once(force_all=True)

        assert cycle.check is check_summary
        assert cycle.delivery is None
        mock_check_class.return_value.execute.assert_awaited_once_with(force_all=True)
        assert mock_check_class.call_args.kwargs["dedup_hours"] == 6
        mock_send_class.assert_not_called()

    @patch("parking_billing.worker.notification_checker.SendCreditNotifications")
    @patch("parking_billing.worker.notification_checker.CheckCreditNotifications")
    @patch("parking_billing.worker.notification_checker.create_async_engine")
    @patch("parking_billing.worker.notification_checker.sessionmaker")
    async def test_run_once_sends_pending_notifications(
        self, mock_sessionmaker, mock_create_engine, mock_check_class, mock_send_class, app_config, mock_session
    ):
        """
        Given: send requested
        When: run_once is called
        Then: Pending notifications are delivered over the configured channels
        """
        mock_sessionmaker.return_value = MagicMock(return_value=mock_session)
        mock_create_engine.return_value = MagicMock()
        mock_check_class.return_value.execute = AsyncMock(return_value=Return.ok(NotificationCheckResultDTO()))
        delivery = SendNotificationsResultDTO(processed=2, sent=2)
        mock_send_class.return_value.execute = AsyncMock(return_value=Return.ok(delivery))
        notifier = LoggingNotificationService()

        worker = NotificationCheckerWorker(notifier=notifier)
        cycle = await worker.run_once(send=True)

        assert cycle.delivery is delivery
        assert mock_send_class.call_args.kwargs["notifier"] is notifier
        command = mock_send_class.return_value.execute.await_args.args[0]
        assert command.channels == [NotificationChannel.IN_APP, NotificationChannel.SMS]

    @patch("parking_billing.worker.notification_checker.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, app_config):
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine

        worker = NotificationCheckerWorker()
        await worker.shutdown()

        mock_engine.dispose.assert_awaited_once()
