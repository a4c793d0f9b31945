"""Immediate delivery of notifications produced by a committed operation"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.app.services.notification_service import NotificationService, enabled_channels
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_account_settings import CreditAccountSettings
from parking_billing.domain.credit_notification import CreditNotification, NotificationChannel

logger = logging.getLogger(__name__)


async def deliver_notifications(
    notifier: Optional[NotificationService],
    notifications: Sequence[CreditNotification],
    account: CreditAccount,
    settings: Optional[CreditAccountSettings],
    requested_channels: Iterable[NotificationChannel],
    notification_repo: CreditNotificationRepository,
    uow: UnitOfWork,
) -> tuple[int, int]:
    """
    Deliver notifications and mark the delivered ones as sent

    Must run after the operation that created the notifications has been
    committed. Failures are logged and counted, never raised.

    Returns:
        (delivered, failed) counts
    """
    if notifier is None or not notifications:
        return 0, 0

    channels = enabled_channels(requested_channels, account, settings)
    if not channels:
        return 0, 0

    delivered = 0
    failed = 0
    for notification in notifications:
        try:
            report = await notifier.send(notification, account, channels)
            if report.delivered:
                notification.is_sent = True
                notification.sent_at = datetime.utcnow()
                await notification_repo.update(notification)
                delivered += 1
            if report.failed:
                failed += 1
        except Exception as e:
            logger.error(f"Delivery of notification {notification.id} to account {account.id} failed: {e}")
            failed += 1

    try:
        await uow.commit()
    except Exception as e:
        logger.error(f"Failed to mark notifications of account {account.id} as sent: {e}")
        await uow.rollback()

    return delivered, failed
