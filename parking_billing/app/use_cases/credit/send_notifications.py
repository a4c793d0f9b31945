"""SendCreditNotifications Use Case

Delivers pending credit notifications over the requested channels.
"""

import logging
from datetime import datetime
from parking_billing.libs.result import Result, Return
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.services.notification_service import NotificationService, enabled_channels
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_account_settings_repository import CreditAccountSettingsRepository
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from .dtos import SendNotificationsCommandDTO, SendNotificationsResultDTO

logger = logging.getLogger(__name__)


class SendCreditNotifications:
    """
    Use Case: Deliver unsent notifications

    Business Rules:
    1. Channels are filtered per account by its settings toggles and by
       available contact details (email address, phone number)
    2. A notification counts as sent when at least one channel delivered it
    3. Delivery failures are counted and logged, never raised
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        settings_repo: CreditAccountSettingsRepository,
        notification_repo: CreditNotificationRepository,
        notifier: NotificationService,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.settings_repo = settings_repo
        self.notification_repo = notification_repo
        self.notifier = notifier

    async def execute(self, command: SendNotificationsCommandDTO) -> Result[SendNotificationsResultDTO]:
        result = SendNotificationsResultDTO()

        pending = await self.notification_repo.list_unsent(command.account_id, command.limit)
        result.processed = len(pending)

        for notification in pending:
            notification_id = notification.id
            try:
                account = await self.account_repo.get_by_id(notification.account_id)
                if account is None:
                    result.failed += 1
                    result.errors.append(f"Notification {notification_id}: account not found")
                    continue

                settings = await self.settings_repo.get_by_account_id(account.id)
                channels = enabled_channels(command.channels, account, settings)
                if not channels:
                    result.failed += 1
                    result.errors.append(f"Notification {notification_id}: no enabled channel")
                    continue

                report = await self.notifier.send(notification, account, channels)
                if report.delivered:
                    notification.is_sent = True
                    notification.sent_at = datetime.utcnow()
                    await self.notification_repo.update(notification)
                    await self.uow.commit()
                    result.sent += 1
                else:
                    result.failed += 1
                    result.errors.append(
                        f"Notification {notification_id}: delivery failed on "
                        f"{', '.join(c.value for c in report.failed)}"
                    )

            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Error sending notification {notification_id}: {e}")
                result.failed += 1
                result.errors.append(f"Notification {notification_id}: {e}")

        logger.info(f"Notification delivery complete: {result.sent} sent, {result.failed} failed")
        return Return.ok(result)
