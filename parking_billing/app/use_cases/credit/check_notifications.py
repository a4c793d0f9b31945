"""CheckCreditNotifications Use Case

Polling sweep that re-evaluates balance alerts of every active account.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Optional
from parking_billing.libs.result import Result, Return
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_account_settings_repository import CreditAccountSettingsRepository
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.domain.credit_engine import evaluate_balance_alerts
from .dtos import NotificationCheckResultDTO

logger = logging.getLogger(__name__)


class CheckCreditNotifications:
    """
    Use Case: Balance alert sweep

    Business Rules:
    1. Accounts without settings are inspected but never alerted
    2. An alert already raised within the dedup window (same type and
       severity) is not raised again, unless force_all
    3. Zero balance may suspend the account per its settings
    4. Each account is committed on its own; one failure does not stop
       the sweep
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        settings_repo: CreditAccountSettingsRepository,
        notification_repo: CreditNotificationRepository,
        dedup_hours: int = 24,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.settings_repo = settings_repo
        self.notification_repo = notification_repo
        self.dedup_hours = dedup_hours

    async def execute(
        self, force_all: bool = False, now: Optional[datetime] = None
    ) -> Result[NotificationCheckResultDTO]:
        start_time = time.time()
        now = now or datetime.utcnow()
        window_start = now - timedelta(hours=self.dedup_hours)
        result = NotificationCheckResultDTO()

        accounts = await self.account_repo.list_active()
        account_ids = [a.id for a in accounts]
        result.processed = len(account_ids)

        logger.info(f"Checking balance alerts for {result.processed} active accounts")

        for account_id in account_ids:
            try:
                settings = await self.settings_repo.get_by_account_id(account_id)
                if settings is None:
                    continue

                account = await self.account_repo.get_by_id(account_id, for_update=True)
                if account is None:
                    continue

                recent = await self.notification_repo.list_since(account_id, window_start)
                was_active = account.is_active
                created = evaluate_balance_alerts(account, settings, recent, now, force_all)

                for notification in created:
                    await self.notification_repo.create(notification)
                if was_active != account.is_active:
                    await self.account_repo.update(account)

                await self.uow.commit()

                result.notifications_created += len(created)
                if created:
                    result.accounts_with_issues += 1

            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Error processing notifications for account {account_id}: {e}")
                result.errors.append(f"Account {account_id}: {e}")

        result.execution_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Balance alert check complete: {result.notifications_created} notifications, "
            f"{result.accounts_with_issues} accounts with issues"
        )
        return Return.ok(result)
