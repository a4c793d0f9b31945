"""Credit Notification Background Worker

Scans active credit accounts for low balances and credit-limit breaches and
optionally delivers the pending notifications afterwards.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from parking_billing.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from parking_billing.adapter.repositories.credit_account_settings_repository import (
    SqlAlchemyCreditAccountSettingsRepository,
)
from parking_billing.adapter.repositories.credit_notification_repository import (
    SqlAlchemyCreditNotificationRepository,
)
from parking_billing.adapter.services.notification_service import create_notification_service
from parking_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from parking_billing.app.services.notification_service import NotificationService
from parking_billing.app.use_cases.credit import (
    CheckCreditNotifications,
    SendCreditNotifications,
    NotificationCheckResultDTO,
    SendNotificationsCommandDTO,
    SendNotificationsResultDTO,
)
from parking_billing.domain.credit_notification import NotificationChannel

logger = logging.getLogger(__name__)


@dataclass
class NotificationCycleResult:
    check: NotificationCheckResultDTO
    delivery: Optional[SendNotificationsResultDTO] = None


class NotificationCheckerWorker:
    """
    Background worker for balance alerts

    Usage:
        worker = NotificationCheckerWorker()
        result = await worker.run_once(send=True)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        notifier: Optional[NotificationService] = None,
        dedup_hours: Optional[int] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            notifier: Delivery service (defaults to one built from
                      ApplicationConfig.NOTIFICATION_WEBHOOK_URL)
            dedup_hours: Alert dedup window (defaults to ApplicationConfig.NOTIFICATION_DEDUP_HOURS)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.notifier = notifier or create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK_URL)
        self.dedup_hours = dedup_hours or ApplicationConfig.NOTIFICATION_DEDUP_HOURS
        self.channels = [NotificationChannel(c) for c in ApplicationConfig.DEFAULT_NOTIFICATION_CHANNELS]

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("NotificationCheckerWorker initialized")

    async def run_once(self, force_all: bool = False, send: bool = False) -> NotificationCycleResult:
        """
        Run one alert sweep, then deliver pending notifications when asked

        Args:
            force_all: Ignore the dedup window
            send: Deliver unsent notifications after the sweep
        """
        async with self.async_session_factory() as session:
            check_uc = CheckCreditNotifications(
                uow=SqlAlchemyUnitOfWork(session),
                account_repo=SqlAlchemyCreditAccountRepository(session),
                settings_repo=SqlAlchemyCreditAccountSettingsRepository(session),
                notification_repo=SqlAlchemyCreditNotificationRepository(session),
                dedup_hours=self.dedup_hours,
            )
            check_result = await check_uc.execute(force_all=force_all)

        cycle = NotificationCycleResult(check=check_result.value)

        if send:
            async with self.async_session_factory() as session:
                send_uc = SendCreditNotifications(
                    uow=SqlAlchemyUnitOfWork(session),
                    account_repo=SqlAlchemyCreditAccountRepository(session),
                    settings_repo=SqlAlchemyCreditAccountSettingsRepository(session),
                    notification_repo=SqlAlchemyCreditNotificationRepository(session),
                    notifier=self.notifier,
                )
                send_result = await send_uc.execute(SendNotificationsCommandDTO(channels=self.channels))
            cycle.delivery = send_result.value

        return cycle

    async def run_forever(self, check_interval_seconds: int = 3600, send: bool = True):
        """
        Run sweeps continuously

        Args:
            check_interval_seconds: Seconds between sweeps (default: 1 hour)
            send: Deliver notifications after each sweep
        """
        logger.info(f"Starting continuous notification check with {check_interval_seconds}s interval")

        while True:
            try:
                cycle = await self.run_once(send=send)
                logger.info(
                    f"Notification cycle: {cycle.check.notifications_created} created for "
                    f"{cycle.check.accounts_with_issues} accounts"
                )
            except Exception as e:
                logger.error(f"Notification cycle failed: {e}")

            await asyncio.sleep(check_interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("NotificationCheckerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m parking_billing.worker.notification_checker
        python -m parking_billing.worker.notification_checker --force-all --send
        python -m parking_billing.worker.notification_checker --continuous
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Credit Notification Worker")
    parser.add_argument("--force-all", action="store_true", help="Ignore the dedup window")
    parser.add_argument("--send", action="store_true", help="Deliver pending notifications")
    parser.add_argument("--continuous", action="store_true", help="Run continuously")
    args = parser.parse_args()

    worker = NotificationCheckerWorker()

    try:
        if args.continuous:
            await worker.run_forever()
        else:
            cycle = await worker.run_once(force_all=args.force_all, send=args.send)
            print("Notification check complete:")
            print(f"  Accounts processed: {cycle.check.processed}")
            print(f"  Notifications created: {cycle.check.notifications_created}")
            print(f"  Accounts with issues: {cycle.check.accounts_with_issues}")
            if cycle.delivery is not None:
                print(f"  Sent: {cycle.delivery.sent}")
                print(f"  Failed: {cycle.delivery.failed}")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
