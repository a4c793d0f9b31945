"""Monthly Auto-Charge Background Worker

Charges credit accounts enrolled in an auto-charge plan on their charge day.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from parking_billing.adapter.repositories.credit_account_repository import SqlAlchemyCreditAccountRepository
from parking_billing.adapter.repositories.credit_account_settings_repository import (
    SqlAlchemyCreditAccountSettingsRepository,
)
from parking_billing.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from parking_billing.adapter.repositories.credit_notification_repository import (
    SqlAlchemyCreditNotificationRepository,
)
from parking_billing.adapter.repositories.monthly_charge_repository import SqlAlchemyMonthlyChargeRepository
from parking_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from parking_billing.app.use_cases.credit import RunMonthlyCharges, MonthlyChargeResultDTO

logger = logging.getLogger(__name__)


class MonthlyChargeWorker:
    """
    Background worker for monthly auto-charges

    Features:
    - Charges accounts whose charge day has come (or all with force_all)
    - Per-account failures are recorded and never stop the sweep
    - Can run once or continuously

    Usage:
        # Run once (typical cron usage)
        worker = MonthlyChargeWorker()
        result = await worker.run_once()

        # Run continuously (once a day)
        worker = MonthlyChargeWorker()
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        enabled: Optional[bool] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            enabled: Run sweeps at all (defaults to ApplicationConfig.MONTHLY_CHARGE_ENABLED)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.MONTHLY_CHARGE_ENABLED if enabled is None else enabled

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("MonthlyChargeWorker initialized")

    async def run_once(self, force_all: bool = False) -> MonthlyChargeResultDTO:
        """
        Run one auto-charge sweep

        Args:
            force_all: Charge every enrolled account regardless of its schedule

        Returns:
            MonthlyChargeResultDTO with counters
        """
        if not self.enabled:
            logger.info("Monthly charge is disabled, skipping sweep")
            return MonthlyChargeResultDTO()

        async with self.async_session_factory() as session:
            use_case = RunMonthlyCharges(
                uow=SqlAlchemyUnitOfWork(session),
                account_repo=SqlAlchemyCreditAccountRepository(session),
                settings_repo=SqlAlchemyCreditAccountSettingsRepository(session),
                transaction_repo=SqlAlchemyCreditTransactionRepository(session),
                notification_repo=SqlAlchemyCreditNotificationRepository(session),
                charge_repo=SqlAlchemyMonthlyChargeRepository(session),
            )
            result = await use_case.execute(force_all=force_all)

        return result.value

    async def run_forever(self, check_interval_seconds: int = 86400):
        """
        Run the sweep continuously

        Args:
            check_interval_seconds: Seconds between sweeps (default: 24 hours)
        """
        logger.info(f"Starting continuous monthly charge with {check_interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(f"Monthly charge cycle: {result.successful} charged, {result.failed} failed")
            except Exception as e:
                logger.error(f"Monthly charge cycle failed: {e}")

            await asyncio.sleep(check_interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("MonthlyChargeWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Charge accounts due today
        python -m parking_billing.worker.monthly_charge

        # Charge every enrolled account
        python -m parking_billing.worker.monthly_charge --force-all

        # Run continuously
        python -m parking_billing.worker.monthly_charge --continuous
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Monthly Auto-Charge Worker")
    parser.add_argument("--force-all", action="store_true", help="Charge all enrolled accounts")
    parser.add_argument("--continuous", action="store_true", help="Run continuously")
    args = parser.parse_args()

    worker = MonthlyChargeWorker()

    try:
        if args.continuous:
            await worker.run_forever()
        else:
            result = await worker.run_once(force_all=args.force_all)
            print("Monthly charge complete:")
            print(f"  Processed: {result.processed}")
            print(f"  Successful: {result.successful}")
            print(f"  Failed: {result.failed}")
            print(f"  Skipped: {result.skipped}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for error in result.errors:
                print(f"  Error: {error}")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
