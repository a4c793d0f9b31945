"""RunMonthlyCharges Use Case

Monthly auto-charge sweep over accounts enrolled in an auto-charge plan.
"""

import logging
import time
from datetime import datetime
from typing import Optional
from parking_billing.libs.result import Result, Return
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_account_settings_repository import CreditAccountSettingsRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.app.repositories.monthly_charge_repository import MonthlyChargeRepository
from parking_billing.domain.credit_engine import (
    MONTHLY_CHARGE_DESCRIPTION,
    apply_charge,
    charge_period_start,
    is_charge_due,
    monthly_charge_failed_notification,
    next_charge_date,
)
from parking_billing.domain.monthly_charge import MonthlyCharge, MonthlyChargeStatus
from .dtos import MonthlyChargeResultDTO

logger = logging.getLogger(__name__)


class RunMonthlyCharges:
    """
    Use Case: Monthly auto-charge sweep

    Business Rules:
    1. Only active accounts with auto_charge and a settings plan
       (auto_monthly_charge) are charged; the rest count as skipped
    2. An account is due on its charge day, when next_charge_date has
       passed or is unset, or always with force_all. Without force_all an
       account already charged since its latest charge day is skipped
    3. A MonthlyCharge row is committed as PROCESSING before charging
    4. Failures are per account and never abort the sweep: the charge is
       rolled back, the row is marked FAILED and a HIGH notification is added
    5. At-least-once batch semantics, not one transaction

    Flow (per account):
    1. Lock account, load settings, check due and period
    2. Create MonthlyCharge(PROCESSING) and commit
    3. Re-lock the account, apply charge, set next_charge_date, link transaction, mark COMPLETED
    4. Commit, or mark FAILED on error
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        settings_repo: CreditAccountSettingsRepository,
        transaction_repo: CreditTransactionRepository,
        notification_repo: CreditNotificationRepository,
        charge_repo: MonthlyChargeRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.settings_repo = settings_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo
        self.charge_repo = charge_repo

    async def execute(
        self, force_all: bool = False, now: Optional[datetime] = None
    ) -> Result[MonthlyChargeResultDTO]:
        """
        Execute the sweep

        Args:
            force_all: Charge every enrolled account regardless of its schedule
            now: Sweep instant (default: current UTC time)

        Returns:
            Result[MonthlyChargeResultDTO]: Counters and per-account errors
        """
        start_time = time.time()
        now = now or datetime.utcnow()
        result = MonthlyChargeResultDTO()

        accounts = await self.account_repo.list_auto_charge()
        account_ids = [a.id for a in accounts]
        result.processed = len(account_ids)

        logger.info(f"Starting monthly charge sweep over {result.processed} accounts (force_all={force_all})")

        for account_id in account_ids:
            charged = await self._charge_account(account_id, now, force_all, result)
            if charged is None:
                result.skipped += 1
            elif charged:
                result.successful += 1
            else:
                result.failed += 1

        result.execution_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Monthly charge sweep complete: {result.successful} successful, "
            f"{result.failed} failed, {result.skipped} skipped, {result.execution_time_ms}ms"
        )
        return Return.ok(result)

    async def _charge_account(
        self, account_id: int, now: datetime, force_all: bool, result: MonthlyChargeResultDTO
    ) -> Optional[bool]:
        """Returns None when skipped, True when charged, False when failed."""
        charge_id: Optional[int] = None
        try:
            # Step 1: Lock account and check schedule
            account = await self.account_repo.get_by_id(account_id, for_update=True)
            settings = await self.settings_repo.get_by_account_id(account_id)
            if account is None or not is_charge_due(account, settings, now, force_all):
                await self.uow.rollback()
                return None

            # Already charged for the current period
            if not force_all:
                period_start = charge_period_start(now, settings.charge_day_of_month)
                if await self.charge_repo.get_completed_since(account_id, period_start) is not None:
                    await self.uow.rollback()
                    return None

            amount = settings.monthly_charge_amount
            next_date = next_charge_date(now, settings.charge_day_of_month)

            # Step 2: Record attempt
            charge = await self.charge_repo.create(
                MonthlyCharge(
                    account_id=account_id,
                    amount=amount,
                    charge_date=now,
                    next_charge_date=next_date,
                    status=MonthlyChargeStatus.PROCESSING,
                    notes=MONTHLY_CHARGE_DESCRIPTION,
                    created_at=now,
                )
            )
            charge_id = charge.id
            await self.uow.commit()

            # Step 3: Re-lock after the commit released the row, then charge
            account = await self.account_repo.get_by_id(account_id, for_update=True)
            if account is None:
                raise ValueError(f"Credit account {account_id} disappeared during the sweep")

            outcome = apply_charge(account, amount, MONTHLY_CHARGE_DESCRIPTION, now, monthly=True)
            account.next_charge_date = next_date

            transaction = await self.transaction_repo.create(outcome.transaction)
            for notification in outcome.notifications:
                await self.notification_repo.create(notification)
            await self.account_repo.update(account)

            charge.status = MonthlyChargeStatus.COMPLETED
            charge.transaction_id = transaction.id
            await self.charge_repo.update(charge)

            # Step 4: Commit
            await self.uow.commit()

            logger.info(f"Monthly charge of {amount} applied to account {account_id}")
            return True

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Error processing monthly charge for account {account_id}: {e}")
            result.errors.append(f"Account {account_id}: {e}")
            await self._mark_failed(account_id, charge_id, str(e), now)
            return False

    async def _mark_failed(
        self, account_id: int, charge_id: Optional[int], message: str, now: datetime
    ) -> None:
        try:
            if charge_id is not None:
                charge = await self.charge_repo.get_by_id(charge_id)
                if charge is not None:
                    charge.status = MonthlyChargeStatus.FAILED
                    charge.notes = f"خطا: {message}"
                    await self.charge_repo.update(charge)

            await self.notification_repo.create(monthly_charge_failed_notification(account_id, now))
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record monthly charge failure for account {account_id}: {e}")
