"""DeductCredit Use Case

Draws an amount from a credit account and raises the balance alerts the
new balance calls for.
"""

import logging
from typing import Iterable, Optional
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.services.notification_service import NotificationService
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_account_settings_repository import CreditAccountSettingsRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.domain.credit_engine import apply_deduction
from parking_billing.domain.credit_notification import NotificationChannel
from parking_billing.domain.exceptions import BillingError
from .delivery import deliver_notifications
from .dtos import CreditOperationResponseDTO, DeductCommandDTO
from .mappers import to_operation_response

logger = logging.getLogger(__name__)


class DeductCredit:
    """
    Use Case: Deduct from a credit account

    Business Rules:
    1. Sufficient balance: balance >= amount, unless allow_negative or the
       credit limit covers the shortfall
    2. At most one threshold tier notification per deduction
    3. Zero or negative balance always notifies, and suspends the account
       when its settings say so
    4. Pessimistic locking: SELECT FOR UPDATE prevents race conditions
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        settings_repo: CreditAccountSettingsRepository,
        transaction_repo: CreditTransactionRepository,
        notification_repo: CreditNotificationRepository,
        notifier: Optional[NotificationService] = None,
        channels: Iterable[NotificationChannel] = (NotificationChannel.IN_APP,),
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.settings_repo = settings_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo
        self.notifier = notifier
        self.channels = list(channels)

    async def execute(self, command: DeductCommandDTO) -> Result[CreditOperationResponseDTO]:
        try:
            # Step 1: Get account with pessimistic lock
            account = await self.account_repo.get_by_id(command.account_id, for_update=True)
            if not account:
                return Return.err(
                    Error(
                        code="CREDIT_ACCOUNT_NOT_FOUND",
                        message=f"Credit account {command.account_id} not found",
                    )
                )
            settings = await self.settings_repo.get_by_account_id(account.id)

            # Step 2: Apply deduction (raises InsufficientBalanceError)
            outcome = apply_deduction(
                account,
                settings,
                command.amount,
                description=command.description,
                reference_id=command.reference_id,
                allow_negative=command.allow_negative,
            )

            # Step 3: Persist
            outcome.transaction = await self.transaction_repo.create(outcome.transaction)
            outcome.notifications = [
                await self.notification_repo.create(n) for n in outcome.notifications
            ]
            await self.account_repo.update(account)

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Deducted {command.amount} from account {account.id}: "
                f"{outcome.transaction.balance_before} -> {outcome.new_balance}"
            )

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DEDUCT_CREDIT_FAILED",
                    message="Failed to deduct from credit account",
                    reason=str(e),
                )
            )

        # Step 5: Deliver notifications
        delivered, failed = await deliver_notifications(
            self.notifier,
            outcome.notifications,
            account,
            settings,
            self.channels,
            self.notification_repo,
            self.uow,
        )

        return Return.ok(to_operation_response(account, outcome, delivered, failed))
