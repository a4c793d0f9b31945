"""ChargeCredit Use Case

Tops up a credit account with pessimistic locking, records the ledger
entry and the notifications the charge produces.
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
from parking_billing.domain.credit_engine import apply_charge
from parking_billing.domain.credit_notification import NotificationChannel
from parking_billing.domain.exceptions import BillingError
from .delivery import deliver_notifications
from .dtos import ChargeCommandDTO, CreditOperationResponseDTO
from .mappers import to_operation_response

logger = logging.getLogger(__name__)


class ChargeCredit:
    """
    Use Case: Charge a credit account

    Business Rules:
    1. Inactive accounts are rejected unless the command asks to reactivate
    2. Amount must be positive
    3. Atomic updates: balance, transaction and notifications in one unit of work
    4. Pessimistic locking: SELECT FOR UPDATE prevents lost updates
    5. Notification delivery happens after commit and never fails the charge

    Flow:
    1. Get account with lock (SELECT FOR UPDATE)
    2. Apply charge (balance, transaction, notifications)
    3. Persist transaction, notifications and account
    4. Commit
    5. Deliver notifications
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

    async def execute(self, command: ChargeCommandDTO) -> Result[CreditOperationResponseDTO]:
        """
        Execute credit charge

        Args:
            command: ChargeCommandDTO with account_id, amount and description

        Returns:
            Result[CreditOperationResponseDTO]: Success with ledger entry or error
        """
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

            # Step 2: Apply charge
            outcome = apply_charge(
                account,
                command.amount,
                description=command.description,
                reference_id=command.reference_id,
                reactivate=command.reactivate,
            )

            # Step 3: Persist ledger entry, notifications and account
            outcome.transaction = await self.transaction_repo.create(outcome.transaction)
            outcome.notifications = [
                await self.notification_repo.create(n) for n in outcome.notifications
            ]
            await self.account_repo.update(account)

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Charged account {account.id} with {command.amount}: "
                f"{outcome.transaction.balance_before} -> {outcome.new_balance}"
            )

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CHARGE_CREDIT_FAILED",
                    message="Failed to charge credit account",
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
