"""RecordCreditTransaction Use Case

Manual ledger entry of any transaction type.
"""

import logging
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.domain.credit_engine import apply_transaction
from parking_billing.domain.exceptions import BillingError
from .dtos import CreditOperationResponseDTO, RecordTransactionCommandDTO
from .mappers import to_operation_response

logger = logging.getLogger(__name__)


class RecordCreditTransaction:
    """
    Use Case: Record a manual ledger entry

    Business Rules:
    1. Balance effect follows the transaction type:
       CHARGE/REFUND add, DEDUCTION subtracts, ADJUSTMENT adds a signed
       delta, MONTHLY_RESET sets the balance
    2. No balance sufficiency check; administrators may push an account
       below zero, which raises a zero-balance notification
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
        notification_repo: CreditNotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo

    async def execute(self, command: RecordTransactionCommandDTO) -> Result[CreditOperationResponseDTO]:
        try:
            account = await self.account_repo.get_by_id(command.account_id, for_update=True)
            if not account:
                return Return.err(
                    Error(
                        code="CREDIT_ACCOUNT_NOT_FOUND",
                        message=f"Credit account {command.account_id} not found",
                    )
                )

            outcome = apply_transaction(
                account,
                command.transaction_type,
                command.amount,
                command.description,
                reference_id=command.reference_id,
            )

            outcome.transaction = await self.transaction_repo.create(outcome.transaction)
            outcome.notifications = [
                await self.notification_repo.create(n) for n in outcome.notifications
            ]
            await self.account_repo.update(account)
            await self.uow.commit()

            logger.info(
                f"Recorded {command.transaction_type.value} of {command.amount} on account {account.id}: "
                f"{outcome.transaction.balance_before} -> {outcome.new_balance}"
            )
            return Return.ok(to_operation_response(account, outcome))

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RECORD_TRANSACTION_FAILED",
                    message="Failed to record credit transaction",
                    reason=str(e),
                )
            )
