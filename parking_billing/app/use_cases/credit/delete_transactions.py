"""DeleteCreditTransactions Use Case

Administrative bulk delete of ledger entries followed by balance
reconciliation.
"""

import logging
from datetime import datetime
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.domain.credit_engine import reconciled_balance
from .dtos import DeleteTransactionsCommandDTO, DeleteTransactionsResponseDTO

logger = logging.getLogger(__name__)


class DeleteCreditTransactions:
    """
    Use Case: Bulk delete credit transactions

    After the delete the account balance becomes the balance_after of the
    most recent remaining transaction, or 0 when none remain. This is a
    reconciliation policy, not a running sum.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self, command: DeleteTransactionsCommandDTO) -> Result[DeleteTransactionsResponseDTO]:
        try:
            # Step 1: Lock account
            account = await self.account_repo.get_by_id(command.account_id, for_update=True)
            if not account:
                return Return.err(
                    Error(
                        code="CREDIT_ACCOUNT_NOT_FOUND",
                        message=f"Credit account {command.account_id} not found",
                    )
                )

            # Step 2: Delete
            deleted = await self.transaction_repo.delete_many(account.id, command.transaction_ids)
            if deleted == 0:
                return Return.err(
                    Error(
                        code="TRANSACTIONS_NOT_FOUND",
                        message="No matching transactions for this account",
                        reason=f"transaction_ids={command.transaction_ids}",
                    )
                )

            # Step 3: Reconcile balance from what remains
            remaining = await self.transaction_repo.list_all_by_account(account.id)
            balance_before = account.balance
            account.balance = reconciled_balance(remaining)
            account.updated_at = datetime.utcnow()
            await self.account_repo.update(account)

            # Step 4: Commit
            await self.uow.commit()

            if balance_before != account.balance:
                logger.warning(
                    f"Account {account.id} balance reconciled after deleting {deleted} transactions: "
                    f"{balance_before} -> {account.balance}"
                )

            return Return.ok(
                DeleteTransactionsResponseDTO(
                    account_id=account.id,
                    deleted_count=deleted,
                    balance_before=balance_before,
                    balance_after=account.balance,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_TRANSACTIONS_FAILED",
                    message="Failed to delete credit transactions",
                    reason=str(e),
                )
            )
