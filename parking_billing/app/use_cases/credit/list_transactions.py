"""
List Transactions Use Case

Retrieves credit transaction history of an account with pagination.
"""
import math
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from .dtos import ListTransactionsResponseDTO, TransactionQuery
from .mappers import to_transaction_dto


class ListCreditTransactions:
    """
    Use case: View credit transactions

    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self, query: TransactionQuery) -> Result[ListTransactionsResponseDTO]:
        account = await self.account_repo.get_by_id(query.account_id)
        if not account:
            return Return.err(
                Error(
                    code="CREDIT_ACCOUNT_NOT_FOUND",
                    message=f"Credit account {query.account_id} not found",
                )
            )

        transactions = await self.transaction_repo.list_by_account(
            account_id=query.account_id,
            transaction_type=query.transaction_type,
            limit=query.limit,
            offset=(query.page - 1) * query.limit,
        )
        total = await self.transaction_repo.count_by_account(query.account_id, query.transaction_type)

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[to_transaction_dto(t) for t in transactions],
                total=total,
                page=query.page,
                limit=query.limit,
                total_pages=math.ceil(total / query.limit) if total else 0,
            )
        )
