"""GetAccountStatement Use Case

Summarizes the ledger of an account over a period.
"""

from datetime import datetime, timedelta
from typing import Optional
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.domain.credit_engine import summarize_statement
from .dtos import StatementResponseDTO
from .mappers import to_transaction_dto


class GetAccountStatement:
    """
    Use case: Account statement

    Opening balance is the balance before the first transaction in the
    period; closing balance the balance after the last one. Defaults to
    the last 30 days.
    """

    def __init__(
        self,
        account_repo: CreditAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(
        self,
        account_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Result[StatementResponseDTO]:
        end = end or datetime.utcnow()
        start = start or end - timedelta(days=30)

        if start > end:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message="Statement start must not be after its end",
                    reason=f"start={start.isoformat()}, end={end.isoformat()}",
                )
            )

        account = await self.account_repo.get_by_id(account_id)
        if not account:
            return Return.err(
                Error(
                    code="CREDIT_ACCOUNT_NOT_FOUND",
                    message=f"Credit account {account_id} not found",
                )
            )

        transactions = await self.transaction_repo.list_between(account_id, start, end)
        summary = summarize_statement(transactions, start, end)

        return Return.ok(
            StatementResponseDTO(
                account_id=account.id,
                owner_name=account.owner_name,
                period_start=start,
                period_end=end,
                opening_balance=summary.opening_balance,
                closing_balance=summary.closing_balance,
                total_credits=summary.total_credits,
                total_debits=summary.total_debits,
                transaction_count=summary.transaction_count,
                current_balance=account.balance,
                transactions=[to_transaction_dto(t) for t in transactions],
            )
        )
