"""SQLAlchemy implementation of CreditTransactionRepository

Provides persistence for the append-only credit ledger.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.domain.credit_transaction import CreditTransaction, TransactionType


class SqlAlchemyCreditTransactionRepository(CreditTransactionRepository):
    """
    SQLAlchemy implementation of CreditTransactionRepository

    Features:
    - Immutable append-only transactions
    - Stable ordering on (created_at, id) for reconciliation
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Create a new credit transaction

        Args:
            transaction: CreditTransaction entity to persist

        Returns:
            Created CreditTransaction with generated ID
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[CreditTransaction]:
        stmt = select(CreditTransaction).where(CreditTransaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _filtered(self, stmt, account_id: int, transaction_type: Optional[TransactionType]):
        stmt = stmt.where(CreditTransaction.account_id == account_id)
        if transaction_type:
            stmt = stmt.where(CreditTransaction.transaction_type == transaction_type)
        return stmt

    async def list_by_account(
        self,
        account_id: int,
        transaction_type: Optional[TransactionType] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[CreditTransaction]:
        """
        List transactions of an account, newest first

        Args:
            account_id: Credit account ID
            transaction_type: Optional filter by type
            limit: Page size
            offset: Rows to skip

        Returns:
            Page of transactions
        """
        stmt = self._filtered(select(CreditTransaction), account_id, transaction_type)
        stmt = stmt.order_by(CreditTransaction.created_at.desc(), CreditTransaction.id.desc())
        stmt = stmt.limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_account(
        self, account_id: int, transaction_type: Optional[TransactionType] = None
    ) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(CreditTransaction), account_id, transaction_type
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_between(
        self, account_id: int, start: datetime, end: datetime
    ) -> List[CreditTransaction]:
        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.account_id == account_id)
            .where(CreditTransaction.created_at >= start)
            .where(CreditTransaction.created_at <= end)
            .order_by(CreditTransaction.created_at, CreditTransaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all_by_account(self, account_id: int) -> List[CreditTransaction]:
        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.account_id == account_id)
            .order_by(CreditTransaction.created_at, CreditTransaction.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_many(self, account_id: int, transaction_ids: List[int]) -> int:
        """
        Delete transactions of an account by ID

        Returns:
            Number of deleted rows
        """
        stmt = (
            delete(CreditTransaction)
            .where(CreditTransaction.account_id == account_id)
            .where(CreditTransaction.id.in_(transaction_ids))
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
