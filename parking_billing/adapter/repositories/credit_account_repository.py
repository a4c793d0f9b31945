"""SQLAlchemy implementation of CreditAccountRepository

Provides persistence for CreditAccount entities with pessimistic locking support
to prevent race conditions during concurrent balance mutations.
"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.domain.credit_account import CreditAccount


class SqlAlchemyCreditAccountRepository(CreditAccountRepository):
    """
    SQLAlchemy implementation of CreditAccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Accounts are updated in place inside the caller's unit of work
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: int, for_update: bool = False) -> Optional[CreditAccount]:
        """
        Retrieve account by ID with optional row-level locking

        Args:
            account_id: Account ID
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)
                and reloads an already loaded instance from the row

        Returns:
            CreditAccount if found, None otherwise
        """
        stmt = select(CreditAccount).where(CreditAccount.id == account_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: CreditAccount) -> CreditAccount:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update(self, account: CreditAccount) -> CreditAccount:
        """
        Persist account changes and bump updated_at

        Note:
            Should be called within a transaction with the account already locked
        """
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        await self.session.flush()
        return account

    async def list_active(self) -> List[CreditAccount]:
        stmt = select(CreditAccount).where(CreditAccount.is_active == True).order_by(CreditAccount.id)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_auto_charge(self) -> List[CreditAccount]:
        stmt = (
            select(CreditAccount)
            .where(CreditAccount.is_active == True)  # noqa: E712
            .where(CreditAccount.auto_charge == True)  # noqa: E712
            .order_by(CreditAccount.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
