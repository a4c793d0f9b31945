"""Credit Transaction Repository Interface

Defines the contract for credit transaction persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from parking_billing.domain.credit_transaction import CreditTransaction, TransactionType


class CreditTransactionRepository(ABC):
    """
    Repository interface for CreditTransaction persistence

    Transactions are append-only for audit trail. The only removal path is
    the administrative bulk delete, which is followed by reconciliation of
    the account balance.
    """

    @abstractmethod
    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Create a new credit transaction

        Args:
            transaction: CreditTransaction entity to persist

        Returns:
            Created CreditTransaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[CreditTransaction]:
        """
        Retrieve transaction by ID

        Args:
            transaction_id: Transaction ID

        Returns:
            CreditTransaction if found, None otherwise
        """
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def count_by_account(
        self, account_id: int, transaction_type: Optional[TransactionType] = None
    ) -> int:
        """Count transactions matching the same filters as list_by_account"""
        pass

    @abstractmethod
    async def list_between(
        self, account_id: int, start: datetime, end: datetime
    ) -> List[CreditTransaction]:
        """
        List transactions created within [start, end], oldest first

        Used for account statements.
        """
        pass

    @abstractmethod
    async def list_all_by_account(self, account_id: int) -> List[CreditTransaction]:
        """List every transaction of an account, oldest first"""
        pass

    @abstractmethod
    async def delete_many(self, account_id: int, transaction_ids: List[int]) -> int:
        """
        Delete transactions of an account by ID

        IDs belonging to other accounts are ignored.

        Returns:
            Number of deleted rows
        """
        pass
