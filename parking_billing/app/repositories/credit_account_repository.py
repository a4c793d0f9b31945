"""Credit Account Repository Interface

Defines the contract for credit account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from parking_billing.domain.credit_account import CreditAccount


class CreditAccountRepository(ABC):
    """
    Repository interface for CreditAccount persistence

    Balance mutations must read the account with for_update=True so that
    concurrent charges and deductions on one account serialize.
    """

    @abstractmethod
    async def get_by_id(self, account_id: int, for_update: bool = False) -> Optional[CreditAccount]:
        """
        Retrieve account by ID with optional row-level locking

        Args:
            account_id: Account ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            CreditAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: CreditAccount) -> CreditAccount:
        pass

    @abstractmethod
    async def update(self, account: CreditAccount) -> CreditAccount:
        """
        Persist changes of an account loaded in the current unit of work

        Args:
            account: Modified CreditAccount

        Returns:
            Updated CreditAccount
        """
        pass

    @abstractmethod
    async def list_active(self) -> List[CreditAccount]:
        """List all active accounts"""
        pass

    @abstractmethod
    async def list_auto_charge(self) -> List[CreditAccount]:
        """List active accounts enrolled in the monthly auto-charge"""
        pass
