"""Monthly Charge Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from parking_billing.domain.monthly_charge import MonthlyCharge


class MonthlyChargeRepository(ABC):
    """Repository interface for MonthlyCharge persistence"""

    @abstractmethod
    async def create(self, charge: MonthlyCharge) -> MonthlyCharge:
        """
        Create a new monthly charge record

        Returns:
            Created MonthlyCharge with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, charge_id: int) -> Optional[MonthlyCharge]:
        pass

    @abstractmethod
    async def update(self, charge: MonthlyCharge) -> MonthlyCharge:
        pass

    @abstractmethod
    async def list_by_account(self, account_id: int, limit: int = 12) -> List[MonthlyCharge]:
        """List recent monthly charges of an account, newest first"""
        pass

    @abstractmethod
    async def get_completed_since(self, account_id: int, since: datetime) -> Optional[MonthlyCharge]:
        """Latest COMPLETED charge of an account dated at or after since"""
        pass
