"""Credit Account Settings Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from parking_billing.domain.credit_account_settings import CreditAccountSettings


class CreditAccountSettingsRepository(ABC):

    @abstractmethod
    async def get_by_account_id(self, account_id: int) -> Optional[CreditAccountSettings]:
        """
        Retrieve the settings row of an account

        Returns:
            CreditAccountSettings if configured, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, settings: CreditAccountSettings) -> CreditAccountSettings:
        pass
