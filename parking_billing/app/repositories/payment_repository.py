"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from parking_billing.domain.payment import Payment


class PaymentRepository(ABC):

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment record

        Returns:
            Created Payment with generated ID
        """
        pass

    @abstractmethod
    async def list_by_session(self, session_id: int) -> List[Payment]:
        pass
