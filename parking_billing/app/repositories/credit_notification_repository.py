"""Credit Notification Repository Interface

Defines the contract for credit notification persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from parking_billing.domain.credit_notification import CreditNotification


class CreditNotificationRepository(ABC):
    """Repository interface for CreditNotification persistence"""

    @abstractmethod
    async def create(self, notification: CreditNotification) -> CreditNotification:
        """
        Create a new notification

        Args:
            notification: CreditNotification entity to persist

        Returns:
            Created CreditNotification with generated ID
        """
        pass

    @abstractmethod
    async def list_since(self, account_id: int, since: datetime) -> List[CreditNotification]:
        """
        List notifications of an account created at or after a point in time

        Used for deduplication of polling alerts.

        Args:
            account_id: Credit account ID
            since: Window start

        Returns:
            Notifications, newest first
        """
        pass

    @abstractmethod
    async def list_unsent(
        self, account_id: Optional[int] = None, limit: int = 100
    ) -> List[CreditNotification]:
        """
        List notifications not delivered yet, oldest first

        Args:
            account_id: Optional filter by account
            limit: Maximum number of notifications to return
        """
        pass

    @abstractmethod
    async def update(self, notification: CreditNotification) -> CreditNotification:
        pass
