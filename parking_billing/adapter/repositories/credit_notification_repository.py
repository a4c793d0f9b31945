"""SQLAlchemy implementation of CreditNotificationRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.domain.credit_notification import CreditNotification


class SqlAlchemyCreditNotificationRepository(CreditNotificationRepository):
    """
    SQLAlchemy implementation of CreditNotificationRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, notification: CreditNotification) -> CreditNotification:
        """
        Create a new notification

        Args:
            notification: CreditNotification entity to persist

        Returns:
            Created CreditNotification with generated ID
        """
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def list_since(self, account_id: int, since: datetime) -> List[CreditNotification]:
        stmt = (
            select(CreditNotification)
            .where(CreditNotification.account_id == account_id)
            .where(CreditNotification.created_at >= since)
            .order_by(CreditNotification.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_unsent(
        self, account_id: Optional[int] = None, limit: int = 100
    ) -> List[CreditNotification]:
        stmt = select(CreditNotification).where(CreditNotification.is_sent == False)  # noqa: E712

        if account_id is not None:
            stmt = stmt.where(CreditNotification.account_id == account_id)

        stmt = stmt.order_by(CreditNotification.created_at, CreditNotification.id).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, notification: CreditNotification) -> CreditNotification:
        self.session.add(notification)
        await self.session.flush()
        return notification
