"""SQLAlchemy implementation of PaymentRepository"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.payment_repository import PaymentRepository
from parking_billing.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def list_by_session(self, session_id: int) -> List[Payment]:
        stmt = select(Payment).where(Payment.session_id == session_id).order_by(Payment.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
