"""SQLAlchemy implementation of MonthlyChargeRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.monthly_charge_repository import MonthlyChargeRepository
from parking_billing.domain.monthly_charge import MonthlyCharge, MonthlyChargeStatus


class SqlAlchemyMonthlyChargeRepository(MonthlyChargeRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, charge: MonthlyCharge) -> MonthlyCharge:
        self.session.add(charge)
        await self.session.flush()
        await self.session.refresh(charge)
        return charge

    async def get_by_id(self, charge_id: int) -> Optional[MonthlyCharge]:
        stmt = select(MonthlyCharge).where(MonthlyCharge.id == charge_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, charge: MonthlyCharge) -> MonthlyCharge:
        self.session.add(charge)
        await self.session.flush()
        return charge

    async def list_by_account(self, account_id: int, limit: int = 12) -> List[MonthlyCharge]:
        stmt = (
            select(MonthlyCharge)
            .where(MonthlyCharge.account_id == account_id)
            .order_by(MonthlyCharge.charge_date.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_completed_since(self, account_id: int, since: datetime) -> Optional[MonthlyCharge]:
        stmt = (
            select(MonthlyCharge)
            .where(MonthlyCharge.account_id == account_id)
            .where(MonthlyCharge.status == MonthlyChargeStatus.COMPLETED)
            .where(MonthlyCharge.charge_date >= since)
            .order_by(MonthlyCharge.charge_date.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()
