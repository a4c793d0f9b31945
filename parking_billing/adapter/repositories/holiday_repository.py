"""SQLAlchemy implementation of HolidayRepository"""

from datetime import date
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.holiday_repository import HolidayRepository
from parking_billing.domain.holiday import Holiday, HolidayType


class SqlAlchemyHolidayRepository(HolidayRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        stmt = select(Holiday).where(Holiday.id == holiday_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_date(self, day: date, exclude_fridays: bool = True) -> Optional[Holiday]:
        stmt = select(Holiday).where(Holiday.date == day)
        if exclude_fridays:
            stmt = stmt.where(Holiday.type != HolidayType.FRIDAY)

        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()

    async def list_active(self) -> List[Holiday]:
        stmt = select(Holiday).where(Holiday.is_active == True).order_by(Holiday.date)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, holiday: Holiday) -> Holiday:
        self.session.add(holiday)
        await self.session.flush()
        await self.session.refresh(holiday)
        return holiday

    async def delete(self, holiday: Holiday) -> None:
        await self.session.delete(holiday)
        await self.session.flush()
