"""SQLAlchemy implementation of TariffRepository"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.tariff_repository import TariffRepository
from parking_billing.domain.tariff import Tariff, VehicleType


class SqlAlchemyTariffRepository(TariffRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tariff_id: int) -> Optional[Tariff]:
        stmt = select(Tariff).where(Tariff.id == tariff_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self, vehicle_type: Optional[VehicleType] = None) -> List[Tariff]:
        stmt = select(Tariff).where(Tariff.is_active == True)  # noqa: E712
        if vehicle_type:
            stmt = stmt.where(Tariff.vehicle_type == vehicle_type)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(
        self,
        vehicle_type: Optional[VehicleType] = None,
        is_active: Optional[bool] = None,
    ) -> List[Tariff]:
        """
        List tariffs for display

        Ordered holiday rates first, then weekend rates, then newest first.
        """
        stmt = select(Tariff)

        if vehicle_type:
            stmt = stmt.where(Tariff.vehicle_type == vehicle_type)
        if is_active is not None:
            stmt = stmt.where(Tariff.is_active == is_active)

        stmt = stmt.order_by(
            Tariff.is_holiday_rate.desc(),
            Tariff.is_weekend_rate.desc(),
            Tariff.created_at.desc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, tariff: Tariff) -> Tariff:
        self.session.add(tariff)
        await self.session.flush()
        await self.session.refresh(tariff)
        return tariff
