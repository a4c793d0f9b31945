"""SQLAlchemy implementation of CreditAccountSettingsRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.credit_account_settings_repository import CreditAccountSettingsRepository
from parking_billing.domain.credit_account_settings import CreditAccountSettings


class SqlAlchemyCreditAccountSettingsRepository(CreditAccountSettingsRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account_id(self, account_id: int) -> Optional[CreditAccountSettings]:
        stmt = select(CreditAccountSettings).where(CreditAccountSettings.account_id == account_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, settings: CreditAccountSettings) -> CreditAccountSettings:
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings
