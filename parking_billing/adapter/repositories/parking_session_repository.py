"""SQLAlchemy implementation of ParkingSessionRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from parking_billing.app.repositories.parking_session_repository import ParkingSessionRepository
from parking_billing.domain.parking_session import ParkingSession


class SqlAlchemyParkingSessionRepository(ParkingSessionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: int, for_update: bool = False) -> Optional[ParkingSession]:
        """
        Retrieve session by ID with optional row-level locking

        Args:
            session_id: Parking session ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            ParkingSession if found, None otherwise
        """
        stmt = select(ParkingSession).where(ParkingSession.id == session_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, parking_session: ParkingSession) -> ParkingSession:
        self.session.add(parking_session)
        await self.session.flush()
        await self.session.refresh(parking_session)
        return parking_session

    async def update(self, parking_session: ParkingSession) -> ParkingSession:
        self.session.add(parking_session)
        await self.session.flush()
        return parking_session
