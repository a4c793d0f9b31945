"""Parking Session Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from parking_billing.domain.parking_session import ParkingSession


class ParkingSessionRepository(ABC):

    @abstractmethod
    async def get_by_id(self, session_id: int, for_update: bool = False) -> Optional[ParkingSession]:
        """
        Retrieve session by ID with optional row-level locking

        Args:
            session_id: Parking session ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            ParkingSession if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, session: ParkingSession) -> ParkingSession:
        pass

    @abstractmethod
    async def update(self, session: ParkingSession) -> ParkingSession:
        pass
