"""Tariff Repository Interface

Defines the contract for tariff lookup operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from parking_billing.domain.tariff import Tariff, VehicleType


class TariffRepository(ABC):

    @abstractmethod
    async def get_by_id(self, tariff_id: int) -> Optional[Tariff]:
        pass

    @abstractmethod
    async def list_active(self, vehicle_type: Optional[VehicleType] = None) -> List[Tariff]:
        """
        List active tariffs, optionally for one vehicle type

        Validity windows are not filtered here; tariff selection does that
        against the entry instant.
        """
        pass

    @abstractmethod
    async def search(
        self,
        vehicle_type: Optional[VehicleType] = None,
        is_active: Optional[bool] = None,
    ) -> List[Tariff]:
        """
        List tariffs for display

        Ordered holiday rates first, then weekend rates, then newest first.
        """
        pass

    @abstractmethod
    async def create(self, tariff: Tariff) -> Tariff:
        pass
