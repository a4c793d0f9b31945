"""Holiday Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from parking_billing.domain.holiday import Holiday


class HolidayRepository(ABC):
    """Repository interface for Holiday persistence"""

    @abstractmethod
    async def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        pass

    @abstractmethod
    async def get_by_date(self, day: date, exclude_fridays: bool = True) -> Optional[Holiday]:
        """
        Retrieve the holiday on a date

        Args:
            day: Calendar date
            exclude_fridays: Ignore rows of type FRIDAY

        Returns:
            Holiday if one exists on that date, None otherwise
        """
        pass

    @abstractmethod
    async def list_active(self) -> List[Holiday]:
        """List active holidays, recurring ones included"""
        pass

    @abstractmethod
    async def create(self, holiday: Holiday) -> Holiday:
        pass

    @abstractmethod
    async def delete(self, holiday: Holiday) -> None:
        pass
