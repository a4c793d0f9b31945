"""DeleteHoliday Use Case"""

import logging
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.repositories.holiday_repository import HolidayRepository
from parking_billing.domain.holiday import HolidayType

logger = logging.getLogger(__name__)


class DeleteHoliday:
    """
    Use Case: Remove a holiday

    FRIDAY holidays are permanent and cannot be deleted.
    """

    def __init__(self, uow: UnitOfWork, holiday_repo: HolidayRepository):
        self.uow = uow
        self.holiday_repo = holiday_repo

    async def execute(self, holiday_id: int) -> Result[int]:
        try:
            holiday = await self.holiday_repo.get_by_id(holiday_id)
            if not holiday:
                return Return.err(
                    Error(
                        code="HOLIDAY_NOT_FOUND",
                        message=f"Holiday {holiday_id} not found",
                    )
                )

            if holiday.type == HolidayType.FRIDAY:
                return Return.err(
                    Error(
                        code="FRIDAY_HOLIDAY_PROTECTED",
                        message="Friday holidays cannot be deleted",
                        reason=f"holiday_id={holiday_id}",
                    )
                )

            await self.holiday_repo.delete(holiday)
            await self.uow.commit()

            logger.info(f"Holiday {holiday_id} deleted")
            return Return.ok(holiday_id)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_HOLIDAY_FAILED",
                    message="Failed to delete holiday",
                    reason=str(e),
                )
            )
