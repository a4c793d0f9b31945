"""CreateHoliday Use Case

Registers a holiday date used by tariff selection.
"""

import logging
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.repositories.holiday_repository import HolidayRepository
from parking_billing.domain.holiday import Holiday, HolidayType
from .dtos import CreateHolidayCommandDTO, HolidayDTO

logger = logging.getLogger(__name__)


def to_holiday_dto(holiday: Holiday) -> HolidayDTO:
    return HolidayDTO(
        id=holiday.id,
        name=holiday.name,
        date=holiday.date,
        type=holiday.type.value if hasattr(holiday.type, "value") else holiday.type,
        is_recurring=holiday.is_recurring,
        is_active=holiday.is_active,
        description=holiday.description,
        created_at=holiday.created_at,
    )


class CreateHoliday:
    """
    Use Case: Register a holiday

    Business Rules:
    1. At most one non-FRIDAY holiday per date
    2. FRIDAY rows are exempt from the duplicate check
    """

    def __init__(self, uow: UnitOfWork, holiday_repo: HolidayRepository):
        self.uow = uow
        self.holiday_repo = holiday_repo

    async def execute(self, command: CreateHolidayCommandDTO) -> Result[HolidayDTO]:
        try:
            # Step 1: Reject duplicate date
            if command.type != HolidayType.FRIDAY:
                existing = await self.holiday_repo.get_by_date(command.date)
                if existing:
                    return Return.err(
                        Error(
                            code="HOLIDAY_EXISTS",
                            message=f"A holiday is already registered on {command.date.isoformat()}",
                            reason=f"existing_holiday_id={existing.id}",
                        )
                    )

            # Step 2: Create holiday
            holiday = await self.holiday_repo.create(
                Holiday(
                    name=command.name,
                    date=command.date,
                    type=command.type,
                    is_recurring=command.is_recurring,
                    description=command.description,
                )
            )

            # Step 3: Commit
            await self.uow.commit()

            logger.info(f"Holiday {holiday.id} registered on {holiday.date.isoformat()}")
            return Return.ok(to_holiday_dto(holiday))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_HOLIDAY_FAILED",
                    message="Failed to create holiday",
                    reason=str(e),
                )
            )
