"""Holiday API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from parking_billing.app.use_cases.pricing.dtos import CreateHolidayCommandDTO, HolidayDTO
from parking_billing.app.use_cases.pricing.create_holiday import CreateHoliday
from parking_billing.app.use_cases.pricing.delete_holiday import DeleteHoliday
from parking_billing.adapter.repositories.holiday_repository import SqlAlchemyHolidayRepository
from parking_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from parking_billing.depends import get_session
from parking_billing.api.error import ClientError

router = APIRouter(prefix="/holidays", tags=["Holidays"])


@router.post("", response_model=HolidayDTO, status_code=status.HTTP_201_CREATED)
async def create_holiday(
    request: CreateHolidayCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """
    Register a holiday. A second non-Friday holiday on the same date is rejected.
    """
    use_case = CreateHoliday(SqlAlchemyUnitOfWork(session), SqlAlchemyHolidayRepository(session))
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/{holiday_id}", status_code=status.HTTP_200_OK)
async def delete_holiday(
    holiday_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Delete a holiday. Friday entries are protected.
    """
    use_case = DeleteHoliday(SqlAlchemyUnitOfWork(session), SqlAlchemyHolidayRepository(session))
    result = await use_case.execute(holiday_id)

    if result.is_err():
        raise ClientError(result.error)

    return {"id": result.value, "deleted": True}
