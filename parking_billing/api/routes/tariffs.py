"""Tariff API Routes

Tariff listing and fee calculation.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from parking_billing.app.use_cases.pricing.dtos import (
    CalculateFeeCommandDTO,
    EstimateFeeCommandDTO,
    FeeResponseDTO,
    ListTariffsResponseDTO,
    TariffQuery,
)
from parking_billing.app.use_cases.pricing.calculate_fee import CalculateParkingFee
from parking_billing.app.use_cases.pricing.estimate_fee import EstimateParkingFee
from parking_billing.app.use_cases.pricing.list_tariffs import ListTariffs
from parking_billing.adapter.repositories.tariff_repository import SqlAlchemyTariffRepository
from parking_billing.adapter.repositories.holiday_repository import SqlAlchemyHolidayRepository
from parking_billing.depends import LOCAL_TZ, get_session
from parking_billing.domain.tariff import VehicleType
from parking_billing.api.error import ClientError

router = APIRouter(prefix="/tariffs", tags=["Tariffs"])


@router.get("", response_model=ListTariffsResponseDTO, status_code=status.HTTP_200_OK)
async def list_tariffs(
    vehicle_type: Optional[VehicleType] = Query(default=None),
    is_active: Optional[bool] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    """
    List tariffs, holiday rates first, then weekend rates, newest first.
    """
    use_case = ListTariffs(SqlAlchemyTariffRepository(session))
    result = await use_case.execute(TariffQuery(vehicle_type=vehicle_type, is_active=is_active))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/calculate",
    response_model=FeeResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "No tariff in force for the vehicle type",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NO_APPLICABLE_TARIFF",
                            "message": "No applicable tariff for vehicle type TRUCK",
                        }
                    }
                }
            },
        }
    },
)
async def calculate_fee(
    request: CalculateFeeCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """
    Price a finished stay.

    **Returns:**
    - 200: Fee with breakdown, applied rules and receipt lines
    - 404: No applicable tariff
    - 400: Exit before entry or invalid parameters
    """
    use_case = CalculateParkingFee(
        SqlAlchemyTariffRepository(session),
        SqlAlchemyHolidayRepository(session),
        tz=LOCAL_TZ,
        currency=ApplicationConfig.CURRENCY_LABEL,
    )
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/estimate", response_model=FeeResponseDTO, status_code=status.HTTP_200_OK)
async def estimate_fee(
    request: EstimateFeeCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """
    Price a stay that has not ended from its expected duration.
    """
    use_case = EstimateParkingFee(
        SqlAlchemyTariffRepository(session),
        SqlAlchemyHolidayRepository(session),
        tz=LOCAL_TZ,
        currency=ApplicationConfig.CURRENCY_LABEL,
    )
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
