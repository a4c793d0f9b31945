"""EstimateParkingFee Use Case

Prices a stay that is still in progress from its expected duration.
"""

import logging
from datetime import tzinfo
from typing import Optional
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.repositories.tariff_repository import TariffRepository
from parking_billing.app.repositories.holiday_repository import HolidayRepository
from parking_billing.domain.exceptions import BillingError
from parking_billing.domain.tariff_calculator import estimate_fee, is_holiday, is_weekend
from .calculate_fee import build_fee_response
from .dtos import EstimateFeeCommandDTO, FeeResponseDTO

logger = logging.getLogger(__name__)


class EstimateParkingFee:
    """
    Use Case: Estimate the fee of a stay from its expected duration

    Same tariff selection and fee formula as CalculateParkingFee, with
    exit = entry + estimated_duration_minutes.
    """

    def __init__(
        self,
        tariff_repo: TariffRepository,
        holiday_repo: HolidayRepository,
        tz: Optional[tzinfo] = None,
        currency: str = "تومان",
    ):
        self.tariff_repo = tariff_repo
        self.holiday_repo = holiday_repo
        self.tz = tz
        self.currency = currency

    async def execute(self, command: EstimateFeeCommandDTO) -> Result[FeeResponseDTO]:
        try:
            tariffs = await self.tariff_repo.list_active(command.vehicle_type)
            holidays = await self.holiday_repo.list_active()

            tariff, calculation = estimate_fee(
                command.entry_time,
                command.estimated_duration_minutes,
                command.vehicle_type,
                tariffs,
                holidays,
                self.tz,
            )

            return Return.ok(
                build_fee_response(
                    tariff,
                    calculation,
                    is_holiday(command.entry_time, holidays, self.tz),
                    is_weekend(command.entry_time, self.tz),
                    self.currency,
                )
            )

        except BillingError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            logger.error(f"Fee estimation failed: {e}")
            return Return.err(
                Error(
                    code="FEE_ESTIMATION_FAILED",
                    message="Failed to estimate parking fee",
                    reason=str(e),
                )
            )
