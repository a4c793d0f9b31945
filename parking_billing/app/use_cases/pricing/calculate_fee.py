"""CalculateParkingFee Use Case

Prices a finished stay: picks the tariff in force at entry and applies the
fee formula between entry and exit.
"""

import logging
from datetime import tzinfo
from typing import Optional
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.repositories.tariff_repository import TariffRepository
from parking_billing.app.repositories.holiday_repository import HolidayRepository
from parking_billing.domain.exceptions import BillingError
from parking_billing.domain.tariff import Tariff
from parking_billing.domain.tariff_calculator import (
    FeeCalculation,
    as_naive_utc,
    calculate_fee,
    generate_cost_breakdown,
    is_holiday,
    is_weekend,
    select_tariff,
)
from .dtos import CalculateFeeCommandDTO, FeeBreakdownDTO, FeeResponseDTO

logger = logging.getLogger(__name__)


def build_fee_response(
    tariff: Tariff,
    calculation: FeeCalculation,
    holiday: bool,
    weekend: bool,
    currency: str,
) -> FeeResponseDTO:
    b = calculation.breakdown
    return FeeResponseDTO(
        tariff_id=tariff.id,
        tariff_name=tariff.name,
        total_amount=calculation.total_amount,
        breakdown=FeeBreakdownDTO(
            entrance_fee=b.entrance_fee,
            free_minutes=b.free_minutes,
            hourly_rate=b.hourly_rate,
            duration_minutes=b.duration_minutes,
            billable_minutes=b.billable_minutes,
            billable_hours=b.billable_hours,
            hourly_amount=b.hourly_amount,
            daily_cap=b.daily_cap,
        ),
        applied_rules=list(calculation.applied_rules),
        receipt_lines=generate_cost_breakdown(calculation, currency),
        is_holiday=holiday,
        is_weekend=weekend,
    )


class CalculateParkingFee:
    """
    Use Case: Calculate the fee of a finished stay

    Business Rules:
    1. Exit before entry is rejected
    2. The most specific active tariff for the vehicle type at entry is used
    3. No matching tariff is an error, never a zero fee

    Flow:
    1. Validate entry/exit order
    2. Load active tariffs and holidays
    3. Select tariff
    4. Calculate fee and receipt lines
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

    async def execute(self, command: CalculateFeeCommandDTO) -> Result[FeeResponseDTO]:
        try:
            # Step 1: Validate order of instants
            if as_naive_utc(command.exit_time) < as_naive_utc(command.entry_time):
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="Exit time must not be before entry time",
                        reason=f"entry={command.entry_time.isoformat()}, exit={command.exit_time.isoformat()}",
                    )
                )

            # Step 2: Load pricing inputs
            tariffs = await self.tariff_repo.list_active(command.vehicle_type)
            holidays = await self.holiday_repo.list_active()

            # Step 3: Select tariff
            tariff = select_tariff(command.entry_time, command.vehicle_type, tariffs, holidays, self.tz)
            if tariff is None:
                return Return.err(
                    Error(
                        code="NO_APPLICABLE_TARIFF",
                        message=f"No applicable tariff for vehicle type {command.vehicle_type.value}",
                        reason=f"entry={command.entry_time.isoformat()}",
                    )
                )

            # Step 4: Calculate
            calculation = calculate_fee(command.entry_time, command.exit_time, tariff)

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
            logger.error(f"Fee calculation failed: {e}")
            return Return.err(
                Error(
                    code="FEE_CALCULATION_FAILED",
                    message="Failed to calculate parking fee",
                    reason=str(e),
                )
            )
