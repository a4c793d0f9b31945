"""
List Tariffs Use Case

Retrieves tariffs for display, holiday and weekend rates first.
"""
from parking_billing.libs.result import Result, Return
from parking_billing.app.repositories.tariff_repository import TariffRepository
from parking_billing.domain.tariff import Tariff
from .dtos import ListTariffsResponseDTO, TariffDTO, TariffQuery


def to_tariff_dto(tariff: Tariff) -> TariffDTO:
    return TariffDTO(
        id=tariff.id,
        name=tariff.name,
        description=tariff.description,
        vehicle_type=tariff.vehicle_type.value if hasattr(tariff.vehicle_type, "value") else tariff.vehicle_type,
        entrance_fee=tariff.entrance_fee,
        free_minutes=tariff.free_minutes,
        hourly_rate=tariff.hourly_rate,
        daily_rate=tariff.daily_rate,
        nightly_rate=tariff.nightly_rate,
        daily_cap=tariff.daily_cap,
        nightly_cap=tariff.nightly_cap,
        weekly_cap=tariff.weekly_cap,
        monthly_cap=tariff.monthly_cap,
        is_holiday_rate=tariff.is_holiday_rate,
        is_weekend_rate=tariff.is_weekend_rate,
        is_active=tariff.is_active,
        valid_from=tariff.valid_from,
        valid_to=tariff.valid_to,
        created_at=tariff.created_at,
    )


class ListTariffs:
    """
    Use case: View tariffs

    Ordered holiday-rate first, then weekend-rate, then newest first.
    """

    def __init__(self, tariff_repo: TariffRepository):
        self.tariff_repo = tariff_repo

    async def execute(self, query: TariffQuery) -> Result[ListTariffsResponseDTO]:
        tariffs = await self.tariff_repo.search(
            vehicle_type=query.vehicle_type,
            is_active=query.is_active,
        )

        return Return.ok(
            ListTariffsResponseDTO(
                tariffs=[to_tariff_dto(t) for t in tariffs],
                total=len(tariffs),
            )
        )
