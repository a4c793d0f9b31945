"""Tariff, holiday and parking session use cases"""
from .calculate_fee import CalculateParkingFee
from .estimate_fee import EstimateParkingFee
from .list_tariffs import ListTariffs
from .create_holiday import CreateHoliday
from .delete_holiday import DeleteHoliday
from .complete_session import CompleteParkingSession
from .dtos import (
    CalculateFeeCommandDTO,
    EstimateFeeCommandDTO,
    FeeBreakdownDTO,
    FeeResponseDTO,
    TariffQuery,
    TariffDTO,
    ListTariffsResponseDTO,
    CreateHolidayCommandDTO,
    HolidayDTO,
    CompleteSessionCommandDTO,
    CompleteSessionResponseDTO,
)

__all__ = [
    "CalculateParkingFee",
    "EstimateParkingFee",
    "ListTariffs",
    "CreateHoliday",
    "DeleteHoliday",
    "CompleteParkingSession",
    "CalculateFeeCommandDTO",
    "EstimateFeeCommandDTO",
    "FeeBreakdownDTO",
    "FeeResponseDTO",
    "TariffQuery",
    "TariffDTO",
    "ListTariffsResponseDTO",
    "CreateHolidayCommandDTO",
    "HolidayDTO",
    "CompleteSessionCommandDTO",
    "CompleteSessionResponseDTO",
]
