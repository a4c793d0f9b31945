"""Data Transfer Objects for Pricing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date as CalendarDate, datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from parking_billing.domain.holiday import HolidayType
from parking_billing.domain.parking_session import PaymentMethod
from parking_billing.domain.tariff import VehicleType


class CalculateFeeCommandDTO(BaseModel):
    """
    Command DTO for pricing a finished stay

    Used as input to CalculateParkingFee use case.
    """

    entry_time: datetime = Field(..., description="Vehicle entry instant")
    exit_time: datetime = Field(..., description="Vehicle exit instant")
    vehicle_type: VehicleType = Field(..., description="Vehicle category")

    class Config:
        json_schema_extra = {
            "example": {
                "entry_time": "2024-01-06T09:00:00",
                "exit_time": "2024-01-06T11:20:00",
                "vehicle_type": "CAR",
            }
        }


class EstimateFeeCommandDTO(BaseModel):
    """
    Command DTO for pricing a stay that has not ended

    Used as input to EstimateParkingFee use case.
    """

    entry_time: datetime = Field(..., description="Vehicle entry instant")
    estimated_duration_minutes: int = Field(..., description="Expected stay in minutes")
    vehicle_type: VehicleType = Field(..., description="Vehicle category")


class FeeBreakdownDTO(BaseModel):
    entrance_fee: int
    free_minutes: int
    hourly_rate: int
    duration_minutes: int
    billable_minutes: int
    billable_hours: int
    hourly_amount: int
    daily_cap: Optional[int] = None


class FeeResponseDTO(BaseModel):
    """Response DTO for fee calculation and estimation"""

    tariff_id: int = Field(..., description="Tariff used for pricing")
    tariff_name: str = Field(..., description="Tariff display name")
    total_amount: int = Field(..., description="Amount due")
    breakdown: FeeBreakdownDTO
    applied_rules: List[str] = Field(default_factory=list, description="Pricing rules that fired")
    receipt_lines: List[str] = Field(default_factory=list, description="Human-readable receipt")
    is_holiday: bool = Field(..., description="Entry day is a holiday (Fridays included)")
    is_weekend: bool = Field(..., description="Entry day is a Friday")

    class Config:
        json_schema_extra = {
            "example": {
                "tariff_id": 1,
                "tariff_name": "Car - standard",
                "total_amount": 35000,
                "breakdown": {
                    "entrance_fee": 5000,
                    "free_minutes": 15,
                    "hourly_rate": 10000,
                    "duration_minutes": 140,
                    "billable_minutes": 125,
                    "billable_hours": 3,
                    "hourly_amount": 30000,
                    "daily_cap": 80000,
                },
                "applied_rules": [],
                "receipt_lines": ["ورودیه: 5,000 تومان", "مبلغ کل: 35,000 تومان"],
                "is_holiday": False,
                "is_weekend": False,
            }
        }


class TariffQuery(BaseModel):
    """Filters for listing tariffs"""

    vehicle_type: Optional[VehicleType] = None
    is_active: Optional[bool] = None


class TariffDTO(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    vehicle_type: str
    entrance_fee: int
    free_minutes: int
    hourly_rate: int
    daily_rate: Optional[int] = None
    nightly_rate: Optional[int] = None
    daily_cap: Optional[int] = None
    nightly_cap: Optional[int] = None
    weekly_cap: Optional[int] = None
    monthly_cap: Optional[int] = None
    is_holiday_rate: bool
    is_weekend_rate: bool
    is_active: bool
    valid_from: datetime
    valid_to: Optional[datetime] = None
    created_at: datetime


class ListTariffsResponseDTO(BaseModel):
    tariffs: List[TariffDTO]
    total: int


class CreateHolidayCommandDTO(BaseModel):
    """Command DTO for registering a holiday"""

    name: str = Field(..., min_length=1, max_length=100)
    date: CalendarDate = Field(..., description="Calendar date of the holiday")
    type: HolidayType = Field(default=HolidayType.OFFICIAL)
    is_recurring: bool = Field(default=False, description="Repeats every year on the same month and day")
    description: Optional[str] = None


class HolidayDTO(BaseModel):
    id: int
    name: str
    date: CalendarDate
    type: str
    is_recurring: bool
    is_active: bool
    description: Optional[str] = None
    created_at: datetime


class CompleteSessionCommandDTO(BaseModel):
    """
    Command DTO for closing a parking session

    Used as input to CompleteParkingSession use case. CREDIT payments
    require credit_account_id.
    """

    session_id: int = Field(..., description="Parking session to complete")
    exit_time: Optional[datetime] = Field(default=None, description="Exit instant (default: now)")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    credit_account_id: Optional[int] = Field(default=None, description="Account charged for CREDIT payments")
    allow_negative: bool = Field(default=False, description="Let the credit balance go negative")
    operator_id: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": 42,
                "exit_time": "2024-01-06T11:20:00",
                "payment_method": "CREDIT",
                "credit_account_id": 7,
            }
        }


class CompleteSessionResponseDTO(BaseModel):
    session_id: int
    plate_number: str
    exit_time: datetime
    total_amount: int
    payment_method: str
    payment_id: Optional[int] = None
    credit_transaction_id: Optional[int] = None
    credit_balance: Optional[int] = None
    applied_rules: List[str] = Field(default_factory=list)
    receipt_lines: List[str] = Field(default_factory=list)
