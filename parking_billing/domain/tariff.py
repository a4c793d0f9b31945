"""Tariff Domain Entity

Pricing rules for one vehicle type over a validity window. Several tariffs may
exist for the same vehicle type (plain, weekend and holiday rates); the tariff
calculator picks the most specific one at the entry instant.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String, Text
from parking_billing.domain.base import BaseModel, BigIntegerPK


class VehicleType(str, Enum):
    """Vehicle categories priced by tariffs"""
    CAR = "CAR"
    MOTORCYCLE = "MOTORCYCLE"
    TRUCK = "TRUCK"
    BUS = "BUS"
    VAN = "VAN"


class Tariff(BaseModel, table=True):
    """
    Tariff - Parking price rules

    Domain Rules:
    - Amounts are whole currency units (Toman)
    - entrance_fee is charged once per session
    - The first free_minutes of a session are not billed
    - daily_cap bounds the fee of a single session
    - weekly_cap / monthly_cap are stored but not applied to single sessions
    - valid_to = None means open-ended
    """

    __tablename__ = "tariffs"
    __table_args__ = (
        Index("ix_tariffs_vehicle_type_active", "vehicle_type", "is_active"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
        description="Unique tariff identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    vehicle_type: VehicleType = Field(
        description="Vehicle type this tariff prices"
    )

    entrance_fee: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Flat fee charged at entry"
    )

    free_minutes: int = Field(
        default=15,
        description="Grace period not billed"
    )

    hourly_rate: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Rate per started billable hour"
    )

    daily_rate: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    nightly_rate: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    daily_cap: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    nightly_cap: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    weekly_cap: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    monthly_cap: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))

    is_holiday_rate: bool = Field(default=False, description="Applies on holidays")
    is_weekend_rate: bool = Field(default=False, description="Applies on the weekend (Friday)")
    is_active: bool = Field(default=True)

    valid_from: datetime = Field(
        default_factory=datetime.utcnow,
        description="Start of validity window (inclusive)"
    )

    valid_to: Optional[datetime] = Field(
        default=None,
        description="End of validity window (inclusive, None = open-ended)"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Car - standard",
                "vehicle_type": "CAR",
                "entrance_fee": 5000,
                "free_minutes": 15,
                "hourly_rate": 10000,
                "daily_cap": 80000,
                "is_holiday_rate": False,
                "is_weekend_rate": False,
                "is_active": True,
                "valid_from": "2024-01-01T00:00:00Z",
                "valid_to": None,
            }
        }
