"""Holiday Domain Entity

Calendar days that switch tariff selection to holiday rates. Fridays are
always holidays whether or not a row exists for them.
"""

from datetime import date as CalendarDate, datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, String, Text
from parking_billing.domain.base import BaseModel, BigIntegerPK


class HolidayType(str, Enum):
    OFFICIAL = "OFFICIAL"
    FRIDAY = "FRIDAY"      # Implicit weekly holiday, cannot be deleted
    RELIGIOUS = "RELIGIOUS"
    OTHER = "OTHER"


class Holiday(BaseModel, table=True):
    """
    Holiday - A day priced with holiday tariffs

    Domain Rules:
    - Only active holidays count
    - Recurring holidays match every year on the same month and day
    - At most one non-FRIDAY holiday per date
    """

    __tablename__ = "holidays"
    __table_args__ = (
        Index("ix_holidays_date", "date"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntegerPK, primary_key=True, autoincrement=True),
    )

    name: str = Field(sa_column=Column(String(100), nullable=False))

    date: CalendarDate = Field(sa_column=Column(Date, nullable=False))

    type: HolidayType = Field(default=HolidayType.OFFICIAL)

    is_recurring: bool = Field(default=False)

    is_active: bool = Field(default=True)

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
