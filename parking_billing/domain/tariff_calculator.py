"""Tariff Calculator

Pure pricing logic for parking sessions:
- holiday / weekend determination for an instant
- selection of the most specific tariff for an entry instant
- fee calculation from entry and exit times
- fee estimation from an expected duration
- receipt line rendering

No I/O happens here; callers load tariffs and holidays and pass them in.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from parking_billing.domain.exceptions import NoApplicableTariffError, ValidationError
from parking_billing.domain.holiday import Holiday
from parking_billing.domain.tariff import Tariff, VehicleType

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Tehran"
FRIDAY = 4  # datetime.weekday()

RULE_FREE_PARKING = "FREE_PARKING"
RULE_DAILY_CAP_APPLIED = "DAILY_CAP_APPLIED"
RULE_NEGATIVE_DURATION_CLAMPED = "NEGATIVE_DURATION_CLAMPED"


@dataclass(frozen=True)
class FeeBreakdown:
    entrance_fee: int
    free_minutes: int
    hourly_rate: int
    duration_minutes: int
    billable_minutes: int
    billable_hours: int
    hourly_amount: int
    daily_cap: Optional[int] = None


@dataclass(frozen=True)
class FeeCalculation:
    total_amount: int
    breakdown: FeeBreakdown
    applied_rules: list[str] = field(default_factory=list)


def as_naive_utc(instant: datetime) -> datetime:
    """Normalise to the naive UTC form timestamps are stored in."""
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def _local(instant: datetime, tz: Optional[tzinfo]) -> datetime:
    """Naive datetimes are UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz or ZoneInfo(DEFAULT_TIMEZONE))


def is_weekend(instant: datetime, tz: Optional[tzinfo] = None) -> bool:
    return _local(instant, tz).weekday() == FRIDAY


def is_holiday(instant: datetime, holidays: Iterable[Holiday], tz: Optional[tzinfo] = None) -> bool:
    """True on Fridays and on days matching an active holiday.

    Recurring holidays match on month and day in any year.
    """
    day = _local(instant, tz).date()
    if day.weekday() == FRIDAY:
        return True

    for holiday in holidays:
        if not holiday.is_active:
            continue
        if holiday.date == day:
            return True
        if holiday.is_recurring and (holiday.date.month, holiday.date.day) == (day.month, day.day):
            return True
    return False


def select_tariff(
    entry: datetime,
    vehicle_type: VehicleType,
    tariffs: Iterable[Tariff],
    holidays: Iterable[Holiday],
    tz: Optional[tzinfo] = None,
) -> Optional[Tariff]:
    """Pick the most specific tariff in force at the entry instant.

    Candidates must match the vehicle type, be active and have the entry
    inside their validity window. Among them, a tariff whose holiday flag
    matches the day wins over one that does not, then the weekend flag
    decides, then the most recently created tariff.
    """
    holiday = is_holiday(entry, holidays, tz)
    weekend = is_weekend(entry, tz)
    at = as_naive_utc(entry)

    candidates = [
        tariff
        for tariff in tariffs
        if tariff.vehicle_type == vehicle_type
        and tariff.is_active
        and as_naive_utc(tariff.valid_from) <= at
        and (tariff.valid_to is None or at <= as_naive_utc(tariff.valid_to))
    ]
    if not candidates:
        return None

    return max(
        candidates,
        key=lambda t: (
            t.is_holiday_rate == holiday,
            t.is_weekend_rate == weekend,
            t.created_at or datetime.min,
        ),
    )


def calculate_fee(entry: datetime, exit: datetime, tariff: Tariff) -> FeeCalculation:
    """Compute the fee of one stay under a tariff.

    The entrance fee is always charged. Minutes beyond free_minutes are
    billed per started hour. The result is bounded by daily_cap when set.
    """
    applied_rules: list[str] = []

    raw_minutes = math.floor((as_naive_utc(exit) - as_naive_utc(entry)).total_seconds() / 60)
    if raw_minutes < 0:
        logger.warning(
            f"Exit {exit.isoformat()} precedes entry {entry.isoformat()} for tariff {tariff.id}, "
            f"treating duration as zero"
        )
        applied_rules.append(RULE_NEGATIVE_DURATION_CLAMPED)
    duration_minutes = max(0, raw_minutes)

    free_minutes = tariff.free_minutes or 0
    entrance_fee = tariff.entrance_fee or 0
    hourly_rate = tariff.hourly_rate or 0

    billable_minutes = max(0, duration_minutes - free_minutes)
    billable_hours = math.ceil(billable_minutes / 60)
    hourly_amount = billable_hours * hourly_rate
    total = entrance_fee + hourly_amount

    if billable_minutes == 0:
        applied_rules.append(RULE_FREE_PARKING)

    if tariff.daily_cap is not None and tariff.daily_cap > 0 and total > tariff.daily_cap:
        total = tariff.daily_cap
        applied_rules.append(RULE_DAILY_CAP_APPLIED)

    breakdown = FeeBreakdown(
        entrance_fee=entrance_fee,
        free_minutes=free_minutes,
        hourly_rate=hourly_rate,
        duration_minutes=duration_minutes,
        billable_minutes=billable_minutes,
        billable_hours=billable_hours,
        hourly_amount=hourly_amount,
        daily_cap=tariff.daily_cap,
    )
    return FeeCalculation(total_amount=total, breakdown=breakdown, applied_rules=applied_rules)


def estimate_fee(
    entry: datetime,
    estimated_duration_minutes: int,
    vehicle_type: VehicleType,
    tariffs: Sequence[Tariff],
    holidays: Sequence[Holiday],
    tz: Optional[tzinfo] = None,
) -> tuple[Tariff, FeeCalculation]:
    """Price a stay that has not ended yet.

    Raises:
        ValidationError: negative duration
        NoApplicableTariffError: no tariff in force for the vehicle type
    """
    if estimated_duration_minutes < 0:
        raise ValidationError("estimated_duration_minutes must not be negative")

    tariff = select_tariff(entry, vehicle_type, tariffs, holidays, tz)
    if tariff is None:
        raise NoApplicableTariffError(f"No applicable tariff for vehicle type {vehicle_type.value}")

    exit = entry + timedelta(minutes=estimated_duration_minutes)
    return tariff, calculate_fee(entry, exit, tariff)


def _money(amount: int, currency: str) -> str:
    return f"{amount:,} {currency}"


def generate_cost_breakdown(calculation: FeeCalculation, currency: str = "تومان") -> list[str]:
    """Receipt lines for a fee calculation."""
    b = calculation.breakdown
    lines: list[str] = []

    if b.entrance_fee > 0:
        lines.append(f"ورودیه: {_money(b.entrance_fee, currency)}")

    if b.free_minutes > 0:
        lines.append(f"دقایق رایگان: {b.free_minutes} دقیقه")

    if b.billable_hours > 0:
        lines.append(
            f"ساعتی: {b.billable_hours} ساعت × {b.hourly_rate:,} = {_money(b.hourly_amount, currency)}"
        )

    if RULE_DAILY_CAP_APPLIED in calculation.applied_rules:
        lines.append(f"سقف روزانه: {_money(b.daily_cap, currency)}")

    lines.append(f"مبلغ کل: {_money(calculation.total_amount, currency)}")
    return lines
