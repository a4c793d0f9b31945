from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_account_settings import CreditAccountSettings
from parking_billing.domain.tariff import Tariff, VehicleType


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def car_tariff():
    """Standard car tariff: 5,000 entrance, 15 free minutes, 10,000/hour, 80,000 daily cap"""
    return Tariff(
        id=1,
        name="Car - standard",
        vehicle_type=VehicleType.CAR,
        entrance_fee=5000,
        free_minutes=15,
        hourly_rate=10000,
        daily_cap=80000,
        valid_from=datetime(2023, 1, 1),
        created_at=datetime(2023, 1, 1),
    )


@pytest.fixture
def sample_account():
    """Active credit account with 12,000 balance and no credit limit"""
    return CreditAccount(
        id=7,
        owner_name="Sara Ahmadi",
        phone_number="09120000000",
        email="sara@example.com",
        balance=12000,
        credit_limit=0,
        is_active=True,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def sample_settings():
    """Default thresholds: 50,000 / 30,000 / 15,000 / 5,000"""
    return CreditAccountSettings(id=3, account_id=7)
