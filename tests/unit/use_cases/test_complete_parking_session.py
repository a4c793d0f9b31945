"""Unit tests for CompleteParkingSession use case

Tests cover:
- Cash completion with payment row
- Credit completion with deduction and notification delivery
- Rejections: missing/inactive session, exit before entry, insufficient balance
- Local calendar pricing of stored UTC times
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from parking_billing.app.services.notification_service import DeliveryReport
from parking_billing.app.use_cases.pricing.complete_session import CompleteParkingSession
from parking_billing.app.use_cases.pricing.dtos import CompleteSessionCommandDTO
from parking_billing.domain.credit_notification import NotificationChannel
from parking_billing.domain.parking_session import ParkingSession, PaymentMethod, SessionStatus
from parking_billing.domain.tariff import Tariff, VehicleType


def assign_id(start):
    counter = {"next": start}

    async def create(entity):
        entity.id = counter["next"]
        counter["next"] += 1
        return entity

    return create


@pytest.fixture
def active_session():
    """Car entered on a Saturday at 09:00"""
    return ParkingSession(
        id=42,
        plate_number="12ب345-67",
        vehicle_type=VehicleType.CAR,
        entry_time=datetime(2024, 1, 6, 9, 0),
        status=SessionStatus.ACTIVE,
    )


@pytest.fixture
def repos(active_session, car_tariff, sample_account, sample_settings):
    """Mock repositories wired with an active session, a tariff and a credit account"""
    session_repo = MagicMock()
    session_repo.get_by_id = AsyncMock(return_value=active_session)
    session_repo.update = AsyncMock(side_effect=lambda s: s)

    tariff_repo = MagicMock()
    tariff_repo.get_by_id = AsyncMock(return_value=None)
    tariff_repo.list_active = AsyncMock(return_value=[car_tariff])

    holiday_repo = MagicMock()
    holiday_repo.list_active = AsyncMock(return_value=[])

    payment_repo = MagicMock()
    payment_repo.create = AsyncMock(side_effect=assign_id(500))

    account_repo = MagicMock()
    account_repo.get_by_id = AsyncMock(return_value=sample_account)
    account_repo.update = AsyncMock(side_effect=lambda a: a)

    settings_repo = MagicMock()
    settings_repo.get_by_account_id = AsyncMock(return_value=sample_settings)

    transaction_repo = MagicMock()
    transaction_repo.create = AsyncMock(side_effect=assign_id(900))

    notification_repo = MagicMock()
    notification_repo.create = AsyncMock(side_effect=assign_id(300))
    notification_repo.update = AsyncMock(side_effect=lambda n: n)

    return dict(
        session_repo=session_repo,
        tariff_repo=tariff_repo,
        holiday_repo=holiday_repo,
        payment_repo=payment_repo,
        account_repo=account_repo,
        settings_repo=settings_repo,
        transaction_repo=transaction_repo,
        notification_repo=notification_repo,
    )


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send = AsyncMock(return_value=DeliveryReport(delivered=[NotificationChannel.IN_APP]))
    return notifier


@pytest.fixture
def use_case(mock_uow, repos, mock_notifier):
    return CompleteParkingSession(uow=mock_uow, notifier=mock_notifier, **repos)


@pytest.mark.asyncio
class TestCompleteParkingSessionSuccess:
    """Successful completions"""

    async def test_cash_payment(self, use_case, repos, mock_uow, active_session, mock_notifier):
        """
        Given: Active session entered at 09:00
        When: Completed at 11:20 with cash
        Then: Session COMPLETED at 35,000 and a payment row is written
        """
        # Arrange
        command = CompleteSessionCommandDTO(session_id=42, exit_time=datetime(2024, 1, 6, 11, 20))

        # Act
        result = await use_case.execute(command)

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.total_amount == 35000
        assert response.payment_method == "CASH"
        assert response.payment_id == 500
        assert response.credit_transaction_id is None
        assert active_session.status == SessionStatus.COMPLETED
        assert active_session.is_paid is True
        assert active_session.tariff_id == 1
        repos["account_repo"].get_by_id.assert_not_awaited()
        mock_notifier.send.assert_not_awaited()
        mock_uow.commit.assert_awaited_once()

    async def test_credit_payment_deducts_balance(self, use_case, repos, sample_account, active_session):
        """
        Given: Account with 12,000 and a 7,000 stay (1 billable hour at 2,000 + 5,000 entrance)
        When: Completed with CREDIT
        Then: Balance is deducted with the session id as reference
        """
        # Arrange
        repos["tariff_repo"].list_active.return_value[0].hourly_rate = 2000
        command = CompleteSessionCommandDTO(
            session_id=42,
            exit_time=datetime(2024, 1, 6, 10, 0),
            payment_method=PaymentMethod.CREDIT,
            credit_account_id=7,
        )

        # Act
        result = await use_case.execute(command)

        # Assert
        assert result.is_ok()
        assert result.value.total_amount == 7000
        assert result.value.credit_balance == 5000
        assert result.value.credit_transaction_id == 900
        transaction = repos["transaction_repo"].create.await_args.args[0]
        assert transaction.reference_id == "42"
        assert sample_account.balance == 5000
        assert active_session.credit_account_id == 7
        repos["notification_repo"].create.assert_awaited_once()

    async def test_session_tariff_takes_precedence(self, use_case, repos, car_tariff):
        repos["session_repo"].get_by_id.return_value.tariff_id = 1
        repos["tariff_repo"].get_by_id = AsyncMock(return_value=car_tariff)

        result = await use_case.execute(
            CompleteSessionCommandDTO(session_id=42, exit_time=datetime(2024, 1, 6, 9, 10))
        )

        assert result.value.total_amount == 5000
        repos["tariff_repo"].list_active.assert_not_awaited()

    async def test_free_stay_on_credit_writes_no_transaction(self, use_case, repos):
        repos["tariff_repo"].list_active.return_value[0].entrance_fee = 0
        command = CompleteSessionCommandDTO(
            session_id=42,
            exit_time=datetime(2024, 1, 6, 9, 10),
            payment_method=PaymentMethod.CREDIT,
            credit_account_id=7,
        )

        result = await use_case.execute(command)

        assert result.value.total_amount == 0
        assert result.value.payment_id is None
        repos["transaction_repo"].create.assert_not_awaited()
        repos["payment_repo"].create.assert_not_awaited()


@pytest.mark.asyncio
class TestCompleteParkingSessionErrors:
    """Rejected completions"""

    async def test_session_not_found(self, use_case, repos):
        repos["session_repo"].get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(CompleteSessionCommandDTO(session_id=1))

        assert result.error.code == "SESSION_NOT_FOUND"

    async def test_session_not_active(self, use_case, active_session):
        active_session.status = SessionStatus.COMPLETED

        result = await use_case.execute(CompleteSessionCommandDTO(session_id=42))

        assert result.error.code == "SESSION_NOT_ACTIVE"
        assert result.error.reason == "status=COMPLETED"

    async def test_exit_before_entry(self, use_case):
        result = await use_case.execute(
            CompleteSessionCommandDTO(session_id=42, exit_time=datetime(2024, 1, 6, 8, 0))
        )

        assert result.error.code == "VALIDATION_ERROR"

    async def test_credit_payment_requires_account(self, use_case):
        result = await use_case.execute(
            CompleteSessionCommandDTO(
                session_id=42, exit_time=datetime(2024, 1, 6, 11, 20), payment_method=PaymentMethod.CREDIT
            )
        )

        assert result.error.code == "VALIDATION_ERROR"

    async def test_insufficient_balance_rolls_back(self, use_case, mock_uow, active_session, sample_account):
        """
        Given: Account with 12,000 and a 35,000 stay
        When: Completed with CREDIT
        Then: INSUFFICIENT_BALANCE, rollback, session stays ACTIVE
        """
        command = CompleteSessionCommandDTO(
            session_id=42,
            exit_time=datetime(2024, 1, 6, 11, 20),
            payment_method=PaymentMethod.CREDIT,
            credit_account_id=7,
        )

        result = await use_case.execute(command)

        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert active_session.status == SessionStatus.ACTIVE
        assert sample_account.balance == 12000
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_awaited()

    async def test_no_applicable_tariff(self, use_case, repos):
        repos["tariff_repo"].list_active = AsyncMock(return_value=[])

        result = await use_case.execute(
            CompleteSessionCommandDTO(session_id=42, exit_time=datetime(2024, 1, 6, 11, 20))
        )

        assert result.error.code == "NO_APPLICABLE_TARIFF"

    async def test_unexpected_failure(self, use_case, repos, mock_uow):
        repos["payment_repo"].create = AsyncMock(side_effect=Exception("disk full"))

        result = await use_case.execute(
            CompleteSessionCommandDTO(session_id=42, exit_time=datetime(2024, 1, 6, 11, 20))
        )

        assert result.error.code == "COMPLETE_SESSION_FAILED"
        mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
class TestCompleteParkingSessionLocalCalendar:
    """Stored UTC times are priced on the local calendar"""

    @pytest.fixture
    def friday_tariff(self):
        return Tariff(
            id=2,
            name="Car - Friday",
            vehicle_type=VehicleType.CAR,
            entrance_fee=10000,
            free_minutes=0,
            hourly_rate=15000,
            is_holiday_rate=True,
            is_weekend_rate=True,
            valid_from=datetime(2023, 1, 1),
            created_at=datetime(2023, 1, 1),
        )

    @pytest.mark.parametrize(
        "entry, tariff_id",
        [
            (datetime(2024, 1, 4, 21, 0), 2),  # Friday 00:30 in Tehran
            (datetime(2024, 1, 5, 21, 0), 1),  # Saturday 00:30 in Tehran
        ],
    )
    async def test_tariff_follows_local_day_of_entry(
        self, use_case, repos, active_session, car_tariff, friday_tariff, entry, tariff_id
    ):
        repos["tariff_repo"].list_active = AsyncMock(return_value=[car_tariff, friday_tariff])
        active_session.entry_time = entry

        result = await use_case.execute(
            CompleteSessionCommandDTO(session_id=42, exit_time=entry + timedelta(minutes=30))
        )

        assert result.is_ok()
        assert active_session.tariff_id == tariff_id

    async def test_offset_aware_exit_time(self, use_case, active_session):
        """
        Given: Session entered Saturday 09:00 UTC
        When: Completed with exit 11:20Z
        Then: Priced at 35,000 and the stored exit time is naive UTC
        """
        exit_time = datetime(2024, 1, 6, 11, 20, tzinfo=timezone.utc)

        result = await use_case.execute(CompleteSessionCommandDTO(session_id=42, exit_time=exit_time))

        assert result.is_ok()
        assert result.value.total_amount == 35000
        assert active_session.exit_time == datetime(2024, 1, 6, 11, 20)
        assert active_session.exit_time.tzinfo is None

    async def test_offset_aware_exit_before_entry(self, use_case):
        exit_time = datetime(2024, 1, 6, 12, 0, tzinfo=ZoneInfo("Asia/Tehran"))  # 08:30 UTC

        result = await use_case.execute(CompleteSessionCommandDTO(session_id=42, exit_time=exit_time))

        assert result.error.code == "VALIDATION_ERROR"
