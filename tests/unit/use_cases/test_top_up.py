"""Unit tests for the online top-up use cases"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from parking_billing.app.services.payment_gateway import PaymentRequest, PaymentVerification
from parking_billing.app.use_cases.credit.dtos import TopUpRequestCommandDTO, TopUpVerifyCommandDTO
from parking_billing.app.use_cases.credit.top_up import RequestCreditTopUp, VerifyCreditTopUp
from parking_billing.libs.result import Return


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.request_payment = AsyncMock(
        return_value=PaymentRequest(
            success=True,
            authority="A00000000001",
            payment_url="https://sandbox.zarinpal.com/pg/StartPay/A00000000001",
        )
    )
    gateway.verify_payment = AsyncMock(return_value=PaymentVerification(success=True, ref_id="REF1234"))
    return gateway


@pytest.fixture
def mock_charge_credit():
    charge = MagicMock()
    charge.execute = AsyncMock(return_value=Return.ok("charged"))
    return charge


@pytest.mark.asyncio
class TestRequestCreditTopUp:
    """RequestCreditTopUp use case"""

    async def test_returns_payment_url(self, sample_account, mock_gateway):
        account_repo = MagicMock()
        account_repo.get_by_id = AsyncMock(return_value=sample_account)
        use_case = RequestCreditTopUp(account_repo, mock_gateway)

        result = await use_case.execute(TopUpRequestCommandDTO(account_id=7, amount=200000))

        assert result.is_ok()
        assert result.value.authority == "A00000000001"
        assert result.value.payment_url.endswith("/A00000000001")
        mock_gateway.request_payment.assert_awaited_once_with(
            amount=200000,
            description="شارژ آنلاین حساب اعتباری",
            mobile="09120000000",
            email="sara@example.com",
        )

    async def test_unknown_account(self, mock_gateway):
        account_repo = MagicMock()
        account_repo.get_by_id = AsyncMock(return_value=None)
        use_case = RequestCreditTopUp(account_repo, mock_gateway)

        result = await use_case.execute(TopUpRequestCommandDTO(account_id=99, amount=1000))

        assert result.is_err()
        assert result.error.code == "CREDIT_ACCOUNT_NOT_FOUND"
        mock_gateway.request_payment.assert_not_awaited()

    async def test_gateway_rejection(self, sample_account, mock_gateway):
        account_repo = MagicMock()
        account_repo.get_by_id = AsyncMock(return_value=sample_account)
        mock_gateway.request_payment = AsyncMock(return_value=PaymentRequest(success=False, error="code -9"))
        use_case = RequestCreditTopUp(account_repo, mock_gateway)

        result = await use_case.execute(TopUpRequestCommandDTO(account_id=7, amount=1000))

        assert result.is_err()
        assert result.error.code == "PAYMENT_REQUEST_FAILED"
        assert result.error.reason == "code -9"


@pytest.mark.asyncio
class TestVerifyCreditTopUp:
    """VerifyCreditTopUp use case"""

    async def test_verified_payment_charges_with_reactivation(self, mock_gateway, mock_charge_credit):
        """
        Given: A verified payment
        When: The callback is processed
        Then: The account is charged with the gateway ref id and reactivated
        """
        use_case = VerifyCreditTopUp(mock_gateway, mock_charge_credit)

        result = await use_case.execute(
            TopUpVerifyCommandDTO(account_id=7, authority="A00000000001", amount=200000, status="OK")
        )

        assert result.is_ok()
        mock_gateway.verify_payment.assert_awaited_once_with("A00000000001", 200000)
        command = mock_charge_credit.execute.await_args.args[0]
        assert command.account_id == 7
        assert command.amount == 200000
        assert command.reference_id == "REF1234"
        assert command.reactivate is True

    async def test_cancelled_payment(self, mock_gateway, mock_charge_credit):
        use_case = VerifyCreditTopUp(mock_gateway, mock_charge_credit)

        result = await use_case.execute(
            TopUpVerifyCommandDTO(account_id=7, authority="A00000000001", amount=200000, status="NOK")
        )

        assert result.is_err()
        assert result.error.code == "PAYMENT_CANCELLED"
        mock_gateway.verify_payment.assert_not_awaited()
        mock_charge_credit.execute.assert_not_awaited()

    async def test_verification_failure(self, mock_gateway, mock_charge_credit):
        mock_gateway.verify_payment = AsyncMock(return_value=PaymentVerification(success=False, error="code -51"))
        use_case = VerifyCreditTopUp(mock_gateway, mock_charge_credit)

        result = await use_case.execute(
            TopUpVerifyCommandDTO(account_id=7, authority="A00000000001", amount=200000)
        )

        assert result.is_err()
        assert result.error.code == "PAYMENT_VERIFICATION_FAILED"
        mock_charge_credit.execute.assert_not_awaited()
