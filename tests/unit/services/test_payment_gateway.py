"""Unit tests for ZarinpalPaymentGateway"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from parking_billing.adapter.services.payment_gateway import ZarinpalPaymentGateway, create_payment_gateway

API_URL = "https://api.zarinpal.com/pg/v4/payment"


def gateway(sandbox):
    return ZarinpalPaymentGateway(
        merchant_id="merchant-1",
        callback_url="https://parking.example.com/payment/callback",
        api_url=API_URL + "/",
        start_url="https://www.zarinpal.com/pg/StartPay",
        sandbox=sandbox,
    )


def patched_client(body=None, error=None):
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json = MagicMock(return_value=body)
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=error)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return patch("parking_billing.adapter.services.payment_gateway.httpx.AsyncClient", return_value=client), client


@pytest.mark.asyncio
class TestSandboxGateway:

    async def test_request_generates_authority(self):
        result = await gateway(sandbox=True).request_payment(200000, "شارژ آنلاین حساب اعتباری")

        assert result.success is True
        assert result.authority.startswith("A")
        assert len(result.authority) == 13
        assert result.payment_url == f"https://sandbox.zarinpal.com/pg/StartPay/{result.authority}"

    async def test_verify_generates_ref_id(self):
        result = await gateway(sandbox=True).verify_payment("A123", 200000)

        assert result.success is True
        assert result.ref_id.startswith("REF")


@pytest.mark.asyncio
class TestLiveGateway:

    async def test_request_success(self):
        """
        Given: The gateway answers code 100
        When: A payment is requested
        Then: The payer URL is built from the start URL and authority
        """
        patcher, client = patched_client({"data": {"code": 100, "authority": "A0000000000000000000000000000123"}})

        with patcher:
            result = await gateway(sandbox=False).request_payment(
                200000, "شارژ آنلاین حساب اعتباری", mobile="09120000000"
            )

        assert result.success is True
        assert result.payment_url == "https://www.zarinpal.com/pg/StartPay/A0000000000000000000000000000123"
        assert client.post.await_args.args[0] == f"{API_URL}/request.json"
        payload = client.post.await_args.kwargs["json"]
        assert payload["merchant_id"] == "merchant-1"
        assert payload["metadata"]["mobile"] == "09120000000"

    async def test_request_rejected(self):
        patcher, _ = patched_client({"data": [], "errors": {"code": -9, "message": "The input params invalid"}})

        with patcher:
            result = await gateway(sandbox=False).request_payment(100, "x")

        assert result.success is False
        assert "-9" in result.error

    async def test_request_network_error(self):
        patcher, _ = patched_client(error=httpx.ConnectTimeout("timed out"))

        with patcher:
            result = await gateway(sandbox=False).request_payment(100, "x")

        assert result.success is False
        assert result.error == "خطا در ارتباط با درگاه پرداخت"

    @pytest.mark.parametrize("code", [100, 101])
    async def test_verify_accepts_success_and_already_verified(self, code):
        patcher, client = patched_client({"data": {"code": code, "ref_id": 201}})

        with patcher:
            result = await gateway(sandbox=False).verify_payment("A123", 200000)

        assert result.success is True
        assert result.ref_id == "201"
        assert client.post.await_args.kwargs["json"] == {
            "merchant_id": "merchant-1",
            "authority": "A123",
            "amount": 200000,
        }

    async def test_verify_failure_code(self):
        patcher, _ = patched_client({"data": {"code": -51}})

        with patcher:
            result = await gateway(sandbox=False).verify_payment("A123", 200000)

        assert result.success is False
        assert result.error == "-51"


class TestGatewayFactory:

    def test_builds_from_config(self):
        config = MagicMock()
        config.PAYMENT_MERCHANT_ID = "merchant-2"
        config.PAYMENT_CALLBACK_URL = "https://parking.example.com/cb"
        config.PAYMENT_API_URL = API_URL
        config.PAYMENT_START_URL = "https://www.zarinpal.com/pg/StartPay"
        config.PAYMENT_SANDBOX = True

        result = create_payment_gateway(config)

        assert result.merchant_id == "merchant-2"
        assert result.sandbox is True
        assert result.api_url == API_URL
