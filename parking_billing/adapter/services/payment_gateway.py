"""Payment Gateway Implementation

Zarinpal REST client for online credit top-ups. In sandbox mode no HTTP
call is made and authorities and reference ids are generated locally.
"""

import logging
from typing import Optional
import httpx
from parking_billing.app.services.payment_gateway import (
    PaymentGateway,
    PaymentRequest,
    PaymentVerification,
)
from parking_billing.domain.base import generate_uuid

logger = logging.getLogger(__name__)

SUCCESS_CODE = 100
ALREADY_VERIFIED_CODE = 101


class ZarinpalPaymentGateway(PaymentGateway):
    """
    Zarinpal payment gateway client

    Flow:
    1. request_payment: POST {api_url}/request.json, payer is redirected to
       {start_url}/{authority}
    2. verify_payment: POST {api_url}/verify.json after the callback
    """

    def __init__(
        self,
        merchant_id: str,
        callback_url: str,
        api_url: str = "https://api.zarinpal.com/pg/v4/payment",
        start_url: str = "https://www.zarinpal.com/pg/StartPay",
        sandbox: bool = True,
        timeout: float = 15.0,
    ):
        self.merchant_id = merchant_id
        self.callback_url = callback_url
        self.api_url = api_url.rstrip("/")
        self.start_url = start_url.rstrip("/")
        self.sandbox = sandbox
        self.timeout = timeout

    async def request_payment(
        self,
        amount: int,
        description: str,
        mobile: Optional[str] = None,
        email: Optional[str] = None,
    ) -> PaymentRequest:
        if self.sandbox:
            authority = f"A{generate_uuid()[:12].upper()}"
            logger.info(f"Sandbox payment request for {amount}: authority {authority}")
            return PaymentRequest(
                success=True,
                authority=authority,
                payment_url=f"https://sandbox.zarinpal.com/pg/StartPay/{authority}",
            )

        payload = {
            "merchant_id": self.merchant_id,
            "amount": amount,
            "description": description,
            "callback_url": self.callback_url,
            "metadata": {"mobile": mobile, "email": email},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/request.json",
                    json=payload,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Payment request failed: {e}")
            return PaymentRequest(success=False, error="خطا در ارتباط با درگاه پرداخت")

        data = body.get("data") or {}
        if data.get("code") == SUCCESS_CODE:
            authority = data["authority"]
            return PaymentRequest(
                success=True,
                authority=authority,
                payment_url=f"{self.start_url}/{authority}",
            )

        return PaymentRequest(success=False, error=str(body.get("errors") or data.get("code")))

    async def verify_payment(self, authority: str, amount: int) -> PaymentVerification:
        if self.sandbox:
            ref_id = f"REF{generate_uuid()[:8].upper()}"
            logger.info(f"Sandbox payment verification for authority {authority}: {ref_id}")
            return PaymentVerification(success=True, ref_id=ref_id)

        payload = {
            "merchant_id": self.merchant_id,
            "authority": authority,
            "amount": amount,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/verify.json",
                    json=payload,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Payment verification failed for authority {authority}: {e}")
            return PaymentVerification(success=False, error="خطا در تأیید پرداخت")

        data = body.get("data") or {}
        if data.get("code") in (SUCCESS_CODE, ALREADY_VERIFIED_CODE):
            return PaymentVerification(success=True, ref_id=str(data.get("ref_id")))

        return PaymentVerification(success=False, error=str(body.get("errors") or data.get("code")))


def create_payment_gateway(config) -> PaymentGateway:
    """Build the gateway from ApplicationConfig"""
    return ZarinpalPaymentGateway(
        merchant_id=config.PAYMENT_MERCHANT_ID,
        callback_url=config.PAYMENT_CALLBACK_URL,
        api_url=config.PAYMENT_API_URL,
        start_url=config.PAYMENT_START_URL,
        sandbox=config.PAYMENT_SANDBOX,
    )
