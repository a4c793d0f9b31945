"""Online top-up Use Cases

RequestCreditTopUp opens a payment at the gateway; VerifyCreditTopUp
confirms it and charges the account with the gateway reference id.
"""

import logging
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.payment_gateway import PaymentGateway
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from .charge_credit import ChargeCredit
from .dtos import (
    ChargeCommandDTO,
    CreditOperationResponseDTO,
    TopUpRequestCommandDTO,
    TopUpRequestResponseDTO,
    TopUpVerifyCommandDTO,
)

logger = logging.getLogger(__name__)


class RequestCreditTopUp:
    """
    Use Case: Start an online top-up

    Inactive accounts may be topped up; the charge reactivates them.
    """

    def __init__(self, account_repo: CreditAccountRepository, gateway: PaymentGateway):
        self.account_repo = account_repo
        self.gateway = gateway

    async def execute(self, command: TopUpRequestCommandDTO) -> Result[TopUpRequestResponseDTO]:
        account = await self.account_repo.get_by_id(command.account_id)
        if not account:
            return Return.err(
                Error(
                    code="CREDIT_ACCOUNT_NOT_FOUND",
                    message=f"Credit account {command.account_id} not found",
                )
            )

        payment = await self.gateway.request_payment(
            amount=command.amount,
            description=command.description,
            mobile=account.phone_number,
            email=account.email,
        )
        if not payment.success:
            logger.error(f"Top-up request for account {account.id} rejected by gateway: {payment.error}")
            return Return.err(
                Error(
                    code="PAYMENT_REQUEST_FAILED",
                    message="Payment gateway rejected the request",
                    reason=payment.error,
                )
            )

        return Return.ok(
            TopUpRequestResponseDTO(
                account_id=account.id,
                amount=command.amount,
                authority=payment.authority,
                payment_url=payment.payment_url,
            )
        )


class VerifyCreditTopUp:
    """
    Use Case: Complete an online top-up

    Flow:
    1. Reject callbacks whose status is not OK
    2. Verify the payment at the gateway
    3. Charge the account (reactivating it) with the gateway ref id
    """

    def __init__(self, gateway: PaymentGateway, charge_credit: ChargeCredit):
        self.gateway = gateway
        self.charge_credit = charge_credit

    async def execute(self, command: TopUpVerifyCommandDTO) -> Result[CreditOperationResponseDTO]:
        # Step 1: Payer cancelled at the gateway
        if command.status.upper() != "OK":
            return Return.err(
                Error(
                    code="PAYMENT_CANCELLED",
                    message="Payment was cancelled by the payer",
                    reason=f"authority={command.authority}, status={command.status}",
                )
            )

        # Step 2: Verify
        verification = await self.gateway.verify_payment(command.authority, command.amount)
        if not verification.success:
            logger.error(f"Top-up verification failed for authority {command.authority}: {verification.error}")
            return Return.err(
                Error(
                    code="PAYMENT_VERIFICATION_FAILED",
                    message="Payment could not be verified",
                    reason=verification.error,
                )
            )

        # Step 3: Charge
        return await self.charge_credit.execute(
            ChargeCommandDTO(
                account_id=command.account_id,
                amount=command.amount,
                description="شارژ آنلاین حساب اعتباری",
                reference_id=verification.ref_id,
                reactivate=True,
            )
        )
