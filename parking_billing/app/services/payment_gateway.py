"""Payment Gateway Interface

Defines the contract for online top-up payments.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PaymentRequest:
    success: bool
    authority: Optional[str] = None
    payment_url: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PaymentVerification:
    success: bool
    ref_id: Optional[str] = None
    error: Optional[str] = None


class PaymentGateway(ABC):

    @abstractmethod
    async def request_payment(
        self,
        amount: int,
        description: str,
        mobile: Optional[str] = None,
        email: Optional[str] = None,
    ) -> PaymentRequest:
        """
        Open a payment at the gateway

        Returns:
            PaymentRequest with the authority and the URL the payer is sent to
        """
        pass

    @abstractmethod
    async def verify_payment(self, authority: str, amount: int) -> PaymentVerification:
        """
        Verify a payment after the payer returns from the gateway

        Returns:
            PaymentVerification with the gateway reference id on success
        """
        pass
