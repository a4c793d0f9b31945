"""Request schemas for Credit Account API

Pydantic models for validating incoming HTTP requests. The account id comes
from the URL path.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from parking_billing.domain.credit_transaction import TransactionType


class ChargeRequestSchema(BaseModel):
    """
    Request schema for charging a credit account

    Used for POST /credit-accounts/{account_id}/charge endpoint.
    """

    amount: int = Field(..., gt=0, description="Amount to add (must be > 0)")
    description: Optional[str] = Field(default=None, description="Ledger description")
    reference_id: Optional[str] = Field(default=None, description="External reference")
    reactivate: bool = Field(default=False, description="Reactivate a suspended account")

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 100000,
                "description": "شارژ دستی حساب",
            }
        }


class DeductRequestSchema(BaseModel):
    """
    Request schema for deducting from a credit account

    Used for POST /credit-accounts/{account_id}/deduct endpoint.
    """

    amount: int = Field(..., gt=0, description="Amount to deduct (must be > 0)")
    description: Optional[str] = Field(default=None, description="Ledger description")
    reference_id: Optional[str] = Field(default=None, description="Parking session id or other reference")
    allow_negative: bool = Field(default=False, description="Let the balance go below zero")

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 35000,
                "reference_id": "42",
            }
        }


class TransactionRequestSchema(BaseModel):
    """Manual ledger entry; ADJUSTMENT amounts are signed"""

    transaction_type: TransactionType
    amount: int
    description: str = Field(default="")
    reference_id: Optional[str] = None


class BulkDeleteRequestSchema(BaseModel):
    transaction_ids: List[int] = Field(..., min_length=1)


class TopUpRequestSchema(BaseModel):
    amount: int = Field(..., gt=0, description="Top-up amount")


class TopUpVerifySchema(BaseModel):
    """Gateway callback parameters"""

    authority: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    status: str = Field(default="OK")
