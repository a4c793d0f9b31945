"""Request schemas for Parking Session API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from parking_billing.domain.parking_session import PaymentMethod


class CompleteSessionRequestSchema(BaseModel):
    """
    Request schema for completing a parking session

    Used for POST /parking-sessions/{session_id}/complete endpoint.
    CREDIT payments require credit_account_id.
    """

    exit_time: Optional[datetime] = Field(default=None, description="Exit instant (default: now)")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    credit_account_id: Optional[int] = Field(default=None)
    allow_negative: bool = Field(default=False)
    operator_id: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "exit_time": "2024-01-06T11:20:00",
                "payment_method": "CREDIT",
                "credit_account_id": 7,
            }
        }
