"""Data Transfer Objects for Credit Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from parking_billing.domain.credit_notification import NotificationChannel
from parking_billing.domain.credit_transaction import TransactionType


class ChargeCommandDTO(BaseModel):
    """
    Command DTO for topping up a credit account

    Used as input to ChargeCredit use case.
    """

    account_id: int = Field(..., description="Credit account identifier")

    amount: int = Field(..., gt=0, description="Amount to add (must be > 0)")

    description: str = Field(default="شارژ دستی حساب", description="Ledger description")

    reference_id: Optional[str] = Field(default=None, description="External reference (payment ref id)")

    reactivate: bool = Field(
        default=False,
        description="Reactivate a suspended account before charging",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": 7,
                "amount": 100000,
                "description": "شارژ دستی حساب",
                "reactivate": False,
            }
        }


class DeductCommandDTO(BaseModel):
    """
    Command DTO for drawing from a credit account

    Used as input to DeductCredit use case.
    """

    account_id: int = Field(..., description="Credit account identifier")

    amount: int = Field(..., gt=0, description="Amount to deduct (must be > 0)")

    description: str = Field(default="کسر هزینه پارکینگ", description="Ledger description")

    reference_id: Optional[str] = Field(default=None, description="Parking session id or other reference")

    allow_negative: bool = Field(default=False, description="Let the balance go below zero")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": 7,
                "amount": 35000,
                "reference_id": "42",
                "allow_negative": False,
            }
        }


class RecordTransactionCommandDTO(BaseModel):
    """
    Command DTO for a manual ledger entry

    ADJUSTMENT amounts are signed deltas; MONTHLY_RESET sets the balance.
    """

    account_id: int = Field(..., description="Credit account identifier")
    transaction_type: TransactionType = Field(..., description="Ledger entry type")
    amount: int = Field(..., description="Amount (signed for ADJUSTMENT)")
    description: str = Field(default="", description="Ledger description")
    reference_id: Optional[str] = Field(default=None)


class DeleteTransactionsCommandDTO(BaseModel):
    account_id: int = Field(..., description="Credit account identifier")
    transaction_ids: List[int] = Field(..., min_length=1, description="Transactions to delete")


class TransactionQuery(BaseModel):
    """Filters and paging for listing transactions"""

    account_id: int
    transaction_type: Optional[TransactionType] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class TransactionDTO(BaseModel):
    id: int
    account_id: int
    transaction_type: str
    amount: int
    balance_before: int
    balance_after: int
    description: str
    reference_id: Optional[str] = None
    created_at: datetime


class NotificationDTO(BaseModel):
    id: Optional[int] = None
    account_id: int
    notification_type: str
    title: str
    message: str
    severity: str
    is_read: bool = False
    is_sent: bool = False
    sent_at: Optional[datetime] = None
    created_at: datetime


class CreditOperationResponseDTO(BaseModel):
    """
    Response DTO for balance-changing operations

    Contains the ledger entry, the resulting account state and the
    notifications the operation produced.
    """

    account_id: int = Field(..., description="Credit account identifier")
    transaction: TransactionDTO = Field(..., description="Recorded ledger entry")
    balance: int = Field(..., description="Balance after the operation")
    is_active: bool = Field(..., description="Account active after the operation")
    notifications: List[NotificationDTO] = Field(default_factory=list)
    notifications_delivered: int = Field(default=0, description="Notifications delivered right away")
    notifications_failed: int = Field(default=0, description="Notifications whose delivery failed")


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionDTO]
    total: int
    page: int
    limit: int
    total_pages: int


class DeleteTransactionsResponseDTO(BaseModel):
    account_id: int
    deleted_count: int
    balance_before: int
    balance_after: int


class StatementResponseDTO(BaseModel):
    """Account statement for a period"""

    account_id: int
    owner_name: str
    period_start: datetime
    period_end: datetime
    opening_balance: int
    closing_balance: int
    total_credits: int
    total_debits: int
    transaction_count: int
    current_balance: int
    transactions: List[TransactionDTO] = Field(default_factory=list)


class MonthlyChargeResultDTO(BaseModel):
    """Result of one monthly auto-charge sweep"""

    processed: int = Field(default=0, description="Accounts enrolled in auto-charge")
    successful: int = Field(default=0, description="Accounts charged")
    failed: int = Field(default=0, description="Accounts whose charge failed")
    skipped: int = Field(default=0, description="Accounts not due or without a plan")
    errors: List[str] = Field(default_factory=list)
    execution_time_ms: int = Field(default=0)


class NotificationCheckResultDTO(BaseModel):
    """Result of one balance alert sweep"""

    processed: int = Field(default=0, description="Active accounts inspected")
    notifications_created: int = Field(default=0)
    accounts_with_issues: int = Field(default=0)
    errors: List[str] = Field(default_factory=list)
    execution_time_ms: int = Field(default=0)


class SendNotificationsCommandDTO(BaseModel):
    account_id: Optional[int] = Field(default=None, description="Restrict to one account")
    channels: List[NotificationChannel] = Field(
        default_factory=lambda: [NotificationChannel.IN_APP],
        description="Requested channels, filtered by account settings",
    )
    limit: int = Field(default=100, ge=1, le=1000)


class SendNotificationsResultDTO(BaseModel):
    processed: int = Field(default=0)
    sent: int = Field(default=0)
    failed: int = Field(default=0)
    errors: List[str] = Field(default_factory=list)


class TopUpRequestCommandDTO(BaseModel):
    account_id: int = Field(..., description="Credit account identifier")
    amount: int = Field(..., gt=0, description="Top-up amount")
    description: str = Field(default="شارژ آنلاین حساب اعتباری")


class TopUpRequestResponseDTO(BaseModel):
    account_id: int
    amount: int
    authority: str
    payment_url: str


class TopUpVerifyCommandDTO(BaseModel):
    """Payer returned from the gateway; status is the gateway callback status"""

    account_id: int
    authority: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    status: str = Field(default="OK")
