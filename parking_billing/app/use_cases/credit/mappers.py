"""Entity to DTO conversion shared by the credit use cases"""

from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_engine import CreditOperationOutcome
from parking_billing.domain.credit_notification import CreditNotification
from parking_billing.domain.credit_transaction import CreditTransaction
from .dtos import CreditOperationResponseDTO, NotificationDTO, TransactionDTO


def _value(enum_or_str):
    return enum_or_str.value if hasattr(enum_or_str, "value") else enum_or_str


def to_transaction_dto(transaction: CreditTransaction) -> TransactionDTO:
    return TransactionDTO(
        id=transaction.id,
        account_id=transaction.account_id,
        transaction_type=_value(transaction.transaction_type),
        amount=transaction.amount,
        balance_before=transaction.balance_before,
        balance_after=transaction.balance_after,
        description=transaction.description,
        reference_id=transaction.reference_id,
        created_at=transaction.created_at,
    )


def to_notification_dto(notification: CreditNotification) -> NotificationDTO:
    return NotificationDTO(
        id=notification.id,
        account_id=notification.account_id,
        notification_type=_value(notification.notification_type),
        title=notification.title,
        message=notification.message,
        severity=_value(notification.severity),
        is_read=notification.is_read,
        is_sent=notification.is_sent,
        sent_at=notification.sent_at,
        created_at=notification.created_at,
    )


def to_operation_response(
    account: CreditAccount,
    outcome: CreditOperationOutcome,
    delivered: int = 0,
    failed: int = 0,
) -> CreditOperationResponseDTO:
    return CreditOperationResponseDTO(
        account_id=account.id,
        transaction=to_transaction_dto(outcome.transaction),
        balance=outcome.new_balance,
        is_active=account.is_active,
        notifications=[to_notification_dto(n) for n in outcome.notifications],
        notifications_delivered=delivered,
        notifications_failed=failed,
    )
