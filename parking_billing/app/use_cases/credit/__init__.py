"""Credit account use cases"""
from .charge_credit import ChargeCredit
from .deduct_credit import DeductCredit
from .record_transaction import RecordCreditTransaction
from .delete_transactions import DeleteCreditTransactions
from .list_transactions import ListCreditTransactions
from .get_statement import GetAccountStatement
from .run_monthly_charges import RunMonthlyCharges
from .check_notifications import CheckCreditNotifications
from .send_notifications import SendCreditNotifications
from .top_up import RequestCreditTopUp, VerifyCreditTopUp
from .dtos import (
    ChargeCommandDTO,
    DeductCommandDTO,
    RecordTransactionCommandDTO,
    DeleteTransactionsCommandDTO,
    TransactionQuery,
    TransactionDTO,
    NotificationDTO,
    CreditOperationResponseDTO,
    ListTransactionsResponseDTO,
    DeleteTransactionsResponseDTO,
    StatementResponseDTO,
    MonthlyChargeResultDTO,
    NotificationCheckResultDTO,
    SendNotificationsCommandDTO,
    SendNotificationsResultDTO,
    TopUpRequestCommandDTO,
    TopUpRequestResponseDTO,
    TopUpVerifyCommandDTO,
)

__all__ = [
    "ChargeCredit",
    "DeductCredit",
    "RecordCreditTransaction",
    "DeleteCreditTransactions",
    "ListCreditTransactions",
    "GetAccountStatement",
    "RunMonthlyCharges",
    "CheckCreditNotifications",
    "SendCreditNotifications",
    "RequestCreditTopUp",
    "VerifyCreditTopUp",
    "ChargeCommandDTO",
    "DeductCommandDTO",
    "RecordTransactionCommandDTO",
    "DeleteTransactionsCommandDTO",
    "TransactionQuery",
    "TransactionDTO",
    "NotificationDTO",
    "CreditOperationResponseDTO",
    "ListTransactionsResponseDTO",
    "DeleteTransactionsResponseDTO",
    "StatementResponseDTO",
    "MonthlyChargeResultDTO",
    "NotificationCheckResultDTO",
    "SendNotificationsCommandDTO",
    "SendNotificationsResultDTO",
    "TopUpRequestCommandDTO",
    "TopUpRequestResponseDTO",
    "TopUpVerifyCommandDTO",
]
