"""Credit Account API Routes

FastAPI routes for prepaid credit account operations.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from parking_billing.api.schemas.credit_request import (
    BulkDeleteRequestSchema,
    ChargeRequestSchema,
    DeductRequestSchema,
    TopUpRequestSchema,
    TopUpVerifySchema,
    TransactionRequestSchema,
)
from parking_billing.app.services.notification_service import NotificationService
from parking_billing.app.services.payment_gateway import PaymentGateway
from parking_billing.app.use_cases.credit.dtos import (
    ChargeCommandDTO,
    CreditOperationResponseDTO,
    DeductCommandDTO,
    DeleteTransactionsCommandDTO,
    DeleteTransactionsResponseDTO,
    ListTransactionsResponseDTO,
    MonthlyChargeResultDTO,
    NotificationCheckResultDTO,
    RecordTransactionCommandDTO,
    SendNotificationsCommandDTO,
    SendNotificationsResultDTO,
    StatementResponseDTO,
    TopUpRequestCommandDTO,
    TopUpRequestResponseDTO,
    TopUpVerifyCommandDTO,
    TransactionQuery,
)
from parking_billing.app.use_cases.credit.charge_credit import ChargeCredit
from parking_billing.app.use_cases.credit.deduct_credit import DeductCredit
from parking_billing.app.use_cases.credit.record_transaction import RecordCreditTransaction
from parking_billing.app.use_cases.credit.delete_transactions import DeleteCreditTransactions
from parking_billing.app.use_cases.credit.list_transactions import ListCreditTransactions
from parking_billing.app.use_cases.credit.get_statement import GetAccountStatement
from parking_billing.app.use_cases.credit.run_monthly_charges import RunMonthlyCharges
from parking_billing.app.use_cases.credit.check_notifications import CheckCreditNotifications
from parking_billing.app.use_cases.credit.send_notifications import SendCreditNotifications
from parking_billing.app.use_cases.credit.top_up import RequestCreditTopUp, VerifyCreditTopUp
from parking_billing.adapter.repositories import (
    SqlAlchemyCreditAccountRepository,
    SqlAlchemyCreditAccountSettingsRepository,
    SqlAlchemyCreditNotificationRepository,
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyMonthlyChargeRepository,
)
from parking_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from parking_billing.depends import (
    DEFAULT_CHANNELS,
    get_notification_service,
    get_payment_gateway,
    get_session,
)
from parking_billing.domain.credit_transaction import TransactionType
from parking_billing.api.error import ClientError

router = APIRouter(prefix="/credit-accounts", tags=["Credit Accounts"])

_INSUFFICIENT_BALANCE_RESPONSE = {
    402: {
        "description": "Insufficient balance",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INSUFFICIENT_BALANCE",
                        "message": "موجودی کافی نیست. موجودی: 12,000، مبلغ درخواستی: 15,000",
                    }
                }
            }
        },
    }
}


def _charge_use_case(session: AsyncSession, notifier: NotificationService) -> ChargeCredit:
    return ChargeCredit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditAccountSettingsRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
        notifier=notifier,
        channels=DEFAULT_CHANNELS,
    )


@router.post("/{account_id}/charge", response_model=CreditOperationResponseDTO, status_code=status.HTTP_200_OK)
async def charge_account(
    account_id: int,
    request: ChargeRequestSchema,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Top up a credit account.

    **Returns:**
    - 200: Charge recorded, with resulting balance and notifications
    - 404: Account not found
    - 400: Account inactive (without reactivate) or invalid amount
    """
    command = ChargeCommandDTO(account_id=account_id, **request.model_dump(exclude_none=True))
    result = await _charge_use_case(session, notifier).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{account_id}/deduct",
    response_model=CreditOperationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=_INSUFFICIENT_BALANCE_RESPONSE,
)
async def deduct_account(
    account_id: int,
    request: DeductRequestSchema,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Draw from a credit account.

    **Returns:**
    - 200: Deduction recorded, with balance alerts raised by it
    - 402: Balance (plus credit limit) does not cover the amount
    - 404: Account not found
    - 400: Account inactive or invalid amount
    """
    use_case = DeductCredit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditAccountSettingsRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
        notifier=notifier,
        channels=DEFAULT_CHANNELS,
    )
    command = DeductCommandDTO(account_id=account_id, **request.model_dump(exclude_none=True))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{account_id}/transactions", response_model=ListTransactionsResponseDTO)
async def list_transactions(
    account_id: int,
    transaction_type: Optional[TransactionType] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    """
    Paged ledger of an account, newest first.
    """
    use_case = ListCreditTransactions(
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    query = TransactionQuery(account_id=account_id, transaction_type=transaction_type, page=page, limit=limit)
    result = await use_case.execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{account_id}/transactions",
    response_model=CreditOperationResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def record_transaction(
    account_id: int,
    request: TransactionRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Record a manual ledger entry (charge, deduction, refund, adjustment or monthly reset).
    """
    use_case = RecordCreditTransaction(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
    )
    command = RecordTransactionCommandDTO(account_id=account_id, **request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{account_id}/transactions/bulk-delete", response_model=DeleteTransactionsResponseDTO)
async def bulk_delete_transactions(
    account_id: int,
    request: BulkDeleteRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Delete ledger entries and reset the balance to the latest remaining entry.
    """
    use_case = DeleteCreditTransactions(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    command = DeleteTransactionsCommandDTO(account_id=account_id, transaction_ids=request.transaction_ids)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{account_id}/statement", response_model=StatementResponseDTO)
async def get_statement(
    account_id: int,
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    """
    Account statement for a period (default: last 30 days).
    """
    use_case = GetAccountStatement(
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    result = await use_case.execute(account_id, start, end)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/monthly-charge", response_model=MonthlyChargeResultDTO)
async def run_monthly_charge(
    force_all: bool = Query(default=False),
    session: AsyncSession = Depends(get_session),
):
    """
    Run the monthly auto-charge sweep now.
    """
    use_case = RunMonthlyCharges(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditAccountSettingsRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
        SqlAlchemyMonthlyChargeRepository(session),
    )
    result = await use_case.execute(force_all=force_all)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/check-notifications", response_model=NotificationCheckResultDTO)
async def check_notifications(
    force_all: bool = Query(default=False),
    session: AsyncSession = Depends(get_session),
):
    """
    Run the balance alert sweep now.
    """
    use_case = CheckCreditNotifications(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditAccountSettingsRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
        dedup_hours=ApplicationConfig.NOTIFICATION_DEDUP_HOURS,
    )
    result = await use_case.execute(force_all=force_all)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/send-notifications", response_model=SendNotificationsResultDTO)
async def send_notifications(
    request: SendNotificationsCommandDTO,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Deliver pending notifications over the requested channels.
    """
    use_case = SendCreditNotifications(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditAccountSettingsRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
        notifier,
    )
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{account_id}/top-up", response_model=TopUpRequestResponseDTO)
async def request_top_up(
    account_id: int,
    request: TopUpRequestSchema,
    session: AsyncSession = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Open an online payment for a top-up and return the gateway URL.
    """
    use_case = RequestCreditTopUp(SqlAlchemyCreditAccountRepository(session), gateway)
    result = await use_case.execute(TopUpRequestCommandDTO(account_id=account_id, amount=request.amount))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{account_id}/top-up/verify", response_model=CreditOperationResponseDTO)
async def verify_top_up(
    account_id: int,
    request: TopUpVerifySchema,
    session: AsyncSession = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Verify a returned payment and charge the account with it.
    """
    use_case = VerifyCreditTopUp(gateway, _charge_use_case(session, notifier))
    command = TopUpVerifyCommandDTO(account_id=account_id, **request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
