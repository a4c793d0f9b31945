"""Parking Session API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from parking_billing.api.schemas.parking_request import CompleteSessionRequestSchema
from parking_billing.app.services.notification_service import NotificationService
from parking_billing.app.use_cases.pricing.dtos import CompleteSessionCommandDTO, CompleteSessionResponseDTO
from parking_billing.app.use_cases.pricing.complete_session import CompleteParkingSession
from parking_billing.adapter.repositories import (
    SqlAlchemyCreditAccountRepository,
    SqlAlchemyCreditAccountSettingsRepository,
    SqlAlchemyCreditNotificationRepository,
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyHolidayRepository,
    SqlAlchemyParkingSessionRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyTariffRepository,
)
from parking_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from parking_billing.depends import DEFAULT_CHANNELS, LOCAL_TZ, get_notification_service, get_session
from parking_billing.api.error import ClientError

router = APIRouter(prefix="/parking-sessions", tags=["Parking Sessions"])


@router.post(
    "/{session_id}/complete",
    response_model=CompleteSessionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {
            "description": "Credit account balance too low",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "موجودی کافی نیست",
                        }
                    }
                }
            },
        }
    },
)
async def complete_session(
    session_id: int,
    request: CompleteSessionRequestSchema,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Close an active parking session and take its payment.

    **Returns:**
    - 200: Session completed with receipt
    - 402: CREDIT payment with insufficient balance
    - 404: Session, tariff or credit account not found
    - 400: Session not active or invalid parameters
    """
    use_case = CompleteParkingSession(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyParkingSessionRepository(session),
        SqlAlchemyTariffRepository(session),
        SqlAlchemyHolidayRepository(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditAccountSettingsRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyCreditNotificationRepository(session),
        notifier=notifier,
        channels=DEFAULT_CHANNELS,
        tz=LOCAL_TZ,
        currency=ApplicationConfig.CURRENCY_LABEL,
    )
    command = CompleteSessionCommandDTO(session_id=session_id, **request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
