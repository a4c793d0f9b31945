"""CompleteParkingSession Use Case

Closes an active parking session: prices the stay, takes the payment
(from a credit account for CREDIT payments) and records it.
"""

import logging
from datetime import datetime, tzinfo
from typing import Iterable, Optional
from parking_billing.libs.result import Result, Return, Error
from parking_billing.app.services.unit_of_work import UnitOfWork
from parking_billing.app.services.notification_service import NotificationService
from parking_billing.app.repositories.tariff_repository import TariffRepository
from parking_billing.app.repositories.holiday_repository import HolidayRepository
from parking_billing.app.repositories.parking_session_repository import ParkingSessionRepository
from parking_billing.app.repositories.payment_repository import PaymentRepository
from parking_billing.app.repositories.credit_account_repository import CreditAccountRepository
from parking_billing.app.repositories.credit_account_settings_repository import CreditAccountSettingsRepository
from parking_billing.app.repositories.credit_transaction_repository import CreditTransactionRepository
from parking_billing.app.repositories.credit_notification_repository import CreditNotificationRepository
from parking_billing.app.use_cases.credit.delivery import deliver_notifications
from parking_billing.domain.credit_engine import apply_deduction
from parking_billing.domain.credit_notification import NotificationChannel
from parking_billing.domain.exceptions import BillingError
from parking_billing.domain.parking_session import PaymentMethod, SessionStatus
from parking_billing.domain.payment import Payment, PaymentStatus
from parking_billing.domain.tariff_calculator import (
    as_naive_utc,
    calculate_fee,
    generate_cost_breakdown,
    select_tariff,
)
from .dtos import CompleteSessionCommandDTO, CompleteSessionResponseDTO

logger = logging.getLogger(__name__)


class CompleteParkingSession:
    """
    Use Case: Complete a parking session

    Business Rules:
    1. Only ACTIVE sessions can be completed
    2. The session's own tariff is used when set, otherwise the tariff in
       force at entry is selected
    3. CREDIT payments deduct the fee from the credit account with the
       session id as reference; insufficient balance fails the completion
    4. Session, payment and ledger entry are written in one unit of work
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_repo: ParkingSessionRepository,
        tariff_repo: TariffRepository,
        holiday_repo: HolidayRepository,
        payment_repo: PaymentRepository,
        account_repo: CreditAccountRepository,
        settings_repo: CreditAccountSettingsRepository,
        transaction_repo: CreditTransactionRepository,
        notification_repo: CreditNotificationRepository,
        notifier: Optional[NotificationService] = None,
        channels: Iterable[NotificationChannel] = (NotificationChannel.IN_APP,),
        tz: Optional[tzinfo] = None,
        currency: str = "تومان",
    ):
        self.uow = uow
        self.session_repo = session_repo
        self.tariff_repo = tariff_repo
        self.holiday_repo = holiday_repo
        self.payment_repo = payment_repo
        self.account_repo = account_repo
        self.settings_repo = settings_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo
        self.notifier = notifier
        self.channels = list(channels)
        self.tz = tz
        self.currency = currency

    async def execute(self, command: CompleteSessionCommandDTO) -> Result[CompleteSessionResponseDTO]:
        account = None
        settings = None
        outcome = None
        try:
            # Step 1: Lock session
            session = await self.session_repo.get_by_id(command.session_id, for_update=True)
            if not session:
                return Return.err(
                    Error(
                        code="SESSION_NOT_FOUND",
                        message=f"Parking session {command.session_id} not found",
                    )
                )
            if session.status != SessionStatus.ACTIVE:
                return Return.err(
                    Error(
                        code="SESSION_NOT_ACTIVE",
                        message=f"Parking session {command.session_id} is not active",
                        reason=f"status={session.status.value}",
                    )
                )

            exit_time = as_naive_utc(command.exit_time) if command.exit_time else datetime.utcnow()
            if exit_time < session.entry_time:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="Exit time must not be before entry time",
                        reason=f"entry={session.entry_time.isoformat()}, exit={exit_time.isoformat()}",
                    )
                )

            # Step 2: Resolve tariff
            tariff = None
            if session.tariff_id is not None:
                tariff = await self.tariff_repo.get_by_id(session.tariff_id)
            if tariff is None:
                tariffs = await self.tariff_repo.list_active(session.vehicle_type)
                holidays = await self.holiday_repo.list_active()
                tariff = select_tariff(session.entry_time, session.vehicle_type, tariffs, holidays, self.tz)
            if tariff is None:
                return Return.err(
                    Error(
                        code="NO_APPLICABLE_TARIFF",
                        message=f"No applicable tariff for vehicle type {session.vehicle_type.value}",
                        reason=f"session_id={session.id}",
                    )
                )

            # Step 3: Price the stay
            calculation = calculate_fee(session.entry_time, exit_time, tariff)
            amount = calculation.total_amount

            # Step 4: Take credit payment
            if command.payment_method == PaymentMethod.CREDIT:
                if command.credit_account_id is None:
                    return Return.err(
                        Error(
                            code="VALIDATION_ERROR",
                            message="credit_account_id is required for CREDIT payments",
                        )
                    )
                account = await self.account_repo.get_by_id(command.credit_account_id, for_update=True)
                if not account:
                    return Return.err(
                        Error(
                            code="CREDIT_ACCOUNT_NOT_FOUND",
                            message=f"Credit account {command.credit_account_id} not found",
                        )
                    )
                settings = await self.settings_repo.get_by_account_id(account.id)

                if amount > 0:
                    outcome = apply_deduction(
                        account,
                        settings,
                        amount,
                        description=f"هزینه پارکینگ پلاک {session.plate_number}",
                        reference_id=str(session.id),
                        allow_negative=command.allow_negative,
                    )
                    outcome.transaction = await self.transaction_repo.create(outcome.transaction)
                    outcome.notifications = [
                        await self.notification_repo.create(n) for n in outcome.notifications
                    ]
                    await self.account_repo.update(account)

            # Step 5: Complete session
            session.exit_time = exit_time
            session.tariff_id = tariff.id
            session.total_amount = amount
            session.paid_amount = amount
            session.is_paid = True
            session.payment_method = command.payment_method
            session.credit_account_id = account.id if account else None
            session.status = SessionStatus.COMPLETED
            session.updated_at = datetime.utcnow()
            await self.session_repo.update(session)

            # Step 6: Record payment
            payment = None
            if amount > 0:
                payment = await self.payment_repo.create(
                    Payment(
                        session_id=session.id,
                        amount=amount,
                        payment_method=command.payment_method,
                        status=PaymentStatus.COMPLETED,
                        operator_id=command.operator_id,
                        reference_id=str(outcome.transaction.id) if outcome else None,
                    )
                )

            # Step 7: Commit
            await self.uow.commit()

            logger.info(
                f"Completed parking session {session.id} ({session.plate_number}): "
                f"{amount} via {command.payment_method.value}"
            )

            response = CompleteSessionResponseDTO(
                session_id=session.id,
                plate_number=session.plate_number,
                exit_time=exit_time,
                total_amount=amount,
                payment_method=command.payment_method.value,
                payment_id=payment.id if payment else None,
                credit_transaction_id=outcome.transaction.id if outcome else None,
                credit_balance=account.balance if account else None,
                applied_rules=list(calculation.applied_rules),
                receipt_lines=generate_cost_breakdown(calculation, self.currency),
            )

        except BillingError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="COMPLETE_SESSION_FAILED",
                    message="Failed to complete parking session",
                    reason=str(e),
                )
            )

        # Step 8: Deliver credit notifications
        if outcome is not None:
            await deliver_notifications(
                self.notifier,
                outcome.notifications,
                account,
                settings,
                self.channels,
                self.notification_repo,
                self.uow,
            )

        return Return.ok(response)
