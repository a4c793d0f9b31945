"""Credit Engine

Balance rules for prepaid credit accounts:
- charge and deduction with their notification side effects
- manual ledger entries for every transaction type
- monthly auto-charge scheduling
- polling re-evaluation of balance alerts
- balance reconciliation and statements

Functions mutate the CreditAccount they are handed and return unsaved
CreditTransaction / CreditNotification entities. Persisting them (and the
account) is the caller's job, inside one unit of work.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Sequence

from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_account_settings import CreditAccountSettings
from parking_billing.domain.credit_notification import (
    CreditNotification,
    NotificationSeverity,
    NotificationType,
)
from parking_billing.domain.credit_transaction import CreditTransaction, TransactionType
from parking_billing.domain.exceptions import (
    InactiveAccountError,
    InsufficientBalanceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_CHARGE_DESCRIPTION = "شارژ دستی حساب"
DEFAULT_DEDUCTION_DESCRIPTION = "کسر هزینه پارکینگ"
MONTHLY_CHARGE_DESCRIPTION = "شارژ ماهانه خودکار"


@dataclass
class CreditOperationOutcome:
    transaction: CreditTransaction
    new_balance: int
    notifications: list[CreditNotification] = field(default_factory=list)
    suspended: bool = False


def _fa(amount: int) -> str:
    return f"{amount:,}"


def _notification(
    account: CreditAccount,
    notification_type: NotificationType,
    severity: NotificationSeverity,
    title: str,
    message: str,
    now: datetime,
) -> CreditNotification:
    return CreditNotification(
        account_id=account.id,
        notification_type=notification_type,
        severity=severity,
        title=title,
        message=message,
        created_at=now,
    )


def _record(
    account: CreditAccount,
    transaction_type: TransactionType,
    amount: int,
    description: str,
    now: datetime,
    reference_id: Optional[str],
) -> CreditTransaction:
    balance_before = account.balance
    balance_after = transaction_type.apply_to(balance_before, amount)

    transaction = CreditTransaction(
        account_id=account.id,
        transaction_type=transaction_type,
        amount=amount,
        balance_before=balance_before,
        balance_after=balance_after,
        description=description,
        reference_id=reference_id,
        created_at=now,
    )
    account.balance = balance_after
    account.updated_at = now
    return transaction


# --- Notification templates -------------------------------------------------

def _tier_notification(
    account: CreditAccount, settings: CreditAccountSettings, balance: int, now: datetime
) -> Optional[CreditNotification]:
    """Threshold ladder, most severe first. At most one tier matches."""
    if settings.critical_threshold >= balance > 0:
        return _notification(
            account, NotificationType.LOW_BALANCE, NotificationSeverity.CRITICAL,
            "هشدار بحرانی - موجودی بسیار کم",
            f"موجودی حساب شما به {_fa(balance)} تومان کاهش یافته است. لطفاً فوراً حساب خود را شارژ کنید.",
            now,
        )
    if settings.warning_threshold_2 >= balance > settings.critical_threshold:
        return _notification(
            account, NotificationType.LOW_BALANCE, NotificationSeverity.HIGH,
            "هشدار - موجودی کم",
            f"موجودی حساب شما به {_fa(balance)} تومان کاهش یافته است.",
            now,
        )
    if settings.warning_threshold_1 >= balance > settings.warning_threshold_2:
        return _notification(
            account, NotificationType.LOW_BALANCE, NotificationSeverity.MEDIUM,
            "اطلاعیه - کاهش موجودی",
            f"موجودی حساب شما به {_fa(balance)} تومان کاهش یافته است.",
            now,
        )
    if settings.low_balance_threshold >= balance > settings.warning_threshold_1:
        return _notification(
            account, NotificationType.LOW_BALANCE, NotificationSeverity.LOW,
            "اطلاعیه - کاهش موجودی",
            f"موجودی حساب شما در حال کاهش است. موجودی فعلی: {_fa(balance)} تومان.",
            now,
        )
    return None


def _zero_balance_notification(account: CreditAccount, now: datetime) -> CreditNotification:
    return _notification(
        account, NotificationType.LOW_BALANCE, NotificationSeverity.CRITICAL,
        "موجودی حساب صفر شد",
        "موجودی حساب شما به پایان رسیده است. لطفاً حساب خود را شارژ کنید.",
        now,
    )


def _suspension_notification(account: CreditAccount, now: datetime) -> CreditNotification:
    return _notification(
        account, NotificationType.ACCOUNT_SUSPENDED, NotificationSeverity.CRITICAL,
        "حساب شما به حالت تعلیق درآمد",
        "حساب اعتباری شما به دلیل عدم موجودی به حالت تعلیق درآمد. برای فعال‌سازی مجدد، حساب خود را شارژ کنید.",
        now,
    )


def _credit_limit_notification(account: CreditAccount, now: datetime) -> CreditNotification:
    return _notification(
        account, NotificationType.CREDIT_LIMIT_EXCEEDED, NotificationSeverity.CRITICAL,
        "عبور از سقف اعتبار",
        "شما از سقف اعتبار خود فراتر رفته‌اید. لطفاً فوراً حساب خود را شارژ کنید.",
        now,
    )


def monthly_charge_failed_notification(account_id: int, now: datetime) -> CreditNotification:
    return CreditNotification(
        account_id=account_id,
        notification_type=NotificationType.MONTHLY_CHARGE_FAILED,
        severity=NotificationSeverity.HIGH,
        title="خطا در شارژ ماهانه",
        message="متأسفانه در شارژ ماهانه حساب شما خطایی رخ داد. لطفاً با پشتیبانی تماس بگیرید.",
        created_at=now,
    )


def _suspend(account: CreditAccount, now: datetime) -> None:
    account.is_active = False
    account.updated_at = now
    logger.warning(f"Credit account {account.id} suspended at balance {account.balance}")


# --- Operations -------------------------------------------------------------

def _check_preconditions(account: CreditAccount, amount: int) -> None:
    if not account.is_active:
        raise InactiveAccountError(f"Credit account {account.id} is inactive")
    if amount <= 0:
        raise ValidationError("Amount must be positive")


def apply_charge(
    account: CreditAccount,
    amount: int,
    description: str = DEFAULT_CHARGE_DESCRIPTION,
    now: Optional[datetime] = None,
    reference_id: Optional[str] = None,
    reactivate: bool = False,
    monthly: bool = False,
) -> CreditOperationOutcome:
    """Top up an account.

    A suspended account is charged only when reactivate is set, which
    turns it active again first. monthly switches the confirmation to the
    auto-charge wording.

    Raises:
        InactiveAccountError: account inactive and reactivate not set
        ValidationError: amount <= 0
    """
    now = now or datetime.utcnow()

    if amount <= 0:
        raise ValidationError("Amount must be positive")
    if reactivate and not account.is_active:
        logger.info(f"Reactivating credit account {account.id}")
        account.is_active = True
    _check_preconditions(account, amount)

    transaction = _record(account, TransactionType.CHARGE, amount, description, now, reference_id)
    account.last_charged_at = now
    new_balance = transaction.balance_after

    if monthly:
        confirmation = _notification(
            account, NotificationType.MONTHLY_CHARGE_SUCCESS, NotificationSeverity.LOW,
            "شارژ ماهانه با موفقیت انجام شد",
            f"حساب شما به مبلغ {_fa(amount)} تومان به صورت خودکار شارژ شد. موجودی جدید: {_fa(new_balance)} تومان.",
            now,
        )
    else:
        confirmation = _notification(
            account, NotificationType.MANUAL_CHARGE, NotificationSeverity.LOW,
            "شارژ حساب با موفقیت انجام شد",
            f"حساب شما به مبلغ {_fa(amount)} تومان شارژ شد. موجودی جدید: {_fa(new_balance)} تومان.",
            now,
        )
    notifications = [confirmation]

    if transaction.balance_before <= 0 < new_balance:
        notifications.append(
            _notification(
                account, NotificationType.ACCOUNT_REACTIVATED, NotificationSeverity.MEDIUM,
                "حساب شما مجدداً فعال شد",
                "حساب اعتباری شما به دلیل شارژ موفقیت‌آمیز مجدداً فعال شد.",
                now,
            )
        )

    return CreditOperationOutcome(transaction=transaction, new_balance=new_balance, notifications=notifications)


def apply_deduction(
    account: CreditAccount,
    settings: Optional[CreditAccountSettings],
    amount: int,
    description: str = DEFAULT_DEDUCTION_DESCRIPTION,
    now: Optional[datetime] = None,
    reference_id: Optional[str] = None,
    allow_negative: bool = False,
) -> CreditOperationOutcome:
    """Draw an amount from an account.

    Going below the current balance needs allow_negative, or a credit
    limit wide enough to absorb the result. Threshold notifications are
    evaluated on the new balance only when settings exist.

    Raises:
        InactiveAccountError: account inactive
        ValidationError: amount <= 0
        InsufficientBalanceError: balance and credit limit do not cover amount
    """
    now = now or datetime.utcnow()
    _check_preconditions(account, amount)

    balance = account.balance
    if balance < amount and not allow_negative:
        within_limit = account.credit_limit > 0 and balance - amount >= -account.credit_limit
        if not within_limit:
            raise InsufficientBalanceError(
                f"Insufficient balance: {balance} available, {amount} requested",
                balance=balance,
                requested=amount,
            )

    transaction = _record(account, TransactionType.DEDUCTION, amount, description, now, reference_id)
    new_balance = transaction.balance_after
    notifications: list[CreditNotification] = []
    suspended = False

    if settings is not None:
        tier = _tier_notification(account, settings, new_balance, now)
        if tier is not None:
            notifications.append(tier)

    if new_balance <= 0:
        notifications.append(_zero_balance_notification(account, now))
        if settings is not None and settings.suspend_on_zero_balance:
            _suspend(account, now)
            notifications.append(_suspension_notification(account, now))
            suspended = True

    if account.credit_limit > 0 and new_balance < -account.credit_limit:
        logger.warning(
            f"Credit account {account.id} exceeded credit limit {account.credit_limit}: balance {new_balance}"
        )
        notifications.append(_credit_limit_notification(account, now))

    return CreditOperationOutcome(
        transaction=transaction,
        new_balance=new_balance,
        notifications=notifications,
        suspended=suspended,
    )


def apply_transaction(
    account: CreditAccount,
    transaction_type: TransactionType,
    amount: int,
    description: str,
    now: Optional[datetime] = None,
    reference_id: Optional[str] = None,
) -> CreditOperationOutcome:
    """Manual ledger entry of any type, applied through the balance-effect table.

    ADJUSTMENT takes a signed amount; every other type needs amount > 0,
    MONTHLY_RESET accepts 0.
    """
    now = now or datetime.utcnow()

    if transaction_type == TransactionType.ADJUSTMENT:
        if amount == 0:
            raise ValidationError("Adjustment amount must not be zero")
    elif transaction_type == TransactionType.MONTHLY_RESET:
        if amount < 0:
            raise ValidationError("Reset amount must not be negative")
    elif amount <= 0:
        raise ValidationError("Amount must be positive")

    transaction = _record(account, transaction_type, amount, description, now, reference_id)
    notifications: list[CreditNotification] = []
    if transaction.balance_after <= 0:
        notifications.append(_zero_balance_notification(account, now))

    return CreditOperationOutcome(
        transaction=transaction,
        new_balance=transaction.balance_after,
        notifications=notifications,
    )


# --- Monthly auto-charge ----------------------------------------------------

def _clamped(year: int, month: int, day_of_month: int) -> int:
    return min(day_of_month, calendar.monthrange(year, month)[1])


def next_charge_date(now: datetime, day_of_month: int) -> datetime:
    """This month's charge day, or next month's once today is past it.

    The day is clamped to the length of the target month.
    """
    year, month = now.year, now.month
    if now.day > day_of_month:
        month += 1
        if month > 12:
            month = 1
            year += 1

    return now.replace(year=year, month=month, day=_clamped(year, month, day_of_month))


def charge_period_start(now: datetime, day_of_month: int) -> datetime:
    """Midnight of the latest charge day on or before now.

    One completed auto-charge covers the period from this instant until
    the next charge day.
    """
    year, month = now.year, now.month
    if now.day < _clamped(year, month, day_of_month):
        month -= 1
        if month < 1:
            month = 12
            year -= 1

    return datetime(year, month, _clamped(year, month, day_of_month))


def is_charge_due(
    account: CreditAccount,
    settings: Optional[CreditAccountSettings],
    now: datetime,
    force_all: bool = False,
) -> bool:
    if not account.is_active or not account.auto_charge:
        return False
    if settings is None or not settings.auto_monthly_charge:
        return False
    if force_all:
        return True

    return (
        now.day == settings.charge_day_of_month
        or account.next_charge_date is None
        or account.next_charge_date <= now
    )


# --- Polling alerts ---------------------------------------------------------

def evaluate_balance_alerts(
    account: CreditAccount,
    settings: CreditAccountSettings,
    recent_notifications: Iterable[CreditNotification],
    now: Optional[datetime] = None,
    force_all: bool = False,
) -> list[CreditNotification]:
    """Re-evaluate alerts from the current balance.

    recent_notifications is the account's notifications within the dedup
    window. An alert is skipped when one with the same type and severity
    is in the window (credit limit alerts by type only), unless force_all.
    May suspend the account as a side effect.
    """
    now = now or datetime.utcnow()
    recent = list(recent_notifications)
    seen = {(n.notification_type, n.severity) for n in recent}
    seen_types = {n.notification_type for n in recent}
    balance = account.balance
    created: list[CreditNotification] = []

    tier = _tier_notification(account, settings, balance, now)
    if tier is not None and (force_all or (tier.notification_type, tier.severity) not in seen):
        created.append(tier)

    if balance <= 0:
        if force_all or (NotificationType.LOW_BALANCE, NotificationSeverity.CRITICAL) not in seen:
            created.append(_zero_balance_notification(account, now))
            if settings.suspend_on_zero_balance:
                _suspend(account, now)
                created.append(_suspension_notification(account, now))

    if account.credit_limit > 0 and balance < -account.credit_limit:
        if force_all or NotificationType.CREDIT_LIMIT_EXCEEDED not in seen_types:
            created.append(_credit_limit_notification(account, now))

    return created


# --- Reconciliation and statements -----------------------------------------

def reconciled_balance(remaining_transactions: Sequence[CreditTransaction]) -> int:
    """Balance after a bulk delete: balance_after of the latest remaining transaction."""
    if not remaining_transactions:
        return 0
    latest = max(remaining_transactions, key=lambda t: (t.created_at, t.id or 0))
    return latest.balance_after


@dataclass(frozen=True)
class StatementSummary:
    opening_balance: int
    closing_balance: int
    total_credits: int
    total_debits: int
    transaction_count: int


def summarize_statement(
    transactions: Iterable[CreditTransaction], start: datetime, end: datetime
) -> StatementSummary:
    in_range = sorted(
        (t for t in transactions if start <= t.created_at <= end),
        key=lambda t: (t.created_at, t.id or 0),
    )
    if not in_range:
        return StatementSummary(0, 0, 0, 0, 0)

    credits = 0
    debits = 0
    for t in in_range:
        delta = t.balance_after - t.balance_before
        if delta >= 0:
            credits += delta
        else:
            debits += -delta

    return StatementSummary(
        opening_balance=in_range[0].balance_before,
        closing_balance=in_range[-1].balance_after,
        total_credits=credits,
        total_debits=debits,
        transaction_count=len(in_range),
    )
