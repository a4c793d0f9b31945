"""Unit tests for the credit engine

Tests cover:
- Charge and deduction with their notifications
- Threshold ladder, zero balance, suspension and credit limit
- Manual ledger entries
- Monthly auto-charge scheduling
- Polling alert dedup
- Reconciliation and statements
"""

from datetime import datetime, timedelta

import pytest

from parking_billing.domain.credit_account import CreditAccount
from parking_billing.domain.credit_account_settings import CreditAccountSettings
from parking_billing.domain.credit_engine import (
    apply_charge,
    apply_deduction,
    apply_transaction,
    charge_period_start,
    evaluate_balance_alerts,
    is_charge_due,
    next_charge_date,
    reconciled_balance,
    summarize_statement,
)
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

NOW = datetime(2024, 1, 10, 12, 0)


def account_with(balance, **overrides):
    values = dict(id=7, owner_name="Sara Ahmadi", balance=balance, credit_limit=0, is_active=True)
    values.update(overrides)
    return CreditAccount(**values)


def tiers(notifications):
    return [n for n in notifications if n.notification_type == NotificationType.LOW_BALANCE]


class TestApplyDeduction:
    """Deduction rules"""

    def test_insufficient_balance_without_credit_limit(self, sample_settings):
        """
        Given: Balance 12,000 and no credit limit
        When: 15,000 is deducted
        Then: InsufficientBalanceError is raised and the balance is unchanged
        """
        account = account_with(12000)

        with pytest.raises(InsufficientBalanceError) as exc_info:
            apply_deduction(account, sample_settings, 15000, now=NOW)

        assert exc_info.value.code == "INSUFFICIENT_BALANCE"
        assert account.balance == 12000

    def test_deduction_to_critical_threshold(self, sample_settings):
        """
        Given: Balance 12,000 and critical threshold 5,000
        When: 7,000 is deducted
        Then: Balance is 5,000 with one CRITICAL low balance notification
        """
        account = account_with(12000)

        outcome = apply_deduction(account, sample_settings, 7000, now=NOW)

        assert outcome.new_balance == 5000
        assert account.balance == 5000
        assert outcome.transaction.transaction_type == TransactionType.DEDUCTION
        assert outcome.transaction.balance_before == 12000
        assert outcome.transaction.balance_after == 5000
        assert len(outcome.notifications) == 1
        assert outcome.notifications[0].notification_type == NotificationType.LOW_BALANCE
        assert outcome.notifications[0].severity == NotificationSeverity.CRITICAL

    @pytest.mark.parametrize(
        "amount, severity",
        [
            (60000, NotificationSeverity.LOW),
            (80000, NotificationSeverity.MEDIUM),
            (90000, NotificationSeverity.HIGH),
            (96000, NotificationSeverity.CRITICAL),
        ],
    )
    def test_threshold_ladder_emits_single_tier(self, sample_settings, amount, severity):
        account = account_with(100000)

        outcome = apply_deduction(account, sample_settings, amount, now=NOW)

        assert len(tiers(outcome.notifications)) == 1
        assert outcome.notifications[0].severity == severity

    def test_balance_above_thresholds_has_no_notification(self, sample_settings):
        account = account_with(100000)

        outcome = apply_deduction(account, sample_settings, 10000, now=NOW)

        assert outcome.notifications == []

    def test_no_threshold_notifications_without_settings(self):
        account = account_with(12000)

        outcome = apply_deduction(account, None, 7000, now=NOW)

        assert outcome.notifications == []

    def test_zero_balance_notification(self, sample_settings):
        account = account_with(12000)

        outcome = apply_deduction(account, sample_settings, 12000, now=NOW)

        assert outcome.new_balance == 0
        assert len(outcome.notifications) == 1
        assert outcome.notifications[0].severity == NotificationSeverity.CRITICAL
        assert outcome.suspended is False
        assert account.is_active is True

    def test_zero_balance_suspends_when_configured(self):
        """
        Given: Settings with suspend_on_zero_balance
        When: The balance reaches zero
        Then: The account is suspended and a suspension notification is added
        """
        settings = CreditAccountSettings(account_id=7, suspend_on_zero_balance=True)
        account = account_with(12000)

        outcome = apply_deduction(account, settings, 12000, now=NOW)

        assert outcome.suspended is True
        assert account.is_active is False
        types = [n.notification_type for n in outcome.notifications]
        assert NotificationType.ACCOUNT_SUSPENDED in types

    def test_credit_limit_allows_negative_balance(self, sample_settings):
        account = account_with(12000, credit_limit=10000)

        outcome = apply_deduction(account, sample_settings, 20000, now=NOW)

        assert outcome.new_balance == -8000
        types = [n.notification_type for n in outcome.notifications]
        assert NotificationType.CREDIT_LIMIT_EXCEEDED not in types

    def test_credit_limit_exceeded_is_rejected(self, sample_settings):
        account = account_with(12000, credit_limit=10000)

        with pytest.raises(InsufficientBalanceError):
            apply_deduction(account, sample_settings, 25000, now=NOW)

    def test_allow_negative_beyond_credit_limit_notifies(self, sample_settings):
        account = account_with(12000, credit_limit=10000)

        outcome = apply_deduction(account, sample_settings, 30000, now=NOW, allow_negative=True)

        assert outcome.new_balance == -18000
        types = [n.notification_type for n in outcome.notifications]
        assert NotificationType.CREDIT_LIMIT_EXCEEDED in types

    def test_inactive_account_is_rejected(self, sample_settings):
        account = account_with(12000, is_active=False)

        with pytest.raises(InactiveAccountError):
            apply_deduction(account, sample_settings, 1000, now=NOW)

    def test_non_positive_amount_is_rejected(self, sample_settings):
        account = account_with(12000)

        with pytest.raises(ValidationError):
            apply_deduction(account, sample_settings, 0, now=NOW)


class TestApplyCharge:
    """Charge rules"""

    def test_charge_adds_amount_and_confirms(self):
        account = account_with(12000)

        outcome = apply_charge(account, 50000, now=NOW, reference_id="REF1")

        assert outcome.new_balance == 62000
        assert outcome.transaction.transaction_type == TransactionType.CHARGE
        assert outcome.transaction.reference_id == "REF1"
        assert account.last_charged_at == NOW
        assert [n.notification_type for n in outcome.notifications] == [NotificationType.MANUAL_CHARGE]

    def test_monthly_charge_uses_monthly_confirmation(self):
        account = account_with(12000)

        outcome = apply_charge(account, 50000, now=NOW, monthly=True)

        assert outcome.notifications[0].notification_type == NotificationType.MONTHLY_CHARGE_SUCCESS
        assert outcome.notifications[0].severity == NotificationSeverity.LOW

    def test_reactivation_notification_when_crossing_zero(self):
        """
        Given: Balance -3,000
        When: 10,000 is charged
        Then: A MEDIUM reactivation notification is added
        """
        account = account_with(-3000)

        outcome = apply_charge(account, 10000, now=NOW)

        reactivated = [n for n in outcome.notifications if n.notification_type == NotificationType.ACCOUNT_REACTIVATED]
        assert len(reactivated) == 1
        assert reactivated[0].severity == NotificationSeverity.MEDIUM

    def test_no_reactivation_notification_when_still_negative(self):
        account = account_with(-30000)

        outcome = apply_charge(account, 10000, now=NOW)

        types = [n.notification_type for n in outcome.notifications]
        assert NotificationType.ACCOUNT_REACTIVATED not in types

    def test_no_reactivation_notification_from_positive_balance(self):
        account = account_with(1)

        outcome = apply_charge(account, 10000, now=NOW)

        types = [n.notification_type for n in outcome.notifications]
        assert NotificationType.ACCOUNT_REACTIVATED not in types

    def test_inactive_account_is_rejected(self):
        account = account_with(0, is_active=False)

        with pytest.raises(InactiveAccountError):
            apply_charge(account, 10000, now=NOW)

    def test_reactivate_flag_turns_account_active(self):
        account = account_with(0, is_active=False)

        outcome = apply_charge(account, 10000, now=NOW, reactivate=True)

        assert account.is_active is True
        assert outcome.new_balance == 10000

    def test_invalid_amount_does_not_reactivate(self):
        account = account_with(0, is_active=False)

        with pytest.raises(ValidationError):
            apply_charge(account, 0, now=NOW, reactivate=True)

        assert account.is_active is False

    def test_deduct_then_charge_restores_balance(self, sample_settings):
        account = account_with(100000)

        apply_deduction(account, sample_settings, 35000, now=NOW)
        apply_charge(account, 35000, now=NOW)

        assert account.balance == 100000


class TestApplyTransaction:
    """Manual ledger entries"""

    def test_adjustment_is_signed(self):
        account = account_with(12000)

        outcome = apply_transaction(account, TransactionType.ADJUSTMENT, -3000, "اصلاح", now=NOW)

        assert outcome.new_balance == 9000

    def test_zero_adjustment_is_rejected(self):
        with pytest.raises(ValidationError):
            apply_transaction(account_with(12000), TransactionType.ADJUSTMENT, 0, "اصلاح", now=NOW)

    def test_monthly_reset_sets_balance(self):
        account = account_with(12000)

        outcome = apply_transaction(account, TransactionType.MONTHLY_RESET, 0, "ریست", now=NOW)

        assert outcome.new_balance == 0
        assert outcome.transaction.balance_before == 12000
        assert len(outcome.notifications) == 1

    def test_refund_adds_amount(self):
        account = account_with(12000)

        outcome = apply_transaction(account, TransactionType.REFUND, 5000, "بازگشت وجه", now=NOW)

        assert outcome.new_balance == 17000
        assert outcome.notifications == []

    def test_refund_requires_positive_amount(self):
        with pytest.raises(ValidationError):
            apply_transaction(account_with(12000), TransactionType.REFUND, 0, "بازگشت وجه", now=NOW)


class TestMonthlySchedule:
    """Auto-charge scheduling"""

    def test_next_charge_date_later_this_month(self):
        assert next_charge_date(datetime(2024, 1, 10, 8, 0), 15) == datetime(2024, 1, 15, 8, 0)

    def test_next_charge_date_on_charge_day_stays_this_month(self):
        assert next_charge_date(datetime(2024, 1, 15, 8, 0), 15) == datetime(2024, 1, 15, 8, 0)

    def test_next_charge_date_past_charge_day_rolls_to_next_month(self):
        assert next_charge_date(datetime(2024, 1, 16, 8, 0), 15) == datetime(2024, 2, 15, 8, 0)

    def test_next_charge_date_rolls_over_year(self):
        assert next_charge_date(datetime(2024, 12, 20), 5) == datetime(2025, 1, 5)

    def test_next_charge_date_clamps_to_month_length(self):
        assert next_charge_date(datetime(2024, 1, 31), 30) == datetime(2024, 2, 29)

    @pytest.mark.parametrize(
        "now, day, expected",
        [
            (datetime(2024, 1, 15, 8, 0), 15, datetime(2024, 1, 15)),
            (datetime(2024, 1, 20, 8, 0), 15, datetime(2024, 1, 15)),
            (datetime(2024, 2, 1, 8, 0), 15, datetime(2024, 1, 15)),
            (datetime(2024, 1, 3), 5, datetime(2023, 12, 5)),
            (datetime(2024, 3, 5), 31, datetime(2024, 2, 29)),
        ],
    )
    def test_charge_period_start(self, now, day, expected):
        assert charge_period_start(now, day) == expected

    def test_due_on_charge_day(self):
        account = account_with(0, auto_charge=True, next_charge_date=datetime(2024, 2, 10))
        settings = CreditAccountSettings(account_id=7, auto_monthly_charge=True, charge_day_of_month=10)

        assert is_charge_due(account, settings, NOW) is True

    def test_due_when_next_charge_date_passed(self):
        account = account_with(0, auto_charge=True, next_charge_date=datetime(2024, 1, 1))
        settings = CreditAccountSettings(account_id=7, auto_monthly_charge=True, charge_day_of_month=1)

        assert is_charge_due(account, settings, NOW) is True

    def test_not_due_before_next_charge_date(self):
        account = account_with(0, auto_charge=True, next_charge_date=datetime(2024, 2, 1))
        settings = CreditAccountSettings(account_id=7, auto_monthly_charge=True, charge_day_of_month=1)

        assert is_charge_due(account, settings, NOW) is False
        assert is_charge_due(account, settings, NOW, force_all=True) is True

    def test_manual_charge_today_does_not_affect_due(self):
        account = account_with(
            0, auto_charge=True, next_charge_date=None, last_charged_at=NOW - timedelta(hours=1)
        )
        settings = CreditAccountSettings(account_id=7, auto_monthly_charge=True, charge_day_of_month=10)

        assert is_charge_due(account, settings, NOW) is True

    def test_never_due_without_plan(self):
        account = account_with(0, auto_charge=True)

        assert is_charge_due(account, None, NOW, force_all=True) is False
        assert is_charge_due(
            account, CreditAccountSettings(account_id=7, auto_monthly_charge=False), NOW, force_all=True
        ) is False
        assert is_charge_due(
            account_with(0, auto_charge=True, is_active=False),
            CreditAccountSettings(account_id=7, auto_monthly_charge=True),
            NOW,
            force_all=True,
        ) is False


class TestEvaluateBalanceAlerts:
    """Polling alert evaluation"""

    def test_tier_alert_for_low_balance(self, sample_settings):
        account = account_with(20000)

        created = evaluate_balance_alerts(account, sample_settings, [], now=NOW)

        assert len(created) == 1
        assert created[0].severity == NotificationSeverity.MEDIUM

    def test_same_alert_is_not_repeated_within_window(self, sample_settings):
        """
        Given: A MEDIUM low balance alert already in the window
        When: Alerts are evaluated again
        Then: Nothing new is created
        """
        account = account_with(20000)
        first = evaluate_balance_alerts(account, sample_settings, [], now=NOW)

        second = evaluate_balance_alerts(account, sample_settings, first, now=NOW + timedelta(hours=1))

        assert second == []

    def test_force_all_ignores_window(self, sample_settings):
        account = account_with(20000)
        first = evaluate_balance_alerts(account, sample_settings, [], now=NOW)

        again = evaluate_balance_alerts(account, sample_settings, first, now=NOW, force_all=True)

        assert len(again) == 1

    def test_different_severity_is_not_deduplicated(self, sample_settings):
        account = account_with(10000)
        earlier = [
            CreditNotification(
                account_id=7,
                notification_type=NotificationType.LOW_BALANCE,
                severity=NotificationSeverity.MEDIUM,
                title="t",
                message="m",
                created_at=NOW,
            )
        ]

        created = evaluate_balance_alerts(account, sample_settings, earlier, now=NOW)

        assert [n.severity for n in created] == [NotificationSeverity.HIGH]

    def test_zero_balance_suspends_when_configured(self):
        settings = CreditAccountSettings(account_id=7, suspend_on_zero_balance=True)
        account = account_with(0)

        created = evaluate_balance_alerts(account, settings, [], now=NOW)

        assert account.is_active is False
        types = [n.notification_type for n in created]
        assert NotificationType.ACCOUNT_SUSPENDED in types

    def test_credit_limit_alert_deduplicated_by_type(self, sample_settings):
        account = account_with(-20000, credit_limit=10000)
        first = evaluate_balance_alerts(account, sample_settings, [], now=NOW)

        second = evaluate_balance_alerts(account, sample_settings, first, now=NOW)

        assert NotificationType.CREDIT_LIMIT_EXCEEDED in [n.notification_type for n in first]
        assert second == []


def make_transaction(id, created_at, before, after, transaction_type=TransactionType.CHARGE):
    return CreditTransaction(
        id=id,
        account_id=7,
        transaction_type=transaction_type,
        amount=abs(after - before),
        balance_before=before,
        balance_after=after,
        created_at=created_at,
    )


class TestReconciliationAndStatement:
    """Balance reconciliation and statements"""

    def test_reconciled_balance_uses_latest_remaining(self):
        remaining = [
            make_transaction(1, datetime(2024, 1, 1), 0, 50000),
            make_transaction(3, datetime(2024, 1, 3), 50000, 45000, TransactionType.DEDUCTION),
            make_transaction(2, datetime(2024, 1, 2), 50000, 50000),
        ]

        assert reconciled_balance(remaining) == 45000

    def test_reconciled_balance_is_zero_when_nothing_remains(self):
        assert reconciled_balance([]) == 0

    def test_statement_totals(self):
        transactions = [
            make_transaction(1, datetime(2024, 1, 1), 0, 50000),
            make_transaction(2, datetime(2024, 1, 2), 50000, 35000, TransactionType.DEDUCTION),
            make_transaction(3, datetime(2024, 1, 3), 35000, 45000),
            make_transaction(4, datetime(2024, 2, 3), 45000, 40000, TransactionType.DEDUCTION),
        ]

        summary = summarize_statement(transactions, datetime(2024, 1, 1), datetime(2024, 1, 31))

        assert summary.opening_balance == 0
        assert summary.closing_balance == 45000
        assert summary.total_credits == 60000
        assert summary.total_debits == 15000
        assert summary.transaction_count == 3
