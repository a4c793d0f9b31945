"""Domain errors raised by the tariff calculator and the credit engine.

Each error carries a stable code; use cases turn them into Result errors
and the API maps the codes to HTTP status codes.
"""


class BillingError(Exception):
    code = "BILLING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    code = "VALIDATION_ERROR"


class NotFoundError(BillingError):
    code = "NOT_FOUND"


class InactiveAccountError(BillingError):
    code = "ACCOUNT_INACTIVE"


class InsufficientBalanceError(BillingError):
    code = "INSUFFICIENT_BALANCE"

    def __init__(self, message: str, balance: int = 0, requested: int = 0):
        super().__init__(message)
        self.balance = balance
        self.requested = requested


class NoApplicableTariffError(BillingError):
    code = "NO_APPLICABLE_TARIFF"
