"""API error type and rendering

Use case errors are raised as ClientError and rendered as
{"error": {"code": ..., "message": ...}}.
"""

from typing import Optional
from fastapi import status
from fastapi.responses import JSONResponse
from parking_billing.libs.result import Error

_STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "ACCOUNT_INACTIVE": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NO_APPLICABLE_TARIFF": status.HTTP_404_NOT_FOUND,
    "INSUFFICIENT_BALANCE": status.HTTP_402_PAYMENT_REQUIRED,
}


def status_for(code: str) -> int:
    if code in _STATUS_BY_CODE:
        return _STATUS_BY_CODE[code]
    if code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error.code)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.error.code, "message": self.error.message}},
        )
