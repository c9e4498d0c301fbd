"""Client-facing errors

Use case errors are raised as ClientError and rendered as
{"error": {"code": ..., "message": ...}} with the status mapped from the
error code.
"""

from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

ERROR_STATUS = {
    # validation
    "EMPTY_CART": status.HTTP_400_BAD_REQUEST,
    "INVALID_QUANTITY": status.HTTP_400_BAD_REQUEST,
    "PRODUCT_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
    "PRODUCT_TENANT_MISMATCH": status.HTTP_400_BAD_REQUEST,
    "AMOUNT_BELOW_MINIMUM": status.HTTP_400_BAD_REQUEST,
    "INVALID_PAYMENT_METHOD": status.HTTP_400_BAD_REQUEST,
    "TENANT_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_AMOUNT": status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_BALANCE": status.HTTP_402_PAYMENT_REQUIRED,
    # auth
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_SIGNATURE": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    # lookup
    "ORDER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "WITHDRAWAL_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    # conflict
    "DUPLICATE_PENDING_ORDER": status.HTTP_409_CONFLICT,
    "ORDER_NOT_PENDING": status.HTTP_409_CONFLICT,
    "ORDER_TERMINAL": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "STATUS_CONFLICT": status.HTTP_409_CONFLICT,
    "WITHDRAWAL_ALREADY_PROCESSED": status.HTTP_409_CONFLICT,
    "AMOUNT_MISMATCH": status.HTTP_409_CONFLICT,
    # external
    "PAYMENT_GATEWAY_UNAVAILABLE": status.HTTP_502_BAD_GATEWAY,
    "CATALOG_UNAVAILABLE": status.HTTP_502_BAD_GATEWAY,
    # integrity
    "ORDER_ITEMS_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(code: str) -> int:
    """Unknown codes are use case failures (*_FAILED) and map to 500"""
    return ERROR_STATUS.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code if status_code is not None else status_for(error.code)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.error.code, "message": exc.error.message}},
    )
