"""Errors shared by withdrawal use cases"""

from libs.result import Error


def withdrawal_not_found(request_id: str) -> Error:
    return Error(code="WITHDRAWAL_NOT_FOUND", message=f"Withdrawal request {request_id} not found")


def already_processed(request_id: str, status: str) -> Error:
    return Error(
        code="WITHDRAWAL_ALREADY_PROCESSED",
        message=f"Withdrawal request {request_id} was already processed",
        reason=f"status={status}",
    )


def forbidden(message: str = "Not allowed to manage withdrawals") -> Error:
    return Error(code="FORBIDDEN", message=message)


def insufficient_balance(available: int, amount: int) -> Error:
    return Error(
        code="INSUFFICIENT_BALANCE",
        message=f"Insufficient balance: available {available}, requested {amount}",
        reason=f"available={available} amount={amount}",
    )
