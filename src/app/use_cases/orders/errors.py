"""Errors shared by order use cases"""

from libs.result import Error


def order_not_found(order_id: str) -> Error:
    return Error(code="ORDER_NOT_FOUND", message=f"Order {order_id} not found")


def forbidden(order_id: str) -> Error:
    return Error(code="FORBIDDEN", message=f"Not allowed to act on order {order_id}")


def order_not_pending(order_id: str, status: str) -> Error:
    return Error(
        code="ORDER_NOT_PENDING",
        message=f"Order {order_id} is not pending",
        reason=f"status={status}",
    )
