"""Shared test doubles"""

from datetime import datetime


def fake_transition(moved: bool = True):
    """
    side_effect for OrderRepository.transition_status that mutates the order
    the way the real conditional update + refresh does
    """
    async def _transition(order, new_status, paid_at=None, gateway_payment_type=None):
        if not moved:
            return False
        order.status = new_status
        if paid_at is not None:
            order.paid_at = paid_at
        if gateway_payment_type is not None:
            order.gateway_payment_type = gateway_payment_type
        order.updated_at = datetime.utcnow()
        return True
    return _transition
