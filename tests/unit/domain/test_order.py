"""Unit tests for the Order entity and its transition graph"""

import re
import pytest
from datetime import datetime, timedelta

from src.domain.order import (
    OrderStatus,
    PaymentMethod,
    can_transition,
    is_terminal,
    new_external_reference,
)


class TestTransitionGraph:
    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.PENDING, OrderStatus.PAID),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.PAID, OrderStatus.PROCESSING),
            (OrderStatus.PAID, OrderStatus.COMPLETED),
            (OrderStatus.PROCESSING, OrderStatus.READY),
            (OrderStatus.PROCESSING, OrderStatus.COMPLETED),
            (OrderStatus.READY, OrderStatus.COMPLETED),
        ],
    )
    def test_forward_moves_allowed(self, current, new):
        assert can_transition(current, new, PaymentMethod.GATEWAY)

    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.COMPLETED, OrderStatus.PENDING),
            (OrderStatus.PAID, OrderStatus.PENDING),
            (OrderStatus.READY, OrderStatus.PROCESSING),
            (OrderStatus.CANCELLED, OrderStatus.PAID),
            (OrderStatus.PAID, OrderStatus.CANCELLED),
            (OrderStatus.PENDING, OrderStatus.READY),
        ],
    )
    def test_backward_and_skipping_moves_rejected(self, current, new):
        assert not can_transition(current, new, PaymentMethod.CASH)

    def test_pending_to_completed_only_for_cash(self):
        assert can_transition(OrderStatus.PENDING, OrderStatus.COMPLETED, PaymentMethod.CASH)
        assert not can_transition(OrderStatus.PENDING, OrderStatus.COMPLETED, PaymentMethod.GATEWAY)

    def test_terminal_statuses(self):
        assert is_terminal(OrderStatus.COMPLETED)
        assert is_terminal(OrderStatus.CANCELLED)
        assert not is_terminal(OrderStatus.PAID)
        assert not is_terminal(OrderStatus.PENDING)

    def test_terminal_statuses_have_no_successors(self):
        for new in OrderStatus:
            assert not can_transition(OrderStatus.COMPLETED, new, PaymentMethod.CASH)
            assert not can_transition(OrderStatus.CANCELLED, new, PaymentMethod.CASH)


class TestExternalReference:
    def test_format(self):
        reference = new_external_reference("ORD")
        assert re.fullmatch(r"ORD-\d{13}-[A-Z0-9]{9}", reference)

    def test_references_are_unique(self):
        references = {new_external_reference("ORD") for _ in range(200)}
        assert len(references) == 200


class TestPaymentSession:
    def test_live_session(self, make_order):
        order = make_order(
            payment_session_token="tok",
            payment_session_expires_at=datetime.utcnow() + timedelta(hours=1),
        )
        assert order.has_live_session()

    def test_expired_session(self, make_order):
        order = make_order(
            payment_session_token="tok",
            payment_session_expires_at=datetime.utcnow() - timedelta(seconds=1),
        )
        assert not order.has_live_session()

    def test_no_token(self, make_order):
        order = make_order(payment_session_token=None)
        assert not order.has_live_session()
