"""Unit tests for CreateOrder use case

Tests cover:
- Prices frozen from the catalog, total = subtotal + fee
- Validation: empty cart, bad quantity, unknown product, foreign product
- Duplicate pending order and failed line item insert roll back
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import IntegrityError

from src.app.services.catalog_store import CollaboratorError
from src.app.use_cases.orders.create_order import CreateOrder
from src.app.use_cases.orders.dtos import CreateOrderCommandDTO, OrderLineCommandDTO
from src.domain.cart import ProductSnapshot
from src.domain.order import OrderStatus, PaymentMethod

CATALOG = {
    "p_rice": ProductSnapshot(id="p_rice", name="Nasi Goreng", price=15000, tenant_id="tenant_1"),
    "p_tea": ProductSnapshot(id="p_tea", name="Es Teh", price=4000, tenant_id="tenant_1"),
    "p_other": ProductSnapshot(id="p_other", name="Bakso", price=12000, tenant_id="tenant_2"),
}


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda order: order)
    return repo


@pytest.fixture
def mock_item_repo():
    repo = MagicMock()
    repo.create_many = AsyncMock(side_effect=lambda items: items)
    return repo


@pytest.fixture
def mock_catalog():
    catalog = MagicMock()
    catalog.get_product = AsyncMock(side_effect=lambda product_id: CATALOG.get(product_id))
    return catalog


@pytest.fixture
def create_order(mock_uow, mock_order_repo, mock_item_repo, mock_catalog):
    return CreateOrder(
        uow=mock_uow,
        order_repo=mock_order_repo,
        item_repo=mock_item_repo,
        catalog=mock_catalog,
    )


def command(items, payment_method=PaymentMethod.GATEWAY, service_fee=2000):
    return CreateOrderCommandDTO(
        user_id="user_1",
        tenant_id="tenant_1",
        items=[OrderLineCommandDTO(product_id=p, quantity=q) for p, q in items],
        payment_method=payment_method,
        service_fee=service_fee,
    )


@pytest.mark.asyncio
class TestCreateOrderSuccess:
    async def test_creates_pending_order_with_frozen_prices(
        self, create_order, mock_uow, mock_order_repo, mock_item_repo
    ):
        """
        Given: Two catalog products of the tenant
        When: An order for 2x rice and 1x tea is created
        Then: Order is pending, total = 34000 + 2000, items carry catalog prices
        """
        # Act
        result = await create_order.execute(command([("p_rice", 2), ("p_tea", 1)]))

        # Assert
        assert result.is_ok()
        order = result.value
        assert order.status == OrderStatus.PENDING
        assert order.subtotal == 34000
        assert order.service_fee == 2000
        assert order.total_amount == 36000
        assert order.external_reference.startswith("ORD-")
        assert [(i.product_id, i.unit_price, i.subtotal) for i in order.items] == [
            ("p_rice", 15000, 30000),
            ("p_tea", 4000, 4000),
        ]

        mock_order_repo.create.assert_called_once()
        mock_item_repo.create_many.assert_called_once()
        mock_uow.commit.assert_called_once()
        mock_uow.rollback.assert_not_called()

    async def test_cash_order_keeps_payment_method(self, create_order):
        result = await create_order.execute(command([("p_tea", 3)], payment_method=PaymentMethod.CASH))

        assert result.is_ok()
        assert result.value.payment_method == PaymentMethod.CASH
        assert result.value.payment_session_token is None


@pytest.mark.asyncio
class TestCreateOrderValidation:
    async def test_empty_cart_rejected(self, create_order, mock_order_repo):
        result = await create_order.execute(command([]))

        assert result.is_err()
        assert result.error.code == "EMPTY_CART"
        mock_order_repo.create.assert_not_called()

    async def test_zero_quantity_rejected(self, create_order, mock_order_repo):
        result = await create_order.execute(command([("p_rice", 0)]))

        assert result.is_err()
        assert result.error.code == "INVALID_QUANTITY"
        mock_order_repo.create.assert_not_called()

    async def test_unknown_product_rejected(self, create_order):
        result = await create_order.execute(command([("p_missing", 1)]))

        assert result.is_err()
        assert result.error.code == "PRODUCT_NOT_FOUND"

    async def test_product_of_other_tenant_rejected(self, create_order, mock_order_repo):
        """
        Given: One product belongs to tenant_2
        When: Ordering it at tenant_1
        Then: PRODUCT_TENANT_MISMATCH, nothing written
        """
        result = await create_order.execute(command([("p_rice", 1), ("p_other", 1)]))

        assert result.is_err()
        assert result.error.code == "PRODUCT_TENANT_MISMATCH"
        mock_order_repo.create.assert_not_called()

    async def test_catalog_unavailable(self, create_order, mock_catalog):
        mock_catalog.get_product = AsyncMock(side_effect=CollaboratorError("connection refused"))

        result = await create_order.execute(command([("p_rice", 1)]))

        assert result.is_err()
        assert result.error.code == "CATALOG_UNAVAILABLE"


@pytest.mark.asyncio
class TestCreateOrderFailures:
    async def test_duplicate_pending_order(self, create_order, mock_order_repo, mock_uow):
        """
        Given: The user already has a pending order at the tenant
        When: The insert hits the one-pending unique index
        Then: DUPLICATE_PENDING_ORDER and the transaction is rolled back
        """
        # Arrange
        mock_order_repo.create = AsyncMock(
            side_effect=IntegrityError("INSERT INTO orders", {}, Exception("UNIQUE constraint failed"))
        )

        # Act
        result = await create_order.execute(command([("p_rice", 1)]))

        # Assert
        assert result.is_err()
        assert result.error.code == "DUPLICATE_PENDING_ORDER"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_item_insert_failure_undoes_order(self, create_order, mock_item_repo, mock_uow):
        """
        Given: Order insert succeeds
        When: Line item insert fails
        Then: ORDER_ITEMS_FAILED, rollback discards the order, no commit
        """
        mock_item_repo.create_many = AsyncMock(side_effect=Exception("disk full"))

        result = await create_order.execute(command([("p_rice", 1)]))

        assert result.is_err()
        assert result.error.code == "ORDER_ITEMS_FAILED"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
