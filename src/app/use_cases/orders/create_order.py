"""CreateOrder Use Case

Creates a pending order and its line items as one all-or-nothing unit,
snapshotting catalog prices at order time.
"""

import logging
from typing import List, Tuple
from sqlalchemy.exc import IntegrityError

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_store import CatalogStore, CollaboratorError
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.cart import Cart, CartTenantConflict, InvalidQuantity
from src.domain.order import Order, OrderStatus, new_external_reference
from src.domain.order_item import OrderItem
from .dtos import CreateOrderCommandDTO, OrderResponseDTO, order_to_dto

logger = logging.getLogger(__name__)


class CreateOrder:
    """
    Use Case: Create an order

    Business Rules:
    1. Items non-empty, each quantity > 0, each product belongs to the tenant
    2. Unit prices are read from the catalog and frozen on the line items
    3. total = subtotal + service_fee, fee captured on the order
    4. External reference is generated once and never changes
    5. If line items fail to insert, the order insert is undone

    Flow:
    1. Price the requested lines into a single-tenant Cart
    2. Insert the order (pending)
    3. Insert the line items; on failure roll back the order insert
    4. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        catalog: CatalogStore,
        reference_prefix: str = "ORD",
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.catalog = catalog
        self.reference_prefix = reference_prefix

    async def execute(self, command: CreateOrderCommandDTO) -> Result[OrderResponseDTO]:
        result = await self.place(command)
        if result.is_err():
            return Return.err(result.error)
        order, items = result.value
        return Return.ok(order_to_dto(order, items))

    async def place(self, command: CreateOrderCommandDTO) -> Result[Tuple[Order, List[OrderItem]]]:
        """Create and commit the order, returning the persisted entities"""
        cart_result = await self._build_cart(command)
        if cart_result.is_err():
            return Return.err(cart_result.error)
        cart = cart_result.value

        try:
            order = Order(
                external_reference=new_external_reference(self.reference_prefix),
                user_id=command.user_id,
                tenant_id=command.tenant_id,
                subtotal=cart.subtotal,
                service_fee=command.service_fee,
                total_amount=cart.subtotal + command.service_fee,
                status=OrderStatus.PENDING,
                payment_method=command.payment_method,
                notes=command.notes,
            )

            try:
                order = await self.order_repo.create(order)
            except IntegrityError as e:
                await self.uow.rollback()
                logger.warning(
                    f"Pending order already exists for user {command.user_id} at tenant {command.tenant_id}"
                )
                return Return.err(
                    Error(
                        code="DUPLICATE_PENDING_ORDER",
                        message="You already have a pending order at this tenant",
                        reason=str(e.orig) if e.orig else str(e),
                    )
                )

            items = [
                OrderItem(
                    order_id=order.id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                )
                for line in cart.lines
            ]

            try:
                items = await self.item_repo.create_many(items)
            except Exception as e:
                logger.error(f"Order items insert failed for order {order.external_reference}: {e}")
                # Rolling back the open transaction discards the order row too
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="ORDER_ITEMS_FAILED",
                        message="Failed to create order items",
                        reason=str(e),
                    )
                )

            await self.uow.commit()

            logger.info(
                f"Created order {order.id} ({order.external_reference}) for user {order.user_id} "
                f"at tenant {order.tenant_id}: total={order.total_amount}"
            )
            return Return.ok((order, items))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Order creation failed: {e}")
            return Return.err(
                Error(
                    code="CREATE_ORDER_FAILED",
                    message="Failed to create order",
                    reason=str(e),
                )
            )

    async def _build_cart(self, command: CreateOrderCommandDTO) -> Result[Cart]:
        if not command.items:
            return Return.err(Error(code="EMPTY_CART", message="Order must contain at least one item"))

        cart = Cart(user_id=command.user_id, tenant_id=command.tenant_id)
        for line in command.items:
            if line.quantity <= 0:
                return Return.err(
                    Error(
                        code="INVALID_QUANTITY",
                        message=f"Quantity for product {line.product_id} must be greater than 0",
                    )
                )

            try:
                product = await self.catalog.get_product(line.product_id)
            except CollaboratorError as e:
                logger.error(f"Catalog lookup failed for product {line.product_id}: {e}")
                return Return.err(
                    Error(code="CATALOG_UNAVAILABLE", message="Product catalog is unavailable", reason=str(e))
                )

            if product is None:
                return Return.err(
                    Error(code="PRODUCT_NOT_FOUND", message=f"Product {line.product_id} not found")
                )

            try:
                cart.add(product, line.quantity)
            except CartTenantConflict:
                return Return.err(
                    Error(
                        code="PRODUCT_TENANT_MISMATCH",
                        message=f"Product {line.product_id} does not belong to tenant {command.tenant_id}",
                    )
                )
            except InvalidQuantity as e:
                return Return.err(Error(code="INVALID_QUANTITY", message=str(e)))

        return Return.ok(cart)
