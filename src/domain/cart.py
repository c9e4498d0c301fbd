"""Cart aggregate

A cart belongs to one user and holds lines for exactly one tenant. Moving
to another tenant discards the current lines, and only happens when the
caller asks for it explicitly.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class CartTenantConflict(Exception):
    """Product belongs to a different tenant than the cart"""

    def __init__(self, cart_tenant_id: str, product_tenant_id: str):
        self.cart_tenant_id = cart_tenant_id
        self.product_tenant_id = product_tenant_id
        super().__init__(
            f"Cart holds items of tenant {cart_tenant_id}, product belongs to {product_tenant_id}"
        )


class InvalidQuantity(ValueError):
    pass


class ProductSnapshot(BaseModel):
    """Catalog product as read at order time"""

    id: str
    name: str
    price: int = Field(..., ge=0, description="Unit price (minor units)")
    tenant_id: str


class CartLine(BaseModel):
    product_id: str
    product_name: str
    unit_price: int
    quantity: int

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity


class Cart:
    def __init__(self, user_id: str, tenant_id: Optional[str] = None):
        self.user_id = user_id
        self.tenant_id = tenant_id
        self._lines: Dict[str, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def subtotal(self) -> int:
        return sum(line.subtotal for line in self._lines.values())

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def belongs_to_other_tenant(self, tenant_id: str) -> bool:
        return self.tenant_id is not None and self.tenant_id != tenant_id

    def add(self, product: ProductSnapshot, quantity: int = 1, replace: bool = False) -> CartLine:
        """
        Add a product, merging with an existing line of the same product.

        Raises:
            InvalidQuantity: quantity is not a positive integer
            CartTenantConflict: product is from another tenant and replace is False
        """
        if quantity <= 0:
            raise InvalidQuantity(f"Quantity must be positive, got {quantity}")

        if self.belongs_to_other_tenant(product.tenant_id):
            if not replace:
                raise CartTenantConflict(self.tenant_id, product.tenant_id)
            self.switch_tenant(product.tenant_id)

        self.tenant_id = product.tenant_id
        existing = self._lines.get(product.id)
        if existing:
            existing.quantity += quantity
            return existing

        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
        )
        self._lines[product.id] = line
        return line

    def set_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        if product_id in self._lines:
            self._lines[product_id].quantity = quantity

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)
        if not self._lines:
            self.tenant_id = None

    def switch_tenant(self, tenant_id: str) -> None:
        self._lines.clear()
        self.tenant_id = tenant_id

    def clear(self) -> None:
        self._lines.clear()
        self.tenant_id = None
