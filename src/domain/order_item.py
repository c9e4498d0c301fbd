"""Order Item Domain Entity

Line items are owned by one order and deleted with it. Price and name are
snapshots taken at order time.
"""

from datetime import datetime
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Integer, String, CheckConstraint
from src.domain.base import BaseModel


class OrderItem(BaseModel, table=True):
    """
    Order Item - One product line within an order

    Domain Rules:
    - quantity > 0
    - unit_price is frozen at order creation
    - subtotal = unit_price * quantity
    """

    __tablename__ = "order_items"
    __table_args__ = (
        Index("ix_order_items_order_id", "order_id"),
        CheckConstraint("quantity > 0", name="quantity_positive"),
    )

    id: int = Field(
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
        description="Unique order item identifier (auto-increment)"
    )

    order_id: str = Field(
        sa_column=Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Order"
    )

    product_id: str = Field(
        description="Catalog product reference"
    )

    product_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Product name at order time"
    )

    quantity: int = Field(
        description="Units ordered (positive)"
    )

    unit_price: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Unit price snapshot (minor units)"
    )

    subtotal: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="unit_price * quantity (minor units)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Line item creation timestamp"
    )
