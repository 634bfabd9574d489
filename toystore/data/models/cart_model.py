"""SQLAlchemy ORM model for shopping cart lines."""

from sqlalchemy import (
    CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base


class CartItemModel(Base):
    """
    SQLAlchemy ORM model for cart_items table.

    The (cart_id, product_id) unique constraint is the conflict target of the
    insert-or-increment upsert in the cart repository.
    """

    __tablename__ = "cart_items"

    item_id = Column(String(50), primary_key=True)
    cart_id = Column(String(50), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(18, 2), nullable=False, default=0)
    date_created = Column(DateTime(timezone=True), nullable=False)

    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)

    product = relationship("ProductModel")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    def __repr__(self):
        return (
            f"<CartItemModel(cart_id={self.cart_id}, product_id={self.product_id}, "
            f"quantity={self.quantity})>"
        )
