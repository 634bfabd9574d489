"""SQLAlchemy ORM models for Order aggregate."""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
)
from sqlalchemy.orm import relationship

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, autoincrement=True)
    order_date = Column(DateTime(timezone=True), nullable=False, index=True)
    username = Column(String(256), nullable=False, index=True)

    # Shipping / contact
    first_name = Column(String(160), nullable=False)
    last_name = Column(String(160), nullable=False)
    address = Column(String(70), nullable=False)
    city = Column(String(40), nullable=False)
    state = Column(String(40), nullable=False)
    postal_code = Column(String(10), nullable=False)
    country = Column(String(40), nullable=False)
    phone = Column(String(24), nullable=True)
    email = Column(String(256), nullable=False)

    # Cached sum of the details at checkout time
    total = Column(Numeric(18, 2), nullable=False, default=0)
    payment_transaction_id = Column(String(100), nullable=True)
    has_been_shipped = Column(Boolean, nullable=False, default=False, index=True)

    details = relationship(
        "OrderDetailModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderDetailModel.order_detail_id",
    )

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_orders_total_non_negative"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.order_id}, username={self.username}, shipped={self.has_been_shipped})>"


class OrderDetailModel(Base):
    """SQLAlchemy ORM model for order_details table."""

    __tablename__ = "order_details"

    order_detail_id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, index=True)
    username = Column(String(256), nullable=False)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)

    # Snapshots taken at checkout
    product_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(18, 2), nullable=False)

    order = relationship("OrderModel", back_populates="details")
    product = relationship("ProductModel")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_details_quantity_positive"),
        CheckConstraint("unit_price > 0", name="ck_order_details_unit_price_positive"),
    )

    def __repr__(self):
        return f"<OrderDetailModel(id={self.order_detail_id}, product={self.product_name}, quantity={self.quantity})>"
