"""
Order aggregate: a completed checkout and its detail lines.

Orders are immutable once captured, except for the shipped flag.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
import re

from ..exceptions import InvalidArgumentError
from .catalog import Product


EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,4}")


@dataclass
class OrderDetail:
    """
    Individual line within an order.

    product_name and unit_price are snapshots taken at checkout and are never
    refreshed from the live product row.
    """
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    username: str = ""
    order_id: Optional[int] = None
    order_detail_id: Optional[int] = None

    # Loaded only when requested with include=("details.product",)
    product: Optional[Product] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.quantity < 1:
            raise InvalidArgumentError(f"Quantity must be at least 1: {self.quantity}")
        self.unit_price = Decimal(str(self.unit_price))
        if self.unit_price <= 0:
            raise InvalidArgumentError(f"Unit price must be positive: {self.unit_price}")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Order:
    """Order aggregate root."""
    username: str
    first_name: str
    last_name: str
    address: str
    city: str
    state: str
    postal_code: str
    country: str
    email: str
    phone: Optional[str] = None
    total: Decimal = Decimal("0.00")
    payment_transaction_id: Optional[str] = None
    has_been_shipped: bool = False
    order_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: Optional[int] = None

    # Loaded only when requested with include=("details",)
    details: List[OrderDetail] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        if not EMAIL_PATTERN.fullmatch(self.email or ""):
            raise InvalidArgumentError(f"Email is not valid: {self.email}")
        self.total = Decimal(str(self.total))
        if self.total < 0:
            raise InvalidArgumentError(f"Total must be non-negative: {self.total}")

    def details_total(self) -> Decimal:
        """Sum of the detail lines (the stored total is not recomputed)."""
        return sum((detail.line_total for detail in self.details), Decimal("0"))

    def mark_shipped(self) -> None:
        """Business rule: the only mutation allowed after checkout."""
        self.has_been_shipped = True
