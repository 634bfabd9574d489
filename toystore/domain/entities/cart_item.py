"""Shopping cart line entity."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import uuid

from ..exceptions import InvalidArgumentError
from .catalog import Product


def new_item_id() -> str:
    """Generate an opaque cart line identifier."""
    return str(uuid.uuid4())


@dataclass
class CartItem:
    """
    One line of a shopping cart, identified by (cart_id, product_id).

    unit_price is a snapshot of the product price taken when the line was
    created. Cart totals use the live product price instead.
    """
    cart_id: str
    product_id: int
    quantity: int = 1
    unit_price: Decimal = Decimal("0.00")
    date_created: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    item_id: str = field(default_factory=new_item_id)

    # Loaded only when requested with include=("product",)
    product: Optional[Product] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.cart_id or not self.cart_id.strip():
            raise InvalidArgumentError("Cart id is required")
        if self.quantity < 1:
            raise InvalidArgumentError(f"Quantity must be at least 1: {self.quantity}")
        self.unit_price = Decimal(str(self.unit_price))

    @property
    def line_total(self) -> Decimal:
        """Quantity times the live product price (0 when unpriced or not loaded)."""
        if self.product is None:
            return Decimal("0")
        return self.product.price_or_zero * self.quantity
