"""
Catalog entities: products and the categories that group them.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from ..exceptions import InvalidArgumentError


@dataclass
class Category:
    """Product category (Cars, Planes, ...)."""
    category_name: str
    description: Optional[str] = None
    category_id: Optional[int] = None

    # Loaded only when requested with include=("products",)
    products: List["Product"] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        if not self.category_name:
            raise InvalidArgumentError("Category name is required")


@dataclass
class Product:
    """
    A toy in the catalog.

    unit_price of None means the price is still to be determined.
    """
    product_name: str
    description: str
    image_path: Optional[str] = None
    unit_price: Optional[Decimal] = None
    category_id: Optional[int] = None
    product_id: Optional[int] = None

    # Loaded only when requested with include=("category",)
    category: Optional[Category] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.product_name:
            raise InvalidArgumentError("Product name is required")
        if not self.description:
            raise InvalidArgumentError("Product description is required")
        if self.unit_price is not None:
            self.unit_price = Decimal(str(self.unit_price))
            if self.unit_price <= 0:
                raise InvalidArgumentError(
                    f"Unit price must be positive when present: {self.unit_price}"
                )

    @property
    def price_or_zero(self) -> Decimal:
        """Price used for totals; a missing price counts as zero."""
        return self.unit_price if self.unit_price is not None else Decimal("0")
