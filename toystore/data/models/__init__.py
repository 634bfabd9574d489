"""Database models."""

from .base import Base
from .cart_model import CartItemModel
from .catalog_model import CategoryModel, ProductModel
from .order_model import OrderDetailModel, OrderModel

__all__ = [
    "Base",
    "CartItemModel",
    "CategoryModel",
    "OrderDetailModel",
    "OrderModel",
    "ProductModel",
]
