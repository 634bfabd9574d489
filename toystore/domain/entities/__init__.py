"""Domain entities."""

from .cart_item import CartItem, new_item_id
from .catalog import Category, Product
from .order import Order, OrderDetail

__all__ = [
    "CartItem",
    "Category",
    "new_item_id",
    "Order",
    "OrderDetail",
    "Product",
]
