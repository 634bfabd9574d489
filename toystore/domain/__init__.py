"""Domain layer - pure domain models and interfaces."""

from .entities import CartItem, Category, Order, OrderDetail, Product
from .exceptions import (
    CartError,
    CategoryNotFoundError,
    EntityNotFoundError,
    InvalidArgumentError,
    OrderNotFoundError,
    PersistenceError,
    ProductNotFoundError,
    ToyStoreError,
    TransactionStateError,
)
from .repositories import (
    CartRepository,
    CategoryRepository,
    OrderRepository,
    ProductRepository,
    Repository,
)

__all__ = [
    "CartError",
    "CartItem",
    "CartRepository",
    "Category",
    "CategoryNotFoundError",
    "CategoryRepository",
    "EntityNotFoundError",
    "InvalidArgumentError",
    "Order",
    "OrderDetail",
    "OrderNotFoundError",
    "OrderRepository",
    "PersistenceError",
    "Product",
    "ProductNotFoundError",
    "ProductRepository",
    "Repository",
    "ToyStoreError",
    "TransactionStateError",
]
