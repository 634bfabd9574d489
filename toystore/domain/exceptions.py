"""
Error taxonomy for the toy store core.

Every error raised by repositories, units of work and the cart service
derives from ToyStoreError so callers can catch the whole family at once.
"""
from typing import Optional


class ToyStoreError(Exception):
    """Base class for all toy store errors."""
    pass


# =============================================================================
# NOT FOUND
# =============================================================================

class EntityNotFoundError(ToyStoreError, LookupError):
    """Raised when a key or name has no matching row."""

    entity_name = "Entity"

    def __init__(self, key: object = None, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"{self.entity_name} with ID {key} was not found.")


class ProductNotFoundError(EntityNotFoundError):
    """Raised when a product id or name does not resolve."""

    entity_name = "Product"

    def __init__(self, product_id: Optional[int] = None, product_name: Optional[str] = None):
        self.product_id = product_id
        self.product_name = product_name
        if product_name is not None:
            message = f"Product with name '{product_name}' was not found."
            super().__init__(product_name, message)
        else:
            super().__init__(product_id)


class CategoryNotFoundError(EntityNotFoundError):
    """Raised when a category id or name does not resolve."""

    entity_name = "Category"

    def __init__(self, category_id: Optional[int] = None, category_name: Optional[str] = None):
        self.category_id = category_id
        self.category_name = category_name
        if category_name is not None:
            message = f"Category with name '{category_name}' was not found."
            super().__init__(category_name, message)
        else:
            super().__init__(category_id)


class OrderNotFoundError(EntityNotFoundError):
    """Raised when an order id does not resolve."""

    entity_name = "Order"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(order_id)


# =============================================================================
# INVALID ARGUMENT
# =============================================================================

class InvalidArgumentError(ToyStoreError, ValueError):
    """Raised for absent entities, non-positive quantities and similar input."""
    pass


class CartError(InvalidArgumentError):
    """Raised for invalid shopping cart input."""

    def __init__(self, message: str, cart_id: Optional[str] = None, product_id: Optional[int] = None):
        self.cart_id = cart_id
        self.product_id = product_id
        super().__init__(message)


# =============================================================================
# ILLEGAL STATE / PERSISTENCE
# =============================================================================

class TransactionStateError(ToyStoreError, RuntimeError):
    """Raised when a transaction verb is used in the wrong state."""
    pass


class PersistenceError(ToyStoreError):
    """
    Raised when the underlying storage fails during save or commit.

    The original exception is always chained as __cause__.
    """
    pass
