"""Application service for shopping cart operations."""

import logging
from decimal import Decimal
from typing import List, Optional

from toystore.data.uow import AsyncUnitOfWork, UnitOfWork
from toystore.domain.entities import CartItem
from toystore.domain.exceptions import InvalidArgumentError


logger = logging.getLogger(__name__)


def _require_positive(quantity: int) -> None:
    if quantity is None or quantity <= 0:
        raise InvalidArgumentError(f"Quantity must be greater than 0: {quantity}")


class ShoppingCartService:
    """
    Cart aggregation on top of a unit of work (blocking form).

    Each line of a cart is either absent or present with quantity >= 1.
    Adds and removes go through single conditional statements in the cart
    repository, so two requests racing on the same cart can neither insert
    a duplicate line nor lose an increment.

    Every mutating call saves the unit of work. Inside an explicit
    transaction that save only flushes; the caller commits.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        """Initialize shopping cart service.

        Args:
            uow: Unit of work owned by the current request
        """
        self._uow = uow

    def add_to_cart(self, cart_id: str, product_id: int) -> CartItem:
        """Add one unit of a product to a cart.

        Args:
            cart_id: Cart identifier
            product_id: Product to add

        Returns:
            The cart line after the add

        Raises:
            ProductNotFoundError: If the product does not exist (cart untouched)
            PersistenceError: If the storage rejects the add; outside a
                transaction the unit of work is rolled back and can retry
        """
        product = self._uow.products.get_by_id(product_id, include=())
        item = self._uow.cart_items.add_or_increment(cart_id, product)
        self._uow.save_changes()
        logger.info(f"Cart {cart_id}: product {product_id} quantity now {item.quantity}")
        return item

    def remove_from_cart(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        """Take one unit off a line; the last unit deletes the line.

        Returns:
            The remaining line, or None if it was deleted or never existed
        """
        item = self._uow.cart_items.decrement_or_remove(cart_id, product_id)
        self._uow.save_changes()
        logger.info(f"Cart {cart_id}: product {product_id} quantity now {item.quantity if item else 0}")
        return item

    def update_quantity(self, cart_id: str, product_id: int, quantity: int) -> Optional[CartItem]:
        """Set the exact quantity of an existing line.

        Raises:
            InvalidArgumentError: If quantity <= 0 (nothing is changed)
        """
        _require_positive(quantity)
        item = self._uow.cart_items.set_quantity(cart_id, product_id, quantity)
        if item is None:
            return None
        self._uow.save_changes()
        return item

    def empty_cart(self, cart_id: str) -> None:
        self._uow.cart_items.empty_cart(cart_id)
        self._uow.save_changes()
        logger.info(f"Cart {cart_id} emptied")

    def migrate_cart(self, old_cart_id: str, new_cart_id: str) -> None:
        """Hand an anonymous cart over to a user cart, merging shared products."""
        self._uow.cart_items.migrate_cart(old_cart_id, new_cart_id)
        self._uow.save_changes()

    def get_cart_items(self, cart_id: str) -> List[CartItem]:
        return self._uow.cart_items.get_cart_items(cart_id)

    def get_total(self, cart_id: str) -> Decimal:
        return self._uow.cart_items.get_cart_total(cart_id)

    def get_count(self, cart_id: str) -> int:
        return self._uow.cart_items.get_cart_item_count(cart_id)


class AsyncShoppingCartService:
    """Cart aggregation on top of an AsyncUnitOfWork; see ShoppingCartService."""

    def __init__(self, uow: AsyncUnitOfWork) -> None:
        self._uow = uow

    async def add_to_cart(self, cart_id: str, product_id: int) -> CartItem:
        product = await self._uow.products.get_by_id(product_id, include=())
        item = await self._uow.cart_items.add_or_increment(cart_id, product)
        await self._uow.save_changes()
        logger.info(f"Cart {cart_id}: product {product_id} quantity now {item.quantity}")
        return item

    async def remove_from_cart(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        item = await self._uow.cart_items.decrement_or_remove(cart_id, product_id)
        await self._uow.save_changes()
        logger.info(f"Cart {cart_id}: product {product_id} quantity now {item.quantity if item else 0}")
        return item

    async def update_quantity(self, cart_id: str, product_id: int, quantity: int) -> Optional[CartItem]:
        _require_positive(quantity)
        item = await self._uow.cart_items.set_quantity(cart_id, product_id, quantity)
        if item is None:
            return None
        await self._uow.save_changes()
        return item

    async def empty_cart(self, cart_id: str) -> None:
        await self._uow.cart_items.empty_cart(cart_id)
        await self._uow.save_changes()
        logger.info(f"Cart {cart_id} emptied")

    async def migrate_cart(self, old_cart_id: str, new_cart_id: str) -> None:
        await self._uow.cart_items.migrate_cart(old_cart_id, new_cart_id)
        await self._uow.save_changes()

    async def get_cart_items(self, cart_id: str) -> List[CartItem]:
        return await self._uow.cart_items.get_cart_items(cart_id)

    async def get_total(self, cart_id: str) -> Decimal:
        return await self._uow.cart_items.get_cart_total(cart_id)

    async def get_count(self, cart_id: str) -> int:
        return await self._uow.cart_items.get_cart_item_count(cart_id)
