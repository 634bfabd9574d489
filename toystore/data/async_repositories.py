"""
Non-blocking repositories.

Each async repository wraps the blocking SQLAlchemy repository bound to the
AsyncSession's underlying sync session, and runs every call through
AsyncSession.run_sync. Both forms therefore share one query implementation
and suspend only at storage round-trips.
"""

from decimal import Decimal
from typing import Any, Callable, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from toystore.domain.entities import CartItem, Category, Order, OrderDetail, Product
from toystore.domain.repositories import Include

from .repositories import (
    SqlAlchemyCartRepository,
    SqlAlchemyCategoryRepository,
    SqlAlchemyOrderDetailRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyRepository,
)


E = TypeVar("E")
R = TypeVar("R")


class AsyncRepository(Generic[E]):
    """Coroutine form of the generic repository contract."""

    repository_class: Type[SqlAlchemyRepository] = SqlAlchemyRepository

    def __init__(self, session: AsyncSession, on_failure: Optional[Callable[[], None]] = None) -> None:
        """Initialize repository with SQLAlchemy async session.

        Args:
            session: SQLAlchemy async session owned by the unit of work
            on_failure: Storage error callback, run inside run_sync
        """
        self._session = session
        self._repository = self.repository_class(session.sync_session, on_failure)

    @property
    def sync_repository(self) -> SqlAlchemyRepository:
        """Blocking repository sharing this repository's session."""
        return self._repository

    async def _run(self, method: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        return await self._session.run_sync(lambda _session: method(*args, **kwargs))

    async def get_by_id(self, entity_id: Any, include: Include = None) -> E:
        return await self._run(self._repository.get_by_id, entity_id, include=include)

    async def get_all(self, include: Include = None) -> List[E]:
        return await self._run(self._repository.get_all, include=include)

    async def find(self, *criteria: Any, include: Include = None) -> List[E]:
        return await self._run(self._repository.find, *criteria, include=include)

    async def single_or_default(self, *criteria: Any, include: Include = None) -> Optional[E]:
        return await self._run(self._repository.single_or_default, *criteria, include=include)

    async def add(self, entity: E) -> None:
        await self._run(self._repository.add, entity)

    async def add_range(self, entities: Iterable[E]) -> None:
        await self._run(self._repository.add_range, entities)

    async def remove(self, entity: E) -> None:
        await self._run(self._repository.remove, entity)

    async def remove_range(self, entities: Iterable[E]) -> None:
        await self._run(self._repository.remove_range, entities)

    async def update(self, entity: E) -> None:
        await self._run(self._repository.update, entity)


class AsyncProductRepository(AsyncRepository[Product]):
    repository_class = SqlAlchemyProductRepository

    async def get_products_by_category(self, category_id: int) -> List[Product]:
        return await self._run(self._repository.get_products_by_category, category_id)

    async def get_products_by_name(self, product_name: str) -> List[Product]:
        return await self._run(self._repository.get_products_by_name, product_name)

    async def get_featured_products(self, limit: Optional[int] = None) -> List[Product]:
        return await self._run(self._repository.get_featured_products, limit)

    async def get_product_by_name(self, product_name: str) -> Product:
        return await self._run(self._repository.get_product_by_name, product_name)


class AsyncCategoryRepository(AsyncRepository[Category]):
    repository_class = SqlAlchemyCategoryRepository

    async def get_category_by_name(self, category_name: str) -> Category:
        return await self._run(self._repository.get_category_by_name, category_name)

    async def get_categories_with_products(self) -> List[Category]:
        return await self._run(self._repository.get_categories_with_products)


class AsyncOrderRepository(AsyncRepository[Order]):
    repository_class = SqlAlchemyOrderRepository

    async def get_orders_by_username(self, username: str) -> List[Order]:
        return await self._run(self._repository.get_orders_by_username, username)

    async def get_order_with_details(self, order_id: int) -> Order:
        return await self._run(self._repository.get_order_with_details, order_id)

    async def get_unshipped_orders(self) -> List[Order]:
        return await self._run(self._repository.get_unshipped_orders)

    async def mark_shipped(self, order_id: int) -> None:
        await self._run(self._repository.mark_shipped, order_id)


class AsyncOrderDetailRepository(AsyncRepository[OrderDetail]):
    repository_class = SqlAlchemyOrderDetailRepository


class AsyncCartRepository(AsyncRepository[CartItem]):
    repository_class = SqlAlchemyCartRepository

    async def get_cart_items(self, cart_id: str) -> List[CartItem]:
        return await self._run(self._repository.get_cart_items, cart_id)

    async def get_cart_item(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        return await self._run(self._repository.get_cart_item, cart_id, product_id)

    async def get_cart_total(self, cart_id: str) -> Decimal:
        return await self._run(self._repository.get_cart_total, cart_id)

    async def get_cart_item_count(self, cart_id: str) -> int:
        return await self._run(self._repository.get_cart_item_count, cart_id)

    async def empty_cart(self, cart_id: str) -> None:
        await self._run(self._repository.empty_cart, cart_id)

    async def migrate_cart(self, old_cart_id: str, new_cart_id: str) -> None:
        await self._run(self._repository.migrate_cart, old_cart_id, new_cart_id)

    async def add_or_increment(self, cart_id: str, product: Product) -> CartItem:
        return await self._run(self._repository.add_or_increment, cart_id, product)

    async def decrement_or_remove(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        return await self._run(self._repository.decrement_or_remove, cart_id, product_id)

    async def set_quantity(self, cart_id: str, product_id: int, quantity: int) -> Optional[CartItem]:
        return await self._run(self._repository.set_quantity, cart_id, product_id, quantity)
