"""
SQLAlchemy implementation of CartRepository.

Concurrent requests on the same cart are made safe by the storage itself:
cart_items is unique on (cart_id, product_id), and the add / remove / set
primitives below are single conditional statements rather than a read
followed by a write.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from toystore.domain.entities import CartItem, Product, new_item_id
from toystore.domain.exceptions import CartError, InvalidArgumentError, PersistenceError
from toystore.domain.repositories import CartRepository

from ..mappers import CartItemMapper
from ..models import CartItemModel, ProductModel
from .base import SqlAlchemyRepository, loader_options, parse_include, storage_operation


logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _blank(cart_id: Optional[str]) -> bool:
    return cart_id is None or not cart_id.strip()


class SqlAlchemyCartRepository(SqlAlchemyRepository[CartItem, CartItemModel], CartRepository):
    """Concrete implementation of CartRepository using SQLAlchemy."""

    model = CartItemModel
    mapper = CartItemMapper
    key = "item_id"
    default_include = ("product",)

    def _order_by(self) -> tuple:
        return (CartItemModel.date_created, CartItemModel.item_id)

    def _line_criteria(self, cart_id: str, product_id: int) -> tuple:
        return (CartItemModel.cart_id == cart_id, CartItemModel.product_id == product_id)

    @storage_operation
    def _cart_models(self, cart_id: str) -> List[CartItemModel]:
        stmt = select(CartItemModel).where(CartItemModel.cart_id == cart_id)
        return list(self._session.scalars(stmt.order_by(*self._order_by())).all())

    @storage_operation
    def _fetch_line(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        """Re-read one line, overwriting any stale copy held by the session."""
        tree = parse_include(self.default_include)
        stmt = (
            select(CartItemModel)
            .where(*self._line_criteria(cart_id, product_id))
            .options(*loader_options(CartItemModel, tree))
            .execution_options(populate_existing=True)
        )
        model = self._session.scalars(stmt).one_or_none()
        return self.mapper.to_domain(model, tree) if model is not None else None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cart_items(self, cart_id: str) -> List[CartItem]:
        if _blank(cart_id):
            return []
        return self.find(CartItemModel.cart_id == cart_id)

    def get_cart_item(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        if _blank(cart_id):
            return None
        return self.single_or_default(*self._line_criteria(cart_id, product_id))

    @storage_operation
    def get_cart_total(self, cart_id: str) -> Decimal:
        """Sum of quantity x live product price; unpriced products count as 0."""
        if _blank(cart_id):
            return Decimal("0.00")
        rows = self._session.execute(
            select(CartItemModel.quantity, ProductModel.unit_price)
            .join(CartItemModel.product)
            .where(CartItemModel.cart_id == cart_id)
        ).all()
        total = sum(
            (Decimal(quantity) * Decimal(str(price or 0)) for quantity, price in rows),
            Decimal("0"),
        )
        return total.quantize(CENTS)

    @storage_operation
    def get_cart_item_count(self, cart_id: str) -> int:
        if _blank(cart_id):
            return 0
        count = self._session.scalar(
            select(func.coalesce(func.sum(CartItemModel.quantity), 0))
            .where(CartItemModel.cart_id == cart_id)
        )
        return int(count or 0)

    # ------------------------------------------------------------------
    # Bulk cart operations (persisted on save)
    # ------------------------------------------------------------------

    @storage_operation
    def empty_cart(self, cart_id: str) -> None:
        if _blank(cart_id):
            return
        for model in self._cart_models(cart_id):
            self._session.delete(model)

    @storage_operation
    def migrate_cart(self, old_cart_id: str, new_cart_id: str) -> None:
        """
        Move every line of old_cart_id into new_cart_id.

        A product already present in the destination is merged: the source
        quantity is added onto the destination line in one UPDATE, so a
        concurrent add to that line is not lost, and the source line is
        deleted. (cart_id, product_id) stays unique.
        """
        if _blank(old_cart_id) or _blank(new_cart_id):
            raise CartError("Cart IDs cannot be null or empty for migration", cart_id=old_cart_id)
        if old_cart_id == new_cart_id:
            return

        source = self._cart_models(old_cart_id)
        if not source:
            return
        destination = {line.product_id for line in self._cart_models(new_cart_id)}

        merged = 0
        for line in source:
            if line.product_id not in destination:
                line.cart_id = new_cart_id
                continue
            self._update_line(new_cart_id, line.product_id, CartItemModel.quantity + line.quantity)
            self._session.delete(line)
            merged += 1

        logger.info(
            f"Cart {old_cart_id} migrated to {new_cart_id} "
            f"({len(source) - merged} moved, {merged} merged)"
        )

    # ------------------------------------------------------------------
    # Atomic line primitives (executed immediately)
    # ------------------------------------------------------------------

    @storage_operation
    def add_or_increment(self, cart_id: str, product: Product) -> CartItem:
        """
        Insert a quantity-1 line or add one to the existing line, atomically.

        The unit price is snapshotted only when the line is created.
        """
        if _blank(cart_id):
            raise CartError("Cart id is required", cart_id=cart_id, product_id=product.product_id)

        self._session.flush()
        values = dict(
            item_id=new_item_id(),
            cart_id=cart_id,
            product_id=product.product_id,
            quantity=1,
            unit_price=product.price_or_zero,
            date_created=datetime.now(timezone.utc),
        )

        dialect = self._session.get_bind().dialect.name
        upsert = UPSERT_INSERTS.get(dialect)
        if upsert is not None:
            table = CartItemModel.__table__
            stmt = upsert(table).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=["cart_id", "product_id"],
                set_={"quantity": table.c.quantity + 1},
            )
            self._session.execute(stmt)
        elif not self._update_line(cart_id, product.product_id, CartItemModel.quantity + 1):
            try:
                self._session.add(CartItemModel(**values))
                self._session.flush()
            except IntegrityError as e:
                # A concurrent request inserted the same line first
                self._storage_failed()
                raise PersistenceError(
                    f"Concurrent insert of product {product.product_id} into cart {cart_id}"
                ) from e

        return self._fetch_line(cart_id, product.product_id)

    @storage_operation
    def decrement_or_remove(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        """
        Take one off a line; a line holding a single unit is deleted.

        Returns the updated line, or None when it was deleted or never existed.
        """
        if _blank(cart_id):
            return None
        if self._update_line(cart_id, product_id, CartItemModel.quantity - 1, CartItemModel.quantity > 1):
            return self._fetch_line(cart_id, product_id)

        self._session.execute(
            delete(CartItemModel)
            .where(*self._line_criteria(cart_id, product_id), CartItemModel.quantity <= 1)
            .execution_options(synchronize_session="evaluate")
        )
        return None

    @storage_operation
    def set_quantity(self, cart_id: str, product_id: int, quantity: int) -> Optional[CartItem]:
        """Set an existing line's quantity; returns None if there is no such line."""
        if quantity is None or quantity <= 0:
            raise InvalidArgumentError(f"Quantity must be greater than 0: {quantity}")
        if _blank(cart_id):
            return None
        if not self._update_line(cart_id, product_id, quantity):
            return None
        return self._fetch_line(cart_id, product_id)

    @storage_operation
    def _update_line(self, cart_id: str, product_id: int, quantity, *extra_criteria) -> bool:
        result = self._session.execute(
            update(CartItemModel)
            .where(*self._line_criteria(cart_id, product_id), *extra_criteria)
            .values(quantity=quantity)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount > 0
