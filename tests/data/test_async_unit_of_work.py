"""
Tests for AsyncUnitOfWork and the non-blocking repositories.

Same behaviour as the blocking form, driven through aiosqlite.
"""
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from toystore.data.models import ProductModel
from toystore.data.uow import AsyncTransactionScope, AsyncUnitOfWork, create_async_uow
from toystore.domain.entities import Category, Order, OrderDetail
from toystore.domain.exceptions import (
    CartError,
    CategoryNotFoundError,
    OrderNotFoundError,
    PersistenceError,
    ProductNotFoundError,
    TransactionStateError,
)

from tests.conftest import FIGHTER_JET, FIRE_TRUCK, RACE_CAR


async def _names(uow) -> list:
    return [c.category_name for c in await uow.categories.get_all(include=())]


async def _add(uow, cart_id: str, product_id: int, times: int = 1):
    product = await uow.products.get_by_id(product_id)
    item = None
    for _ in range(times):
        item = await uow.cart_items.add_or_increment(cart_id, product)
    await uow.save_changes()
    return item


@pytest.mark.asyncio
async def test_get_by_id(async_uow):
    product = await async_uow.products.get_by_id(RACE_CAR)
    assert product.product_name == "Race Car"
    assert product.category.category_name == "Cars"

    with pytest.raises(ProductNotFoundError):
        await async_uow.products.get_by_id(999)


@pytest.mark.asyncio
async def test_queries(async_uow):
    assert len(await async_uow.products.get_all()) == 4
    expensive = await async_uow.products.find(ProductModel.unit_price > Decimal("20.00"))
    assert [p.product_id for p in expensive] == [FIGHTER_JET, FIRE_TRUCK]
    assert await async_uow.products.single_or_default(ProductModel.product_name == "Yo-yo") is None
    assert [p.product_id for p in await async_uow.products.get_featured_products(1)] == [RACE_CAR]
    assert (await async_uow.products.get_product_by_name("Fire Truck")).product_id == FIRE_TRUCK
    assert [p.product_id for p in await async_uow.products.get_products_by_name("Jet")] == [FIGHTER_JET]
    assert [p.product_id for p in await async_uow.products.get_products_by_category(3)] == [FIRE_TRUCK]

    cars = await async_uow.categories.get_category_by_name("Cars")
    assert [p.product_id for p in cars.products] == [RACE_CAR]
    assert len(await async_uow.categories.get_categories_with_products()) == 4


@pytest.mark.asyncio
async def test_add_writes_back_key(async_uow, async_session_factory):
    dolls = Category(category_name="Dolls")
    await async_uow.categories.add(dolls)
    assert await async_uow.save_changes() == 1
    assert dolls.category_id == 5

    async with AsyncUnitOfWork(async_session_factory) as other:
        assert "Dolls" in await _names(other)


@pytest.mark.asyncio
async def test_remove_and_update(async_uow):
    product = await async_uow.products.get_by_id(FIRE_TRUCK)
    product.unit_price = Decimal("31.00")
    await async_uow.products.update(product)
    await async_uow.save_changes()
    assert (await async_uow.products.get_by_id(FIRE_TRUCK)).unit_price == Decimal("31.00")

    dolls, trains = Category(category_name="Dolls"), Category(category_name="Trains")
    await async_uow.categories.add_range([dolls, trains])
    await async_uow.save_changes()
    await async_uow.categories.remove_range([dolls, trains])
    await async_uow.save_changes()
    with pytest.raises(CategoryNotFoundError):
        await async_uow.categories.get_by_id(dolls.category_id)


class TestAsyncTransactions:
    @pytest.mark.asyncio
    async def test_state_machine(self, async_uow):
        scope = async_uow.begin_transaction()
        assert isinstance(scope, AsyncTransactionScope)
        with pytest.raises(TransactionStateError):
            async_uow.begin_transaction()

        await async_uow.rollback_transaction()
        assert async_uow.transaction_active is False

        with pytest.raises(TransactionStateError):
            await async_uow.commit_transaction()
        with pytest.raises(TransactionStateError):
            await async_uow.rollback_transaction()

    @pytest.mark.asyncio
    async def test_scope_commits(self, async_uow, async_session_factory):
        async with async_uow.begin_transaction():
            await async_uow.categories.add(Category(category_name="Dolls"))

        assert async_uow.transaction_active is False
        async with AsyncUnitOfWork(async_session_factory) as other:
            assert "Dolls" in await _names(other)

    @pytest.mark.asyncio
    async def test_scope_rolls_back_on_error(self, async_uow):
        with pytest.raises(RuntimeError):
            async with async_uow.begin_transaction():
                await async_uow.categories.add(Category(category_name="Dolls"))
                await async_uow.save_changes()
                raise RuntimeError("boom")

        assert async_uow.transaction_active is False
        assert "Dolls" not in await _names(async_uow)

    @pytest.mark.asyncio
    async def test_storage_failure_is_wrapped(self, async_uow):
        await async_uow.categories.add(Category(category_id=1, category_name="Duplicate"))

        with pytest.raises(PersistenceError) as exc_info:
            await async_uow.save_changes()
        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert await async_uow.save_changes() == 0

    @pytest.mark.asyncio
    async def test_dispose(self, async_session_factory):
        uow = create_async_uow(async_session_factory)
        assert isinstance(uow, AsyncUnitOfWork)
        uow.begin_transaction()
        await uow.dispose()
        await uow.dispose()

        assert uow.transaction_active is False
        with pytest.raises(TransactionStateError):
            await uow.save_changes()


class TestAsyncCartAndOrders:
    @pytest.mark.asyncio
    async def test_cart_primitives(self, async_uow):
        item = await _add(async_uow, "cart-1", RACE_CAR, times=2)
        assert item.quantity == 2
        await _add(async_uow, "cart-1", FIGHTER_JET)

        assert await async_uow.cart_items.get_cart_total("cart-1") == Decimal("56.97")
        assert await async_uow.cart_items.get_cart_item_count("cart-1") == 3

        item = await async_uow.cart_items.decrement_or_remove("cart-1", RACE_CAR)
        assert item.quantity == 1
        item = await async_uow.cart_items.set_quantity("cart-1", FIGHTER_JET, 4)
        assert item.quantity == 4
        await async_uow.save_changes()

        line = await async_uow.cart_items.get_cart_item("cart-1", FIGHTER_JET)
        assert line.quantity == 4

    @pytest.mark.asyncio
    async def test_migrate_and_empty(self, async_uow):
        await _add(async_uow, "anonymous", RACE_CAR, times=2)
        await _add(async_uow, "alice", RACE_CAR)

        await async_uow.cart_items.migrate_cart("anonymous", "alice")
        await async_uow.save_changes()
        items = await async_uow.cart_items.get_cart_items("alice")
        assert [(i.product_id, i.quantity) for i in items] == [(RACE_CAR, 3)]
        assert await async_uow.cart_items.get_cart_items("anonymous") == []

        with pytest.raises(CartError):
            await async_uow.cart_items.migrate_cart("", "alice")

        await async_uow.cart_items.empty_cart("alice")
        await async_uow.save_changes()
        assert await async_uow.cart_items.get_cart_item_count("alice") == 0

    @pytest.mark.asyncio
    async def test_orders(self, async_uow):
        order = Order(
            username="alice@example.com", first_name="Alice", last_name="Smith",
            address="1 Main St", city="Springfield", state="IL", postal_code="62701",
            country="US", email="alice@example.com", total=Decimal("15.99"),
        )
        order.details = [
            OrderDetail(product_id=RACE_CAR, product_name="Race Car", quantity=1,
                        unit_price=Decimal("15.99"), username="alice@example.com"),
        ]
        await async_uow.orders.add(order)
        await async_uow.save_changes()
        assert order.details[0].order_detail_id is not None

        loaded = await async_uow.orders.get_order_with_details(order.order_id)
        assert loaded.details[0].product.product_name == "Race Car"
        assert [o.order_id for o in await async_uow.orders.get_orders_by_username("alice@example.com")] == [
            order.order_id
        ]
        assert len(await async_uow.orders.get_unshipped_orders()) == 1

        await async_uow.orders.mark_shipped(order.order_id)
        await async_uow.save_changes()
        assert await async_uow.orders.get_unshipped_orders() == []
        assert len(await async_uow.order_details.get_all()) == 1

        with pytest.raises(OrderNotFoundError):
            await async_uow.orders.mark_shipped(404)
