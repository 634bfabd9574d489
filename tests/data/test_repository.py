"""
Tests for the generic repository contract.

Exercised through the product and category repositories of a unit of work
over the seeded catalog.
"""
from decimal import Decimal

import pytest

from toystore.data.models import ProductModel
from toystore.data.repositories.base import parse_include
from toystore.domain.entities import Category, Product
from toystore.domain.exceptions import (
    CategoryNotFoundError,
    EntityNotFoundError,
    InvalidArgumentError,
    OrderNotFoundError,
    ProductNotFoundError,
)

from tests.conftest import FIGHTER_JET, FIRE_TRUCK, RACE_CAR, SAILBOAT


def _kite(**overrides) -> Product:
    fields = dict(
        product_name="Kite",
        description="Diamond kite with tail",
        unit_price=Decimal("9.99"),
        category_id=1,
    )
    fields.update(overrides)
    return Product(**fields)


class TestParseInclude:
    def test_nested_paths_share_prefixes(self):
        tree = parse_include(("details.product", "details", "category"))
        assert tree == {"details": {"product": {}}, "category": {}}

    def test_empty(self):
        assert parse_include(None) == {}
        assert parse_include(()) == {}

    def test_single_string(self):
        assert parse_include("products") == {"products": {}}


class TestQueries:
    """Reads by key, listing and criteria."""

    def test_get_by_id_loads_default_relationships(self, uow):
        product = uow.products.get_by_id(RACE_CAR)
        assert product.product_name == "Race Car"
        assert product.unit_price == Decimal("15.99")
        assert product.category is not None
        assert product.category.category_name == "Cars"

    def test_get_by_id_with_empty_include_skips_relationships(self, uow):
        product = uow.products.get_by_id(RACE_CAR, include=())
        assert product.category is None

    def test_nested_include(self, uow):
        category = uow.categories.get_by_id(1, include=("products.category",))
        assert [p.product_name for p in category.products] == ["Race Car"]
        assert category.products[0].category.category_name == "Cars"

    def test_unknown_include_is_rejected(self, uow):
        with pytest.raises(InvalidArgumentError):
            uow.products.get_by_id(RACE_CAR, include=("reviews",))

    @pytest.mark.parametrize("repository,error", [
        ("products", ProductNotFoundError),
        ("categories", CategoryNotFoundError),
        ("orders", OrderNotFoundError),
    ])
    def test_missing_key_raises_not_found(self, uow, repository, error):
        with pytest.raises(error) as exc_info:
            getattr(uow, repository).get_by_id(999)
        assert isinstance(exc_info.value, EntityNotFoundError)
        assert exc_info.value.key == 999

    def test_get_all_is_ordered_by_key(self, uow):
        products = uow.products.get_all()
        assert [p.product_id for p in products] == [RACE_CAR, FIGHTER_JET, FIRE_TRUCK, SAILBOAT]

    def test_get_all_on_empty_store(self, uow):
        assert uow.orders.get_all() == []

    def test_find(self, uow):
        products = uow.products.find(ProductModel.unit_price > Decimal("20.00"))
        assert [p.product_name for p in products] == ["Fighter Jet", "Fire Truck"]

    def test_find_without_matches(self, uow):
        assert uow.products.find(ProductModel.product_name == "Yo-yo") == []

    def test_single_or_default(self, uow):
        product = uow.products.single_or_default(ProductModel.product_name == "Sailboat")
        assert product.product_id == SAILBOAT
        assert uow.products.single_or_default(ProductModel.product_name == "Yo-yo") is None

    def test_single_or_default_with_many_matches(self, uow):
        with pytest.raises(InvalidArgumentError):
            uow.products.single_or_default(ProductModel.unit_price > Decimal("1.00"))


class TestMutations:
    """Queued writes, key write-back and read-your-writes."""

    def test_add_writes_back_generated_key(self, uow):
        kite = _kite()
        uow.products.add(kite)
        assert kite.product_id is None

        assert uow.save_changes() == 1
        assert kite.product_id == 5

    def test_add_range(self, uow):
        dolls = Category(category_name="Dolls")
        trains = Category(category_name="Trains")
        uow.categories.add_range([dolls, trains])
        assert uow.save_changes() == 2
        assert (dolls.category_id, trains.category_id) == (5, 6)

    def test_pending_add_is_visible_to_queries(self, uow):
        uow.products.add(_kite())
        names = [p.product_name for p in uow.products.get_products_by_name("Kite")]
        assert names == ["Kite"]

    def test_none_is_rejected(self, uow):
        with pytest.raises(InvalidArgumentError):
            uow.products.add(None)
        with pytest.raises(InvalidArgumentError):
            uow.products.update(None)
        with pytest.raises(InvalidArgumentError):
            uow.products.remove(None)
        with pytest.raises(InvalidArgumentError):
            uow.products.add_range(None)

    def test_add_range_with_none_queues_nothing(self, uow):
        with pytest.raises(InvalidArgumentError):
            uow.products.add_range([_kite(), None])
        assert uow.save_changes() == 0
        assert len(uow.products.get_all()) == 4

    def test_update_is_persisted_on_save(self, uow, fresh_uow):
        product = uow.products.get_by_id(FIRE_TRUCK)
        product.unit_price = Decimal("27.50")
        uow.products.update(product)
        assert uow.save_changes() == 1

        reread = fresh_uow().products.get_by_id(FIRE_TRUCK)
        assert reread.unit_price == Decimal("27.50")

    def test_update_of_unknown_entity(self, uow):
        with pytest.raises(ProductNotFoundError):
            uow.products.update(_kite(product_id=999))

    def test_remove_persisted(self, uow):
        product = uow.products.get_by_id(SAILBOAT)
        uow.products.remove(product)
        uow.save_changes()

        with pytest.raises(ProductNotFoundError):
            uow.products.get_by_id(SAILBOAT)

    def test_remove_pending_add_cancels_it(self, uow):
        kite = _kite()
        uow.products.add(kite)
        uow.products.remove(kite)

        assert uow.save_changes() == 0
        assert kite.product_id is None
        assert uow.products.get_products_by_name("Kite") == []

    def test_remove_range_is_all_or_nothing(self, uow):
        race_car = uow.products.get_by_id(RACE_CAR)
        with pytest.raises(ProductNotFoundError):
            uow.products.remove_range([race_car, _kite(product_id=999)])

        uow.save_changes()
        assert uow.products.get_by_id(RACE_CAR).product_name == "Race Car"
