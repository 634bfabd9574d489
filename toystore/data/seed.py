"""Initial catalog data."""

import logging
from decimal import Decimal
from typing import List, Tuple

from toystore.domain.entities import Category, Product

from .uow import AsyncUnitOfWork, UnitOfWork


logger = logging.getLogger(__name__)


CATEGORIES = [
    ("Cars", "Toy cars for all ages"),
    ("Planes", "Model airplanes and jets"),
    ("Trucks", "Heavy-duty toy trucks"),
    ("Boats", "Boats and ships"),
]

# (name, description, image path, price, category name)
PRODUCTS = [
    ("Race Car", "Fast racing car toy with realistic details",
     "~/Catalog/Images/carracer.png", Decimal("15.99"), "Cars"),
    ("Fighter Jet", "Military fighter jet model with moving parts",
     "~/Catalog/Images/planeace.png", Decimal("24.99"), "Planes"),
    ("Fire Truck", "Emergency fire truck with ladder and sirens",
     "~/Catalog/Images/truckfire.png", Decimal("29.99"), "Trucks"),
    ("Sailboat", "Classic sailboat with authentic rigging",
     "~/Catalog/Images/boatsail.png", Decimal("19.99"), "Boats"),
]


def seed_catalog(uow: UnitOfWork) -> Tuple[List[Category], List[Product]]:
    """
    Insert the starter categories and products and save them.

    Products get ids 1..4 in PRODUCTS order on an empty database.
    """
    categories = _categories()
    uow.categories.add_range(categories)
    uow.save_changes()

    products = _products({category.category_name: category.category_id for category in categories})
    uow.products.add_range(products)
    uow.save_changes()

    logger.info(f"Seeded {len(categories)} categories and {len(products)} products")
    return categories, products


def _categories() -> List[Category]:
    return [Category(category_name=name, description=description) for name, description in CATEGORIES]


def _products(category_ids: dict) -> List[Product]:
    return [
        Product(
            product_name=name,
            description=description,
            image_path=image_path,
            unit_price=price,
            category_id=category_ids[category_name],
        )
        for name, description, image_path, price, category_name in PRODUCTS
    ]


async def seed_catalog_async(uow: AsyncUnitOfWork) -> Tuple[List[Category], List[Product]]:
    """Async form of seed_catalog."""
    categories = _categories()
    await uow.categories.add_range(categories)
    await uow.save_changes()

    products = _products({category.category_name: category.category_id for category in categories})
    await uow.products.add_range(products)
    await uow.save_changes()

    logger.info(f"Seeded {len(categories)} categories and {len(products)} products")
    return categories, products
