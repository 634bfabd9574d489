"""SQLAlchemy implementations of the product and category repositories."""

from typing import List, Optional

from toystore.domain.entities import Category, Product
from toystore.domain.exceptions import CategoryNotFoundError, ProductNotFoundError
from toystore.domain.repositories import CategoryRepository, ProductRepository
from toystore.infrastructure.database.config import get_settings

from ..mappers import CategoryMapper, ProductMapper
from ..models import CategoryModel, ProductModel
from .base import SqlAlchemyRepository


class SqlAlchemyProductRepository(SqlAlchemyRepository[Product, ProductModel], ProductRepository):
    """Concrete implementation of ProductRepository using SQLAlchemy."""

    model = ProductModel
    mapper = ProductMapper
    key = "product_id"
    default_include = ("category",)
    not_found_error = ProductNotFoundError

    def get_products_by_category(self, category_id: int) -> List[Product]:
        return self.find(ProductModel.category_id == category_id)

    def get_products_by_name(self, product_name: str) -> List[Product]:
        if not product_name or not product_name.strip():
            return []
        return self.find(ProductModel.product_name.contains(product_name, autoescape=True))

    def get_featured_products(self, limit: Optional[int] = None) -> List[Product]:
        """First products of the catalog (there is no featured flag yet)."""
        if limit is None:
            limit = get_settings().featured_products_limit
        return self._list(limit=limit)

    def get_product_by_name(self, product_name: str) -> Product:
        if not product_name or not product_name.strip():
            raise ProductNotFoundError(product_name=product_name)
        product = self.single_or_default(ProductModel.product_name == product_name)
        if product is None:
            raise ProductNotFoundError(product_name=product_name)
        return product


class SqlAlchemyCategoryRepository(SqlAlchemyRepository[Category, CategoryModel], CategoryRepository):
    """Concrete implementation of CategoryRepository using SQLAlchemy."""

    model = CategoryModel
    mapper = CategoryMapper
    key = "category_id"
    default_include = ("products",)
    not_found_error = CategoryNotFoundError

    def get_category_by_name(self, category_name: str) -> Category:
        if not category_name or not category_name.strip():
            raise CategoryNotFoundError(category_name=category_name)
        categories = self.find(CategoryModel.category_name == category_name)
        if not categories:
            raise CategoryNotFoundError(category_name=category_name)
        # Names are unique in practice; the lowest id wins otherwise
        return categories[0]

    def get_categories_with_products(self) -> List[Category]:
        return self.find(CategoryModel.products.any())
