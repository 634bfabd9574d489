"""SQLAlchemy repository implementations."""

from .base import SqlAlchemyRepository, loader_options, parse_include
from .cart_repository_impl import SqlAlchemyCartRepository
from .catalog_repository_impl import SqlAlchemyCategoryRepository, SqlAlchemyProductRepository
from .order_repository_impl import SqlAlchemyOrderDetailRepository, SqlAlchemyOrderRepository

__all__ = [
    "loader_options",
    "parse_include",
    "SqlAlchemyCartRepository",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyOrderDetailRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyRepository",
]
