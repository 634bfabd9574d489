"""Repository interfaces."""

from .catalog_repositories import (
    CartRepository,
    CategoryRepository,
    OrderRepository,
    ProductRepository,
)
from .repository import Include, Repository

__all__ = [
    "CartRepository",
    "CategoryRepository",
    "Include",
    "OrderRepository",
    "ProductRepository",
    "Repository",
]
