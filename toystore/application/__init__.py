"""Application layer - use cases on top of the unit of work."""

from .services import AsyncShoppingCartService, ShoppingCartService

__all__ = ["AsyncShoppingCartService", "ShoppingCartService"]
