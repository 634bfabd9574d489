"""Application services."""

from .shopping_cart_service import AsyncShoppingCartService, ShoppingCartService

__all__ = ["AsyncShoppingCartService", "ShoppingCartService"]
