"""Repository interfaces for the catalog, cart and order stores."""

from abc import abstractmethod
from decimal import Decimal
from typing import List, Optional

from ..entities import CartItem, Category, Order, Product
from .repository import Repository


class ProductRepository(Repository[Product]):
    """Products with their category joined by default."""

    @abstractmethod
    def get_products_by_category(self, category_id: int) -> List[Product]:
        pass

    @abstractmethod
    def get_products_by_name(self, product_name: str) -> List[Product]:
        """Substring search; a blank name yields an empty list."""
        pass

    @abstractmethod
    def get_featured_products(self, limit: Optional[int] = None) -> List[Product]:
        pass

    @abstractmethod
    def get_product_by_name(self, product_name: str) -> Product:
        """Exact lookup.

        Raises:
            ProductNotFoundError: If no product has that name
        """
        pass


class CategoryRepository(Repository[Category]):
    """Categories with their products joined by default."""

    @abstractmethod
    def get_category_by_name(self, category_name: str) -> Category:
        pass

    @abstractmethod
    def get_categories_with_products(self) -> List[Category]:
        pass


class OrderRepository(Repository[Order]):
    """Orders with their detail lines joined by default."""

    @abstractmethod
    def get_orders_by_username(self, username: str) -> List[Order]:
        """Orders placed by a user, newest first."""
        pass

    @abstractmethod
    def get_order_with_details(self, order_id: int) -> Order:
        pass

    @abstractmethod
    def get_unshipped_orders(self) -> List[Order]:
        """Orders still waiting for shipment, oldest first."""
        pass

    @abstractmethod
    def mark_shipped(self, order_id: int) -> None:
        """Set the shipped flag. The caller must save the unit of work."""
        pass


class CartRepository(Repository[CartItem]):
    """Shopping cart lines grouped by cart id."""

    @abstractmethod
    def get_cart_items(self, cart_id: str) -> List[CartItem]:
        pass

    @abstractmethod
    def get_cart_item(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        pass

    @abstractmethod
    def get_cart_total(self, cart_id: str) -> Decimal:
        pass

    @abstractmethod
    def get_cart_item_count(self, cart_id: str) -> int:
        pass

    @abstractmethod
    def empty_cart(self, cart_id: str) -> None:
        pass

    @abstractmethod
    def migrate_cart(self, old_cart_id: str, new_cart_id: str) -> None:
        """Move every line of old_cart_id into new_cart_id, merging duplicates."""
        pass

    @abstractmethod
    def add_or_increment(self, cart_id: str, product: Product) -> CartItem:
        pass

    @abstractmethod
    def decrement_or_remove(self, cart_id: str, product_id: int) -> Optional[CartItem]:
        pass

    @abstractmethod
    def set_quantity(self, cart_id: str, product_id: int, quantity: int) -> Optional[CartItem]:
        pass
