"""Static mappers for domain entities ↔ database models.

Every to_domain takes an include tree (relationship name -> nested tree, as
built by ``parse_include``). Only relationships named in the tree are mapped,
so a mapper never triggers a lazy load the query did not ask for.
"""

from decimal import Decimal
from typing import Dict, Optional

from toystore.domain.entities import CartItem, Category, Order, OrderDetail, Product

from .models import (
    CartItemModel,
    CategoryModel,
    OrderDetailModel,
    OrderModel,
    ProductModel,
)


IncludeTree = Dict[str, "IncludeTree"]

EMPTY: IncludeTree = {}


def _money(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.01"))


class CategoryMapper:
    """Static mapper for Category ↔ CategoryModel transformation."""

    @staticmethod
    def to_domain(model: CategoryModel, include: IncludeTree = EMPTY) -> Category:
        category = Category(
            category_id=model.category_id,
            category_name=model.category_name,
            description=model.description,
        )
        if "products" in include:
            category.products = [
                ProductMapper.to_domain(product, include["products"])
                for product in model.products
            ]
        return category

    @staticmethod
    def to_persistence(entity: Category) -> CategoryModel:
        return CategoryModel(
            category_id=entity.category_id,
            category_name=entity.category_name,
            description=entity.description,
        )

    @staticmethod
    def update_persistence(entity: Category, model: CategoryModel) -> None:
        model.category_name = entity.category_name
        model.description = entity.description


class ProductMapper:
    """Static mapper for Product ↔ ProductModel transformation."""

    @staticmethod
    def to_domain(model: ProductModel, include: IncludeTree = EMPTY) -> Product:
        product = Product(
            product_id=model.product_id,
            product_name=model.product_name,
            description=model.description,
            image_path=model.image_path,
            unit_price=_money(model.unit_price),
            category_id=model.category_id,
        )
        if "category" in include and model.category is not None:
            product.category = CategoryMapper.to_domain(model.category, include["category"])
        return product

    @staticmethod
    def to_persistence(entity: Product) -> ProductModel:
        return ProductModel(
            product_id=entity.product_id,
            product_name=entity.product_name,
            description=entity.description,
            image_path=entity.image_path,
            unit_price=entity.unit_price,
            category_id=entity.category_id,
        )

    @staticmethod
    def update_persistence(entity: Product, model: ProductModel) -> None:
        model.product_name = entity.product_name
        model.description = entity.description
        model.image_path = entity.image_path
        model.unit_price = entity.unit_price
        model.category_id = entity.category_id


class CartItemMapper:
    """Static mapper for CartItem ↔ CartItemModel transformation."""

    @staticmethod
    def to_domain(model: CartItemModel, include: IncludeTree = EMPTY) -> CartItem:
        item = CartItem(
            item_id=model.item_id,
            cart_id=model.cart_id,
            product_id=model.product_id,
            quantity=model.quantity,
            unit_price=_money(model.unit_price),
            date_created=model.date_created,
        )
        if "product" in include and model.product is not None:
            item.product = ProductMapper.to_domain(model.product, include["product"])
        return item

    @staticmethod
    def to_persistence(entity: CartItem) -> CartItemModel:
        return CartItemModel(
            item_id=entity.item_id,
            cart_id=entity.cart_id,
            product_id=entity.product_id,
            quantity=entity.quantity,
            unit_price=entity.unit_price,
            date_created=entity.date_created,
        )

    @staticmethod
    def update_persistence(entity: CartItem, model: CartItemModel) -> None:
        model.cart_id = entity.cart_id
        model.product_id = entity.product_id
        model.quantity = entity.quantity
        model.unit_price = entity.unit_price
        model.date_created = entity.date_created


class OrderDetailMapper:
    """Static mapper for OrderDetail ↔ OrderDetailModel transformation."""

    @staticmethod
    def to_domain(model: OrderDetailModel, include: IncludeTree = EMPTY) -> OrderDetail:
        detail = OrderDetail(
            order_detail_id=model.order_detail_id,
            order_id=model.order_id,
            username=model.username,
            product_id=model.product_id,
            product_name=model.product_name,
            quantity=model.quantity,
            unit_price=_money(model.unit_price),
        )
        if "product" in include and model.product is not None:
            detail.product = ProductMapper.to_domain(model.product, include["product"])
        return detail

    @staticmethod
    def to_persistence(entity: OrderDetail) -> OrderDetailModel:
        return OrderDetailModel(
            order_detail_id=entity.order_detail_id,
            order_id=entity.order_id,
            username=entity.username,
            product_id=entity.product_id,
            product_name=entity.product_name,
            quantity=entity.quantity,
            unit_price=entity.unit_price,
        )

    @staticmethod
    def update_persistence(entity: OrderDetail, model: OrderDetailModel) -> None:
        model.order_id = entity.order_id
        model.username = entity.username
        model.product_id = entity.product_id
        model.product_name = entity.product_name
        model.quantity = entity.quantity
        model.unit_price = entity.unit_price


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested details."""

    @staticmethod
    def to_domain(model: OrderModel, include: IncludeTree = EMPTY) -> Order:
        order = Order(
            order_id=model.order_id,
            order_date=model.order_date,
            username=model.username,
            first_name=model.first_name,
            last_name=model.last_name,
            address=model.address,
            city=model.city,
            state=model.state,
            postal_code=model.postal_code,
            country=model.country,
            phone=model.phone,
            email=model.email,
            total=_money(model.total),
            payment_transaction_id=model.payment_transaction_id,
            has_been_shipped=bool(model.has_been_shipped),
        )
        if "details" in include:
            order.details = [
                OrderDetailMapper.to_domain(detail, include["details"])
                for detail in model.details
            ]
        return order

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert the aggregate, including any detail lines it carries."""
        model = OrderModel(order_id=entity.order_id)
        OrderMapper.update_persistence(entity, model)
        model.details = [OrderDetailMapper.to_persistence(detail) for detail in entity.details]
        return model

    @staticmethod
    def update_persistence(entity: Order, model: OrderModel) -> None:
        # Detail lines are immutable after checkout and are not rewritten here
        model.order_date = entity.order_date
        model.username = entity.username
        model.first_name = entity.first_name
        model.last_name = entity.last_name
        model.address = entity.address
        model.city = entity.city
        model.state = entity.state
        model.postal_code = entity.postal_code
        model.country = entity.country
        model.phone = entity.phone
        model.email = entity.email
        model.total = entity.total
        model.payment_transaction_id = entity.payment_transaction_id
        model.has_been_shipped = entity.has_been_shipped
