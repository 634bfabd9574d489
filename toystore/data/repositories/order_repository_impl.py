"""SQLAlchemy implementation of OrderRepository."""

from typing import List

from toystore.domain.entities import Order, OrderDetail
from toystore.domain.exceptions import OrderNotFoundError
from toystore.domain.repositories import OrderRepository

from ..mappers import OrderDetailMapper, OrderMapper
from ..models import OrderDetailModel, OrderModel
from .base import SqlAlchemyRepository, storage_operation


class SqlAlchemyOrderRepository(SqlAlchemyRepository[Order, OrderModel], OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    model = OrderModel
    mapper = OrderMapper
    key = "order_id"
    default_include = ("details",)
    not_found_error = OrderNotFoundError

    def get_orders_by_username(self, username: str) -> List[Order]:
        if not username or not username.strip():
            return []
        return self._list(
            OrderModel.username == username,
            order_by=(OrderModel.order_date.desc(), OrderModel.order_id.desc()),
        )

    def get_order_with_details(self, order_id: int) -> Order:
        return self.get_by_id(order_id, include=("details.product",))

    def get_unshipped_orders(self) -> List[Order]:
        return self._list(
            OrderModel.has_been_shipped.is_(False),
            order_by=(OrderModel.order_date.asc(), OrderModel.order_id.asc()),
        )

    @storage_operation
    def mark_shipped(self, order_id: int) -> None:
        model = self._session.get(OrderModel, order_id)
        if model is None:
            raise OrderNotFoundError(order_id)
        model.has_been_shipped = True

    def sync_keys(self) -> None:
        """Write back order keys and the keys of the detail lines they carried."""
        for order, model in self._added:
            for detail, detail_model in zip(order.details, model.details):
                detail.order_detail_id = detail_model.order_detail_id
                detail.order_id = detail_model.order_id
        super().sync_keys()


class SqlAlchemyOrderDetailRepository(SqlAlchemyRepository[OrderDetail, OrderDetailModel]):
    """Plain generic repository over order detail lines."""

    model = OrderDetailModel
    mapper = OrderDetailMapper
    key = "order_detail_id"
