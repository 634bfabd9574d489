"""Data layer - infrastructure persistence and mapping."""

from .async_repositories import (
    AsyncCartRepository,
    AsyncCategoryRepository,
    AsyncOrderDetailRepository,
    AsyncOrderRepository,
    AsyncProductRepository,
    AsyncRepository,
)
from .mappers import (
    CartItemMapper,
    CategoryMapper,
    OrderDetailMapper,
    OrderMapper,
    ProductMapper,
)
from .models import (
    Base,
    CartItemModel,
    CategoryModel,
    OrderDetailModel,
    OrderModel,
    ProductModel,
)
from .repositories import (
    SqlAlchemyCartRepository,
    SqlAlchemyCategoryRepository,
    SqlAlchemyOrderDetailRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyRepository,
)
from .uow import (
    AsyncTransactionScope,
    AsyncUnitOfWork,
    TransactionScope,
    UnitOfWork,
    create_async_uow,
    create_uow,
)

__all__ = [
    "AsyncCartRepository",
    "AsyncCategoryRepository",
    "AsyncOrderDetailRepository",
    "AsyncOrderRepository",
    "AsyncProductRepository",
    "AsyncRepository",
    "AsyncTransactionScope",
    "AsyncUnitOfWork",
    "Base",
    "CartItemMapper",
    "CartItemModel",
    "CategoryMapper",
    "CategoryModel",
    "create_async_uow",
    "create_uow",
    "OrderDetailMapper",
    "OrderDetailModel",
    "OrderMapper",
    "OrderModel",
    "ProductMapper",
    "ProductModel",
    "SqlAlchemyCartRepository",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyOrderDetailRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyRepository",
    "TransactionScope",
    "UnitOfWork",
]
