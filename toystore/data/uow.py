"""Unit of Work pattern for atomic transactions."""

import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, sessionmaker

from toystore.domain.exceptions import PersistenceError, TransactionStateError

from .async_repositories import (
    AsyncCartRepository,
    AsyncCategoryRepository,
    AsyncOrderDetailRepository,
    AsyncOrderRepository,
    AsyncProductRepository,
)
from .repositories import (
    SqlAlchemyCartRepository,
    SqlAlchemyCategoryRepository,
    SqlAlchemyOrderDetailRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
)


logger = logging.getLogger(__name__)

SAVE_FAILED = "An error occurred while saving changes to the database."
COMMIT_FAILED = "An error occurred while committing the transaction."
ROLLBACK_FAILED = "An error occurred while rolling back the transaction."


def _pending_count(session) -> int:
    """Number of entities a flush would write."""
    modified = sum(1 for obj in session.dirty if session.is_modified(obj))
    return len(session.new) + len(session.deleted) + modified


class TransactionScope:
    """
    Handle returned by UnitOfWork.begin_transaction.

    Used as a context manager it commits on normal exit and rolls back when
    the block raises. Either way the unit of work is Idle afterwards.

    Usage:
        with uow.begin_transaction():
            uow.cart_items.migrate_cart(anonymous_id, user_id)
            uow.orders.mark_shipped(order_id)
    """

    def __init__(self, uow: "UnitOfWork") -> None:
        self._uow = uow

    @property
    def active(self) -> bool:
        return self._uow._transaction is self

    def _require_active(self) -> None:
        if not self.active:
            raise TransactionStateError("Transaction scope is no longer active.")

    def commit(self) -> None:
        self._require_active()
        self._uow.commit_transaction()

    def rollback(self) -> None:
        self._require_active()
        self._uow.rollback_transaction()

    def __enter__(self) -> "TransactionScope":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self.active:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions (blocking form).

    Responsibilities:
    1. Own one SQLAlchemy session for its whole lifetime
    2. Hand out the five repositories, all bound to that session
    3. Track the single Idle/Active transaction
    4. Wrap storage failures in PersistenceError

    Usage:
        with UnitOfWork(session_factory) as uow:
            uow.cart_items.empty_cart(cart_id)
            uow.save_changes()
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy session factory
        """
        self._session: Session = session_factory()
        self._transaction: Optional[TransactionScope] = None
        self._disposed = False
        self.execution_id = uuid.uuid4().hex[:12]

        self.products = SqlAlchemyProductRepository(self._session, self._storage_failed)
        self.categories = SqlAlchemyCategoryRepository(self._session, self._storage_failed)
        self.cart_items = SqlAlchemyCartRepository(self._session, self._storage_failed)
        self.orders = SqlAlchemyOrderRepository(self._session, self._storage_failed)
        self.order_details = SqlAlchemyOrderDetailRepository(self._session, self._storage_failed)
        self._repositories = (
            self.products,
            self.categories,
            self.cart_items,
            self.orders,
            self.order_details,
        )

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            logger.error(f"[{self.execution_id}] Unit of work failed: {exc_val}")
        self.dispose()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def transaction_active(self) -> bool:
        return self._transaction is not None

    def _ensure_open(self) -> None:
        if self._disposed:
            raise TransactionStateError("UnitOfWork has been disposed.")

    def _require_transaction(self) -> None:
        self._ensure_open()
        if self._transaction is None:
            raise TransactionStateError("No transaction is in progress.")

    def _rollback_session(self) -> None:
        """Roll back after a failure without masking the original error."""
        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"[{self.execution_id}] Rollback failed: {e}")
        for repository in self._repositories:
            repository.discard_pending()

    def _storage_failed(self) -> None:
        """
        Called when a storage statement fails.

        An Idle unit of work rolls its session back so the caller can retry.
        An Active one keeps the failed transaction for rollback_transaction.
        """
        if self._transaction is None:
            self._rollback_session()

    # ------------------------------------------------------------------
    # Transaction verbs
    # ------------------------------------------------------------------

    def begin_transaction(self) -> TransactionScope:
        """Idle -> Active."""
        self._ensure_open()
        if self._transaction is not None:
            raise TransactionStateError("A transaction is already in progress.")
        self._transaction = TransactionScope(self)
        logger.debug(f"[{self.execution_id}] Transaction started")
        return self._transaction

    def save_changes(self) -> int:
        """
        Flush every queued repository mutation.

        Outside a transaction the flush is committed straight away. Inside
        one, the changes stay uncommitted until commit_transaction.

        Returns:
            Number of entities written

        Raises:
            PersistenceError: If the storage rejects the changes
        """
        self._ensure_open()
        count = _pending_count(self._session)
        try:
            self._session.flush()
            if self._transaction is None:
                self._session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ [{self.execution_id}] Save failed: {e}")
            self._storage_failed()
            raise PersistenceError(SAVE_FAILED) from e

        for repository in self._repositories:
            repository.sync_keys()
        logger.debug(f"[{self.execution_id}] Saved {count} change(s)")
        return count

    def commit_transaction(self) -> None:
        """Save, then commit. Rolls back on any failure; always ends Idle."""
        self._require_transaction()
        try:
            self.save_changes()
            try:
                self._session.commit()
            except SQLAlchemyError as e:
                raise PersistenceError(COMMIT_FAILED) from e
            logger.info(f"✅ [{self.execution_id}] Transaction committed")
        except Exception as e:
            logger.error(f"❌ [{self.execution_id}] Commit failed: {e}")
            self._rollback_session()
            raise
        finally:
            self._transaction = None

    def rollback_transaction(self) -> None:
        """Discard everything since begin_transaction; always ends Idle."""
        self._require_transaction()
        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            raise PersistenceError(ROLLBACK_FAILED) from e
        finally:
            for repository in self._repositories:
                repository.discard_pending()
            self._transaction = None
        logger.warning(f"[{self.execution_id}] Transaction rolled back")

    def dispose(self) -> None:
        """Roll back an Active transaction and close the session. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        try:
            if self._transaction is not None:
                logger.warning(f"[{self.execution_id}] Disposed with an active transaction, rolling back")
                self._rollback_session()
                self._transaction = None
        finally:
            self._session.close()

    close = dispose


class AsyncTransactionScope:
    """Handle returned by AsyncUnitOfWork.begin_transaction (``async with``)."""

    def __init__(self, uow: "AsyncUnitOfWork") -> None:
        self._uow = uow

    @property
    def active(self) -> bool:
        return self._uow._transaction is self

    def _require_active(self) -> None:
        if not self.active:
            raise TransactionStateError("Transaction scope is no longer active.")

    async def commit(self) -> None:
        self._require_active()
        await self._uow.commit_transaction()

    async def rollback(self) -> None:
        self._require_active()
        await self._uow.rollback_transaction()

    async def __aenter__(self) -> "AsyncTransactionScope":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self.active:
            return
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()


class AsyncUnitOfWork:
    """
    Unit of Work pattern for atomic transactions (non-blocking form).

    Same state machine as UnitOfWork; every storage round-trip is awaited.
    begin_transaction is a plain method because it performs no I/O.

    Usage:
        async with AsyncUnitOfWork(session_factory) as uow:
            async with uow.begin_transaction():
                await uow.cart_items.migrate_cart(anonymous_id, user_id)
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session: AsyncSession = session_factory()
        self._transaction: Optional[AsyncTransactionScope] = None
        self._disposed = False
        self.execution_id = uuid.uuid4().hex[:12]

        self.products = AsyncProductRepository(self._session, self._storage_failed)
        self.categories = AsyncCategoryRepository(self._session, self._storage_failed)
        self.cart_items = AsyncCartRepository(self._session, self._storage_failed)
        self.orders = AsyncOrderRepository(self._session, self._storage_failed)
        self.order_details = AsyncOrderDetailRepository(self._session, self._storage_failed)
        self._repositories = tuple(
            repository.sync_repository
            for repository in (
                self.products,
                self.categories,
                self.cart_items,
                self.orders,
                self.order_details,
            )
        )

    async def __aenter__(self) -> "AsyncUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            logger.error(f"[{self.execution_id}] Unit of work failed: {exc_val}")
        await self.dispose()

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def transaction_active(self) -> bool:
        return self._transaction is not None

    def _ensure_open(self) -> None:
        if self._disposed:
            raise TransactionStateError("UnitOfWork has been disposed.")

    def _require_transaction(self) -> None:
        self._ensure_open()
        if self._transaction is None:
            raise TransactionStateError("No transaction is in progress.")

    async def _rollback_session(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"[{self.execution_id}] Rollback failed: {e}")
        for repository in self._repositories:
            repository.discard_pending()

    def _storage_failed(self) -> None:
        """Storage error callback for the repositories (runs inside run_sync)."""
        if self._transaction is not None:
            return
        try:
            self._session.sync_session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"[{self.execution_id}] Rollback failed: {e}")
        for repository in self._repositories:
            repository.discard_pending()

    def begin_transaction(self) -> AsyncTransactionScope:
        """Idle -> Active."""
        self._ensure_open()
        if self._transaction is not None:
            raise TransactionStateError("A transaction is already in progress.")
        self._transaction = AsyncTransactionScope(self)
        logger.debug(f"[{self.execution_id}] Transaction started")
        return self._transaction

    async def save_changes(self) -> int:
        """Flush queued mutations (and commit when Idle); see UnitOfWork.save_changes."""
        self._ensure_open()
        count = _pending_count(self._session)
        try:
            await self._session.flush()
            if self._transaction is None:
                await self._session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ [{self.execution_id}] Save failed: {e}")
            if self._transaction is None:
                await self._rollback_session()
            raise PersistenceError(SAVE_FAILED) from e

        for repository in self._repositories:
            repository.sync_keys()
        logger.debug(f"[{self.execution_id}] Saved {count} change(s)")
        return count

    async def commit_transaction(self) -> None:
        self._require_transaction()
        try:
            await self.save_changes()
            try:
                await self._session.commit()
            except SQLAlchemyError as e:
                raise PersistenceError(COMMIT_FAILED) from e
            logger.info(f"✅ [{self.execution_id}] Transaction committed")
        except Exception as e:
            logger.error(f"❌ [{self.execution_id}] Commit failed: {e}")
            await self._rollback_session()
            raise
        finally:
            self._transaction = None

    async def rollback_transaction(self) -> None:
        self._require_transaction()
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            raise PersistenceError(ROLLBACK_FAILED) from e
        finally:
            for repository in self._repositories:
                repository.discard_pending()
            self._transaction = None
        logger.warning(f"[{self.execution_id}] Transaction rolled back")

    async def dispose(self) -> None:
        """Roll back an Active transaction and close the session. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        try:
            if self._transaction is not None:
                logger.warning(f"[{self.execution_id}] Disposed with an active transaction, rolling back")
                await self._rollback_session()
                self._transaction = None
        finally:
            await self._session.close()

    close = dispose


def create_uow(session_factory: sessionmaker) -> UnitOfWork:
    """Create a new blocking Unit of Work instance.

    Args:
        session_factory: SQLAlchemy session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)


def create_async_uow(session_factory: async_sessionmaker) -> AsyncUnitOfWork:
    """Create a new non-blocking Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        AsyncUnitOfWork instance
    """
    return AsyncUnitOfWork(session_factory)
