"""Pytest configuration and fixtures shared by all test packages."""

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from toystore.data.models import Base
from toystore.data.seed import seed_catalog, seed_catalog_async
from toystore.data.uow import AsyncUnitOfWork, UnitOfWork
from toystore.infrastructure.database.config import (
    create_async_engine,
    create_engine,
    get_async_session_factory,
    get_session_factory,
    init_database,
    init_database_async,
)


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite://"
TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite://"

RACE_CAR, FIGHTER_JET, FIRE_TRUCK, SAILBOAT = 1, 2, 3, 4


# =============================================================================
# BLOCKING
# =============================================================================

@pytest.fixture
def test_engine():
    """Create test database engine with all tables."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_database(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed engine, so separate units of work get separate connections."""
    engine = create_engine(f"sqlite:///{tmp_path / 'toystore.db'}")
    init_database(engine)
    with UnitOfWork(get_session_factory(engine)) as uow:
        seed_catalog(uow)

    yield engine

    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return get_session_factory(test_engine)


@pytest.fixture
def seeded(session_factory):
    """Load the starter catalog (products 1..4) and return (categories, products)."""
    with UnitOfWork(session_factory) as uow:
        return seed_catalog(uow)


@pytest.fixture
def uow(session_factory, seeded) -> Generator[UnitOfWork, None, None]:
    """Unit of work over the seeded catalog."""
    with UnitOfWork(session_factory) as uow:
        yield uow


@pytest.fixture
def fresh_uow(session_factory):
    """Factory for additional units of work on the same database."""
    created = []

    def _make() -> UnitOfWork:
        uow = UnitOfWork(session_factory)
        created.append(uow)
        return uow

    yield _make

    for uow in created:
        uow.dispose()


# =============================================================================
# NON-BLOCKING
# =============================================================================

@pytest_asyncio.fixture
async def test_async_engine():
    """Create async test database engine with all tables."""
    engine = create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_database_async(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(test_async_engine):
    return get_async_session_factory(test_async_engine)


@pytest_asyncio.fixture
async def async_uow(async_session_factory) -> AsyncGenerator[AsyncUnitOfWork, None]:
    """Async unit of work over a freshly seeded catalog."""
    async with AsyncUnitOfWork(async_session_factory) as seeding:
        await seed_catalog_async(seeding)

    async with AsyncUnitOfWork(async_session_factory) as uow:
        yield uow
