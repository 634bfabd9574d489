"""
Database configuration.

Manages database connection settings, engine creation and session factories
for both the blocking and the non-blocking units of work.
"""
from functools import lru_cache
from typing import Optional
import logging

from pydantic_settings import BaseSettings
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine as sa_create_async_engine,
)
from sqlalchemy.orm import Session, sessionmaker

from toystore.infrastructure.logging import configure_logging


logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Database configuration settings.

    Loaded from environment variables (TOYSTORE_DB_*) or .env file.
    """

    # Blocking engine URL
    database_url: str = "sqlite:///./toystore.db"

    # Non-blocking engine URL (async driver)
    async_database_url: str = "sqlite+aiosqlite:///./toystore.db"

    # Echo SQL (for debugging)
    echo_sql: bool = False

    # Catalog
    featured_products_limit: int = 10

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "TOYSTORE_DB_"
        extra = "ignore"  # Ignore extra fields from .env


@lru_cache()
def get_settings() -> DatabaseSettings:
    return DatabaseSettings()


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine(database_url: Optional[str] = None, **kwargs) -> Engine:
    """
    Create blocking SQLAlchemy engine.

    Args:
        database_url: Override for settings.database_url

    Returns:
        Configured engine
    """
    settings = get_settings()
    url = database_url or settings.database_url
    logger.info(f"Creating database engine: {url}")
    return sa_create_engine(url, echo=settings.echo_sql, **kwargs)


def create_async_engine(database_url: Optional[str] = None, **kwargs) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        database_url: Override for settings.async_database_url

    Returns:
        Configured async engine
    """
    settings = get_settings()
    url = database_url or settings.async_database_url
    logger.info(f"Creating async database engine: {url}")
    return sa_create_async_engine(url, echo=settings.echo_sql, **kwargs)


# Global engine instances
engine: Optional[Engine] = None
async_engine: Optional[AsyncEngine] = None


def get_engine() -> Engine:
    """Get or create global blocking engine instance."""
    global engine

    if engine is None:
        engine = create_engine()

    return engine


def get_async_engine() -> AsyncEngine:
    """Get or create global async engine instance."""
    global async_engine

    if async_engine is None:
        async_engine = create_async_engine()

    return async_engine


# =============================================================================
# SESSION FACTORIES
# =============================================================================

def get_session_factory(bind: Optional[Engine] = None) -> sessionmaker:
    """
    Get blocking session factory.

    autoflush stays on so reads inside a unit of work see its queued writes.
    """
    return sessionmaker(
        bind=bind or get_engine(),
        class_=Session,
        expire_on_commit=False,
        autoflush=True,
    )


def get_async_session_factory(bind: Optional[AsyncEngine] = None) -> async_sessionmaker:
    """Get async session factory (same options as get_session_factory)."""
    return async_sessionmaker(
        bind=bind or get_async_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

def init_database(bind: Optional[Engine] = None) -> None:
    """Configure package logging and create all tables if they don't exist."""
    from toystore.data.models import Base

    configure_logging()
    logger.info("Initializing database...")
    Base.metadata.create_all(bind or get_engine())
    logger.info("✅ Database initialized successfully")


async def init_database_async(bind: Optional[AsyncEngine] = None) -> None:
    """Configure package logging and create all tables (async engine)."""
    from toystore.data.models import Base

    configure_logging()
    logger.info("Initializing database...")

    async with (bind or get_async_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database initialized successfully")


def close_database() -> None:
    """Close blocking database connections."""
    global engine

    if engine:
        logger.info("Closing database connections...")
        engine.dispose()
        engine = None
        logger.info("✅ Database connections closed")


async def close_database_async() -> None:
    """Close async database connections."""
    global async_engine

    if async_engine:
        logger.info("Closing database connections...")
        await async_engine.dispose()
        async_engine = None
        logger.info("✅ Database connections closed")
