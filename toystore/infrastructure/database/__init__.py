"""Database engines, session factories and settings."""

from .config import (
    DatabaseSettings,
    close_database,
    close_database_async,
    create_async_engine,
    create_engine,
    get_async_engine,
    get_async_session_factory,
    get_engine,
    get_session_factory,
    get_settings,
    init_database,
    init_database_async,
)

__all__ = [
    "close_database",
    "close_database_async",
    "create_async_engine",
    "create_engine",
    "DatabaseSettings",
    "get_async_engine",
    "get_async_session_factory",
    "get_engine",
    "get_session_factory",
    "get_settings",
    "init_database",
    "init_database_async",
]
