"""
Test settings loading from the environment.

Verifies DatabaseSettings defaults, TOYSTORE_DB_* overrides and the engine
and logging helpers that read them.
"""
import logging

import pytest

from toystore.infrastructure.database import config
from toystore.infrastructure.database.config import DatabaseSettings, get_settings
from toystore.infrastructure.logging import configure_logging, get_logger


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Isolate settings from any .env file and from the cached instance."""
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "ASYNC_DATABASE_URL", "ECHO_SQL", "FEATURED_PRODUCTS_LIMIT", "LOG_LEVEL"):
        monkeypatch.delenv(f"TOYSTORE_DB_{name}", raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(clean_settings):
    settings = DatabaseSettings()

    assert settings.database_url == "sqlite:///./toystore.db"
    assert settings.async_database_url == "sqlite+aiosqlite:///./toystore.db"
    assert settings.echo_sql is False
    assert settings.featured_products_limit == 10
    assert settings.log_level == "INFO"


def test_environment_overrides(clean_settings):
    clean_settings.setenv("TOYSTORE_DB_DATABASE_URL", "sqlite:///./other.db")
    clean_settings.setenv("TOYSTORE_DB_ECHO_SQL", "true")
    clean_settings.setenv("TOYSTORE_DB_FEATURED_PRODUCTS_LIMIT", "3")

    settings = get_settings()

    assert settings.database_url == "sqlite:///./other.db"
    assert settings.echo_sql is True
    assert settings.featured_products_limit == 3
    assert get_settings() is settings


def test_env_file_is_read(clean_settings, tmp_path):
    (tmp_path / ".env").write_text("TOYSTORE_DB_LOG_LEVEL=DEBUG\nUNRELATED_KEY=1\n", encoding="utf-8")

    assert DatabaseSettings().log_level == "DEBUG"


def test_global_engine_lifecycle(clean_settings, tmp_path):
    clean_settings.setenv("TOYSTORE_DB_DATABASE_URL", f"sqlite:///{tmp_path / 'global.db'}")
    clean_settings.setattr(config, "engine", None)

    engine = config.get_engine()
    assert config.get_engine() is engine
    config.init_database()
    assert (tmp_path / "global.db").exists()

    config.close_database()
    assert config.engine is None


def test_get_logger(clean_settings):
    logger = get_logger("toystore.tests.settings", "warning")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1

    # A second call reuses the configured logger
    assert get_logger("toystore.tests.settings") is logger
    assert len(logger.handlers) == 1


def test_configure_logging_uses_settings_level(clean_settings):
    clean_settings.setenv("TOYSTORE_DB_LOG_LEVEL", "ERROR")
    root = logging.getLogger("toystore")
    clean_settings.setattr(root, "handlers", [])
    clean_settings.setattr(root, "level", root.level)

    logger = configure_logging()

    assert logger is root
    assert logger.level == logging.ERROR


def test_init_database_configures_logging(clean_settings):
    root = logging.getLogger("toystore")
    clean_settings.setattr(root, "handlers", [])
    clean_settings.setattr(root, "level", root.level)
    engine = config.create_engine("sqlite://")

    config.init_database(engine)

    assert len(root.handlers) == 1
    assert root.level == logging.INFO
    engine.dispose()
