"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from entityrest.config import RestConfig
from entityrest.persistence import StoreConfig

ENV_VARS = [
    "ENTITYREST_BASE_URL",
    "ENTITYREST_DEFAULT_LIMIT",
    "ENTITYREST_MAX_LIMIT",
    "ENTITYREST_PATCH_CONCURRENCY",
    "ENTITYREST_RESOURCES_PATH",
    "ENTITYREST_LOG_LEVEL",
    "ENTITYREST_DATABASE_URL",
    "DATABASE_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestRestConfig:
    def test_defaults(self):
        config = RestConfig.from_env()
        assert config.base_url == ""
        assert config.default_limit == 25
        assert config.max_limit == 500
        assert config.patch_concurrency == 0
        assert config.resources_path == Path("resources")
        assert config.log_level == "INFO"
        assert config.store.is_memory

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ENTITYREST_BASE_URL", "http://host/api")
        monkeypatch.setenv("ENTITYREST_DEFAULT_LIMIT", "10")
        monkeypatch.setenv("ENTITYREST_MAX_LIMIT", "100")
        monkeypatch.setenv("ENTITYREST_PATCH_CONCURRENCY", "4")
        monkeypatch.setenv("ENTITYREST_LOG_LEVEL", "debug")
        config = RestConfig.from_env()

        assert config.base_url == "http://host/api"
        assert config.log_level == "DEBUG"
        options = config.operation_options
        assert (options.default_limit, options.max_limit, options.patch_concurrency) == (10, 100, 4)

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("ENTITYREST_MAX_LIMIT", "lots")
        with pytest.raises(ValueError, match="ENTITYREST_MAX_LIMIT"):
            RestConfig.from_env()


class TestStoreConfig:
    def test_entityrest_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
        monkeypatch.setenv("ENTITYREST_DATABASE_URL", "sqlite:///mine.db")
        assert StoreConfig.from_env().url == "sqlite:///mine.db"

    def test_database_url_fallback(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
        assert StoreConfig.from_env().url == "sqlite:///other.db"

    def test_postgres_uses_psycopg_driver(self):
        config = StoreConfig(url="postgresql://u:p@localhost/db")
        assert config.sqlalchemy_url == "postgresql+psycopg://u:p@localhost/db"
        assert not config.is_memory
