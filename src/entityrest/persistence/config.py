"""Store configuration and factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from entityrest.persistence.adapter import DocumentStore


@dataclass
class StoreConfig:
    """Document store configuration.

    ``url`` is None for in-memory stores, otherwise a sqlite:/// or
    postgresql:// URL.
    """

    url: str | None = None

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Create config from environment variables.

        Resolution order:
        1. ENTITYREST_DATABASE_URL
        2. DATABASE_URL
        3. None (in-memory)
        """
        url = os.environ.get("ENTITYREST_DATABASE_URL") or os.environ.get("DATABASE_URL")
        return cls(url=url or None)

    @property
    def is_memory(self) -> bool:
        return not self.url

    @property
    def sqlalchemy_url(self) -> str | None:
        """URL suitable for SQLAlchemy engine creation.

        postgresql:// URLs are switched to the psycopg (v3) driver.
        """
        if self.url and self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        return self.url


class StoreFactory:
    """Creates one store per collection, sharing a single engine."""

    def __init__(self, config: StoreConfig):
        self.config = config
        self._engine: Engine | None = None

    def create(self, collection: str) -> DocumentStore:
        if self.config.is_memory:
            from entityrest.persistence.memory import MemoryStore

            return MemoryStore(collection)

        from entityrest.persistence.sql import SQLDocumentStore

        if self._engine is None:
            self._engine = create_engine(self.config.sqlalchemy_url)
        return SQLDocumentStore(self.config.sqlalchemy_url, collection, engine=self._engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
