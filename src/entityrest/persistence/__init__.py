"""Persistence layer - reference document stores."""

from entityrest.persistence.adapter import DocumentStore
from entityrest.persistence.config import StoreConfig, StoreFactory
from entityrest.persistence.memory import MemoryStore
from entityrest.persistence.sql import SQLDocumentStore

__all__ = ["DocumentStore", "MemoryStore", "SQLDocumentStore", "StoreConfig", "StoreFactory"]
