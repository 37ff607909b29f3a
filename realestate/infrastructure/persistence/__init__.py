"""Persistence: document store adapters (in-memory and SQLAlchemy async)."""

from realestate.infrastructure.persistence.database import (
    create_engine,
    create_session_factory,
    create_tables,
)
from realestate.infrastructure.persistence.memory_store import InMemoryDocumentStore
from realestate.infrastructure.persistence.sqlalchemy_store import SqlAlchemyDocumentStore
from realestate.infrastructure.persistence.tables import EntityTables, build_tables

__all__ = [
    "EntityTables",
    "InMemoryDocumentStore",
    "SqlAlchemyDocumentStore",
    "build_tables",
    "create_engine",
    "create_session_factory",
    "create_tables",
]
