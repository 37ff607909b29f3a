"""Composition root: builds stores, caches and facades from Settings.

build_container wires one MemoryCacheStore per facade and one store per
collection. By default stores are in-memory; container_lifespan swaps in
SQLAlchemy stores backed by the configured database.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from realestate.application.interfaces.repositories import IDocumentStore
from realestate.application.interfaces.services import IPasswordHasher, IRoleChangePolicy
from realestate.application.services import (
    AuthService,
    OwnerService,
    PropertyImageService,
    PropertyService,
    PropertyTraceService,
    UserService,
)
from realestate.application.services.validators import (
    owner_validator,
    property_image_validator,
    property_trace_validator,
    property_validator,
    user_validator,
)
from realestate.core.config import Settings, get_settings
from realestate.core.constants import (
    CACHE_PREFIX_OWNER,
    CACHE_PREFIX_PROPERTY,
    CACHE_PREFIX_PROPERTY_IMAGE,
    CACHE_PREFIX_PROPERTY_TRACE,
    CACHE_PREFIX_USER,
)
from realestate.domain.entities import Owner, Property, PropertyImage, PropertyTrace, User
from realestate.infrastructure.cache import MemoryCacheStore
from realestate.infrastructure.persistence import (
    InMemoryDocumentStore,
    SqlAlchemyDocumentStore,
    build_tables,
    create_engine,
    create_session_factory,
    create_tables,
)
from realestate.infrastructure.security import BcryptPasswordHasher, TokenService
from realestate.shared.logging import setup_logging

logger = logging.getLogger(__name__)

# (collection name, record type) -> store
StoreFactory = Callable[[str, type], IDocumentStore[Any]]


def in_memory_store_factory(collection: str, record_type: type) -> IDocumentStore[Any]:
    return InMemoryDocumentStore(record_type, collection)


@dataclass
class ServiceContainer:
    """All facades plus the caches they own (exposed for tests and admin tooling)."""

    settings: Settings
    owners: OwnerService
    properties: PropertyService
    property_images: PropertyImageService
    property_traces: PropertyTraceService
    users: UserService
    auth: AuthService
    caches: dict[str, MemoryCacheStore] = field(default_factory=dict)

    async def clear_caches(self) -> None:
        for cache in self.caches.values():
            await cache.clear()


def build_container(
    settings: Settings | None = None,
    *,
    store_factory: StoreFactory | None = None,
    password_hasher: IPasswordHasher | None = None,
    role_policy: IRoleChangePolicy | None = None,
) -> ServiceContainer:
    """Wire every facade.

    Raises:
        ConfigurationException: On an empty collection name or SECRET_KEY.
    """
    settings = settings or get_settings()
    make_store = store_factory or in_memory_store_factory
    hasher = password_hasher or BcryptPasswordHasher()
    caches = {
        prefix: MemoryCacheStore(
            name=prefix,
            tombstone_retention_seconds=settings.cache_tombstone_retention_seconds,
        )
        for prefix in (
            CACHE_PREFIX_OWNER,
            CACHE_PREFIX_PROPERTY,
            CACHE_PREFIX_PROPERTY_IMAGE,
            CACHE_PREFIX_PROPERTY_TRACE,
            CACHE_PREFIX_USER,
        )
    }

    owners = OwnerService(
        make_store(settings.collection_owner, Owner),
        caches[CACHE_PREFIX_OWNER],
        owner_validator(),
        settings,
    )
    images = PropertyImageService(
        make_store(settings.collection_property_image, PropertyImage),
        caches[CACHE_PREFIX_PROPERTY_IMAGE],
        property_image_validator(),
        settings,
    )
    traces = PropertyTraceService(
        make_store(settings.collection_property_trace, PropertyTrace),
        caches[CACHE_PREFIX_PROPERTY_TRACE],
        property_trace_validator(),
        settings,
    )
    properties = PropertyService(
        make_store(settings.collection_property, Property),
        caches[CACHE_PREFIX_PROPERTY],
        property_validator(),
        settings,
        owners=owners,
        images=images,
        traces=traces,
    )
    users = UserService(
        make_store(settings.collection_user, User),
        caches[CACHE_PREFIX_USER],
        user_validator(),
        settings,
        password_hasher=hasher,
        role_policy=role_policy,
    )
    auth = AuthService(users, TokenService(settings), hasher)
    return ServiceContainer(
        settings=settings,
        owners=owners,
        properties=properties,
        property_images=images,
        property_traces=traces,
        users=users,
        auth=auth,
        caches=caches,
    )


@asynccontextmanager
async def container_lifespan(settings: Settings | None = None) -> AsyncIterator[ServiceContainer]:
    """Create engine and tables, yield a SQL-backed container, dispose the engine.

    Startup order: engine, tables, container. Shutdown: caches cleared,
    engine disposed.
    """
    settings = settings or get_settings()
    setup_logging(logging.DEBUG if settings.debug else logging.INFO)
    tables = build_tables(settings)
    engine = create_engine(settings)
    try:
        await create_tables(engine, tables.metadata)
        session_factory = create_session_factory(engine)

        def sql_store(collection: str, record_type: type) -> IDocumentStore[Any]:
            return SqlAlchemyDocumentStore(
                session_factory, tables.metadata.tables[collection], record_type
            )

        container = build_container(settings, store_factory=sql_store)
        logger.info("Service container ready (%s)", settings.app_name)
        yield container
        await container.clear_caches()
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")
