"""Cached entity service: the facade shared by every entity.

Read path: cache hit, else fetch from the store and cache the mapped
result. Write path: validate, mutate the store once, then invalidate the
entity key, every list key and the entity's secondary lookups. Every
public operation returns a ServiceResult; domain exceptions raised inside
are turned into failure envelopes at this boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from realestate.application.dtos.result import ServiceResult
from realestate.application.interfaces.repositories import (
    Condition,
    DeleteResult,
    IDocumentStore,
    InsertResult,
    UpdateResult,
    eq,
)
from realestate.application.interfaces.services import IRecordValidator
from realestate.application.services.caching import ReadThroughCache
from realestate.application.services.mappers import EntityMapper
from realestate.core.config import Settings
from realestate.core.constants import DEFAULT_PAGE
from realestate.domain.exceptions import (
    ConfigurationException,
    RealEstateException,
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)
from realestate.infrastructure.cache import CacheProtocol, entity_key, list_key
from realestate.shared.utils import generate_cuid

EntityT = TypeVar("EntityT")
InputT = TypeVar("InputT")
ResultT = TypeVar("ResultT")
R = TypeVar("R", InsertResult, UpdateResult, DeleteResult)

logger = logging.getLogger(__name__)


class CachedEntityService(Generic[EntityT, InputT, ResultT]):
    """Base facade. Subclasses set the class attributes and declare get_all filters.

    Hooks:
        _check_references(entity): raise before a mutation if a referenced
            entity is missing.
        _secondary_fields: secondary lookup fields invalidated on every write.

    list_filters names the get_all filters in cache key order.
    """

    entity_name: ClassVar[str]
    entity_plural: ClassVar[str]
    cache_prefix: ClassVar[str]
    collection_setting: ClassVar[str]
    list_filters: ClassVar[tuple[str, ...]] = ()
    mapper_type: ClassVar[type[EntityMapper[Any, Any, Any]]]
    _secondary_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        store: IDocumentStore[EntityT],
        cache: CacheProtocol,
        validator: IRecordValidator,
        settings: Settings,
        mapper: EntityMapper[EntityT, InputT, ResultT] | None = None,
    ) -> None:
        """Wire collaborators.

        Raises:
            ConfigurationException: If the entity's collection name is empty.
        """
        collection = getattr(settings, self.collection_setting.lower(), "")
        if not collection or not str(collection).strip():
            raise ConfigurationException(self.collection_setting)
        self.collection = collection
        self.store = store
        self.validator = validator
        self.mapper = mapper or self.mapper_type()
        self.max_page_size = settings.max_page_size
        self.default_page_size = settings.default_page_size
        self.cache = ReadThroughCache(cache, self.cache_prefix, settings.cache_ttl_seconds)

    # -- boundary ---------------------------------------------------------

    async def _guard(
        self, operation: str, call: Callable[[], Awaitable[ServiceResult[Any]]]
    ) -> ServiceResult[Any]:
        """Run call; convert domain exceptions into failure envelopes."""
        try:
            return await call()
        except ConfigurationException:
            raise
        except StoreException as e:
            logger.exception(
                "%s %s failed: %s", self.entity_name, operation, e.details.get("reason")
            )
            return ServiceResult.from_exception(e)
        except RealEstateException as e:
            return ServiceResult.from_exception(e)

    # -- read path --------------------------------------------------------

    async def _get_list(
        self,
        filters: Sequence[tuple[str, Any]],
        conditions: Sequence[Condition],
        page: int,
        limit: int,
        force_refresh: bool,
    ) -> ServiceResult[list[ResultT]]:
        """Shared get_all: filters build the key, conditions drive the store query."""
        if page < DEFAULT_PAGE:
            return ServiceResult.fail("Invalid pagination", 400, ["page: must be at least 1"])
        if limit < 1 or limit > self.max_page_size:
            return ServiceResult.fail(
                "Invalid pagination", 400, [f"limit: must be between 1 and {self.max_page_size}"]
            )
        key = list_key(self.cache_prefix, filters, page, limit)

        async def fetch() -> tuple[ResultT, ...]:
            records = await self.store.find(conditions, skip=(page - 1) * limit, limit=limit)
            return self.mapper.to_results(records)

        async def run() -> ServiceResult[list[ResultT]]:
            results, from_cache = await self.cache.get_or_fetch(
                key, fetch, force_refresh=force_refresh
            )
            message = f"{self.entity_plural} retrieved" + (" from cache" if from_cache else "")
            return ServiceResult.ok(list(results), message)

        return await self._guard("get_all", run)

    async def _lookup(self, entity_id: str, force_refresh: bool) -> tuple[ResultT | None, bool]:
        async def fetch() -> ResultT | None:
            record = await self.store.find_one([eq("id", entity_id)])
            return None if record is None else self.mapper.to_result(record)

        return await self.cache.get_or_fetch(
            entity_key(self.cache_prefix, entity_id), fetch, force_refresh=force_refresh
        )

    async def lookup(self, entity_id: str, force_refresh: bool = False) -> ResultT | None:
        """Cached fetch by id without an envelope. Raises StoreException."""
        result, _ = await self._lookup(entity_id, force_refresh)
        return result

    async def get_by_id(
        self, entity_id: str, force_refresh: bool = False
    ) -> ServiceResult[ResultT]:
        if not entity_id:
            return ServiceResult.fail(f"{self.entity_name} id is required", 400)

        async def run() -> ServiceResult[ResultT]:
            result, from_cache = await self._lookup(entity_id, force_refresh)
            if result is None:
                raise ResourceNotFoundException(self.entity_name, entity_id)
            message = f"{self.entity_name} retrieved" + (" from cache" if from_cache else "")
            return ServiceResult.ok(result, message)

        return await self._guard("get_by_id", run)

    # -- write path -------------------------------------------------------

    async def validation_errors(self, data: InputT) -> list[str]:
        """Run the validator on a write input; empty list when valid."""
        outcome = await self.validator.validate(data)
        return list(outcome.errors)

    async def _validate(self, data: InputT) -> None:
        errors = await self.validation_errors(data)
        if errors:
            raise ValidationException("Validation failed", errors=errors)

    async def _require(self, entity_id: str) -> EntityT:
        record = await self.store.find_one([eq("id", entity_id)])
        if record is None:
            raise ResourceNotFoundException(self.entity_name, entity_id)
        return record

    async def _check_references(self, entity: EntityT) -> None:
        """Override to reject writes that point at missing entities."""

    @staticmethod
    def _acknowledged(operation: str, result: R) -> R:
        if not result.acknowledged:
            raise StoreException(operation, "write not acknowledged")
        return result

    async def _insert(self, entity: EntityT) -> None:
        self._acknowledged("insert_one", await self.store.insert_one(entity))

    async def _replace(self, entity_id: str, entity: EntityT) -> None:
        result = self._acknowledged("replace_one", await self.store.replace_one(entity_id, entity))
        if result.matched_count == 0:
            raise ResourceNotFoundException(self.entity_name, entity_id)

    async def _update_fields(self, entity_id: str, fields: Mapping[str, Any]) -> None:
        result = self._acknowledged("update_one", await self.store.update_one(entity_id, fields))
        if result.matched_count == 0:
            raise ResourceNotFoundException(self.entity_name, entity_id)

    async def invalidate(self, entity_id: str | None = None) -> None:
        """Drop the entity key, every list key and secondary lookups of this entity."""
        await self.cache.invalidate_entity(entity_id, fields=self._secondary_fields)

    async def invalidate_all(self) -> None:
        """Drop every cached key of this entity."""
        await self.cache.invalidate_all()

    async def create(self, data: InputT) -> ServiceResult[ResultT]:
        return await self._guard("create", lambda: self._create(data))

    async def _create(self, data: InputT) -> ServiceResult[ResultT]:
        await self._validate(data)
        return await self._insert_new(data)

    async def _insert_new(self, data: InputT) -> ServiceResult[ResultT]:
        """Insert an already validated input under a fresh id."""
        entity = self.mapper.to_entity(data, generate_cuid())
        await self._check_references(entity)
        await self._insert(entity)
        await self.invalidate(getattr(entity, "id"))
        return ServiceResult.created(self.mapper.to_result(entity), f"{self.entity_name} created")

    async def update(self, entity_id: str, data: InputT) -> ServiceResult[ResultT]:
        return await self._guard("update", lambda: self._update(entity_id, data))

    async def _update(self, entity_id: str, data: InputT) -> ServiceResult[ResultT]:
        await self._validate(data)
        current = await self._require(entity_id)
        entity = self.mapper.merge(data, current)
        await self._check_references(entity)
        await self._replace(entity_id, entity)
        await self.invalidate(entity_id)
        return ServiceResult.ok(self.mapper.to_result(entity), f"{self.entity_name} updated")

    async def patch(self, entity_id: str, fields: Mapping[str, Any]) -> ServiceResult[ResultT]:
        if not fields:
            return ServiceResult.fail("No fields to update", 400, ["fields: at least one field is required"])
        return await self._guard("patch", lambda: self._patch(entity_id, fields))

    async def _patch(self, entity_id: str, fields: Mapping[str, Any]) -> ServiceResult[ResultT]:
        normalized = self.mapper.normalize_fields(fields)
        current = await self._require(entity_id)
        patched = self.mapper.apply(current, normalized)
        await self._validate(self.mapper.to_input(patched))
        await self._check_references(patched)
        await self._update_fields(entity_id, normalized)
        await self.invalidate(entity_id)
        return ServiceResult.ok(await self._reload(entity_id), f"{self.entity_name} updated")

    async def _reload(self, entity_id: str) -> ResultT:
        return self.mapper.to_result(await self._require(entity_id))

    async def delete(self, entity_id: str) -> ServiceResult[None]:
        return await self._guard("delete", lambda: self._delete(entity_id))

    async def _delete(self, entity_id: str) -> ServiceResult[None]:
        result = self._acknowledged("delete_one", await self.store.delete_one(entity_id))
        if result.deleted_count == 0:
            raise ResourceNotFoundException(self.entity_name, entity_id)
        await self.invalidate(entity_id)
        return ServiceResult.ok(None, f"{self.entity_name} deleted")
