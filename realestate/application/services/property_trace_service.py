"""Property trace facade (sale history of a property)."""

from __future__ import annotations

from collections.abc import Sequence

from realestate.application.dtos import (
    PropertyTraceInput,
    PropertyTraceResult,
    ServiceResult,
)
from realestate.application.interfaces.repositories import Condition, eq
from realestate.application.services.base import CachedEntityService
from realestate.application.services.mappers import PropertyTraceMapper
from realestate.core.constants import CACHE_PREFIX_PROPERTY_TRACE, DEFAULT_PAGE
from realestate.domain.entities import PropertyTrace
from realestate.domain.exceptions import ValidationException
from realestate.infrastructure.cache import field_key
from realestate.shared.utils import generate_cuid


class PropertyTraceService(
    CachedEntityService[PropertyTrace, PropertyTraceInput, PropertyTraceResult]
):
    """Traces filtered by id_property."""

    entity_name = "Property trace"
    entity_plural = "Property traces"
    cache_prefix = CACHE_PREFIX_PROPERTY_TRACE
    collection_setting = "COLLECTION_PROPERTY_TRACE"
    list_filters = ("id_property",)
    mapper_type = PropertyTraceMapper
    _secondary_fields = ("id_property",)

    async def get_all(
        self,
        id_property: str | None = None,
        page: int = DEFAULT_PAGE,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> ServiceResult[list[PropertyTraceResult]]:
        conditions: list[Condition] = []
        if id_property:
            conditions.append(eq("id_property", id_property))
        return await self._get_list(
            [("id_property", id_property)],
            conditions,
            page,
            self.default_page_size if limit is None else limit,
            force_refresh,
        )

    async def get_by_property_id(
        self, id_property: str, force_refresh: bool = False
    ) -> list[PropertyTraceResult]:
        """Cached traces of a property (all of them, ordered by id). Raises StoreException."""

        async def fetch() -> tuple[PropertyTraceResult, ...]:
            records = await self.store.find([eq("id_property", id_property)])
            return self.mapper.to_results(records)

        results, _ = await self.cache.get_or_fetch(
            field_key(self.cache_prefix, "id_property", id_property),
            fetch,
            force_refresh=force_refresh,
        )
        return list(results)

    async def create_many(
        self, inputs: Sequence[PropertyTraceInput]
    ) -> ServiceResult[list[str]]:
        """Insert every valid trace; 400 listing per-item errors if any was invalid.

        Valid items are inserted even when others fail validation.
        """
        if not inputs:
            return ServiceResult.fail("No traces to create", 400)
        return await self._guard("create_many", lambda: self._create_many(inputs))

    async def _create_many(
        self, inputs: Sequence[PropertyTraceInput]
    ) -> ServiceResult[list[str]]:
        created: list[str] = []
        errors: list[str] = []
        try:
            for index, data in enumerate(inputs):
                item_errors = await self.validation_errors(data)
                if item_errors:
                    errors.extend(f"[{index}] {error}" for error in item_errors)
                    continue
                entity = self.mapper.to_entity(data, generate_cuid())
                await self._insert(entity)
                created.append(entity.id)
        finally:
            if created:
                await self.invalidate()
        if errors:
            raise ValidationException(
                f"{len(inputs) - len(created)} of {len(inputs)} traces failed validation",
                errors=errors,
            )
        return ServiceResult.created(created, "Property traces created")

    async def delete_by_property(self, id_property: str) -> int:
        """Delete every trace of a property. Returns the number deleted. Raises StoreException."""
        result = self._acknowledged(
            "delete_many", await self.store.delete_many([eq("id_property", id_property)])
        )
        await self.invalidate_all()
        return result.deleted_count
