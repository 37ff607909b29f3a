"""Property image facade.

A property has at most one image: creating an image for a property that
already has one updates that image in place (200) instead of inserting.
"""

from __future__ import annotations

from realestate.application.dtos import (
    PropertyImageInput,
    PropertyImageResult,
    ServiceResult,
)
from realestate.application.interfaces.repositories import Condition, eq
from realestate.application.services.base import CachedEntityService
from realestate.application.services.mappers import PropertyImageMapper
from realestate.core.constants import CACHE_PREFIX_PROPERTY_IMAGE, DEFAULT_PAGE
from realestate.domain.entities import PropertyImage
from realestate.domain.exceptions import ValidationException
from realestate.infrastructure.cache import field_key


class PropertyImageService(
    CachedEntityService[PropertyImage, PropertyImageInput, PropertyImageResult]
):
    """Images filtered by id_property and enabled."""

    entity_name = "Property image"
    entity_plural = "Property images"
    cache_prefix = CACHE_PREFIX_PROPERTY_IMAGE
    collection_setting = "COLLECTION_PROPERTY_IMAGE"
    list_filters = ("id_property", "enabled")
    mapper_type = PropertyImageMapper
    _secondary_fields = ("id_property",)

    async def get_all(
        self,
        id_property: str | None = None,
        enabled: bool | None = None,
        page: int = DEFAULT_PAGE,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> ServiceResult[list[PropertyImageResult]]:
        conditions: list[Condition] = []
        if id_property:
            conditions.append(eq("id_property", id_property))
        if enabled is not None:
            conditions.append(eq("enabled", enabled))
        return await self._get_list(
            [("id_property", id_property), ("enabled", enabled)],
            conditions,
            page,
            self.default_page_size if limit is None else limit,
            force_refresh,
        )

    async def get_by_property_id(
        self, id_property: str, force_refresh: bool = False
    ) -> PropertyImageResult | None:
        """Cached image of a property, or None. Raises StoreException."""

        async def fetch() -> PropertyImageResult | None:
            record = await self.store.find_one([eq("id_property", id_property)])
            return None if record is None else self.mapper.to_result(record)

        result, _ = await self.cache.get_or_fetch(
            field_key(self.cache_prefix, "id_property", id_property),
            fetch,
            force_refresh=force_refresh,
        )
        return result

    async def _create(self, data: PropertyImageInput) -> ServiceResult[PropertyImageResult]:
        await self._validate(data)
        existing = await self.store.find_one([eq("id_property", data.id_property)])
        if existing is None:
            return await self._insert_new(data)
        fields = {"file": data.file, "enabled": data.enabled}
        await self._update_fields(existing.id, fields)
        await self.invalidate(existing.id)
        updated = self.mapper.apply(existing, fields)
        return ServiceResult.ok(self.mapper.to_result(updated), "Property image updated")

    async def _check_references(self, entity: PropertyImage) -> None:
        """Reject moving an image onto a property that already has another one."""
        other = await self.store.find_one([eq("id_property", entity.id_property)])
        if other is not None and other.id != entity.id:
            raise ValidationException(
                "Property already has an image", field="id_property"
            )

    async def delete_by_property(self, id_property: str) -> int:
        """Delete every image of a property. Returns the number deleted. Raises StoreException."""
        result = self._acknowledged(
            "delete_many", await self.store.delete_many([eq("id_property", id_property)])
        )
        await self.invalidate_all()
        return result.deleted_count
