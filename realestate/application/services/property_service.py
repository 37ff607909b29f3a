"""Property facade: the property aggregate over owner, image and traces.

Only the bare property is cached under the property prefix. Reads by id
compose the owner, image and traces through their own facades (and their
own caches), so a change to any part shows up without touching the
property cache.
"""

from __future__ import annotations

import dataclasses

from realestate.application.dtos import (
    PropertyInput,
    PropertyResult,
    ServiceResult,
)
from realestate.application.interfaces.repositories import (
    Condition,
    IDocumentStore,
    contains,
    eq,
    gte,
    lte,
)
from realestate.application.interfaces.services import IRecordValidator
from realestate.application.services.base import CachedEntityService
from realestate.application.services.mappers import PropertyMapper
from realestate.application.services.owner_service import OwnerService
from realestate.application.services.property_image_service import PropertyImageService
from realestate.application.services.property_trace_service import PropertyTraceService
from realestate.core.config import Settings
from realestate.core.constants import CACHE_PREFIX_PROPERTY, DEFAULT_PAGE
from realestate.domain.entities import Property
from realestate.domain.exceptions import ValidationException
from realestate.infrastructure.cache import CacheProtocol
from realestate.shared.utils import generate_cuid


class PropertyService(CachedEntityService[Property, PropertyInput, PropertyResult]):
    """Properties filtered by name, address, owner and price range."""

    entity_name = "Property"
    entity_plural = "Properties"
    cache_prefix = CACHE_PREFIX_PROPERTY
    collection_setting = "COLLECTION_PROPERTY"
    list_filters = ("name", "address", "id_owner", "min_price", "max_price")
    mapper_type = PropertyMapper

    def __init__(
        self,
        store: IDocumentStore[Property],
        cache: CacheProtocol,
        validator: IRecordValidator,
        settings: Settings,
        owners: OwnerService,
        images: PropertyImageService,
        traces: PropertyTraceService,
        mapper: PropertyMapper | None = None,
    ) -> None:
        self.mapper: PropertyMapper
        super().__init__(store, cache, validator, settings, mapper)
        self.owners = owners
        self.images = images
        self.traces = traces

    async def get_all(
        self,
        name: str | None = None,
        address: str | None = None,
        id_owner: str | None = None,
        min_price: int | float | None = None,
        max_price: int | float | None = None,
        page: int = DEFAULT_PAGE,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> ServiceResult[list[PropertyResult]]:
        if min_price is not None and max_price is not None and min_price > max_price:
            return ServiceResult.fail(
                "Invalid price range", 400, ["min_price: must not be greater than max_price"]
            )
        conditions: list[Condition] = []
        if name:
            conditions.append(contains("name", name))
        if address:
            conditions.append(contains("address", address))
        if id_owner:
            conditions.append(eq("id_owner", id_owner))
        if min_price is not None:
            conditions.append(gte("price", min_price))
        if max_price is not None:
            conditions.append(lte("price", max_price))
        return await self._get_list(
            [
                ("name", name),
                ("address", address),
                ("id_owner", id_owner),
                ("min_price", min_price),
                ("max_price", max_price),
            ],
            conditions,
            page,
            self.default_page_size if limit is None else limit,
            force_refresh,
        )

    async def get_by_id(
        self, entity_id: str, force_refresh: bool = False
    ) -> ServiceResult[PropertyResult]:
        """Property with owner, image and traces composed from their facades."""
        result = await super().get_by_id(entity_id, force_refresh)
        if not result.success or result.data is None:
            return result
        bare = result.data

        async def run() -> ServiceResult[PropertyResult]:
            composed = await self._compose(bare, force_refresh)
            return ServiceResult.ok(composed, result.message)

        return await self._guard("get_by_id", run)

    async def _compose(self, bare: PropertyResult, force_refresh: bool = False) -> PropertyResult:
        owner = None
        if bare.id_owner:
            owner = await self.owners.lookup(bare.id_owner, force_refresh)
        image = await self.images.get_by_property_id(bare.id, force_refresh)
        traces = await self.traces.get_by_property_id(bare.id, force_refresh)
        return self.mapper.compose(bare, owner, image, traces)

    async def _check_references(self, entity: Property) -> None:
        if entity.id_owner and await self.owners.lookup(entity.id_owner) is None:
            raise ValidationException("Owner not found", field="id_owner")

    async def _nested_errors(self, data: PropertyInput, property_id: str) -> list[str]:
        """Validate the property and every nested input before anything is written."""
        errors = await self.validation_errors(data)
        if data.owner is not None and not data.id_owner:
            errors.extend(f"owner.{e}" for e in await self.owners.validation_errors(data.owner))
        if data.image is not None:
            image = dataclasses.replace(data.image, id_property=property_id)
            errors.extend(f"image.{e}" for e in await self.images.validation_errors(image))
        for index, trace in enumerate(data.traces):
            trace = dataclasses.replace(trace, id_property=property_id)
            errors.extend(
                f"traces[{index}].{e}" for e in await self.traces.validation_errors(trace)
            )
        return errors

    async def _create(self, data: PropertyInput) -> ServiceResult[PropertyResult]:
        property_id = generate_cuid()
        errors = await self._nested_errors(data, property_id)
        if errors:
            raise ValidationException("Validation failed", errors=errors)
        entity = self.mapper.to_entity(data, property_id)
        await self._check_references(entity)

        if not entity.id_owner and data.owner is not None:
            owner_result = await self.owners.create(data.owner)
            if not owner_result.success or owner_result.data is None:
                return owner_result  # type: ignore[return-value]
            entity.id_owner = owner_result.data.id

        await self._insert(entity)
        await self.invalidate(property_id)

        if data.image is not None:
            image_result = await self.images.create(
                dataclasses.replace(data.image, id_property=property_id)
            )
            if not image_result.success:
                return image_result  # type: ignore[return-value]
        if data.traces:
            traces_result = await self.traces.create_many(
                [dataclasses.replace(t, id_property=property_id) for t in data.traces]
            )
            if not traces_result.success:
                return traces_result  # type: ignore[return-value]

        composed = await self._compose(self.mapper.to_result(entity))
        return ServiceResult.created(composed, "Property created")

    async def _delete(self, entity_id: str) -> ServiceResult[None]:
        result = await super()._delete(entity_id)
        await self.images.delete_by_property(entity_id)
        await self.traces.delete_by_property(entity_id)
        return result
