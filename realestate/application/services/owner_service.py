"""Owner facade: cached reads and invalidating writes for owners."""

from __future__ import annotations

from realestate.application.dtos import OwnerInput, OwnerResult, ServiceResult
from realestate.application.interfaces.repositories import Condition, contains
from realestate.application.services.base import CachedEntityService
from realestate.application.services.mappers import OwnerMapper
from realestate.core.constants import CACHE_PREFIX_OWNER, DEFAULT_PAGE
from realestate.domain.entities import Owner


class OwnerService(CachedEntityService[Owner, OwnerInput, OwnerResult]):
    """Owners filtered by name and address (case-insensitive contains)."""

    entity_name = "Owner"
    entity_plural = "Owners"
    cache_prefix = CACHE_PREFIX_OWNER
    collection_setting = "COLLECTION_OWNER"
    list_filters = ("name", "address")
    mapper_type = OwnerMapper

    async def get_all(
        self,
        name: str | None = None,
        address: str | None = None,
        page: int = DEFAULT_PAGE,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> ServiceResult[list[OwnerResult]]:
        conditions: list[Condition] = []
        if name:
            conditions.append(contains("name", name))
        if address:
            conditions.append(contains("address", address))
        return await self._get_list(
            [("name", name), ("address", address)],
            conditions,
            page,
            self.default_page_size if limit is None else limit,
            force_refresh,
        )
