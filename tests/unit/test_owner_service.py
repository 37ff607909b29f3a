"""OwnerService tests: read-through caching, invalidation on writes, envelopes."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock

import pytest

from fakes import BlockingSpyStore, FailingStore, SpyStore, make_settings
from realestate.application.dtos import OwnerInput
from realestate.application.interfaces.repositories import InsertResult
from realestate.application.services import OwnerService
from realestate.application.services.validators import owner_validator
from realestate.core.config import Settings
from realestate.core.container import ServiceContainer
from realestate.domain.entities import Owner
from realestate.domain.exceptions import ConfigurationException
from realestate.infrastructure.cache import MemoryCacheStore, all_key, entity_key

ALL = all_key("owner", OwnerService.list_filters)


@pytest.fixture
def owners(container: ServiceContainer) -> OwnerService:
    container.owners.store.seed(
        Owner(id="o1", name="Ana Gomez", address="Calle 1", birthday=date(1980, 5, 1)),
        Owner(id="o2", name="Luis Perez", address="Carrera 7"),
    )
    return container.owners


@pytest.fixture
def cache(container: ServiceContainer) -> MemoryCacheStore:
    return container.caches["owner"]


async def test_get_all_populates_all_key(owners: OwnerService, cache: MemoryCacheStore) -> None:
    result = await owners.get_all()
    assert result.success and result.status_code == 200
    assert result.message == "Owners retrieved"
    assert [o.id for o in result.data] == ["o1", "o2"]
    assert await cache.get(ALL) == tuple(result.data)


async def test_second_get_all_is_served_from_cache(owners: OwnerService) -> None:
    first = await owners.get_all()
    second = await owners.get_all()
    assert second.message == "Owners retrieved from cache"
    assert second.data == first.data
    assert owners.store.calls["find"] == 1


async def test_cached_list_is_not_shared_between_callers(owners: OwnerService) -> None:
    first = await owners.get_all()
    first.data.clear()
    second = await owners.get_all()
    assert len(second.data) == 2


async def test_filters_are_case_insensitive_contains_and_keyed_separately(owners: OwnerService) -> None:
    result = await owners.get_all(name="gomez")
    assert [o.id for o in result.data] == ["o1"]
    other = await owners.get_all(address="carrera")
    assert [o.id for o in other.data] == ["o2"]
    assert owners.store.calls["find"] == 2


async def test_pagination(owners: OwnerService) -> None:
    page2 = await owners.get_all(page=2, limit=1)
    assert [o.id for o in page2.data] == ["o2"]


@pytest.mark.parametrize(("page", "limit"), [(0, 6), (1, 0), (1, 101)])
async def test_invalid_pagination_is_400(owners: OwnerService, page: int, limit: int) -> None:
    result = await owners.get_all(page=page, limit=limit)
    assert result.status_code == 400
    assert owners.store.calls["find"] == 0


async def test_force_refresh_bypasses_and_rewrites_cache(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    owners.store.seed(Owner(id="o3", name="Nueva"))
    refreshed = await owners.get_all(force_refresh=True)
    assert refreshed.message == "Owners retrieved"
    assert [o.id for o in refreshed.data] == ["o1", "o2", "o3"]
    assert owners.store.calls["find"] == 2
    assert len(await cache.get(ALL)) == 3


async def test_create_returns_201_and_invalidates_lists(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    result = await owners.create(OwnerInput(name="Marta", address="Av 3"))
    assert result.status_code == 201
    assert result.message == "Owner created"
    assert result.data.id
    assert await cache.get(ALL) is None
    assert owners.store.calls["insert_one"] == 1
    listed = await owners.get_all()
    assert result.data.id in [o.id for o in listed.data]


async def test_invalid_create_is_400_without_mutation(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    result = await owners.create(OwnerInput(name=""))
    assert result.status_code == 400
    assert result.message == "Validation failed"
    assert any(e.startswith("name:") for e in result.errors)
    assert owners.store.mutations == 0
    assert await cache.get(ALL) is not None


async def test_get_by_id_caches_and_reports_cache_hits(owners: OwnerService, cache: MemoryCacheStore) -> None:
    first = await owners.get_by_id("o1")
    assert first.message == "Owner retrieved"
    assert first.data.birthday == date(1980, 5, 1)
    second = await owners.get_by_id("o1")
    assert second.message == "Owner retrieved from cache"
    assert owners.store.calls["find_one"] == 1
    assert await cache.get(entity_key("owner", "o1")) == first.data


async def test_get_by_id_not_found_is_404_and_not_cached(owners: OwnerService, cache: MemoryCacheStore) -> None:
    result = await owners.get_by_id("missing")
    assert (result.status_code, result.message) == (404, "Owner not found")
    await owners.get_by_id("missing")
    assert owners.store.calls["find_one"] == 2
    assert await cache.get(entity_key("owner", "missing")) is None


async def test_patch_invalidates_all_and_entity_keys(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    await owners.get_by_id("o1")
    result = await owners.patch("o1", {"Name": "Ana Maria"})
    assert result.status_code == 200
    assert result.data.name == "Ana Maria"
    assert await cache.get(ALL) is None
    assert await cache.get(entity_key("owner", "o1")) is None
    assert owners.store.calls["update_one"] == 1
    fresh = await owners.get_by_id("o1")
    assert fresh.data.name == "Ana Maria"


async def test_patch_accepts_camel_case_and_iso_dates(owners: OwnerService) -> None:
    result = await owners.patch("o1", {"birthday": "1990-12-31", "address": "Nueva 5"})
    assert result.data.birthday == date(1990, 12, 31)
    assert result.data.address == "Nueva 5"


async def test_patch_with_no_fields_is_400_without_store_call(owners: OwnerService) -> None:
    result = await owners.patch("o1", {})
    assert result.status_code == 400
    assert sum(owners.store.calls.values()) == 0


async def test_patch_unknown_field_is_400(owners: OwnerService) -> None:
    result = await owners.patch("o1", {"nickname": "x"})
    assert result.status_code == 400
    assert result.errors == ["nickname: unknown field"]
    assert owners.store.mutations == 0


async def test_patch_result_is_revalidated(owners: OwnerService) -> None:
    result = await owners.patch("o1", {"name": "   "})
    assert result.status_code == 400
    assert owners.store.mutations == 0


async def test_patch_missing_owner_is_404(owners: OwnerService) -> None:
    result = await owners.patch("missing", {"name": "x"})
    assert result.status_code == 404


async def test_update_replaces_whole_record(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_by_id("o1")
    result = await owners.update("o1", OwnerInput(name="Ana G."))
    assert result.status_code == 200
    assert result.message == "Owner updated"
    assert result.data.address is None
    assert result.data.birthday is None
    assert owners.store.calls["replace_one"] == 1
    assert await cache.get(entity_key("owner", "o1")) is None


async def test_update_missing_is_404_and_invalid_is_400(owners: OwnerService) -> None:
    assert (await owners.update("missing", OwnerInput(name="x"))).status_code == 404
    assert (await owners.update("o1", OwnerInput(name=""))).status_code == 400
    assert owners.store.mutations == 0


async def test_delete_missing_is_404_and_leaves_cache(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    result = await owners.delete("missing")
    assert (result.status_code, result.message) == (404, "Owner not found")
    assert await cache.get(ALL) is not None


async def test_delete_existing_invalidates(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    await owners.get_by_id("o2")
    result = await owners.delete("o2")
    assert (result.status_code, result.message) == (200, "Owner deleted")
    assert await cache.get(ALL) is None
    assert await cache.get(entity_key("owner", "o2")) is None
    assert (await owners.get_by_id("o2")).status_code == 404


async def test_store_failure_is_500_and_not_cached(settings: Settings) -> None:
    cache = MemoryCacheStore()
    owners = OwnerService(FailingStore(Owner), cache, owner_validator(), settings)
    result = await owners.get_all()
    assert result.status_code == 500
    assert result.message == "Store operation 'find' failed"
    assert await cache.get(ALL) is None
    assert (await owners.get_by_id("o1")).status_code == 500
    assert (await owners.delete("o1")).status_code == 500


async def test_unacknowledged_insert_is_500_and_does_not_invalidate(owners: OwnerService, cache: MemoryCacheStore) -> None:
    await owners.get_all()
    owners.store.insert_one = AsyncMock(return_value=InsertResult(acknowledged=False))
    result = await owners.create(OwnerInput(name="Marta"))
    assert result.status_code == 500
    assert await cache.get(ALL) is not None


async def test_fetch_overtaken_by_write_does_not_repopulate(settings: Settings) -> None:
    store = BlockingSpyStore(Owner)
    store.seed(Owner(id="o1", name="Ana"))
    cache = MemoryCacheStore()
    owners = OwnerService(store, cache, owner_validator(), settings)

    store.block_next_find = True
    reader = asyncio.create_task(owners.get_all())
    await store.started.wait()
    created = await owners.create(OwnerInput(name="Marta"))
    store.release.set()
    stale = await reader

    assert created.status_code == 201
    assert [o.id for o in stale.data] == ["o1"]
    assert await cache.get(ALL) is None
    fresh = await owners.get_all()
    assert len(fresh.data) == 2


def test_empty_collection_name_fails_construction() -> None:
    settings = make_settings(collection_owner="")
    with pytest.raises(ConfigurationException, match="COLLECTION_OWNER"):
        OwnerService(SpyStore(Owner), MemoryCacheStore(), owner_validator(), settings)
