"""UserService tests: unique email, hashed passwords, role policy, email lookups."""

import pytest

from realestate.application.dtos import UserInput
from realestate.application.services import UserService
from realestate.core.container import ServiceContainer
from realestate.domain.entities import User
from realestate.infrastructure.cache import MemoryCacheStore, field_key


@pytest.fixture
def users(container: ServiceContainer) -> UserService:
    container.users.store.seed(
        User(id="u1", name="Admin", email="admin@example.com", role="admin", password="hashed:adminpass"),
        User(id="u2", name="Bob", email="bob@example.com", role="user", password="hashed:bobpass1"),
    )
    return container.users


@pytest.fixture
def cache(container: ServiceContainer) -> MemoryCacheStore:
    return container.caches["user"]


async def test_create_hashes_password_and_hides_it(users: UserService) -> None:
    result = await users.create(UserInput(name="Carla", email="Carla@Example.com ", password="secret12"))
    assert result.status_code == 201
    assert result.data.email == "carla@example.com"
    assert not hasattr(result.data, "password")
    stored = await users.find_credentials("carla@example.com")
    assert stored.password == "hashed:secret12"


async def test_create_without_password_is_400(users: UserService) -> None:
    result = await users.create(UserInput(name="Carla", email="carla@example.com"))
    assert result.status_code == 400
    assert result.errors == ["password: Password is required"]
    assert users.store.mutations == 0


async def test_create_duplicate_email_is_400(users: UserService) -> None:
    result = await users.create(UserInput(name="Bob 2", email="BOB@example.com", password="secret12"))
    assert (result.status_code, result.message) == (400, "Email is already registered")
    assert users.store.mutations == 0


async def test_create_invalid_email_is_400(users: UserService) -> None:
    result = await users.create(UserInput(name="X", email="not-an-email", password="secret12"))
    assert result.status_code == 400
    assert any(e.startswith("email:") for e in result.errors)


async def test_get_all_filters_by_role(users: UserService) -> None:
    result = await users.get_all(role="admin")
    assert [u.id for u in result.data] == ["u1"]


async def test_get_by_email_is_cached_and_invalidated_on_write(
    users: UserService, cache: MemoryCacheStore
) -> None:
    first = await users.get_by_email("bob@example.com")
    assert first.message == "User retrieved"
    assert (await users.get_by_email("BOB@example.com")).message == "User retrieved from cache"
    await users.patch("u2", {"name": "Robert"})
    assert await cache.get(field_key("user", "email", "bob@example.com")) is None
    assert (await users.get_by_email("bob@example.com")).data.name == "Robert"


async def test_get_by_email_missing_is_404(users: UserService) -> None:
    assert (await users.get_by_email("ghost@example.com")).status_code == 404


async def test_role_change_requires_admin(users: UserService) -> None:
    result = await users.patch("u2", {"role": "admin"}, requester_role="user")
    assert result.status_code == 403
    assert users.store.mutations == 0


async def test_admin_can_change_role(users: UserService) -> None:
    result = await users.patch("u2", {"Role": "admin"}, requester_role="admin")
    assert result.status_code == 200
    assert result.data.role == "admin"


async def test_update_keeping_role_needs_no_admin(users: UserService) -> None:
    result = await users.update("u2", UserInput(name="Bobby", email="bob@example.com", role="user"))
    assert result.status_code == 200
    stored = await users.find_credentials("bob@example.com")
    assert stored.password == "hashed:bobpass1"


async def test_update_role_without_admin_is_403(users: UserService) -> None:
    result = await users.update("u2", UserInput(name="Bob", email="bob@example.com", role="admin"))
    assert result.status_code == 403


async def test_update_to_taken_email_is_400(users: UserService) -> None:
    result = await users.update("u2", UserInput(name="Bob", email="admin@example.com"))
    assert result.status_code == 400
    assert result.message == "Email is already registered"


async def test_patch_password_is_hashed(users: UserService) -> None:
    result = await users.patch("u2", {"password": "newpass99"})
    assert result.status_code == 200
    assert (await users.find_credentials("bob@example.com")).password == "hashed:newpass99"


async def test_patch_short_password_is_400(users: UserService) -> None:
    result = await users.patch("u2", {"password": "123"})
    assert result.status_code == 400
    assert users.store.mutations == 0


async def test_patch_email_to_taken_is_400(users: UserService) -> None:
    result = await users.patch("u2", {"email": "ADMIN@example.com"})
    assert result.status_code == 400


async def test_patch_empty_is_400(users: UserService) -> None:
    result = await users.patch("u2", {})
    assert result.status_code == 400
    assert sum(users.store.calls.values()) == 0


async def test_find_credentials_is_uncached(users: UserService) -> None:
    await users.find_credentials("bob@example.com")
    await users.find_credentials("bob@example.com")
    assert users.store.calls["find_one"] == 2


@pytest.mark.parametrize(
    ("user_id", "password", "message"),
    [("", "newpass99", "User id is required"), ("u2", "", "New password is required")],
)
async def test_update_password_requires_id_and_password(
    users: UserService, user_id: str, password: str, message: str
) -> None:
    result = await users.update_password_by_id(user_id, password)
    assert (result.status_code, result.message) == (400, message)
    assert sum(users.store.calls.values()) == 0


async def test_update_password_unknown_user_is_404(users: UserService) -> None:
    result = await users.update_password_by_id("ghost", "newpass99")
    assert (result.status_code, result.message) == (404, "User not found")
    assert users.store.mutations == 0


async def test_update_password_short_is_400(users: UserService) -> None:
    result = await users.update_password_by_id("u2", "123")
    assert result.status_code == 400
    assert users.store.mutations == 0


async def test_update_password_hashes_and_invalidates(
    users: UserService, cache: MemoryCacheStore
) -> None:
    await users.get_by_email("bob@example.com")
    result = await users.update_password_by_id("u2", "newpass99")
    assert (result.status_code, result.message) == (200, "Password updated")
    assert users.store.calls["update_one"] == 1
    assert (await users.find_credentials("bob@example.com")).password == "hashed:newpass99"
    assert await cache.get(field_key("user", "email", "bob@example.com")) is None
