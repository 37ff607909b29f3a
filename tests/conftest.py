"""Pytest configuration and fixtures for realestate.

Services are wired through build_container with in-memory stores that
count their calls (SpyStore) and a fast fake password hasher. Test doubles
live in tests/fakes.py (tests/ is on pythonpath).
"""

import pytest

from fakes import FakePasswordHasher, SpyStore, make_settings
from realestate.core.config import Settings
from realestate.core.container import ServiceContainer, build_container


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def container(settings: Settings, fake_hasher: FakePasswordHasher) -> ServiceContainer:
    """All facades over SpyStores (reach a store via service.store)."""
    return build_container(
        settings,
        store_factory=lambda name, record_type: SpyStore(record_type, name),
        password_hasher=fake_hasher,
    )
