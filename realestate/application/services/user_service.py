"""User facade: cached reads, unique emails, hashed passwords, guarded roles.

Passwords are hashed in a worker thread (bcrypt is CPU-bound) and never
leave the service except through find_credentials, which is uncached and
only used by login. Emails are stored lower-cased.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Mapping
from typing import Any

from realestate.application.dtos import ServiceResult, UserInput, UserResult
from realestate.application.interfaces.repositories import Condition, IDocumentStore, eq
from realestate.application.interfaces.services import (
    IPasswordHasher,
    IRecordValidator,
    IRoleChangePolicy,
)
from realestate.application.services.authorization import AdminOnlyRoleChangePolicy
from realestate.application.services.base import CachedEntityService
from realestate.application.services.mappers import UserMapper
from realestate.core.config import Settings
from realestate.core.constants import CACHE_PREFIX_USER, DEFAULT_PAGE
from realestate.domain.entities import User
from realestate.domain.exceptions import (
    AuthorizationException,
    DuplicateEmailException,
    ResourceNotFoundException,
    ValidationException,
)
from realestate.infrastructure.cache import CacheProtocol, field_key
from realestate.shared.utils import generate_cuid


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService(CachedEntityService[User, UserInput, UserResult]):
    """Users filtered by role; secondary lookup by email."""

    entity_name = "User"
    entity_plural = "Users"
    cache_prefix = CACHE_PREFIX_USER
    collection_setting = "COLLECTION_USER"
    list_filters = ("role",)
    mapper_type = UserMapper
    _secondary_fields = ("email",)

    def __init__(
        self,
        store: IDocumentStore[User],
        cache: CacheProtocol,
        validator: IRecordValidator,
        settings: Settings,
        password_hasher: IPasswordHasher,
        role_policy: IRoleChangePolicy | None = None,
        mapper: UserMapper | None = None,
    ) -> None:
        super().__init__(store, cache, validator, settings, mapper)
        self.password_hasher = password_hasher
        self.role_policy = role_policy or AdminOnlyRoleChangePolicy()

    async def get_all(
        self,
        role: str | None = None,
        page: int = DEFAULT_PAGE,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> ServiceResult[list[UserResult]]:
        conditions: list[Condition] = []
        if role:
            conditions.append(eq("role", role))
        return await self._get_list(
            [("role", role)],
            conditions,
            page,
            self.default_page_size if limit is None else limit,
            force_refresh,
        )

    async def get_by_email(
        self, email: str, force_refresh: bool = False
    ) -> ServiceResult[UserResult]:
        if not email or not email.strip():
            return ServiceResult.fail("Email is required", 400, ["email: is required"])
        normalized = _normalize_email(email)

        async def fetch() -> UserResult | None:
            record = await self.store.find_one([eq("email", normalized)])
            return None if record is None else self.mapper.to_result(record)

        async def run() -> ServiceResult[UserResult]:
            result, from_cache = await self.cache.get_or_fetch(
                field_key(self.cache_prefix, "email", normalized),
                fetch,
                force_refresh=force_refresh,
            )
            if result is None:
                raise ResourceNotFoundException(self.entity_name, normalized)
            message = "User retrieved" + (" from cache" if from_cache else "")
            return ServiceResult.ok(result, message)

        return await self._guard("get_by_email", run)

    async def find_credentials(self, email: str) -> User | None:
        """Raw user (with password hash) for login. Uncached. Raises StoreException."""
        if not email:
            return None
        return await self.store.find_one([eq("email", _normalize_email(email))])

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self.password_hasher.hash_password, password)

    async def _ensure_email_free(self, email: str, user_id: str | None = None) -> None:
        existing = await self.store.find_one([eq("email", email)])
        if existing is not None and existing.id != user_id:
            raise DuplicateEmailException(email)

    def _ensure_role_change_allowed(
        self, requester_role: str | None, target: User, new_role: str
    ) -> None:
        if not self.role_policy.can_change_role(requester_role, target, new_role):
            raise AuthorizationException("user", "change_role")

    async def _create(self, data: UserInput) -> ServiceResult[UserResult]:
        data = dataclasses.replace(data, email=_normalize_email(data.email or ""))
        await self._validate(data)
        if not data.password:
            raise ValidationException("Password is required", field="password")
        await self._ensure_email_free(data.email)
        entity = self.mapper.to_entity(data, generate_cuid())
        entity.password = await self._hash(data.password)
        await self._insert(entity)
        await self.invalidate(entity.id)
        return ServiceResult.created(self.mapper.to_result(entity), "User created")

    async def update(
        self, entity_id: str, data: UserInput, *, requester_role: str | None = None
    ) -> ServiceResult[UserResult]:
        """Full replace. Changing role requires the policy's approval (403 otherwise)."""
        return await self._guard("update", lambda: self._update_user(entity_id, data, requester_role))

    async def _update_user(
        self, entity_id: str, data: UserInput, requester_role: str | None
    ) -> ServiceResult[UserResult]:
        data = dataclasses.replace(data, email=_normalize_email(data.email or ""))
        await self._validate(data)
        current = await self._require(entity_id)
        self._ensure_role_change_allowed(requester_role, current, data.role)
        if data.email != current.email:
            await self._ensure_email_free(data.email, entity_id)
        entity = self.mapper.merge(data, current)
        if data.password:
            entity.password = await self._hash(data.password)
        await self._replace(entity_id, entity)
        await self.invalidate(entity_id)
        return ServiceResult.ok(self.mapper.to_result(entity), "User updated")

    async def patch(
        self,
        entity_id: str,
        fields: Mapping[str, Any],
        *,
        requester_role: str | None = None,
    ) -> ServiceResult[UserResult]:
        if not fields:
            return ServiceResult.fail("No fields to update", 400, ["fields: at least one field is required"])
        return await self._guard(
            "patch", lambda: self._patch_user(entity_id, fields, requester_role)
        )

    async def _patch_user(
        self, entity_id: str, fields: Mapping[str, Any], requester_role: str | None
    ) -> ServiceResult[UserResult]:
        normalized = self.mapper.normalize_fields(fields)
        if isinstance(normalized.get("email"), str):
            normalized["email"] = _normalize_email(normalized["email"])
        current = await self._require(entity_id)
        patched = self.mapper.apply(current, normalized)
        candidate = self.mapper.to_input(patched)
        if "password" in normalized:
            candidate = dataclasses.replace(candidate, password=normalized["password"])
            if not normalized["password"]:
                raise ValidationException("Password cannot be empty", field="password")
        await self._validate(candidate)
        if "role" in normalized:
            self._ensure_role_change_allowed(requester_role, current, normalized["role"])
        if "email" in normalized and normalized["email"] != current.email:
            await self._ensure_email_free(normalized["email"], entity_id)
        if "password" in normalized:
            normalized["password"] = await self._hash(normalized["password"])
        await self._update_fields(entity_id, normalized)
        await self.invalidate(entity_id)
        return ServiceResult.ok(await self._reload(entity_id), "User updated")

    async def update_password_by_id(self, user_id: str, new_password: str) -> ServiceResult[None]:
        """Set a new password, e.g. after a verified reset token."""
        if not user_id or not user_id.strip():
            return ServiceResult.fail("User id is required", 400, ["id: is required"])
        if not new_password:
            return ServiceResult.fail("New password is required", 400, ["password: is required"])
        return await self._guard(
            "update_password", lambda: self._update_password(user_id, new_password)
        )

    async def _update_password(self, user_id: str, new_password: str) -> ServiceResult[None]:
        current = await self._require(user_id)
        await self._validate(
            dataclasses.replace(self.mapper.to_input(current), password=new_password)
        )
        await self._update_fields(user_id, {"password": await self._hash(new_password)})
        await self.invalidate(user_id)
        return ServiceResult.ok(None, "Password updated")
