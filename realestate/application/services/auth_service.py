"""Authentication: login, registration and refresh-token exchange.

Issues access/refresh token pairs via TokenService. Credential checks use
the uncached UserService.find_credentials; password verification runs in
a worker thread.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging

from realestate.application.dtos import AuthTokens, LoginInput, ServiceResult, UserInput, UserResult
from realestate.application.interfaces.services import IPasswordHasher
from realestate.application.services.user_service import UserService
from realestate.domain.entities import User
from realestate.domain.enums import UserRole
from realestate.domain.exceptions import AuthenticationException, StoreException
from realestate.infrastructure.security.jwt import TokenService

logger = logging.getLogger(__name__)

_BEARER = "bearer"
_INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Login, register and refresh; every operation returns a ServiceResult."""

    def __init__(
        self,
        users: UserService,
        tokens: TokenService,
        password_hasher: IPasswordHasher,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.password_hasher = password_hasher

    def _issue(self, user: User | UserResult) -> AuthTokens:
        subject = user if isinstance(user, User) else User(
            id=user.id, name=user.name, email=user.email, role=user.role
        )
        return AuthTokens(
            access_token=self.tokens.create_access_token(subject),
            refresh_token=self.tokens.create_refresh_token(subject),
            expires_in=self.tokens.access_expires_in,
            user=self.users.mapper.to_result(subject),
        )

    async def login(self, data: LoginInput) -> ServiceResult[AuthTokens]:
        errors = []
        if not data.email or not data.email.strip():
            errors.append("email: is required")
        if not data.password:
            errors.append("password: is required")
        if errors:
            return ServiceResult.fail("Validation failed", 400, errors)
        try:
            user = await self.users.find_credentials(data.email)
        except StoreException as e:
            logger.exception("Login lookup failed: %s", e.details.get("reason"))
            return ServiceResult.from_exception(e)
        if user is None or not user.password:
            return ServiceResult.fail(_INVALID_CREDENTIALS, 401)
        valid = await asyncio.to_thread(
            self.password_hasher.verify_password, data.password, user.password
        )
        if not valid:
            return ServiceResult.fail(_INVALID_CREDENTIALS, 401)
        logger.info("User logged in: %s", user.id)
        return ServiceResult.ok(self._issue(user), "Login successful")

    async def register(self, data: UserInput) -> ServiceResult[AuthTokens]:
        """Create a regular user (role is always 'user') and return tokens."""
        if not data.password:
            return ServiceResult.fail("Validation failed", 400, ["password: is required"])
        created = await self.users.create(dataclasses.replace(data, role=UserRole.USER.value))
        if not created.success or created.data is None:
            return ServiceResult.fail(created.message, created.status_code, created.errors)
        logger.info("User registered: %s", created.data.id)
        return ServiceResult.created(self._issue(created.data), "User registered")

    async def refresh(self, authorization_header: str | None) -> ServiceResult[AuthTokens]:
        """Exchange 'Bearer <refresh token>' for a new token pair."""
        scheme, _, token = (authorization_header or "").strip().partition(" ")
        token = token.strip()
        if scheme.lower() != _BEARER or not token:
            return ServiceResult.fail("Missing or malformed Authorization header", 401)
        try:
            claims = self.tokens.decode_refresh_token(token)
            user = await self.users.lookup(claims.sub)
            if user is None:
                raise AuthenticationException("User not found")
        except StoreException as e:
            logger.exception("Refresh lookup failed: %s", e.details.get("reason"))
            return ServiceResult.from_exception(e)
        except AuthenticationException as e:
            return ServiceResult.from_exception(e)
        return ServiceResult.ok(self._issue(user), "Token refreshed")

    async def reset_password(self, token: str | None, new_password: str) -> ServiceResult[None]:
        """Verify a reset token and set the new password of its user."""
        try:
            user_id = self.tokens.verify_reset_token(token)
        except AuthenticationException as e:
            return ServiceResult.from_exception(e)
        result = await self.users.update_password_by_id(user_id, new_password)
        if result.success:
            logger.info("Password reset for user: %s", user_id)
        return result
