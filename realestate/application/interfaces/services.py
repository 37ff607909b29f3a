"""Service interfaces (ports) consumed by the cached entity services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from realestate.application.dtos.validation import ValidationResult
    from realestate.domain.entities import User


class IRecordValidator(Protocol):
    """Validates a write input; returns pass/fail plus field errors."""

    async def validate(self, record: Any) -> ValidationResult:
        """Return the validation outcome for record."""
        ...


class IPasswordHasher(Protocol):
    """Password hashing used by user and auth services."""

    def hash_password(self, password: str) -> str:
        ...

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        ...


class IRoleChangePolicy(Protocol):
    """Decides whether a requester may change a user's role."""

    def can_change_role(self, requester_role: str | None, target: User, new_role: str) -> bool:
        ...
