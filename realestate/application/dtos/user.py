"""DTOs for user use cases. Results never include the password."""

from dataclasses import dataclass

from realestate.domain.enums import UserRole


@dataclass
class UserInput:
    """User write model. password is plain text and hashed before storage."""

    name: str
    email: str
    password: str | None = None
    role: str = UserRole.USER.value


@dataclass(frozen=True)
class UserResult:
    """User read-model (no password)."""

    id: str
    name: str
    email: str
    role: str
