"""User domain entity."""

from dataclasses import dataclass

from realestate.domain.enums import UserRole


@dataclass
class User:
    """Account allowed to use the API. password holds the bcrypt hash, never plain text."""

    id: str
    name: str
    email: str
    role: str = UserRole.USER.value
    password: str | None = None
