"""Domain enums."""

from enum import StrEnum


class UserRole(StrEnum):
    """Roles a user can hold. Only admins may change roles."""

    ADMIN = "admin"
    USER = "user"


class TokenType(StrEnum):
    """JWT token kinds carried in the 'type' claim."""

    ACCESS = "access"
    REFRESH = "refresh"
    RESET = "reset"
