"""DTOs for authentication and token use cases."""

from dataclasses import dataclass

from realestate.application.dtos.user import UserResult


@dataclass
class LoginInput:
    """Credentials submitted to login."""

    email: str
    password: str


@dataclass(frozen=True)
class AuthTokens:
    """Token pair returned by login, register and refresh. expires_in is in seconds."""

    access_token: str
    refresh_token: str
    expires_in: int
    user: UserResult
