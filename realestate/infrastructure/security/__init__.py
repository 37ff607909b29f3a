"""Security: password hashing and JWT tokens."""

from realestate.infrastructure.security.jwt import TokenClaims, TokenService
from realestate.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    verify_password,
)

__all__ = [
    "BcryptPasswordHasher",
    "TokenClaims",
    "TokenService",
    "get_password_hash",
    "verify_password",
]
