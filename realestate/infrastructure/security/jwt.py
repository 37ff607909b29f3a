"""JWT access, refresh and password reset token issuing and verification.

Uses Settings for secret, algorithm, issuer, audience and lifetimes.
Decoded tokens are returned as TokenClaims; any failure (bad signature,
expired, wrong issuer/audience, missing claim) is an AuthenticationException.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from realestate.core.config import Settings
from realestate.domain.entities import User
from realestate.domain.enums import TokenType
from realestate.domain.exceptions import AuthenticationException, ConfigurationException
from realestate.shared.utils import generate_cuid

_REQUIRED_CLAIMS = ("sub", "email", "role", "type")


@dataclass(frozen=True)
class TokenClaims:
    """Verified token payload."""

    sub: str
    email: str
    name: str
    role: str
    type: str
    iss: str
    aud: str
    exp: datetime
    jti: str | None = None


class TokenService:
    """Issues and verifies access and refresh tokens for a user."""

    def __init__(self, settings: Settings, now: Callable[[], datetime] | None = None) -> None:
        """Initialize from settings.

        Args:
            settings: Application settings (SECRET_KEY must be set).
            now: Optional UTC clock for tests.

        Raises:
            ConfigurationException: If SECRET_KEY is empty.
        """
        secret = settings.secret_key.get_secret_value()
        if not secret:
            raise ConfigurationException("SECRET_KEY")
        self._secret = secret
        self._algorithm = settings.algorithm
        self.issuer = settings.jwt_issuer
        self.audience = settings.jwt_audience
        self.access_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_ttl = timedelta(days=settings.refresh_token_expire_days)
        self.reset_ttl = timedelta(minutes=settings.reset_token_expire_minutes)
        self._now = now or (lambda: datetime.now(UTC))

    @property
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self.access_ttl.total_seconds())

    def _encode(self, user: User, token_type: TokenType, ttl: timedelta) -> str:
        payload: dict[str, Any] = {
            "sub": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "type": token_type.value,
            "iss": self.issuer,
            "aud": self.audience,
            "exp": self._now() + ttl,
            "jti": generate_cuid(),
        }
        return cast(str, jwt.encode(payload, self._secret, algorithm=self._algorithm))

    def create_access_token(self, user: User) -> str:
        return self._encode(user, TokenType.ACCESS, self.access_ttl)

    def create_refresh_token(self, user: User) -> str:
        return self._encode(user, TokenType.REFRESH, self.refresh_ttl)

    def create_reset_token(self, user: User) -> str:
        """Short-lived token carried by a password recovery link."""
        return self._encode(user, TokenType.RESET, self.reset_ttl)

    def decode(self, token: str) -> TokenClaims:
        """Verify signature, expiry, issuer and audience; return the claims.

        Raises:
            AuthenticationException: If the token is invalid or incomplete.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise AuthenticationException(f"Invalid token: {e!s}") from e
        missing = [claim for claim in _REQUIRED_CLAIMS if not payload.get(claim)]
        if missing:
            raise AuthenticationException(f"Token missing required claim(s): {', '.join(missing)}")
        return TokenClaims(
            sub=payload["sub"],
            email=payload["email"],
            name=payload.get("name", ""),
            role=payload["role"],
            type=payload["type"],
            iss=payload["iss"],
            aud=payload["aud"],
            exp=datetime.fromtimestamp(payload["exp"], UTC),
            jti=payload.get("jti"),
        )

    def decode_refresh_token(self, token: str) -> TokenClaims:
        """Decode and require type == refresh."""
        claims = self.decode(token)
        if claims.type != TokenType.REFRESH:
            raise AuthenticationException("Token is not a refresh token")
        return claims

    def verify_reset_token(self, token: str | None) -> str:
        """Return the user id of a valid password reset token.

        Raises:
            AuthenticationException: If the token is missing, invalid,
                expired, or not a reset token.
        """
        if not token or not token.strip():
            raise AuthenticationException("Reset token is required")
        claims = self.decode(token.strip())
        if claims.type != TokenType.RESET:
            raise AuthenticationException("Token is not a reset token")
        return claims.sub

    def refresh_access_token(self, refresh_token: str, user: User) -> str:
        """Issue a new access token for user from a valid refresh token.

        Raises:
            AuthenticationException: If the token is invalid, not a refresh
                token, or was issued to another user.
        """
        claims = self.decode_refresh_token(refresh_token)
        if claims.sub != user.id:
            raise AuthenticationException("Refresh token does not belong to user")
        return self.create_access_token(user)
