"""TokenService tests: issuing, decoding, expiry, refresh exchange."""

from datetime import UTC, datetime, timedelta

import pytest

from fakes import make_settings
from realestate.domain.entities import User
from realestate.domain.exceptions import AuthenticationException, ConfigurationException
from realestate.infrastructure.security import TokenService

USER = User(id="u1", name="Bob", email="bob@example.com", role="user")


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(make_settings())


def test_access_token_round_trip_claims(tokens: TokenService) -> None:
    claims = tokens.decode(tokens.create_access_token(USER))
    assert (claims.sub, claims.email, claims.name, claims.role) == ("u1", "bob@example.com", "Bob", "user")
    assert claims.type == "access"
    assert (claims.iss, claims.aud) == ("RealEstateAPI", "RealEstateUsers")
    assert claims.exp > datetime.now(UTC)


def test_tokens_are_unique(tokens: TokenService) -> None:
    assert tokens.create_access_token(USER) != tokens.create_access_token(USER)


def test_expired_token_rejected() -> None:
    past = datetime.now(UTC) - timedelta(days=30)
    issuer = TokenService(make_settings(), now=lambda: past)
    token = issuer.create_access_token(USER)
    with pytest.raises(AuthenticationException, match="Invalid token"):
        TokenService(make_settings()).decode(token)


def test_wrong_secret_rejected(tokens: TokenService) -> None:
    other = TokenService(make_settings(secret_key="another-secret-key-value"))
    with pytest.raises(AuthenticationException):
        other.decode(tokens.create_access_token(USER))


def test_wrong_audience_rejected(tokens: TokenService) -> None:
    other = TokenService(make_settings(jwt_audience="SomeoneElse"))
    with pytest.raises(AuthenticationException):
        other.decode(tokens.create_access_token(USER))


def test_refresh_access_token(tokens: TokenService) -> None:
    refresh = tokens.create_refresh_token(USER)
    access = tokens.refresh_access_token(refresh, USER)
    assert tokens.decode(access).type == "access"


def test_refresh_rejects_access_token(tokens: TokenService) -> None:
    with pytest.raises(AuthenticationException, match="not a refresh token"):
        tokens.refresh_access_token(tokens.create_access_token(USER), USER)


def test_refresh_rejects_other_users_token(tokens: TokenService) -> None:
    other = User(id="u2", name="Eve", email="eve@example.com")
    with pytest.raises(AuthenticationException, match="does not belong"):
        tokens.refresh_access_token(tokens.create_refresh_token(other), USER)


def test_empty_secret_is_configuration_error() -> None:
    with pytest.raises(ConfigurationException, match="SECRET_KEY"):
        TokenService(make_settings(secret_key=""))


def test_reset_token_yields_user_id(tokens: TokenService) -> None:
    token = tokens.create_reset_token(USER)
    assert tokens.decode(token).type == "reset"
    assert tokens.verify_reset_token(token) == "u1"


@pytest.mark.parametrize("token", [None, "", "   "])
def test_reset_token_is_required(tokens: TokenService, token: str | None) -> None:
    with pytest.raises(AuthenticationException, match="Reset token is required"):
        tokens.verify_reset_token(token)


def test_reset_rejects_invalid_and_other_token_types(tokens: TokenService) -> None:
    with pytest.raises(AuthenticationException, match="Invalid token"):
        tokens.verify_reset_token("x.y.z")
    with pytest.raises(AuthenticationException, match="not a reset token"):
        tokens.verify_reset_token(tokens.create_access_token(USER))


def test_expired_reset_token_rejected() -> None:
    past = datetime.now(UTC) - timedelta(hours=2)
    token = TokenService(make_settings(), now=lambda: past).create_reset_token(USER)
    with pytest.raises(AuthenticationException):
        TokenService(make_settings()).verify_reset_token(token)
