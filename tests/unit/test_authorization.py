"""Role change policy."""

import pytest

from realestate.application.services import AdminOnlyRoleChangePolicy
from realestate.domain.entities import User

TARGET = User(id="u1", name="Bob", email="bob@example.com", role="user")


@pytest.mark.parametrize(
    ("requester", "new_role", "allowed"),
    [
        (None, "user", True),
        ("user", "user", True),
        ("user", "admin", False),
        (None, "admin", False),
        ("admin", "admin", True),
    ],
)
def test_can_change_role(requester: str | None, new_role: str, allowed: bool) -> None:
    assert AdminOnlyRoleChangePolicy().can_change_role(requester, TARGET, new_role) is allowed
