"""Role change policy for user updates."""

from realestate.domain.entities import User
from realestate.domain.enums import UserRole


class AdminOnlyRoleChangePolicy:
    """Only admins may change a user's role; keeping the same role is always allowed."""

    def can_change_role(self, requester_role: str | None, target: User, new_role: str) -> bool:
        if new_role == target.role:
            return True
        return requester_role == UserRole.ADMIN
