"""
Role grants and the admin capability check.

Roles come from the role-grant table, seeded from ADMIN_USERNAMES at startup,
never from the shape of a username.
"""

from typing import Iterable, Optional

from lms_api.repositories.base import Store
from lms_api.schemas.user_schemas import Role, User
from lms_api.utils.logger import configure_logging

logger = configure_logging()


class RoleService:
    def __init__(self, store: Store):
        self.store = store

    def role_for(self, username: str) -> Role:
        granted = self.store.roles.get_role(username)
        try:
            return Role(granted) if granted else Role.STUDENT
        except ValueError:
            logger.warning("ignoring unknown role grant username=%s role=%s", username, granted)
            return Role.STUDENT

    def grant(self, username: str, role: Role) -> None:
        self.store.roles.grant(username, role.value)

    def sync_admins(self, usernames: Iterable[str]) -> int:
        """Grant admin to every listed username that does not have it yet."""
        granted = 0
        for username in usernames:
            if self.store.roles.get_role(username) != Role.ADMIN.value:
                self.store.roles.grant(username, Role.ADMIN.value)
                granted += 1
        if granted:
            logger.info("admin grants synced count=%s", granted)
        return granted

    def is_admin(self, user: Optional[User]) -> bool:
        if user is None:
            return False
        return user.role == Role.ADMIN or self.role_for(user.id) == Role.ADMIN
