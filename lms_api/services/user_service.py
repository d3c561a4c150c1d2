"""
User store operations: admin registration, shadow users from external login, XP and ranking.
"""

from typing import Optional

from lms_api.config import settings
from lms_api.repositories.base import Store
from lms_api.schemas.auth_schemas import ExternalIdentity
from lms_api.schemas.user_schemas import CreateUserRequest, Role, User
from lms_api.utils.logger import configure_logging

logger = configure_logging()


class UserService:
    """Service for users, their XP accumulator and the ranking board."""

    def __init__(self, store: Store):
        self.store = store

    def find_all(self) -> list[User]:
        return self.store.users.list_users()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.store.users.get(user_id)

    def create(self, req: CreateUserRequest) -> Optional[User]:
        """Register a user. Returns None when the id is already taken."""
        user_id = (req.id or req.name).strip()
        if self.store.users.get(user_id) is not None:
            return None
        user = User(
            id=user_id,
            name=req.name.strip(),
            role=req.role,
            title=req.title,
            xp=req.xp,
            category=req.category,
        )
        logger.info("user created id=%s role=%s", user.id, user.role.value)
        return self.store.users.add(user)

    def delete(self, user_id: str) -> bool:
        if not self.store.users.delete(user_id):
            return False
        self.store.progress.delete_for_user(user_id)
        self.store.certificates.delete_for_user(user_id)
        logger.info("user deleted id=%s", user_id)
        return True

    def update_xp(self, user_id: str, amount: int) -> Optional[User]:
        """Add a signed amount to the user's XP. No history is kept."""
        user = self.store.users.add_xp(user_id, amount)
        if user is None:
            logger.warning("xp update for unknown user id=%s amount=%s", user_id, amount)
        return user

    def update_category(self, user_id: str, category: Optional[str]) -> Optional[User]:
        category = category.strip() if category else None
        return self.store.users.update(user_id, {"category": category or None})

    def get_ranking(self, limit: Optional[int] = None) -> list[User]:
        """
        Users by XP descending. limit=None falls back to RANKING_LIMIT;
        limit=0 (or RANKING_LIMIT=0) returns everyone.
        """
        if limit is None:
            limit = settings.ranking_limit
        return self.store.users.ranking(limit or None)

    def upsert_shadow(self, identity: ExternalIdentity, role: Role) -> User:
        """Create or refresh the local mirror of an externally authenticated identity."""
        existing = self.store.users.get(identity.username)
        if existing is None:
            logger.info("shadow user created id=%s role=%s", identity.username, role.value)
            return self.store.users.add(User(id=identity.username, name=identity.name, role=role))
        fields: dict = {}
        if identity.name and identity.name != existing.name:
            fields["name"] = identity.name
        if role != existing.role:
            fields["role"] = role
        if not fields:
            return existing
        return self.store.users.update(identity.username, fields) or existing
