from typing import Optional

from lms_api.repositories.base import Store
from lms_api.schemas.auth_schemas import ExternalIdentity, LoginUser
from lms_api.schemas.user_schemas import User
from lms_api.services.identity_client import IdentityProvider
from lms_api.services.role_service import RoleService
from lms_api.services.user_service import UserService
from lms_api.utils.logger import configure_logging

logger = configure_logging()


class AuthService:
    """Login relay: external authentication, then a local shadow user."""

    def __init__(self, store: Store, provider: IdentityProvider):
        self.store = store
        self.provider = provider
        self.roles = RoleService(store)
        self.users = UserService(store)

    async def login(self, username: str, password: str) -> Optional[tuple[User, ExternalIdentity]]:
        """
        Authenticate against the identity provider and upsert the shadow user.
        Returns None on any failure; there is no local password fallback.
        """
        if not username or not password:
            return None
        identity = await self.provider.authenticate(username, password)
        if identity is None:
            logger.warning("login failed username=%s", username)
            return None
        user = self.users.upsert_shadow(identity, self.roles.role_for(identity.username))
        logger.info("login ok user_id=%s role=%s", user.id, user.role.value)
        return user, identity


def merge_profile(user: User, identity: ExternalIdentity) -> LoginUser:
    """External profile fields plus local XP, role and category."""
    name = identity.name or user.name
    return LoginUser(
        id=user.id,
        external_id=identity.external_id,
        name=name,
        username=identity.username,
        usuario=identity.username,
        nome=name,
        email=identity.email,
        avatar=identity.avatar,
        role=user.role.value,
        xp=user.xp,
        category=user.category,
    )
