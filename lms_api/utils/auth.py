from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lms_api.config import settings
from lms_api.dependencies import get_store
from lms_api.repositories.base import Store
from lms_api.schemas.user_schemas import User
from lms_api.services.role_service import RoleService
from lms_api.utils.jwt import create_access_token, verify_token

bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(None),
    store: Store = Depends(get_store),
) -> User:
    """Resolve the session user from `Authorization: Bearer` or the access_token cookie."""
    token = credentials.credentials if credentials else access_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )

    payload = verify_token(token)
    user = store.users.get(payload.sub)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return user


def require_admin(
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> User:
    if not RoleService(store).is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return current_user


def ensure_self_or_admin(user_id: str, current_user: User, store: Store) -> None:
    """Only the user themself or an admin may act on user_id's records."""
    if current_user.id != user_id and not RoleService(store).is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to record progress for another user",
        )


def set_auth_cookie(response: Response, user: User) -> str:
    token = create_access_token(user.id, user.role.value)
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return token


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )
