"""
User endpoints: registration, XP, ranking and the external login relay.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from lms_api.dependencies import get_store
from lms_api.repositories.base import Store
from lms_api.schemas.auth_schemas import LoginRequest, LoginResponse, LogoutResponse
from lms_api.schemas.user_schemas import CreateUserRequest, UpdateCategoryRequest, UpdateXpRequest, User
from lms_api.services.auth_service import AuthService, merge_profile
from lms_api.services.identity_client import IdentityProvider, get_identity_provider
from lms_api.services.user_service import UserService
from lms_api.utils.auth import clear_auth_cookie, get_current_user, require_admin, set_auth_cookie

user_routes = APIRouter()


@user_routes.get("/users", response_model=list[User])
async def list_users(store: Store = Depends(get_store)) -> list[User]:
    return UserService(store).find_all()


@user_routes.post("/users", response_model=User)
async def create_user(
    req: CreateUserRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> User:
    user = UserService(store).create(req)
    if user is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    return user


@user_routes.get("/users/ranking", response_model=list[User])
async def ranking(
    limit: Optional[int] = Query(None, ge=0, description="0 returns every user"),
    store: Store = Depends(get_store),
) -> list[User]:
    return UserService(store).get_ranking(limit)


@user_routes.get("/users/me", response_model=User)
async def me(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@user_routes.post("/users/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    store: Store = Depends(get_store),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """
    Authenticate against the identity API and open a local session.
    Every failure is the same 401 so callers cannot probe which step failed.
    """
    result = await AuthService(store, provider).login(body.username, body.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
        )
    user, identity = result
    token = set_auth_cookie(response, user)
    return LoginResponse(access_token=token, user=merge_profile(user, identity))


@user_routes.post("/users/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Clear the authentication cookie."""
    clear_auth_cookie(response)
    return LogoutResponse(message="Logout successful")


@user_routes.get("/users/{user_id}", response_model=User)
async def get_user(user_id: str, store: Store = Depends(get_store)) -> User:
    user = UserService(store).find_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@user_routes.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> dict:
    """Delete a user together with their progress and certificates."""
    if not UserService(store).delete(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return {"deleted": True}


@user_routes.post("/users/{user_id}/xp", response_model=User)
async def update_xp(
    user_id: str,
    body: UpdateXpRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> User:
    user = UserService(store).update_xp(user_id, body.amount)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@user_routes.post("/users/{user_id}/category", response_model=User)
async def update_category(
    user_id: str,
    body: UpdateCategoryRequest,
    store: Store = Depends(get_store),
) -> User:
    user = UserService(store).update_category(user_id, body.category)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
