from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError
from jose.jwt import decode, encode

from lms_api.config import settings
from lms_api.schemas.auth_schemas import AuthTokenPayload


def create_access_token(sub: str, role: str, expires_minutes: Optional[int] = None) -> str:
    """Mint the local session token for a user."""
    minutes = settings.access_token_expire_minutes if expires_minutes is None else expires_minutes
    payload = AuthTokenPayload(sub=sub, role=role, exp=datetime.now(timezone.utc) + timedelta(minutes=minutes))
    return encode(payload.model_dump(), settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    try:
        payload = decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return AuthTokenPayload(**payload)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
