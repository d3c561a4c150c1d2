from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from lms_api.schemas.base import CamelModel


class LoginRequest(BaseModel):
    """Accepts the identity API's field names (usuario/senha) as well as username/password."""
    username: str = Field(validation_alias=AliasChoices("username", "usuario"))
    password: str = Field(validation_alias=AliasChoices("password", "senha"))

    @field_validator("username", "password")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class ExternalIdentity(BaseModel):
    """Profile returned by the identity provider after a successful login."""
    username: str
    name: str
    external_id: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None


class LoginUser(CamelModel):
    """Profile returned by login. usuario/nome repeat username/name under the identity API's keys."""
    id: str
    external_id: Optional[str] = None
    name: str
    username: str
    usuario: str
    nome: str
    email: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    xp: int
    category: Optional[str] = None


class LoginResponse(CamelModel):
    access_token: str
    user: LoginUser


class LogoutResponse(BaseModel):
    message: str


class AuthTokenPayload(BaseModel):
    sub: str
    role: str = "student"
    exp: Optional[datetime] = None
