"""
User, XP and ranking schemas.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from lms_api.schemas.base import CamelModel


class Role(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"


class User(CamelModel):
    id: str
    name: str
    role: Role = Role.STUDENT
    title: Optional[str] = None
    xp: int = 0
    category: Optional[str] = None


class CreateUserRequest(CamelModel):
    """Admin registration. id defaults to the name when omitted, as the admin panel does."""
    id: Optional[str] = None
    name: str = Field(min_length=1)
    role: Role = Role.STUDENT
    title: Optional[str] = None
    xp: int = Field(default=0, ge=0)
    category: Optional[str] = None


class UpdateXpRequest(CamelModel):
    amount: int


class UpdateCategoryRequest(CamelModel):
    category: Optional[str] = None
