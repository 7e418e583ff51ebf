from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ..models import CamelModel


class Role(str, Enum):
    user = "user"
    admin = "admin"


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str | None = Field(default=None, min_length=6, max_length=128)
    role: Role | None = None


class UserOut(CamelModel):
    id: str
    username: str
    email: str
    role: Role = Role.user
    favorites: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class UserPage(CamelModel):
    total: int
    page: int
    total_pages: int
    users: list[UserOut]
