"""Personnel schemas."""
from pydantic import Field

from app.models.user import UserRole
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)
    rank: str | None = Field(default=None, max_length=100)
    badge_number: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=50)
    role: UserRole = UserRole.officer
    is_active: bool = True


class UserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    rank: str | None = Field(default=None, max_length=100)
    badge_number: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=50)
    role: UserRole | None = None
    is_active: bool | None = None


class UserRead(CamelModel):
    id: int
    username: str
    name: str
    rank: str | None
    badge_number: str | None
    phone: str | None
    role: UserRole
    is_active: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class UserPage(CamelModel):
    data: list[UserRead]
    pagination: Pagination
