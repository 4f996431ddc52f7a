# bloomhub/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from bloomhub.schemas.base import CamelModel

# App-level roles. Anonymous visitors have no token, so no role.
Role = Literal["customer", "florist", "admin"]


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return v
    return v.strip()


class UserRead(CamelModel):
    """Response schema for a users row (never includes the hash)."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: str
    is_verified: bool = False
    created_at: datetime | None = None


class UserWithRolesRead(UserRead):
    """Admin listing entry: the primary role plus every granted role."""

    roles: list[str] = []


class ActorRead(CamelModel):
    """
    `GET /auth/user` response.

    `roles` lists stored grants; `is_admin` is the outcome of the full
    admin check (escalation allow-list included).
    """

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    roles: list[str]
    is_admin: bool
    kind: str


class AdminUserCreate(CamelModel):
    """
    Admin-only user creation.

    If `password` is omitted a temporary one is generated and returned
    once in the response.
    """

    email: EmailStr
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: Role = "customer"
    password: str | None = Field(default=None, min_length=6)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class AdminUserCreated(UserRead):
    temp_password: str | None = None


class AdminUserUpdate(CamelModel):
    """Partial update; a blank password leaves the hash unchanged."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: Role | None = None
    password: str | None = None
    is_verified: bool | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class RoleGrantRequest(CamelModel):
    role: Role
