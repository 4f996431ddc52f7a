# bloomhub/models/user.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Customer (and admin) identity.

    Identity:
      - id: opaque string, generated at registration
      - email: unique, stored lower-cased

    Role:
      - `role` is the *primary* role shown in admin tooling.
      - The full role set lives in `user_roles` (see UserRole) and is
        keyed by email, so one person may be customer + admin at once.
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        primary_key=True,
        index=True,
    )

    email: str = Field(unique=True, index=True)

    password_hash: str = Field(description="Salted one-way hash, never plaintext")

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)

    role: str = Field(
        default="customer",
        index=True,
        description="Primary role: customer | florist | admin",
    )

    is_verified: bool = Field(default=False)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class UserRole(SQLModel, table=True):
    """
    Role grant: one (email, role) membership.

    The pair is unique, so granting a role twice is a no-op at the
    storage layer (INSERT ... ON CONFLICT DO NOTHING).
    """

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_email", "role", name="uq_user_roles_email_role"),
    )

    id: int | None = Field(default=None, primary_key=True)

    user_email: str = Field(index=True)
    role: str = Field(max_length=20)

    created_at: datetime = Field(default_factory=_utcnow)
