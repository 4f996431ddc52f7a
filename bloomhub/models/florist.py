# bloomhub/models/florist.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FloristAuth(SQLModel, table=True):
    """
    Authentication identity of a florist.

    Created once at florist registration. Holds credentials and the
    person's name only; storefront data lives in BusinessProfile.
    """

    __tablename__ = "florist_auth"

    id: int | None = Field(default=None, primary_key=True)

    email: str = Field(unique=True, index=True)
    password_hash: str

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    is_verified: bool = Field(default=False)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class BusinessProfile(SQLModel, table=True):
    """
    Storefront data of a florist.

    Relationship:
      - 0..1 per FloristAuth, linked by `florist_auth_id` (unique).
      - The unique FK is the conflict target of the profile upsert.

    There is no `setup_complete` column: completeness is derived from
    `business_name` (see services.florist_service.is_profile_complete).
    """

    __tablename__ = "florists"

    id: int | None = Field(default=None, primary_key=True)

    florist_auth_id: int = Field(
        foreign_key="florist_auth.id",
        unique=True,
        index=True,
    )

    email: str | None = Field(default=None, index=True)

    business_name: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)

    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=255)
    profile_summary: str | None = None
    years_of_experience: int = Field(default=0, ge=0)

    specialties: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    services: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    profile_image_url: str | None = None

    is_active: bool = Field(default=True, index=True)
    is_featured: bool = Field(default=False)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
