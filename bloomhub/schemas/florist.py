# bloomhub/schemas/florist.py
from datetime import datetime

from pydantic import AliasChoices, Field, field_validator

from bloomhub.schemas.base import CamelModel


class FloristAuthRead(CamelModel):
    """Auth-side fields of a florist (florist_auth row)."""

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_verified: bool = False


class BusinessProfileRead(CamelModel):
    id: int
    email: str | None = None
    business_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    phone: str | None = None
    website: str | None = None
    profile_summary: str | None = None
    years_of_experience: int = 0
    specialties: list[str] = []
    services: list[str] = []
    profile_image_url: str | None = None
    is_active: bool = True
    is_featured: bool = False
    updated_at: datetime | None = None


class FloristProfileRead(CamelModel):
    """
    Joined florist view.

    `business_profile` is None until profile setup has run.
    `profile_complete` is derived, never stored.
    """

    auth: FloristAuthRead
    business_profile: BusinessProfileRead | None
    profile_complete: bool


class ProfileSetup(CamelModel):
    """
    Business profile setup payload (upsert).

    Required: businessName, address, city, state, zipCode. They are
    checked by the service so that a missing one yields a 400.
    The image URL is accepted as `profileImageUrl` or `profileImage`.
    """

    business_name: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=255)
    profile_summary: str | None = None
    years_of_experience: int | None = Field(default=None, ge=0)
    specialties: list[str] | None = None
    services: list[str] | None = None
    profile_image_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("profileImageUrl", "profileImage", "profile_image_url"),
    )

    @field_validator(
        "business_name", "address", "city", "state", "zip_code", "phone", "website"
    )
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()
