# bloomhub/schemas/auth.py
from pydantic import Field

from bloomhub.schemas.base import CamelModel
from bloomhub.schemas.florist import FloristAuthRead
from bloomhub.schemas.user import UserRead


class CustomerRegister(CamelModel):
    """
    Customer sign-up payload.

    All fields are optional at the schema level; the service reports
    missing ones as a single 400 (see schemas.base.missing_fields).
    """

    email: str | None = Field(default=None, max_length=255)
    password: str | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)


class FloristRegister(CamelModel):
    email: str | None = Field(default=None, max_length=255)
    password: str | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class CustomerAuthResponse(CamelModel):
    user: UserRead
    token: str


class FloristAuthResponse(CamelModel):
    florist: FloristAuthRead
    token: str
