# bloomhub/core/security.py
"""
Password hashing and session tokens.

Tokens are stateless HS256 JWTs. There is no server-side revocation
list: a token stays valid until `exp`, logout means the client drops it.

Each actor kind has its own claim shape, tagged by `kind`:

    customer: {"kind": "customer", "sub", "email", "iat", "exp"}
    florist:  {"kind": "florist", "type": "florist", "floristId", "email", ...}
    admin:    {"kind": "admin", "sub", "email", ...}   (break-glass operators)

`verify` decodes the tag explicitly; a token without a known `kind` is
rejected even when its signature is valid.
"""

import time
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Any, Literal, Union

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from bloomhub.core.config import get_settings
from bloomhub.core.errors import InvalidToken

_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

DEFAULT_TOKEN_TTL = timedelta(hours=24)


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password cannot be empty")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except ValueError:
        # Unrecognised / corrupted hash format
        return False


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------


class CustomerClaims(BaseModel):
    kind: Literal["customer"]
    sub: str
    email: str
    iat: int
    exp: int


class FloristClaims(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["florist"]
    type: Literal["florist"] = "florist"
    florist_id: int = Field(alias="floristId")
    email: str
    iat: int
    exp: int


class AdminClaims(BaseModel):
    kind: Literal["admin"]
    sub: str
    email: str
    iat: int
    exp: int


SessionClaims = Annotated[
    Union[CustomerClaims, FloristClaims, AdminClaims],
    Field(discriminator="kind"),
]

_claims_adapter: TypeAdapter[Any] = TypeAdapter(SessionClaims)


class TokenService:
    """Issue and verify signed, time-boxed session tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
    ):
        if not secret:
            raise ValueError("JWT secret cannot be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, claims: dict[str, Any], ttl: timedelta | None = None) -> str:
        """
        Sign `claims` with `iat`/`exp` added.

        `ttl` defaults to the service TTL (24h unless configured).
        A zero or negative ttl yields a token that is already expired.
        """
        if "email" not in claims or not ("sub" in claims or "floristId" in claims):
            raise ValueError("claims must include a subject and an email")

        lifetime = self.ttl if ttl is None else ttl
        now = int(time.time())
        payload = {
            **claims,
            "iat": now,
            "exp": now + int(lifetime.total_seconds()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_customer(self, user_id: str, email: str, ttl: timedelta | None = None) -> str:
        return self.issue({"kind": "customer", "sub": user_id, "email": email}, ttl)

    def issue_florist(self, florist_id: int, email: str, ttl: timedelta | None = None) -> str:
        return self.issue(
            {"kind": "florist", "type": "florist", "floristId": florist_id, "email": email},
            ttl,
        )

    def issue_admin(self, subject: str, email: str, ttl: timedelta | None = None) -> str:
        return self.issue({"kind": "admin", "sub": subject, "email": email}, ttl)

    def verify(self, token: str) -> CustomerClaims | FloristClaims | AdminClaims:
        """
        Decode and verify a token.

        Raises:
            InvalidToken: malformed, bad signature, expired, or unknown shape.
        """
        if not token:
            raise InvalidToken("No token provided")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise InvalidToken("Token expired")
        except JWTError:
            raise InvalidToken("Invalid token")

        # jose accepts exp == now; a token is expired from its exp second on.
        exp = payload.get("exp")
        if not isinstance(exp, int) or exp <= int(time.time()):
            raise InvalidToken("Token expired")

        try:
            return _claims_adapter.validate_python(payload)
        except ValidationError:
            raise InvalidToken("Invalid token claims")


@lru_cache
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES),
    )
