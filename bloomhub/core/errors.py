# bloomhub/core/errors.py
"""
Error taxonomy for the identity core.

Client-facing errors are HTTPException subclasses so that services can
raise them directly and FastAPI renders them as `{"detail": ...}`.
`AuthRecordNotFound` is deliberately NOT an HTTPException: it signals
corrupted state and is turned into a generic 500 by the handler
registered in `bloomhub.main`.
"""

from fastapi import HTTPException, status


class InvalidCredentials(HTTPException):
    """Unknown email or wrong password. Both cases look identical."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )


class DuplicateEmail(HTTPException):
    def __init__(self, kind: str = "User") -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{kind} with this email already exists",
        )


class MissingFields(HTTPException):
    """Required fields absent or blank."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: " + ", ".join(fields),
        )


class InvalidEmail(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email address",
        )


class InvalidToken(HTTPException):
    """Missing, malformed, expired, or badly signed bearer token."""

    def __init__(self, detail: str = "Invalid token") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InsufficientRole(HTTPException):
    def __init__(self, detail: str = "Admin access required") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthRecordNotFound(Exception):
    """A profile or session references a florist auth id that does not exist."""

    def __init__(self, florist_auth_id: int) -> None:
        self.florist_auth_id = florist_auth_id
        super().__init__(f"Florist auth record {florist_auth_id} not found")
