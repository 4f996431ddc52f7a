# bloomhub/core/config.py
from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class OperatorAccount(BaseModel):
    """
    Break-glass operator login.

    Operators never have a row in `users`; they authenticate against the
    configured password hash and receive an admin token whose `sub` is
    `subject`.
    """

    subject: str
    email: str
    password_hash: str
    first_name: str = "Admin"
    last_name: str = "User"


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string)
      - JWT_SECRET (HS256 signing secret for session tokens)

    Optional:
      - ACCESS_TOKEN_TTL_MINUTES (default 24h)
      - ADMIN_ESCALATION_EMAILS / ADMIN_ESCALATION_SUBJECTS
        JSON lists, e.g. '["ops@example.com"]'. Identities listed here are
        always treated as administrators, whatever their role grants say.
      - ADMIN_OPERATORS
        JSON list of OperatorAccount objects (break-glass logins).
    """

    PROJECT_NAME: str = "Bloomhub Marketplace API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # Session tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_TTL_MINUTES: int = 24 * 60

    # Operator break-glass access
    ADMIN_ESCALATION_EMAILS: list[str] = []
    ADMIN_ESCALATION_SUBJECTS: list[str] = []
    ADMIN_OPERATORS: list[OperatorAccount] = []

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
