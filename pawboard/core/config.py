from __future__ import annotations

import re
from typing import Final

from pydantic import Field, PostgresDsn, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pawboard.core.policy import ScoringPolicy

JWT_SECRET_MIN_LENGTH: Final[int] = 32
_JWT_SECRET_CHARACTER_CLASSES: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[^\w\s]"),
)


class MissingRequiredSettingsError(Exception):
    """Raised when required settings are missing."""

    def __init__(self, missing_fields: list[str]) -> None:
        self.missing_fields = missing_fields
        super().__init__(f"Missing required environment variables: {', '.join(missing_fields)}")


class InvalidSettingsError(Exception):
    """Raised when settings are present but malformed."""

    def __init__(self, invalid_fields: list[tuple[str, str]]) -> None:
        self.invalid_fields = invalid_fields
        summary = ", ".join(f"{field}: {message}" for field, message in invalid_fields)
        super().__init__(f"Invalid environment variables: {summary}")


class Settings(BaseSettings):
    """Process configuration from the environment and an optional ``.env`` file.

    Scorer constants are nested under ``scoring`` and overridden with a double
    underscore, e.g. ``SCORING__MODERATION__SPAM_BLOCK=90``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Required
    postgres_user: str = Field(..., description="Postgres user")
    postgres_password: str = Field(..., description="Postgres password")
    postgres_host: str = Field(..., description="Postgres host")
    postgres_port: int = Field(..., description="Postgres port")
    postgres_db: str = Field(..., description="Postgres database name")
    redis_host: str = Field(..., description="Redis host for rate limit counters")
    redis_port: int = Field(..., description="Redis port")
    redis_db: int = Field(..., description="Redis database number")
    jwt_secret_key: str = Field(..., description="JWT signing secret")
    jwt_access_token_expire_minutes: int = Field(..., description="Access token lifetime")

    # Derived from the components above when not set
    database_url: str | None = Field(
        default=None, description="SQLAlchemy async URL; any supported backend"
    )
    rate_limit_storage_url: str | None = Field(
        default=None, description="slowapi storage URI, e.g. redis://... or memory://"
    )

    # Optional
    app_name: str = "pawboard-api"
    environment: str = "local"
    log_level: str = "INFO"
    jwt_algorithm: str = "HS256"

    scoring: ScoringPolicy = Field(default_factory=ScoringPolicy)

    @field_validator("jwt_secret_key")
    @classmethod
    def jwt_secret_is_strong(cls, secret: str) -> str:
        if len(secret) < JWT_SECRET_MIN_LENGTH or not all(
            pattern.search(secret) for pattern in _JWT_SECRET_CHARACTER_CLASSES
        ):
            raise ValueError(
                f"JWT secret key must be at least {JWT_SECRET_MIN_LENGTH} characters and "
                "include upper, lower, number, and symbol characters."
            )
        return secret

    @model_validator(mode="after")
    def build_derived_urls(self) -> Settings:
        if self.database_url is None:
            self.database_url = str(
                PostgresDsn.build(
                    scheme="postgresql+asyncpg",
                    username=self.postgres_user,
                    password=self.postgres_password,
                    host=self.postgres_host,
                    port=self.postgres_port,
                    path=self.postgres_db,
                )
            )
        if self.rate_limit_storage_url is None:
            self.rate_limit_storage_url = (
                f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"
            )
        return self


def validate_settings() -> Settings:
    """Load settings, reporting missing and malformed variables separately.

    Raises:
        MissingRequiredSettingsError: If required environment variables are missing
        InvalidSettingsError: If any environment variable has an invalid value
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        errors = e.errors()
        missing_fields = [
            str(error["loc"][0]).upper() if error["loc"] else "UNKNOWN"
            for error in errors
            if error["type"] == "missing"
        ]
        if missing_fields:
            raise MissingRequiredSettingsError(missing_fields) from e

        invalid_fields = [
            (
                ".".join(str(part) for part in error.get("loc", ())) or "unknown",
                error.get("msg", "Invalid value"),
            )
            for error in errors
        ]
        raise InvalidSettingsError(invalid_fields) from e


# Validated at import so a misconfigured process fails before serving requests.
settings = validate_settings()
