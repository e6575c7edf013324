"""Request models for auth API endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field, field_validator, model_validator

from pawboard.core.auth import MAX_PASSWORD_BYTES
from pawboard.core.schema_base import CamelModel

PASSWORD_MIN_LENGTH = 8
# Characters, not bytes; the byte limit is checked separately for multi-byte input.
PASSWORD_MAX_LENGTH = 50


def _within_bcrypt_limit(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return password


class RegisterUserRequest(CamelModel):
    """New member account. Roles above member are granted by an admin, never here."""

    email: EmailStr = Field(..., max_length=320, description="Valid email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="Password between 8 and 50 characters",
    )
    confirm_password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="Must match password",
    )

    @field_validator("password", "confirm_password")
    @classmethod
    def password_within_bcrypt_limit(cls, v: str) -> str:
        return _within_bcrypt_limit(v)

    @model_validator(mode="after")
    def passwords_match(self) -> RegisterUserRequest:
        if self.password != self.confirm_password:
            raise ValueError("Password and confirm password do not match")
        return self


class LoginUserRequest(CamelModel):
    email: EmailStr = Field(..., max_length=320)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_within_bcrypt_limit(cls, v: str) -> str:
        return _within_bcrypt_limit(v)
