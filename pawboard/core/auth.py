from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Final

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from pawboard.core.config import settings

ROLE_MEMBER: Final[str] = "member"
ROLE_PARTNER: Final[str] = "partner"
ROLE_MODERATOR: Final[str] = "moderator"
ROLE_ADMIN: Final[str] = "admin"

ALL_ROLES: Final[frozenset[str]] = frozenset({ROLE_MEMBER, ROLE_PARTNER, ROLE_MODERATOR, ROLE_ADMIN})
# Roles allowed to link a question to an earlier duplicate.
DUPLICATE_REVIEWER_ROLES: Final[frozenset[str]] = frozenset(
    {ROLE_PARTNER, ROLE_MODERATOR, ROLE_ADMIN}
)
MODERATOR_ROLES: Final[frozenset[str]] = frozenset({ROLE_MODERATOR, ROLE_ADMIN})

# bcrypt only considers the first 72 bytes of a password.
MAX_PASSWORD_BYTES: Final[int] = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2PasswordBearer only extracts the Bearer token from the Authorization header.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError("Password must not exceed 72 bytes when UTF-8 encoded.")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError("Password must not exceed 72 bytes when UTF-8 encoded.")
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any] | None:
    """Verify and decode a JWT token. Expired or tampered tokens return None."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def has_role(role: str | None, allowed: frozenset[str]) -> bool:
    return role is not None and role in allowed
