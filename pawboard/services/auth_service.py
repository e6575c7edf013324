"""User service layer - business logic for user operations."""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pawboard.core.auth import get_password_hash, verify_password
from pawboard.core.errors import ServiceError
from pawboard.db.models.user import User

logger = logging.getLogger(__name__)


class AuthenticationError(ServiceError):
    """Base error for authentication-related failures."""


class UserAlreadyExistsError(AuthenticationError):
    """Raised when attempting to register a user that already exists."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message, "user_exists")


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Incorrect email or password") -> None:
        super().__init__(message, "invalid_credentials")


class PasswordTooLongError(AuthenticationError):
    """Raised when password exceeds the maximum allowed length (72 bytes)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self, message: str = "Password must not exceed 72 bytes when UTF-8 encoded"
    ) -> None:
        super().__init__(message, "password_too_long")


def _is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg reports SQLSTATE 23505; sqlite says "UNIQUE constraint failed".
    error_str = str(exc.orig).lower()
    return "unique" in error_str or "duplicate" in error_str or "23505" in error_str


class AuthService:
    """Registration, login and account removal for community members."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def register_user(self, email: str, password: str) -> User:
        """Register a new user.

        Raises:
            UserAlreadyExistsError: If email is already registered
            PasswordTooLongError: If password exceeds 72 bytes when UTF-8 encoded
        """
        result = await self._session.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none() is not None:
            raise UserAlreadyExistsError()

        try:
            hashed_password = get_password_hash(password)
        except ValueError as e:
            raise PasswordTooLongError() from e

        user = User(email=email, hashed_password=hashed_password)
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise UserAlreadyExistsError() from e
            raise

        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate a user with email and password.

        Raises:
            InvalidCredentialsError: If email or password is incorrect
            PasswordTooLongError: If password exceeds 72 bytes when UTF-8 encoded
        """
        result = await self._session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            raise InvalidCredentialsError()

        try:
            password_valid = verify_password(password, user.hashed_password)
        except ValueError as e:
            raise PasswordTooLongError() from e

        if not password_valid:
            raise InvalidCredentialsError()
        return user

    async def get_user_by_id(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def delete_user(self, user_id: int) -> int:
        """Hard-delete a user. Owned questions go with it via CASCADE."""
        await self._session.execute(delete(User).where(User.id == user_id))
        logger.info("User deleted", extra={"user_id": user_id})
        return user_id


def auth_service_factory_provider() -> Callable[[AsyncSession], AuthService]:
    def factory(session: AsyncSession) -> AuthService:
        return AuthService(session)

    return factory
