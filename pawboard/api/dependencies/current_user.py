"""Bearer-token authentication and role gates for route handlers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status

from pawboard.api.dependencies.unit_of_work import UnitOfWork, get_uow
from pawboard.core.auth import has_role, oauth2_scheme, verify_token
from pawboard.core.errors import build_http_error
from pawboard.db.models.user import User


def _invalid_credentials() -> HTTPException:
    return build_http_error(
        status_code=status.HTTP_401_UNAUTHORIZED,
        error="unauthorized",
        message="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_id_from_token(token: str) -> int | None:
    payload = verify_token(token)
    subject = payload.get("sub") if payload else None
    if not isinstance(subject, str) or not subject.isdigit():
        return None
    return int(subject)


async def get_current_user(
    token: str = Depends(oauth2_scheme), uow: UnitOfWork = Depends(get_uow)
) -> User:
    """Resolve the token's subject to a live account.

    The role is read from the database row, not the token, so a demotion takes
    effect on the next request.
    """
    user_id = _user_id_from_token(token)
    user = await uow.auth_service.get_user_by_id(user_id) if user_id is not None else None
    if user is None:
        raise _invalid_credentials()
    return user


def ensure_role(user: User, allowed: frozenset[str], message: str) -> None:
    """Raise 403 unless the user holds one of the allowed roles."""
    if has_role(user.role, allowed):
        return
    raise build_http_error(
        status_code=status.HTTP_403_FORBIDDEN,
        error="forbidden",
        message=message,
    )


def require_roles(
    allowed: frozenset[str], message: str = "Insufficient permissions"
) -> Callable[..., Awaitable[User]]:
    """Dependency factory for routes closed to everyone outside ``allowed``."""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        ensure_role(current_user, allowed, message)
        return current_user

    return dependency
