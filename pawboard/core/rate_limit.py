"""Request rate limits.

Authenticated calls are counted per user so a member cannot dodge a limit by switching
networks; anonymous calls fall back to the client address.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final, ParamSpec, TypeVar, cast

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from pawboard.core.auth import verify_token
from pawboard.core.config import settings

DEFAULT_RATE_LIMIT: Final[str] = "120/minute"
HEALTH_RATE_LIMIT: Final[str] = "300/minute"

AUTH_REGISTER_RATE_LIMIT: Final[str] = "5/minute"
AUTH_LOGIN_RATE_LIMIT: Final[str] = "10/minute"
AUTH_DELETE_RATE_LIMIT: Final[str] = "2/minute"

# Posting and duplicate checks hit the database; draft scoring is pure computation.
QUESTION_CREATE_RATE_LIMIT: Final[str] = "20/minute"
DUPLICATE_CHECK_RATE_LIMIT: Final[str] = "30/minute"
QUESTION_QUALITY_RATE_LIMIT: Final[str] = "60/minute"

MODERATION_ANALYZE_RATE_LIMIT: Final[str] = "60/minute"
MODERATION_PROCESS_RATE_LIMIT: Final[str] = "30/minute"

P = ParamSpec("P")
R = TypeVar("R")
KeyFunc = Callable[[Request], str]


def _token_subject(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    payload = verify_token(token)
    subject = payload.get("sub") if payload else None
    return subject if isinstance(subject, str) and subject else None


def rate_limit_ip_key(request: Request) -> str:
    return f"ip:{get_remote_address(request)}"


def rate_limit_user_or_ip_key(request: Request) -> str:
    subject = _token_subject(request)
    if subject is not None:
        return f"user:{subject}"
    return rate_limit_ip_key(request)


limiter = Limiter(
    key_func=rate_limit_user_or_ip_key,
    default_limits=[DEFAULT_RATE_LIMIT],
    storage_uri=settings.rate_limit_storage_url,
    in_memory_fallback_enabled=True,
    in_memory_fallback=[DEFAULT_RATE_LIMIT],
)


def limit(
    limit_value: str, *, key_func: KeyFunc | None = None
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Typed wrapper for SlowAPI's limit decorator.

    The decorated endpoint must accept ``request: Request``.
    """
    decorator = limiter.limit(limit_value, key_func=key_func)
    return cast(Callable[[Callable[P, R]], Callable[P, R]], decorator)
