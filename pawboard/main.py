from __future__ import annotations

import logging
import sys
import types
from collections.abc import Callable, Mapping
from importlib.metadata import PackageNotFoundError, version
from typing import Any, NoReturn, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ExceptionHandler

from pawboard.api.router import router as api_router
from pawboard.core.config import InvalidSettingsError, MissingRequiredSettingsError
from pawboard.core.errors import (
    http_exception_handler,
    rate_limit_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
)
from pawboard.core.lifespan import lifespan
from pawboard.core.logging import configure_logging
from pawboard.core.policy import ScoringPolicy
from pawboard.core.rate_limit import limiter
from pawboard.services.auth_service import auth_service_factory_provider
from pawboard.services.moderation_service import moderation_service_factory_provider
from pawboard.services.question_service import question_service_factory_provider

PACKAGE_NAME = "pawboard-api"
FALLBACK_VERSION = "0.1.0"


def _exit_with_settings_errors(heading: str, lines: list[str], hint: str) -> NoReturn:
    print(f"ERROR: {heading}:", file=sys.stderr)
    for line in lines:
        print(f"  - {line}", file=sys.stderr)
    print(f"\nPlease {hint} in your .env file (see env.example for reference)", file=sys.stderr)
    sys.exit(1)


try:
    from pawboard.core.config import settings
except MissingRequiredSettingsError as e:
    _exit_with_settings_errors(
        "Missing required environment variables", e.missing_fields, "set these"
    )
except InvalidSettingsError as e:
    _exit_with_settings_errors(
        "Invalid environment variable values",
        [f"{field}: {message}" for field, message in e.invalid_fields],
        "update these",
    )

_EXCEPTION_HANDLERS: tuple[tuple[type[Exception], Callable[..., Any]], ...] = (
    (StarletteHTTPException, http_exception_handler),
    (RequestValidationError, request_validation_exception_handler),
    (RateLimitExceeded, rate_limit_exception_handler),
    (Exception, unhandled_exception_handler),
)


def _api_version() -> str:
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        logging.warning(
            "%s package not found, using fallback version %s", PACKAGE_NAME, FALLBACK_VERSION
        )
        return FALLBACK_VERSION


def build_service_registry(policy: ScoringPolicy) -> Mapping[str, Callable[..., Any]]:
    """Session-scoped service factories, resolved per request by the unit of work."""
    return types.MappingProxyType(
        {
            "auth_service": auth_service_factory_provider(),
            "question_service": question_service_factory_provider(policy),
            "moderation_service": moderation_service_factory_provider(policy),
        }
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=_api_version(),
        debug=settings.environment == "local",
        lifespan=lifespan,
    )
    for exc_class, handler in _EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, cast(ExceptionHandler, handler))
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.include_router(api_router, prefix="/api")
    app.state.services = build_service_registry(settings.scoring)
    return app


app = create_app()
