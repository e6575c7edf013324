"""The ``{error, message, details?}`` envelope and the handlers that enforce it.

Every non-2xx body the API emits goes through :func:`error_json_response`, whether the
failure came from a route, a dependency, request validation, the rate limiter, or an
unexpected exception.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_429_TOO_MANY_REQUESTS,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)

# Fallback codes for errors raised without an explicit ``error`` value.
ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limited",
    500: "internal_error",
    503: "service_unavailable",
}


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Any | None = None


class ServiceError(Exception):
    """A domain failure with a stable machine-readable code.

    Subclasses pin ``status_code``; route handlers translate them with
    :func:`http_error_from_service`.
    """

    status_code: int = HTTP_400_BAD_REQUEST

    def __init__(self, message: str, error_code: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details


def _default_error_code(status_code: int) -> str:
    return ERROR_CODE_BY_STATUS.get(status_code, "error")


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _envelope(error: str, message: str, details: Any | None = None) -> dict[str, Any]:
    return ErrorResponse(error=error, message=message, details=details).model_dump(
        exclude_none=True
    )


def error_json_response(
    status_code: int,
    error: str,
    message: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=_envelope(error, message, details), headers=headers
    )


def build_http_error(
    status_code: int,
    error: str,
    message: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
) -> HTTPException:
    """An HTTPException whose detail is already a complete envelope."""
    return HTTPException(
        status_code=status_code, detail=_envelope(error, message, details), headers=headers
    )


def http_error_from_service(
    exc: ServiceError, headers: dict[str, str] | None = None
) -> HTTPException:
    return build_http_error(exc.status_code, exc.error_code, str(exc), exc.details, headers)


def _internal_error() -> JSONResponse:
    return error_json_response(
        HTTP_500_INTERNAL_SERVER_ERROR,
        _default_error_code(HTTP_500_INTERNAL_SERVER_ERROR),
        _reason_phrase(HTTP_500_INTERNAL_SERVER_ERROR),
    )


def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        return _internal_error()
    headers = getattr(exc, "headers", None)
    detail = exc.detail
    if isinstance(detail, dict) and {"error", "message"} <= detail.keys():
        envelope = ErrorResponse.model_validate(detail)
        return error_json_response(
            exc.status_code, envelope.error, envelope.message, envelope.details, headers
        )
    # Framework-raised errors (unknown route, wrong method) carry a plain string.
    return error_json_response(
        exc.status_code,
        _default_error_code(exc.status_code),
        str(detail) if detail else _reason_phrase(exc.status_code),
        headers=headers,
    )


def validation_error_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic errors trimmed to JSON-safe ``loc``/``msg``/``type`` triples."""
    return [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]


def request_validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        return _internal_error()
    return error_json_response(
        HTTP_400_BAD_REQUEST,
        "validation_error",
        "Request validation failed",
        validation_error_details(exc),
    )


def rate_limit_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_json_response(
        HTTP_429_TOO_MANY_REQUESTS,
        _default_error_code(HTTP_429_TOO_MANY_REQUESTS),
        "Too many requests",
        headers=getattr(exc, "headers", None),
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return _internal_error()
