"""OpenAPI ``responses=`` builders for the shared error envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import status

from pawboard.core.errors import ErrorResponse

OpenApiResponses = dict[int | str, dict[str, Any]]


@dataclass(frozen=True)
class ErrorExample:
    status_code: int
    error: str
    message: str
    description: str
    summary: str | None = None
    details: Any | None = None
    example_name: str | None = None

    def payload(self) -> dict[str, Any]:
        return ErrorResponse(
            error=self.error, message=self.message, details=self.details
        ).model_dump(exclude_none=True)


def error_responses(*examples: ErrorExample) -> OpenApiResponses:
    """Group examples by status code; the first example names the response."""
    responses: OpenApiResponses = {}
    for example in examples:
        response = responses.setdefault(
            example.status_code,
            {
                "model": ErrorResponse,
                "description": example.description,
                "content": {"application/json": {"examples": {}}},
            },
        )
        named = response["content"]["application/json"]["examples"]
        named[example.example_name or example.error] = {
            "summary": example.summary or example.description,
            "value": example.payload(),
        }
    return responses


def rate_limited_response(description: str = "Rate limit exceeded") -> OpenApiResponses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="rate_limited",
            message="Too many requests",
            description=description,
        )
    )


def unauthorized_response(description: str = "Missing or invalid token") -> OpenApiResponses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="unauthorized",
            message="Could not validate credentials",
            description=description,
        )
    )


def forbidden_response(
    message: str = "Insufficient permissions",
    description: str = "Caller lacks the required role",
) -> OpenApiResponses:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_403_FORBIDDEN,
            error="forbidden",
            message=message,
            description=description,
        )
    )


def validation_error_example(field: str, description: str = "Invalid request") -> ErrorExample:
    return ErrorExample(
        status_code=status.HTTP_400_BAD_REQUEST,
        error="validation_error",
        message="Request validation failed",
        description=description,
        details=[{"loc": ["body", field], "msg": "Field required", "type": "missing"}],
    )
