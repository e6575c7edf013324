from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from pawboard.api.dependencies import UnitOfWork, get_current_user, get_uow
from pawboard.api.openapi_responses import (
    ErrorExample,
    error_responses,
    rate_limited_response,
    unauthorized_response,
)
from pawboard.api.schemas import (
    AccessTokenResponse,
    DeleteUserResponse,
    LoginUserRequest,
    RegisterUserRequest,
    UserResponse,
)
from pawboard.core.auth import create_access_token
from pawboard.core.errors import http_error_from_service
from pawboard.core.rate_limit import (
    AUTH_DELETE_RATE_LIMIT,
    AUTH_LOGIN_RATE_LIMIT,
    AUTH_REGISTER_RATE_LIMIT,
    limit,
    rate_limit_ip_key,
    rate_limit_user_or_ip_key,
)
from pawboard.db.models.user import User
from pawboard.services.auth_service import AuthenticationError

router = APIRouter()

_PASSWORD_TOO_LONG = ErrorExample(
    status_code=status.HTTP_400_BAD_REQUEST,
    error="password_too_long",
    message="Password must not exceed 72 bytes when UTF-8 encoded",
    description="Invalid password input",
    summary="Password too long",
)


@router.post(
    "/register",
    summary="Register user",
    description="Create a new member account with email and password.",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **error_responses(
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="user_exists",
                message="Email already registered",
                description="Email already registered",
                summary="User already exists",
            ),
            _PASSWORD_TOO_LONG,
        ),
        **rate_limited_response(),
    },
)
@limit(AUTH_REGISTER_RATE_LIMIT, key_func=rate_limit_ip_key)
async def register(
    request: Request,
    user_data: RegisterUserRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> UserResponse:
    """Register a new user."""
    try:
        new_user = await uow.auth_service.register_user(user_data.email, user_data.password)
    except AuthenticationError as e:
        raise http_error_from_service(e) from e
    return UserResponse.model_validate(new_user)


@router.post(
    "/login",
    summary="Log in",
    description="Authenticate credentials and return a bearer access token.",
    response_model=AccessTokenResponse,
    responses={
        **error_responses(
            ErrorExample(
                status_code=status.HTTP_401_UNAUTHORIZED,
                error="invalid_credentials",
                message="Incorrect email or password",
                description="Invalid credentials",
                summary="Invalid email or password",
            ),
            _PASSWORD_TOO_LONG,
        ),
        **rate_limited_response(),
    },
)
@limit(AUTH_LOGIN_RATE_LIMIT, key_func=rate_limit_ip_key)
async def login(
    request: Request,
    credentials: LoginUserRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> AccessTokenResponse:
    """Authenticate user and return JWT token."""
    try:
        user = await uow.auth_service.authenticate_user(credentials.email, credentials.password)
    except AuthenticationError as e:
        headers = (
            {"WWW-Authenticate": "Bearer"}
            if e.status_code == status.HTTP_401_UNAUTHORIZED
            else None
        )
        raise http_error_from_service(e, headers=headers) from e

    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return AccessTokenResponse(access_token=access_token)


@router.get(
    "/me",
    summary="Get current user",
    description="Return the user for the provided bearer token.",
    response_model=UserResponse,
    responses={**unauthorized_response(), **rate_limited_response()},
)
async def get_me(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Get current authenticated user information."""
    return UserResponse.model_validate(current_user)


@router.delete(
    "/me",
    summary="Delete current user",
    description="Delete the current user and the questions they posted.",
    response_model=DeleteUserResponse,
    responses={**unauthorized_response(), **rate_limited_response()},
)
@limit(AUTH_DELETE_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def delete_me(
    request: Request,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> DeleteUserResponse:
    """Delete the current authenticated user and all associated data."""
    deleted_id = await uow.auth_service.delete_user(current_user.id)
    return DeleteUserResponse(deleted_user_id=deleted_id)
