"""Response models for auth API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict

from pawboard.core.schema_base import CamelModel


class AccessTokenResponse(CamelModel):
    """Bearer token; the role claim inside it is informational only."""

    access_token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str
    created_at: datetime | None = None


class DeleteUserResponse(CamelModel):
    deleted_user_id: int
