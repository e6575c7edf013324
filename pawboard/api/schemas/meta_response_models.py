"""Response models for service metadata endpoints."""

from __future__ import annotations

from pawboard.core.schema_base import CamelModel


class HealthResponse(CamelModel):
    status: str
    environment: str
    version: str
