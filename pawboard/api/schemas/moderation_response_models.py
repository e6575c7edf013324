"""Response models for moderation API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from pawboard.core.schema_base import CamelModel
from pawboard.scoring.schemas import AutoAction, Recommendation


class ProcessResponse(CamelModel):
    action: Recommendation
    message: str
    content_id: str
    reasons: list[str] = Field(default_factory=list)
    confidence: float
    auto_actions: list[AutoAction] = Field(default_factory=list)
    processing_time: float
    queue_position: int | None = None
    estimated_review_time: str | None = None
    previous_action: str | None = None


class BlockedContentDetails(CamelModel):
    reason: str
    confidence: float
    auto_actions: list[AutoAction] = Field(default_factory=list)
    can_appeal: bool = True


class FeedbackResponse(CamelModel):
    message: str
    content_id: str
    original_action: str | None = None
    actual_action: str
    was_accurate: bool


class QueueItemResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content_type: str
    content_id: str
    queue_type: str
    priority: int
    status: str
    added_reason: str
    added_by: str
    added_at: datetime


class DecisionLogEntry(CamelModel):
    key: str
    decision: dict[str, Any]
    updated_at: datetime | None = None
