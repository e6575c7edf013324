"""Request models for moderation API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from pawboard.core.schema_base import CamelModel
from pawboard.scoring.schemas import Recommendation

ContentType = Literal["question", "answer", "comment", "forum_post", "story"]
ProcessAction = Literal["process", "feedback", "reprocess"]


class AnalyzeContentRequest(CamelModel):
    content: str = Field(..., min_length=1, max_length=20_000)
    content_type: ContentType
    content_id: str | None = Field(None, max_length=64)


class AutoProcessRequest(CamelModel):
    content: str = Field(..., min_length=1, max_length=20_000)
    content_type: ContentType
    content_id: str | None = Field(None, max_length=64)
    action: ProcessAction = "process"
    was_accurate: bool | None = None
    actual_action: Recommendation | None = None
    moderator_notes: str | None = Field(None, max_length=2_000)
