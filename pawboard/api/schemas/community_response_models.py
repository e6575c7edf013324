"""Response models for community API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from pawboard.core.schema_base import CamelModel
from pawboard.scoring.schemas import IntentResult, Recommendation


class QuestionResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    content: str
    category: str
    status: str
    duplicate_of_id: int | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime


class CreateQuestionResponse(CamelModel):
    question: QuestionResponse
    recommendation: Recommendation
    flags: list[str] = Field(default_factory=list)


class SimilarQuestion(CamelModel):
    question: QuestionResponse
    title_similarity: float
    content_similarity: float
    overall_similarity: float


class DuplicateCheckResponse(CamelModel):
    similar_questions: list[SimilarQuestion] = Field(default_factory=list)
    likely_duplicate: bool
    duplicate_threshold: float
    recommendations: list[str] = Field(default_factory=list)


class DuplicateMarkResponse(CamelModel):
    message: str
    question: QuestionResponse


class QuestionQualityResponse(CamelModel):
    score: int
    suggestions: list[str] = Field(default_factory=list)
    intent: IntentResult
