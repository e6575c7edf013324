"""Request models for community API endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator

from pawboard.core.schema_base import CamelModel

DuplicateMarkAction = Literal["mark_duplicate", "not_duplicate"]


class CreateQuestionRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1, max_length=10_000)
    category: str = Field("general", min_length=1, max_length=64)
    tags: list[str] = Field(default_factory=list, max_length=10)


class DuplicateCheckRequest(CamelModel):
    """A draft question to compare against existing active questions."""

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1, max_length=10_000)
    category: str | None = Field(None, max_length=64)
    tags: list[str] = Field(default_factory=list, max_length=10)


class DuplicateMarkRequest(CamelModel):
    question_id: int
    duplicate_of_id: int | None = None
    action: DuplicateMarkAction

    @model_validator(mode="after")
    def duplicate_target_required(self) -> DuplicateMarkRequest:
        if self.action == "mark_duplicate" and self.duplicate_of_id is None:
            raise ValueError("duplicateOfId is required to mark a duplicate")
        return self


class QuestionQualityRequest(CamelModel):
    title: str = Field("", max_length=300)
    content: str = Field("", max_length=10_000)
