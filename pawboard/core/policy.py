"""Tunable constants for the duplicate, moderation and intent scorers."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

# Tolerance for float weights that must add up to 1.0.
WEIGHT_SUM_TOLERANCE = 1e-6


class DuplicatePolicy(BaseModel):
    """Weights and cut-offs for the Jaccard duplicate scorer."""

    title_weight: float = Field(0.7, ge=0.0, le=1.0)
    content_weight: float = Field(0.3, ge=0.0, le=1.0)
    text_weight: float = Field(0.8, ge=0.0, le=1.0)
    tag_weight: float = Field(0.2, ge=0.0, le=1.0)
    phrase_boost: float = Field(0.2, ge=0.0, le=1.0)
    min_similarity: float = Field(0.3, ge=0.0, le=1.0)
    duplicate_threshold: float = Field(0.7, ge=0.0, le=1.0)
    max_results: int = Field(5, ge=1)
    candidate_pool_limit: int = Field(100, ge=1)

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> DuplicatePolicy:
        if abs(self.title_weight + self.content_weight - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError("Duplicate title and content weights must sum to 1.0.")
        if abs(self.text_weight + self.tag_weight - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError("Duplicate text and tag weights must sum to 1.0.")
        return self


class ModerationThresholds(BaseModel):
    """Score cut-offs that turn sub-scores into a recommendation.

    Spam and toxicity trigger at or above the value; quality triggers at or below it.
    """

    spam_block: int = 85
    spam_review: int = 70
    spam_flag: int = 50
    toxicity_block: int = 80
    toxicity_review: int = 60
    toxicity_flag: int = 40
    quality_review: int = 25
    quality_flag: int = 40


class ClassifierPolicy(BaseModel):
    spam_threshold: int = 50
    toxicity_threshold: int = 30
    severity_critical: int = 70
    severity_high: int = 50
    severity_medium: int = 25


class IntentPolicy(BaseModel):
    question_threshold: float = 0.2
    multi_indicator_boost: float = 1.15
    exclusion_weight: float = 0.3
    max_indicators: int = 3


class ScoringPolicy(BaseModel):
    duplicate: DuplicatePolicy = Field(default_factory=DuplicatePolicy)
    moderation: ModerationThresholds = Field(default_factory=ModerationThresholds)
    classifier: ClassifierPolicy = Field(default_factory=ClassifierPolicy)
    intent: IntentPolicy = Field(default_factory=IntentPolicy)


DEFAULT_POLICY = ScoringPolicy()
