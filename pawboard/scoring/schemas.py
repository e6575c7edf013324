from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from pawboard.core.schema_base import CamelModel


class Recommendation(StrEnum):
    APPROVE = "approve"
    FLAG = "flag"
    REVIEW = "review"
    BLOCK = "block"

    @property
    def severity_rank(self) -> int:
        return _RECOMMENDATION_RANK[self]


_RECOMMENDATION_RANK: dict[Recommendation, int] = {
    Recommendation.APPROVE: 0,
    Recommendation.FLAG: 1,
    Recommendation.REVIEW: 2,
    Recommendation.BLOCK: 3,
}


class Severity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SpamSignals(CamelModel):
    keyword_matches: list[str] = Field(default_factory=list)
    url_count: int = 0
    caps_ratio: float = 0.0
    word_count: int = 0
    language_quality: float = 0.0
    repetitive_score: int = 0
    promotional_score: int = 0


class SpamAnalysis(CamelModel):
    spam_score: int = Field(..., ge=0, le=100)
    is_spam: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    flags: list[str] = Field(default_factory=list)
    analysis: SpamSignals = Field(default_factory=SpamSignals)


class QualityMetrics(CamelModel):
    word_count: int = 0
    sentence_count: int = 0
    avg_words_per_sentence: float = 0.0
    meaningful_ratio: float = 0.0
    grammar_score: int = 0
    coherence_score: float = 0.0


class QualityAnalysis(CamelModel):
    quality_score: int = Field(..., ge=0, le=100)
    readability_score: int = Field(..., ge=0, le=100)
    feedback: list[str] = Field(default_factory=list)
    metrics: QualityMetrics = Field(default_factory=QualityMetrics)


class ToxicityCategories(CamelModel):
    harassment: int = 0
    threats: int = 0
    profanity: int = 0
    animal_abuse: int = 0
    misinformation: int = 0


class ToxicityAnalysis(CamelModel):
    toxicity_score: int = Field(..., ge=0, le=100)
    is_toxic: bool
    severity: Severity
    flags: list[str] = Field(default_factory=list)
    categories: ToxicityCategories = Field(default_factory=ToxicityCategories)


class ComprehensiveAnalysis(CamelModel):
    spam: SpamAnalysis
    quality: QualityAnalysis
    toxicity: ToxicityAnalysis
    overall_score: int = Field(..., ge=0, le=100)
    recommendation: Recommendation
    processing_time: float = Field(..., ge=0.0, description="Milliseconds spent scoring")

    @property
    def flags(self) -> list[str]:
        flags = [*self.spam.flags, *self.toxicity.flags]
        if self.quality.quality_score < 50:
            flags.append("low_quality")
        return flags


class IntentResult(CamelModel):
    is_question: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    type: str
    indicators: list[str] = Field(default_factory=list)


class QuestionQuality(CamelModel):
    score: int = Field(..., ge=0, le=100)
    suggestions: list[str] = Field(default_factory=list)
    intent: IntentResult


class SimilarityScore(CamelModel):
    title_similarity: float
    content_similarity: float
    tag_similarity: float
    overall_similarity: float


class RankedCandidate(CamelModel):
    candidate_id: Any
    score: SimilarityScore


class DuplicateCheckResult(CamelModel):
    similar: list[RankedCandidate] = Field(default_factory=list)
    likely_duplicate: bool = False
    duplicate_threshold: float


class AutoAction(CamelModel):
    type: str
    target: str
    reason: str


class ModerationDecision(CamelModel):
    action: Recommendation
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasons: list[str] = Field(default_factory=list)
    auto_actions: list[AutoAction] = Field(default_factory=list)
