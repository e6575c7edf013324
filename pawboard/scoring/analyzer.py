from __future__ import annotations

import logging
import time

from pawboard.core.policy import DEFAULT_POLICY, ModerationThresholds, ScoringPolicy
from pawboard.scoring.quality import analyze_quality
from pawboard.scoring.schemas import ComprehensiveAnalysis, Recommendation
from pawboard.scoring.spam import analyze_spam
from pawboard.scoring.toxicity import analyze_toxicity

logger = logging.getLogger(__name__)


def recommend(
    spam_score: int,
    toxicity_score: int,
    quality_score: int,
    thresholds: ModerationThresholds | None = None,
) -> Recommendation:
    """Map sub-scores to the single moderation action.

    Buckets are checked from most to least severe, so raising spam or toxicity can only
    keep or escalate the result.
    """
    thresholds = thresholds or ModerationThresholds()
    if spam_score >= thresholds.spam_block or toxicity_score >= thresholds.toxicity_block:
        return Recommendation.BLOCK
    if (
        spam_score >= thresholds.spam_review
        or toxicity_score >= thresholds.toxicity_review
        or quality_score <= thresholds.quality_review
    ):
        return Recommendation.REVIEW
    if (
        spam_score >= thresholds.spam_flag
        or toxicity_score >= thresholds.toxicity_flag
        or quality_score <= thresholds.quality_flag
    ):
        return Recommendation.FLAG
    return Recommendation.APPROVE


def overall_score(spam_score: int, quality_score: int, toxicity_score: int) -> int:
    score = 0.4 * (100 - spam_score) + 0.35 * quality_score + 0.25 * (100 - toxicity_score)
    return max(0, min(100, round(score)))


class ContentAnalyzer:
    """Runs the spam, quality and toxicity scorers and combines their verdicts."""

    def __init__(self, policy: ScoringPolicy | None = None) -> None:
        self.policy = policy or DEFAULT_POLICY

    def analyze(self, content: str | None) -> ComprehensiveAnalysis:
        started = time.perf_counter()
        spam = analyze_spam(content, self.policy.classifier)
        quality = analyze_quality(content)
        toxicity = analyze_toxicity(content, self.policy.classifier)
        recommendation = recommend(
            spam.spam_score,
            toxicity.toxicity_score,
            quality.quality_score,
            self.policy.moderation,
        )
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.debug(
            "Content analyzed",
            extra={
                "spam_score": spam.spam_score,
                "quality_score": quality.quality_score,
                "toxicity_score": toxicity.toxicity_score,
                "recommendation": recommendation.value,
            },
        )
        return ComprehensiveAnalysis(
            spam=spam,
            quality=quality,
            toxicity=toxicity,
            overall_score=overall_score(
                spam.spam_score, quality.quality_score, toxicity.toxicity_score
            ),
            recommendation=recommendation,
            processing_time=round(elapsed_ms, 2),
        )
