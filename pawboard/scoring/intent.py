"""Question intent detection for English and Hinglish community posts.

A literal question mark is always a question. Otherwise weighted regex families vote,
non-question phrasing (thanks, announcements, celebrations, narrative) votes against,
and the net score is normalised into a confidence.
"""

from __future__ import annotations

from pawboard.core.policy import IntentPolicy
from pawboard.scoring.patterns import CONTEXT_INDICATORS, EXCLUSION_PATTERNS, INTENT_PATTERNS
from pawboard.scoring.schemas import IntentResult, QuestionQuality

EXPLICIT_QUESTION = "explicit_question"
UNKNOWN_INTENT = "unknown"


def _normalise(score: float) -> float:
    if score <= 0:
        return 0.0
    if score >= 1.5:
        return min(score / 2.5, 1.0)
    if score >= 0.8:
        return score / 2.0
    return score / 3.0


def detect_question_intent(
    title: str | None,
    body: str | None,
    policy: IntentPolicy | None = None,
) -> IntentResult:
    policy = policy or IntentPolicy()
    text = f"{title or ''} {body or ''}".lower()

    if "?" in text:
        return IntentResult(
            is_question=True,
            confidence=1.0,
            type=EXPLICIT_QUESTION,
            indicators=["question mark"],
        )

    exclusion = sum(
        len(pattern.findall(text)) * policy.exclusion_weight for pattern in EXCLUSION_PATTERNS
    )

    total = 0.0
    indicators: list[str] = []
    detected_type = UNKNOWN_INTENT
    highest_weight = 0.0
    for family in INTENT_PATTERNS:
        matches = family.pattern.findall(text)
        if not matches:
            continue
        total += len(matches) * family.weight
        indicators.append(family.description)
        if family.weight > highest_weight:
            highest_weight = family.weight
            detected_type = family.type

    confidence = _normalise(max(0.0, total - exclusion))
    if len(indicators) > 1:
        confidence = min(confidence * policy.multi_indicator_boost, 1.0)

    return IntentResult(
        is_question=confidence > policy.question_threshold,
        confidence=round(confidence, 2),
        type=detected_type,
        indicators=indicators[: policy.max_indicators],
    )


def score_question_quality(
    title: str | None,
    body: str | None,
    policy: IntentPolicy | None = None,
) -> QuestionQuality:
    """Writer-facing guidance for a draft question. Advisory only."""
    title = title or ""
    body = body or ""
    intent = detect_question_intent(title, body, policy)
    suggestions: list[str] = []
    score = 100

    if len(title) < 10:
        suggestions.append("Title is too short. Consider adding more details.")
        score -= 15
    if len(title) > 100:
        suggestions.append("Title is too long. Keep it concise and focused.")
        score -= 10

    if not intent.is_question:
        if intent.confidence < 0.3:
            suggestions.append("Consider clarifying what specific help or information you need.")
            score -= 8
    elif intent.confidence > 0.7:
        score += 5

    if len(body) < 20:
        suggestions.append("Add more details about your situation for better answers.")
        score -= 20
    if len(body) > 2000:
        suggestions.append("Consider breaking down your question into smaller, focused questions.")
        score -= 10

    lowered = body.lower()
    has_context = any(indicator in lowered for indicator in CONTEXT_INDICATORS)
    if not has_context and len(body) > 20:
        suggestions.append("Include relevant context (dog age, breed, duration of issue, etc.).")
        score -= 15

    return QuestionQuality(score=max(0, min(score, 100)), suggestions=suggestions, intent=intent)
