from __future__ import annotations

import re

from pawboard.core.policy import ClassifierPolicy
from pawboard.scoring.patterns import TOXIC_CATEGORIES, ToxicCategory
from pawboard.scoring.schemas import Severity, ToxicityAnalysis, ToxicityCategories

_KEYWORD_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    category.name: tuple(
        re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE) for keyword in category.keywords
    )
    for category in TOXIC_CATEGORIES
}


def _category_score(category: ToxicCategory, text: str) -> int:
    keyword_hits = sum(1 for pattern in _KEYWORD_PATTERNS[category.name] if pattern.search(text))
    pattern_hits = sum(len(pattern.findall(text)) for pattern in category.patterns)
    return keyword_hits * category.keyword_weight + pattern_hits * category.pattern_weight


def severity_for(max_category_score: int, policy: ClassifierPolicy | None = None) -> Severity:
    policy = policy or ClassifierPolicy()
    if max_category_score > policy.severity_critical:
        return Severity.CRITICAL
    if max_category_score > policy.severity_high:
        return Severity.HIGH
    if max_category_score > policy.severity_medium:
        return Severity.MEDIUM
    return Severity.LOW


def analyze_toxicity(content: str | None, policy: ClassifierPolicy | None = None) -> ToxicityAnalysis:
    """Score hostile or harmful language across the toxic categories."""
    policy = policy or ClassifierPolicy()
    text = content or ""
    raw_scores = {category.name: _category_score(category, text) for category in TOXIC_CATEGORIES}
    flags = [name for name, score in raw_scores.items() if score > 0]
    capped = {name: min(score, 100) for name, score in raw_scores.items()}

    toxicity_score = min(sum(raw_scores.values()), 100)
    return ToxicityAnalysis(
        toxicity_score=toxicity_score,
        is_toxic=toxicity_score > policy.toxicity_threshold,
        severity=severity_for(max(capped.values(), default=0), policy),
        flags=flags,
        categories=ToxicityCategories(**capped),
    )
