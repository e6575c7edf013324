"""Lexical duplicate detection for community questions.

Similarity is plain word-set overlap: no stemming, synonyms or language detection,
so paraphrases with different vocabulary are not caught.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field

from pawboard.core.policy import DuplicatePolicy
from pawboard.scoring.schemas import DuplicateCheckResult, RankedCandidate, SimilarityScore

logger = logging.getLogger(__name__)

_PHRASE_SPLIT_PATTERN = re.compile(r"[.!?]")

DUPLICATE_RECOMMENDATIONS = [
    "Consider reviewing similar questions before posting",
    "You might find your answer in existing discussions",
    "If your question is unique, please explain how it differs",
]
UNIQUE_RECOMMENDATIONS = [
    "Your question appears to be unique",
    "Consider adding relevant tags to help others find it",
]


@dataclass(frozen=True)
class SimilarityInput:
    """The text fields of a question that take part in duplicate scoring."""

    title: str = ""
    content: str = ""
    tags: Sequence[str] = field(default_factory=tuple)
    key: Hashable | None = None


def tokenize(text: str | None) -> set[str]:
    """Lowercase, trim and split on whitespace into a set of words."""
    return set((text or "").lower().strip().split())


def jaccard(first: set[str], second: set[str]) -> float:
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


def _phrases(title: str) -> list[str]:
    return [phrase.strip() for phrase in _PHRASE_SPLIT_PATTERN.split(title.lower()) if phrase.strip()]


def _has_phrase_overlap(first: str, second: str) -> bool:
    second_phrases = _phrases(second)
    for phrase in _phrases(first):
        for other in second_phrases:
            if phrase in other or other in phrase:
                return True
    return False


def title_similarity(first: str | None, second: str | None, phrase_boost: float = 0.2) -> float:
    """Jaccard of the title word sets, boosted when a whole phrase is shared."""
    first, second = first or "", second or ""
    score = jaccard(tokenize(first), tokenize(second))
    if _has_phrase_overlap(first, second):
        score += phrase_boost
    return min(1.0, score)


def content_similarity(first: str | None, second: str | None) -> float:
    return min(1.0, jaccard(tokenize(first), tokenize(second)))


def tag_similarity(first: Iterable[str] | None, second: Iterable[str] | None) -> float:
    first_tags, second_tags = set(first or ()), set(second or ())
    if not first_tags or not second_tags:
        return 0.0
    return min(1.0, len(first_tags & second_tags) / max(len(first_tags), len(second_tags)))


def score_candidate(
    candidate: SimilarityInput,
    existing: SimilarityInput,
    policy: DuplicatePolicy | None = None,
) -> SimilarityScore:
    policy = policy or DuplicatePolicy()
    title = title_similarity(candidate.title, existing.title, policy.phrase_boost)
    content = content_similarity(candidate.content, existing.content)
    tags = tag_similarity(candidate.tags, existing.tags)
    text = policy.title_weight * title + policy.content_weight * content
    overall = min(1.0, policy.text_weight * text + policy.tag_weight * tags)
    return SimilarityScore(
        title_similarity=title,
        content_similarity=content,
        tag_similarity=tags,
        overall_similarity=overall,
    )


def is_likely_duplicate(overall_similarity: float, policy: DuplicatePolicy | None = None) -> bool:
    policy = policy or DuplicatePolicy()
    return overall_similarity > policy.duplicate_threshold


def rank_similar(
    candidate: SimilarityInput,
    pool: Iterable[SimilarityInput],
    policy: DuplicatePolicy | None = None,
) -> DuplicateCheckResult:
    """Score ``candidate`` against ``pool`` and keep the closest matches.

    Matches must score strictly above ``min_similarity``; the best ``max_results`` are
    returned, highest first. Ties keep pool order.
    """
    policy = policy or DuplicatePolicy()
    ranked: list[RankedCandidate] = []
    for existing in pool:
        score = score_candidate(candidate, existing, policy)
        if score.overall_similarity > policy.min_similarity:
            ranked.append(RankedCandidate(candidate_id=existing.key, score=score))

    ranked.sort(key=lambda item: item.score.overall_similarity, reverse=True)
    top = ranked[: policy.max_results]
    likely = bool(top) and is_likely_duplicate(top[0].score.overall_similarity, policy)
    logger.debug(
        "Ranked duplicate candidates",
        extra={"matches": len(ranked), "returned": len(top), "likely_duplicate": likely},
    )
    return DuplicateCheckResult(
        similar=top,
        likely_duplicate=likely,
        duplicate_threshold=policy.duplicate_threshold,
    )


def recommendations_for(likely_duplicate: bool) -> list[str]:
    return list(DUPLICATE_RECOMMENDATIONS if likely_duplicate else UNIQUE_RECOMMENDATIONS)
