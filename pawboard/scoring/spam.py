from __future__ import annotations

from pawboard.core.policy import ClassifierPolicy
from pawboard.scoring.patterns import (
    EXCESSIVE_KEYWORD_COUNT,
    EXCESSIVE_KEYWORD_SCORE,
    PROMOTIONAL_WORDS,
    SENTENCE_SPLIT_PATTERN,
    SPAM_KEYWORD_SCORE,
    SPAM_KEYWORDS,
    SUSPICIOUS_PATTERN_CAP,
    SUSPICIOUS_PATTERNS,
    URL_PATTERN,
)
from pawboard.scoring.schemas import SpamAnalysis, SpamSignals

# Number of distinct signals that must agree before confidence reaches 1.0.
SIGNALS_FOR_FULL_CONFIDENCE = 4


def _sentences(text: str) -> list[str]:
    return [sentence for sentence in SENTENCE_SPLIT_PATTERN.split(text) if sentence.strip()]


def language_quality(text: str, words: list[str]) -> float:
    """Rough 0-1 proxy for how much the text reads like written prose."""
    if not words:
        return 1.0

    quality = 1.0
    stripped = text.strip()
    avg_words_per_sentence = len(words) / max(len(_sentences(text)), 1)
    if avg_words_per_sentence < 2:
        quality -= 0.3
    if avg_words_per_sentence > 50:
        quality -= 0.2

    if not stripped[:1].isupper() and len(stripped) > 10:
        quality -= 0.2
    if stripped[-1:] not in {".", "!", "?"} and len(stripped) > 20:
        quality -= 0.1

    unique_ratio = len({word.lower() for word in words}) / len(words)
    if unique_ratio < 0.6:
        quality -= 0.3

    return max(0.0, quality)


def analyze_spam(content: str | None, policy: ClassifierPolicy | None = None) -> SpamAnalysis:
    """Score promotional/spam likelihood on a 0-100 scale."""
    policy = policy or ClassifierPolicy()
    text = content or ""
    normalized = text.lower().strip()
    words = normalized.split()
    word_count = len(words)
    score = 0.0
    flags: list[str] = []

    keyword_matches = list(
        dict.fromkeys(
            keyword
            for keywords in SPAM_KEYWORDS.values()
            for keyword in keywords
            if keyword in normalized
        )
    )
    score += len(keyword_matches) * SPAM_KEYWORD_SCORE
    if keyword_matches:
        flags.append("spam_keywords")
    if len(keyword_matches) > EXCESSIVE_KEYWORD_COUNT:
        score += EXCESSIVE_KEYWORD_SCORE
        flags.append("excessive_spam_keywords")

    repetitive_score = 0
    for suspicious in SUSPICIOUS_PATTERNS:
        count = sum(1 for _ in suspicious.pattern.finditer(text))
        if count:
            pattern_score = int(min(count * suspicious.weight, SUSPICIOUS_PATTERN_CAP))
            score += pattern_score
            repetitive_score += pattern_score
            flags.append(suspicious.name)

    if word_count < 5 and (keyword_matches or repetitive_score > 0):
        score += 30
        flags.append("short_promotional")

    if len(_sentences(text)) == 1 and word_count > 25:
        score += 20
        flags.append("run_on_sentence")

    quality = language_quality(text, text.split())
    if quality < 0.4:
        score += 15
        flags.append("poor_language_quality")

    caps_ratio = sum(1 for char in text if char.isupper()) / len(text) if text else 0.0
    if caps_ratio > 0.3:
        score += min(caps_ratio * 50, 30)
        flags.append("excessive_capitalization")

    url_count = len(URL_PATTERN.findall(text))
    if url_count > 1:
        score += url_count * 15
        flags.append("multiple_links")

    promotional_count = sum(1 for word in PROMOTIONAL_WORDS if word in normalized)
    promotional_score = 0
    if promotional_count >= 3:
        promotional_score = min(promotional_count * 8, 40)
        score += promotional_score
        flags.append("promotional_content")

    final_score = min(round(score), 100)
    confidence = min(len(set(flags)) / SIGNALS_FOR_FULL_CONFIDENCE, 1.0) if final_score else 0.0

    return SpamAnalysis(
        spam_score=final_score,
        is_spam=final_score > policy.spam_threshold,
        confidence=round(confidence, 2),
        flags=flags,
        analysis=SpamSignals(
            keyword_matches=keyword_matches,
            url_count=url_count,
            caps_ratio=round(caps_ratio, 2),
            word_count=word_count,
            language_quality=round(quality, 2),
            repetitive_score=repetitive_score,
            promotional_score=promotional_score,
        ),
    )
