from __future__ import annotations

import re

from pawboard.scoring.patterns import (
    PET_CARE_KEYWORDS,
    SENTENCE_SPLIT_PATTERN,
    STOP_WORDS,
    TRANSITION_WORDS,
)
from pawboard.scoring.schemas import QualityAnalysis, QualityMetrics

_NON_LETTERS = re.compile(r"[^a-z]")
_VOWEL_GROUPS = re.compile(r"[aeiouy]+")
_WORD_PUNCTUATION = ".,!?;:'\"()[]"
_CONSONANTS = "bcdfghjklmnpqrstvwxz"


def estimate_syllables(word: str) -> int:
    clean = _NON_LETTERS.sub("", word.lower())
    if len(clean) <= 3:
        return 1
    count = len(_VOWEL_GROUPS.findall(clean))
    if clean.endswith("e") and count > 1:
        count -= 1
    if clean.endswith("le") and len(clean) > 2 and clean[-3] in _CONSONANTS:
        count += 1
    return max(1, count)


def readability(words: list[str], sentence_count: int) -> float:
    """Simplified Flesch reading ease, clamped to 0-100."""
    if not words:
        return 0.0
    avg_words_per_sentence = len(words) / max(sentence_count, 1)
    avg_syllables = sum(estimate_syllables(word) for word in words) / len(words)
    score = 120 - avg_words_per_sentence * 1.2 - avg_syllables * 35
    simple_ratio = sum(1 for word in words if len(word) <= 6) / len(words)
    score += simple_ratio * 20
    return max(0.0, min(100.0, score))


def coherence(text: str, sentences: list[str]) -> float:
    score = 0.7
    tokens = {word.strip(_WORD_PUNCTUATION) for word in text.lower().split()}
    transitions = len(tokens & TRANSITION_WORDS)
    if transitions:
        score += min(transitions * 0.1, 0.2)

    if len(sentences) > 1:
        sentence_words = [sentence.lower().split() for sentence in sentences]
        overlap = 0.0
        for previous, current in zip(sentence_words, sentence_words[1:]):
            previous_set = set(previous)
            shared = sum(1 for word in current if word in previous_set)
            overlap += shared / max(len(current), 1)
        score += overlap / (len(sentence_words) - 1) * 0.3

    return min(1.0, score)


def analyze_quality(content: str | None) -> QualityAnalysis:
    """Score how useful a post is likely to be, with writer-facing feedback."""
    text = content or ""
    words = text.split()
    sentences = [sentence for sentence in SENTENCE_SPLIT_PATTERN.split(text) if sentence.strip()]
    word_count = len(words)
    sentence_count = len(sentences)
    score = 100
    feedback: list[str] = []

    if word_count < 5:
        score -= 40
        feedback.append("Add more detail: content is too short for a meaningful discussion")
    elif word_count < 10:
        score -= 15
        feedback.append("Content could be more detailed")
    elif word_count > 500:
        score -= 10
        feedback.append("Content is very long - consider breaking it into sections")

    avg_words_per_sentence = word_count / max(sentence_count, 1)
    if avg_words_per_sentence < 3:
        score -= 25
        feedback.append("Sentences are too short and lack detail")
    elif avg_words_per_sentence > 40:
        score -= 20
        feedback.append("Sentences are too long and hard to read")

    question_marks = text.count("?")
    periods = text.count(".")
    exclamations = text.count("!")
    grammar_score = 100

    if exclamations > 3:
        score -= 15
        grammar_score -= 15
        feedback.append("Too many exclamation marks")

    if sentence_count > 1 and periods + question_marks + exclamations < sentence_count * 0.8:
        score -= 10
        grammar_score -= 20
        feedback.append("Missing proper sentence endings")

    meaningful = sum(
        1
        for word in words
        if len(word) > 3
        and word.strip(_WORD_PUNCTUATION).lower() not in STOP_WORDS
        and not word.isdigit()
    )
    meaningful_ratio = meaningful / word_count if word_count else 0.0
    if meaningful_ratio < 0.3:
        score -= 30
        feedback.append("Low content value - too many filler words")
    elif meaningful_ratio < 0.5:
        score -= 15
        feedback.append("Could include more specific, meaningful content")

    readability_score = readability(words, sentence_count)
    if readability_score < 40:
        score -= 20
        feedback.append("Difficult to read - consider simpler language")

    coherence_score = coherence(text, sentences)
    if coherence_score < 0.5:
        score -= 25
        feedback.append("Content lacks coherence - ideas are not well connected")

    lowered = text.lower()
    pet_keywords = sum(1 for keyword in PET_CARE_KEYWORDS if keyword in lowered)
    if pet_keywords:
        score += min(pet_keywords * 2, 10)

    return QualityAnalysis(
        quality_score=max(0, min(100, score)),
        readability_score=round(readability_score),
        feedback=feedback,
        metrics=QualityMetrics(
            word_count=word_count,
            sentence_count=sentence_count,
            avg_words_per_sentence=round(avg_words_per_sentence, 1),
            meaningful_ratio=round(meaningful_ratio, 2),
            grammar_score=max(0, grammar_score),
            coherence_score=round(coherence_score, 2),
        ),
    )
