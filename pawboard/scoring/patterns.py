"""Keyword lists and regex families used by the heuristic scorers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class WeightedPattern:
    name: str
    pattern: re.Pattern[str]
    weight: float


@dataclass(frozen=True)
class IntentPattern:
    pattern: re.Pattern[str]
    weight: float
    type: str
    description: str


@dataclass(frozen=True)
class ToxicCategory:
    name: str
    keywords: tuple[str, ...]
    patterns: tuple[re.Pattern[str], ...]
    keyword_weight: int
    pattern_weight: int


def _words(*words: str) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(word) for word in words)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


# Spam

SPAM_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "english": (
        "buy now", "click here", "limited offer", "guaranteed", "earn money",
        "work from home", "free gift", "act now", "special deal", "discount",
        "make money fast", "no experience needed", "urgent", "congratulations",
        "winner", "selected", "claim now", "risk free", "call now", "apply now",
    ),
    "hindi": (
        "paisa kamao", "ghar baithe kaam", "free mein", "jaldi karo", "offer",
        "discount mil raha", "click karo", "guarantee", "easy money", "kamao",
        "rupaye", "muft", "jeetna", "prize", "gift",
    ),
    "hinglish": (
        "paisa earn karo", "ghar se work", "free offer", "easy income",
        "click kar", "apply kar", "join kar", "money kamao",
    ),
}

SPAM_KEYWORD_SCORE: Final[int] = 15
EXCESSIVE_KEYWORD_COUNT: Final[int] = 3
EXCESSIVE_KEYWORD_SCORE: Final[int] = 25
SUSPICIOUS_PATTERN_CAP: Final[int] = 50

SUSPICIOUS_PATTERNS: Final[tuple[WeightedPattern, ...]] = (
    WeightedPattern("repeated_chars", re.compile(r"(.)\1{4,}"), 20),
    WeightedPattern("excessive_caps", re.compile(r"[A-Z]{5,}"), 15),
    WeightedPattern("long_numbers", re.compile(r"\d{11,}"), 25),
    WeightedPattern("excessive_symbols", re.compile(r"[!@#$%^&*]{3,}"), 10),
    WeightedPattern("multiple_urls", re.compile(r"https?://\S+"), 20),
    WeightedPattern("money_mentions", re.compile(r"\b\d+\s*(?:rs|rupees)\b|₹\s*\d+", re.I), 15),
    WeightedPattern("social_media_promo", _words("whatsapp", "telegram", "instagram"), 30),
    WeightedPattern("phone_numbers", re.compile(r"(?<!\d)(?:\+91[\s-]?)?[6-9]\d{9}(?!\d)"), 35),
    WeightedPattern(
        "email_addresses",
        re.compile(r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}", re.IGNORECASE),
        25,
    ),
)

URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"https?://\S+")
SENTENCE_SPLIT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[.!?]+")

PROMOTIONAL_WORDS: Final[tuple[str, ...]] = (
    "buy", "sell", "discount", "offer", "deal", "sale", "price", "cheap",
    "business", "service", "company", "website", "promotion", "advertisement",
)

# Quality

STOP_WORDS: Final[frozenset[str]] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "this", "that", "these", "those", "i", "you", "he",
        "she", "it", "we", "they", "is", "are", "was", "were", "be", "been",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "very", "really", "just", "only",
        "also", "even", "still", "well", "now", "then", "here", "there",
    }
)

TRANSITION_WORDS: Final[frozenset[str]] = frozenset(
    {
        "however", "therefore", "moreover", "furthermore", "additionally",
        "consequently", "meanwhile", "similarly", "likewise", "nevertheless",
        "also", "but", "and", "so", "because", "since", "although", "while",
    }
)

PET_CARE_KEYWORDS: Final[tuple[str, ...]] = (
    "dog", "puppy", "pet", "vet", "health", "feeding", "training", "breed",
    "vaccination", "grooming", "exercise", "behavior", "nutrition", "care",
)

# Toxicity

TOXIC_CATEGORIES: Final[tuple[ToxicCategory, ...]] = (
    ToxicCategory(
        name="harassment",
        keywords=(
            "stupid", "idiot", "dumb", "moron", "fool", "loser", "pathetic",
            "useless", "worthless", "disgusting",
        ),
        patterns=(
            re.compile(r"you\s+(?:are|r)\s+(?:stupid|dumb|an?\s+idiot)", re.I),
            re.compile(r"\bshut\s+up\b", re.I),
            re.compile(r"\bget\s+lost\b", re.I),
            re.compile(r"\bmind\s+your\s+(?:own\s+)?business\b", re.I),
        ),
        keyword_weight=15,
        pattern_weight=20,
    ),
    ToxicCategory(
        name="threats",
        keywords=("kill", "hurt", "harm", "attack", "violence", "threat"),
        patterns=(
            re.compile(r"\bi\s*(?:will|'ll)\s+(?:kill|hurt|harm)\b", re.I),
            re.compile(r"\byou\s+should\s+(?:die|suffer)\b", re.I),
            re.compile(r"\bwatch\s+your\s+back\b", re.I),
        ),
        keyword_weight=30,
        pattern_weight=40,
    ),
    ToxicCategory(
        name="animal_abuse",
        keywords=(
            "abuse", "cruel", "cruelty", "torture", "mistreat", "starve",
            "abandon", "kick", "beat",
        ),
        patterns=(
            re.compile(r"\b(?:beat|kick|hit)\s+(?:the|your|my|that)\s+(?:dog|puppy|cat|pet)\b", re.I),
            re.compile(r"\bdon'?t\s+feed\s+(?:it|him|her|them)\b", re.I),
            re.compile(r"\blet\s+(?:it|him|her|them)\s+starve\b", re.I),
            re.compile(r"\babandon\s+(?:the|your|my)\s+(?:dog|puppy|pet)\b", re.I),
        ),
        keyword_weight=30,
        pattern_weight=40,
    ),
    ToxicCategory(
        name="profanity",
        keywords=("damn", "hell", "crap", "bloody"),
        patterns=(
            re.compile(r"\bwhat\s+the\s+hell\b", re.I),
            re.compile(r"\bdamn\s+it\b", re.I),
        ),
        keyword_weight=10,
        pattern_weight=15,
    ),
    ToxicCategory(
        name="misinformation",
        keywords=("human medicine", "never vaccinate", "vaccines are poison"),
        patterns=(
            re.compile(r"\bchocolate\s+is\s+(?:safe|good|healthy)\b", re.I),
            re.compile(r"\bonions?\s+(?:are|is)\s+(?:safe|good|healthy)\b", re.I),
            re.compile(r"\bgrapes?\s+(?:are|is)\s+(?:safe|good|healthy)\b", re.I),
            re.compile(r"\bvaccines?\s+(?:are|is)\s+(?:poison|toxic|harmful)\b", re.I),
        ),
        keyword_weight=20,
        pattern_weight=30,
    ),
)

# Intent

INTENT_PATTERNS: Final[tuple[IntentPattern, ...]] = (
    IntentPattern(_words("what", "when", "where", "why", "how", "who", "which"),
                  0.9, "interrogative", "question word"),
    IntentPattern(_words("urgent", "emergency", "immediately", "asap", "critical", "serious"),
                  0.85, "urgent_request", "urgency indicator"),
    IntentPattern(_words("help", "advice", "suggest", "recommend", "tip", "tips", "guidance"),
                  0.8, "help_request", "help request"),
    IntentPattern(_words("should i", "can i", "will this", "is this", "would it", "could i"),
                  0.8, "seeking_guidance", "seeking guidance"),
    IntentPattern(_words("need", "want", "looking for", "seeking", "require"),
                  0.75, "need_statement", "need statement"),
    IntentPattern(_words("best", "better", "compare", "vs", "versus", "which is", "top",
                         "recommended"),
                  0.7, "comparison_request", "comparison query"),
    IntentPattern(_words("brand", "brands", "type", "types", "option", "options", "varieties",
                         "choices", "alternatives"),
                  0.6, "selection_query", "selection query"),
    IntentPattern(_words("near me", "nearby", "contact", "address", "location", "phone",
                         "clinic", "hospital"),
                  0.7, "location_query", "location query"),
    IntentPattern(_words("mumbai", "delhi", "bangalore", "bengaluru", "chennai", "pune",
                         "hyderabad", "ahmedabad", "kolkata", "gurgaon", "gurugram", "noida",
                         "in india"),
                  0.6, "location_query", "Indian city"),
    IntentPattern(_words("anyone tried", "review", "reviews", "feedback", "opinion", "opinions",
                         "experience", "worth it", "good idea"),
                  0.65, "experience_request", "experience request"),
    IntentPattern(_words("safe", "work", "works", "effective", "reliable", "trustworthy",
                         "legit"),
                  0.55, "validation_seeking", "validation seeking"),
    IntentPattern(_words("problem", "issue", "trouble", "struggling", "difficulty", "confused",
                         "stuck"),
                  0.6, "problem_statement", "problem statement"),
    IntentPattern(_words("not working", "doesn't work", "won't", "isn't", "can't"),
                  0.55, "malfunction", "malfunction"),
    IntentPattern(_words("my dog", "dog is", "dog has", "dog won't", "dog doesn't", "puppy is"),
                  0.7, "pet_issue", "pet issue"),
    IntentPattern(_words("kya", "kaise", "kyun", "kahan", "kab", "kaun", "kya karna", "batao",
                         "suggest karo"),
                  0.8, "hinglish_question", "Hinglish question"),
    IntentPattern(_words("chahiye", "hona chahiye", "karna chahiye", "milega", "kaise kare"),
                  0.75, "hinglish_need", "Hinglish need"),
    IntentPattern(_words("bhaiya", "sir", "doctor sahab", "veterinary wala", "clinic main",
                         "hospital main"),
                  0.6, "indian_cultural", "Indian context"),
    IntentPattern(_words("koi", "kuch", "achha", "samjho", "pata hai", "malum hai"),
                  0.5, "hinglish_misc", "Hinglish misc"),
)

EXCLUSION_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    # gratitude
    _words("thank you", "thanks", "grateful", "appreciate", "great job", "well done",
           "dhanyavad", "shukriya"),
    # information sharing
    _words("here is", "here are", "sharing", "update", "announcement", "fyi",
           "just to inform"),
    # celebrations
    _words("congratulations", "congrats", "happy birthday", "celebration", "hooray", "yay"),
    # personal narrative
    _words("i am", "i was", "i have been", "yesterday i", "today i", "this morning"),
)

CONTEXT_INDICATORS: Final[tuple[str, ...]] = (
    "age", "breed", "symptoms", "duration", "when", "how long",
)
