from pawboard.scoring.analyzer import ContentAnalyzer, overall_score, recommend
from pawboard.scoring.intent import detect_question_intent, score_question_quality
from pawboard.scoring.quality import analyze_quality
from pawboard.scoring.schemas import ComprehensiveAnalysis, Recommendation
from pawboard.scoring.similarity import (
    SimilarityInput,
    is_likely_duplicate,
    rank_similar,
    recommendations_for,
    score_candidate,
)
from pawboard.scoring.spam import analyze_spam
from pawboard.scoring.toxicity import analyze_toxicity

__all__ = [
    "ComprehensiveAnalysis",
    "ContentAnalyzer",
    "Recommendation",
    "SimilarityInput",
    "analyze_quality",
    "analyze_spam",
    "analyze_toxicity",
    "detect_question_intent",
    "is_likely_duplicate",
    "overall_score",
    "rank_similar",
    "recommend",
    "recommendations_for",
    "score_candidate",
    "score_question_quality",
]
