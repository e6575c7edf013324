from pawboard.db.models.kv_entry import KeyValueEntry
from pawboard.db.models.moderation import (
    ContentQualityScore,
    ModerationFeedback,
    ModerationQueueItem,
)
from pawboard.db.models.question import CommunityQuestion, QuestionSimilarity, QuestionTag
from pawboard.db.models.user import User

__all__ = [
    "User",
    "CommunityQuestion",
    "QuestionTag",
    "QuestionSimilarity",
    "ModerationQueueItem",
    "ContentQualityScore",
    "ModerationFeedback",
    "KeyValueEntry",
]
