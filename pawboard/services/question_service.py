"""Community question service: posting, duplicate detection and duplicate review."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pawboard.core.content_sanitizer import sanitize_content
from pawboard.core.errors import ServiceError
from pawboard.core.policy import ScoringPolicy
from pawboard.db.models.moderation import QUEUE_MONITOR, QUEUE_REVIEW, ModerationQueueItem
from pawboard.db.models.question import (
    ALGORITHM_JACCARD,
    ALGORITHM_MANUAL,
    STATUS_ACTIVE,
    STATUS_DUPLICATE,
    STATUS_FLAGGED,
    STATUS_PENDING_REVIEW,
    CommunityQuestion,
    QuestionSimilarity,
    QuestionTag,
)
from pawboard.scoring.analyzer import ContentAnalyzer
from pawboard.scoring.schemas import (
    ComprehensiveAnalysis,
    DuplicateCheckResult,
    Recommendation,
    SimilarityScore,
)
from pawboard.scoring.similarity import SimilarityInput, rank_similar

logger = logging.getLogger(__name__)

CONTENT_TYPE_QUESTION = "question"
AUTO_MODERATION_ACTOR = "auto_moderation_system"

_STATUS_BY_RECOMMENDATION: dict[Recommendation, str] = {
    Recommendation.APPROVE: STATUS_ACTIVE,
    Recommendation.FLAG: STATUS_FLAGGED,
    Recommendation.REVIEW: STATUS_PENDING_REVIEW,
}


class QuestionServiceError(ServiceError):
    """Base error for community question failures."""


class QuestionNotFoundError(QuestionServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, question_id: int) -> None:
        super().__init__(f"Question {question_id} not found", "question_not_found")


class ContentBlockedError(QuestionServiceError):
    """Raised when automated moderation refuses a post outright."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, analysis: ComprehensiveAnalysis) -> None:
        super().__init__(
            "Content blocked by automated moderation",
            "content_blocked",
            details={
                "recommendation": analysis.recommendation.value,
                "flags": analysis.flags,
                "overallScore": analysis.overall_score,
            },
        )


class DuplicateLinkError(QuestionServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "invalid_duplicate_link")


class CategoryMismatchError(QuestionServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self) -> None:
        super().__init__(
            "A question can only duplicate a question in the same category",
            "category_mismatch",
        )


@dataclass(frozen=True)
class DuplicateMatch:
    question: CommunityQuestion
    score: SimilarityScore


@dataclass(frozen=True)
class DuplicateCheck:
    matches: list[DuplicateMatch] = field(default_factory=list)
    likely_duplicate: bool = False
    duplicate_threshold: float = 0.7


def _normalize_tags(tags: Sequence[str] | None) -> list[str]:
    cleaned = (tag.strip().lower() for tag in tags or ())
    return list(dict.fromkeys(tag for tag in cleaned if tag))


class QuestionService:
    """Session-scoped operations on community questions."""

    def __init__(self, session: AsyncSession, policy: ScoringPolicy) -> None:
        self._session = session
        self._policy = policy
        self._analyzer = ContentAnalyzer(policy)

    async def create_question(
        self,
        user_id: int,
        title: str,
        content: str,
        category: str = "general",
        tags: Sequence[str] | None = None,
    ) -> tuple[CommunityQuestion, ComprehensiveAnalysis]:
        """Screen and store a new question.

        Blocked content is never written. Content needing review or monitoring is stored
        with a non-active status and queued for moderators.

        Raises:
            ContentValidationError: If title or body is empty after sanitization
            ContentBlockedError: If automated moderation blocks the post
        """
        title = sanitize_content(title)
        content = sanitize_content(content)
        analysis = self._analyzer.analyze(f"{title}\n{content}")
        if analysis.recommendation is Recommendation.BLOCK:
            logger.info(
                "Question blocked by automated moderation",
                extra={"user_id": user_id, "flags": analysis.flags},
            )
            raise ContentBlockedError(analysis)

        question = CommunityQuestion(
            user_id=user_id,
            title=title,
            content=content,
            category=category,
            status=_STATUS_BY_RECOMMENDATION[analysis.recommendation],
            tag_links=[QuestionTag(tag=tag) for tag in _normalize_tags(tags)],
        )
        self._session.add(question)
        await self._session.flush()

        if analysis.recommendation is Recommendation.REVIEW:
            self._enqueue(question.id, QUEUE_REVIEW, 7, "High-risk content requiring human review")
        elif analysis.recommendation is Recommendation.FLAG:
            self._enqueue(question.id, QUEUE_MONITOR, 5, "Flagged content for monitoring")
        await self._record_similar_questions(question, tags)
        await self._session.flush()

        logger.info(
            "Question created",
            extra={"question_id": question.id, "status": question.status},
        )
        return question, analysis

    def _enqueue(self, question_id: int, queue_type: str, priority: int, reason: str) -> None:
        self._session.add(
            ModerationQueueItem(
                content_type=CONTENT_TYPE_QUESTION,
                content_id=str(question_id),
                queue_type=queue_type,
                priority=priority,
                added_reason=reason,
                added_by=AUTO_MODERATION_ACTOR,
            )
        )

    async def get_question(self, question_id: int) -> CommunityQuestion:
        question = await self._session.get(CommunityQuestion, question_id)
        if question is None:
            raise QuestionNotFoundError(question_id)
        return question

    async def candidate_pool(
        self,
        category: str | None = None,
        tags: Sequence[str] | None = None,
        exclude_id: int | None = None,
    ) -> list[CommunityQuestion]:
        """Active questions worth comparing against, newest first."""
        stmt = select(CommunityQuestion).where(CommunityQuestion.status == STATUS_ACTIVE)
        if exclude_id is not None:
            stmt = stmt.where(CommunityQuestion.id != exclude_id)
        if category:
            stmt = stmt.where(CommunityQuestion.category == category)
        normalized_tags = _normalize_tags(tags)
        if normalized_tags:
            stmt = stmt.where(CommunityQuestion.tag_links.any(QuestionTag.tag.in_(normalized_tags)))
        stmt = stmt.order_by(CommunityQuestion.created_at.desc(), CommunityQuestion.id.desc()).limit(
            self._policy.duplicate.candidate_pool_limit
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    def _rank(
        self,
        title: str,
        content: str,
        tags: Sequence[str] | None,
        pool: Sequence[CommunityQuestion],
    ) -> DuplicateCheckResult:
        return rank_similar(
            SimilarityInput(title=title, content=content, tags=tuple(_normalize_tags(tags))),
            (
                SimilarityInput(
                    title=question.title,
                    content=question.content,
                    tags=tuple(question.tags),
                    key=question.id,
                )
                for question in pool
            ),
            self._policy.duplicate,
        )

    async def check_duplicates(
        self,
        title: str,
        content: str,
        category: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> DuplicateCheck:
        pool = await self.candidate_pool(category, tags)
        by_id = {question.id: question for question in pool}
        ranked = self._rank(title, content, tags, pool)
        logger.info(
            "Duplicate check completed",
            extra={
                "pool_size": len(pool),
                "matches": len(ranked.similar),
                "likely_duplicate": ranked.likely_duplicate,
            },
        )
        return DuplicateCheck(
            matches=[
                DuplicateMatch(question=by_id[item.candidate_id], score=item.score)
                for item in ranked.similar
            ],
            likely_duplicate=ranked.likely_duplicate,
            duplicate_threshold=ranked.duplicate_threshold,
        )

    async def _record_similar_questions(
        self, question: CommunityQuestion, tags: Sequence[str] | None
    ) -> None:
        """Store a jaccard similarity row for each close match of a newly posted question."""
        pool = await self.candidate_pool(question.category, tags, exclude_id=question.id)
        ranked = self._rank(question.title, question.content, tags, pool)
        for item in ranked.similar:
            await self._upsert_similarity(
                question.id,
                item.candidate_id,
                round(item.score.overall_similarity, 2),
                ALGORITHM_JACCARD,
            )
        if ranked.similar:
            logger.info(
                "Similar questions recorded",
                extra={"question_id": question.id, "matches": len(ranked.similar)},
            )

    async def _upsert_similarity(
        self, question_id: int, similar_question_id: int, score: float, algorithm: str
    ) -> None:
        result = await self._session.execute(
            select(QuestionSimilarity).where(
                QuestionSimilarity.question_id == question_id,
                QuestionSimilarity.similar_question_id == similar_question_id,
            )
        )
        similarity = result.scalar_one_or_none()
        if similarity is None:
            self._session.add(
                QuestionSimilarity(
                    question_id=question_id,
                    similar_question_id=similar_question_id,
                    similarity_score=score,
                    algorithm_used=algorithm,
                )
            )
        elif similarity.algorithm_used != ALGORITHM_MANUAL or algorithm == ALGORITHM_MANUAL:
            # Manual rows are only replaced by manual rows.
            similarity.similarity_score = score
            similarity.algorithm_used = algorithm

    async def mark_duplicate(self, question_id: int, duplicate_of_id: int) -> CommunityQuestion:
        """Link a question to the earlier question it repeats.

        Raises:
            DuplicateLinkError: If the question would duplicate itself
            QuestionNotFoundError: If either question does not exist
            CategoryMismatchError: If the questions are in different categories
        """
        if question_id == duplicate_of_id:
            raise DuplicateLinkError("A question cannot be a duplicate of itself")
        question = await self.get_question(question_id)
        original = await self.get_question(duplicate_of_id)
        if question.category != original.category:
            raise CategoryMismatchError()

        await self._upsert_similarity(question_id, duplicate_of_id, 1.0, ALGORITHM_MANUAL)
        question.duplicate_of_id = duplicate_of_id
        question.status = STATUS_DUPLICATE
        await self._session.flush()
        logger.info(
            "Question marked as duplicate",
            extra={"question_id": question_id, "duplicate_of_id": duplicate_of_id},
        )
        return question

    async def clear_duplicate(self, question_id: int) -> CommunityQuestion:
        """Undo a duplicate link and put the question back in circulation.

        Questions held by automated moderation stay held; only moderation can release them.

        Raises:
            QuestionNotFoundError: If the question does not exist
            DuplicateLinkError: If the question is not currently marked as a duplicate
        """
        question = await self.get_question(question_id)
        if question.status != STATUS_DUPLICATE:
            raise DuplicateLinkError("Question is not marked as a duplicate")
        question.duplicate_of_id = None
        question.status = STATUS_ACTIVE
        await self._session.flush()
        logger.info("Question marked as not duplicate", extra={"question_id": question_id})
        return question


def question_service_factory_provider(
    policy: ScoringPolicy,
) -> Callable[[AsyncSession], QuestionService]:
    def factory(session: AsyncSession) -> QuestionService:
        return QuestionService(session, policy)

    return factory
