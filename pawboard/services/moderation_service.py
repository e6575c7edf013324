"""Automated moderation: scoring, decisions, the review queue and moderator feedback."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pawboard.core.content_sanitizer import sanitize_content
from pawboard.core.errors import ServiceError
from pawboard.core.policy import ScoringPolicy
from pawboard.db.base import utcnow
from pawboard.db.kv_store import KeyValueRecord, KeyValueStore, SqlKeyValueStore
from pawboard.db.models.moderation import (
    QUEUE_MONITOR,
    QUEUE_REVIEW,
    QUEUE_STATUS_PENDING,
    QUEUE_URGENT,
    ContentQualityScore,
    ModerationFeedback,
    ModerationQueueItem,
)
from pawboard.scoring.analyzer import ContentAnalyzer
from pawboard.scoring.schemas import (
    AutoAction,
    ComprehensiveAnalysis,
    ModerationDecision,
    Recommendation,
)

logger = logging.getLogger(__name__)

DECISION_LOG_NAMESPACE = "auto_moderation"
AUTO_MODERATION_ACTOR = "auto_moderation_system"
ESTIMATED_REVIEW_TIME = "2-4 hours"
CRITICAL_TOXICITY_SCORE = 90

# (queue type, priority, reason) per action that lands in the moderation queue.
_QUEUE_PLACEMENT: dict[Recommendation, tuple[str, int, str]] = {
    Recommendation.BLOCK: (QUEUE_URGENT, 10, "Auto-blocked content requiring review"),
    Recommendation.REVIEW: (QUEUE_REVIEW, 7, "High-risk content requiring human review"),
    Recommendation.FLAG: (QUEUE_MONITOR, 5, "Flagged content for monitoring"),
}


class ModerationServiceError(ServiceError):
    """Base error for moderation failures."""


class MissingFieldsError(ModerationServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "missing_fields")


def decision_key(content_type: str, content_id: str) -> str:
    return f"{content_type}:{content_id}"


def automated_decision(analysis: ComprehensiveAnalysis) -> ModerationDecision:
    """Turn a scored piece of content into an action with reasons and side effects."""
    action = analysis.recommendation
    reasons: list[str] = []
    auto_actions: list[AutoAction] = []

    if action is Recommendation.BLOCK:
        confidence = 0.95
        reasons.append("High toxicity or spam score")
        if analysis.toxicity.toxicity_score >= CRITICAL_TOXICITY_SCORE:
            reasons.append("Critical toxicity detected - immediate intervention required")
        auto_actions += [
            AutoAction(type="hide", target="content", reason="Auto-blocked due to policy violation"),
            AutoAction(
                type="warn",
                target="user",
                reason="Content automatically blocked for policy violation",
            ),
            AutoAction(type="queue", target="content", reason="Added to urgent moderation queue"),
        ]
    elif action is Recommendation.REVIEW:
        confidence = 0.8
        reasons.append("Content requires human review")
        auto_actions.append(
            AutoAction(type="queue", target="content", reason="Queued for moderator review")
        )
    elif action is Recommendation.FLAG:
        confidence = 0.65
        reasons.append("Medium risk content flagged for monitoring")
        auto_actions.append(
            AutoAction(type="queue", target="content", reason="Flagged for monitoring")
        )
    else:
        confidence = round(analysis.overall_score / 100, 2)

    return ModerationDecision(
        action=action,
        confidence=confidence,
        reasons=reasons,
        auto_actions=auto_actions,
    )


@dataclass(frozen=True)
class ProcessOutcome:
    content_id: str
    analysis: ComprehensiveAnalysis
    decision: ModerationDecision
    queue_item_id: int | None = None
    queue_position: int | None = None


class ModerationService:
    """Session-scoped automated moderation workflow."""

    def __init__(
        self,
        session: AsyncSession,
        policy: ScoringPolicy,
        decision_log: KeyValueStore | None = None,
    ) -> None:
        self._session = session
        self._analyzer = ContentAnalyzer(policy)
        self._decision_log = decision_log or SqlKeyValueStore(session)

    async def analyze(
        self,
        content: str,
        content_type: str,
        content_id: str | None = None,
    ) -> ComprehensiveAnalysis:
        """Score content; when it has an id, keep the latest scores for it.

        Raises:
            ContentValidationError: If content is empty after sanitization
        """
        analysis = self._analyzer.analyze(sanitize_content(content))
        if content_id:
            await self._store_scores(content_type, content_id, analysis)
        return analysis

    async def process(
        self,
        user_id: int,
        content: str,
        content_type: str,
        content_id: str | None = None,
        *,
        owns_content: bool = True,
    ) -> ProcessOutcome:
        """Score, decide, queue and log one piece of content.

        The decision log entry is owned by ``user_id`` unless ``owns_content`` is false,
        in which case an existing owner is kept.
        """
        content_id = content_id or f"pending-{uuid.uuid4().hex}"
        analysis = await self.analyze(content, content_type, content_id)
        decision = automated_decision(analysis)

        queue_item: ModerationQueueItem | None = None
        placement = _QUEUE_PLACEMENT.get(decision.action)
        if placement is not None:
            queue_type, priority, reason = placement
            queue_item = ModerationQueueItem(
                content_type=content_type,
                content_id=content_id,
                queue_type=queue_type,
                priority=priority,
                added_reason=reason,
                added_by=AUTO_MODERATION_ACTOR,
            )
            self._session.add(queue_item)
            await self._session.flush()

        await self._decision_log.put(
            DECISION_LOG_NAMESPACE,
            decision_key(content_type, content_id),
            {
                "contentType": content_type,
                "contentId": content_id,
                "action": decision.action.value,
                "confidence": decision.confidence,
                "reasons": decision.reasons,
                "overallScore": analysis.overall_score,
                "processedAt": utcnow().isoformat(),
            },
            owner_id=user_id if owns_content else None,
        )

        queue_position = None
        if queue_item is not None and decision.action is Recommendation.REVIEW:
            queue_position = await self.queue_position(queue_item.id)

        logger.info(
            "Automated moderation decision",
            extra={
                "content_type": content_type,
                "content_id": content_id,
                "action": decision.action.value,
                "confidence": decision.confidence,
                "user_id": user_id,
            },
        )
        return ProcessOutcome(
            content_id=content_id,
            analysis=analysis,
            decision=decision,
            queue_item_id=queue_item.id if queue_item is not None else None,
            queue_position=queue_position,
        )

    async def reprocess(
        self,
        user_id: int,
        content: str,
        content_type: str,
        content_id: str | None,
    ) -> tuple[ProcessOutcome, str]:
        """Run a fresh decision and report what the previous one was.

        Raises:
            MissingFieldsError: If no content id is given
        """
        if not content_id:
            raise MissingFieldsError("Content ID required for reprocessing")
        previous = await self._decision_log.get(
            DECISION_LOG_NAMESPACE, decision_key(content_type, content_id)
        )
        previous_action = str(previous["action"]) if previous else "unknown"
        outcome = await self.process(
            user_id, content, content_type, content_id, owns_content=False
        )
        return outcome, previous_action

    async def record_feedback(
        self,
        moderator_id: int,
        content_type: str,
        content_id: str | None,
        was_accurate: bool | None,
        actual_action: str | None,
        moderator_notes: str | None = None,
    ) -> ModerationFeedback:
        """Store a moderator's verdict on an automated decision.

        Feedback is an audit trail only; scoring thresholds never change because of it.

        Raises:
            MissingFieldsError: If content id, accuracy or the actual action is missing
        """
        if not content_id or was_accurate is None or not actual_action:
            raise MissingFieldsError("Feedback requires contentId, wasAccurate, and actualAction")

        logged = await self._decision_log.get(
            DECISION_LOG_NAMESPACE, decision_key(content_type, content_id)
        )
        feedback = ModerationFeedback(
            content_type=content_type,
            content_id=content_id,
            moderator_id=moderator_id,
            original_action=str(logged["action"]) if logged else None,
            actual_action=actual_action,
            was_accurate=was_accurate,
            moderator_notes=moderator_notes,
        )
        self._session.add(feedback)
        await self._session.flush()

        logger.info(
            "Moderator feedback recorded",
            extra={
                "content_type": content_type,
                "content_id": content_id,
                "original_action": feedback.original_action,
                "actual_action": actual_action,
                "was_accurate": was_accurate,
                "moderator_id": moderator_id,
            },
        )
        return feedback

    async def queue_position(self, queue_item_id: int) -> int:
        """1-based FIFO position of a queue item among pending items."""
        result = await self._session.execute(
            select(func.count())
            .select_from(ModerationQueueItem)
            .where(
                ModerationQueueItem.status == QUEUE_STATUS_PENDING,
                ModerationQueueItem.id < queue_item_id,
            )
        )
        return int(result.scalar_one()) + 1

    async def list_queue(
        self, queue_type: str | None = None, limit: int = 50
    ) -> list[ModerationQueueItem]:
        stmt = select(ModerationQueueItem).where(
            ModerationQueueItem.status == QUEUE_STATUS_PENDING
        )
        if queue_type:
            stmt = stmt.where(ModerationQueueItem.queue_type == queue_type)
        stmt = stmt.order_by(ModerationQueueItem.added_at, ModerationQueueItem.id).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_decisions(self, owner_id: int, limit: int = 50) -> list[KeyValueRecord]:
        return await self._decision_log.list_by_owner(DECISION_LOG_NAMESPACE, owner_id, limit)

    async def _store_scores(
        self, content_type: str, content_id: str, analysis: ComprehensiveAnalysis
    ) -> None:
        values: dict[str, Any] = {
            "quality_score": analysis.quality.quality_score,
            "spam_likelihood": analysis.spam.spam_score,
            "toxicity_score": analysis.toxicity.toxicity_score,
            "readability_score": analysis.quality.readability_score,
            "overall_score": analysis.overall_score,
            "confidence": analysis.spam.confidence,
            "recommendation": analysis.recommendation.value,
            "flags": analysis.flags,
            "analysis_data": analysis.model_dump(mode="json", by_alias=True),
            "last_analyzed": utcnow(),
        }
        result = await self._session.execute(
            select(ContentQualityScore).where(
                ContentQualityScore.content_type == content_type,
                ContentQualityScore.content_id == content_id,
            )
        )
        score = result.scalar_one_or_none()
        if score is None:
            self._session.add(
                ContentQualityScore(content_type=content_type, content_id=content_id, **values)
            )
        else:
            for name, value in values.items():
                setattr(score, name, value)
        await self._session.flush()


def moderation_service_factory_provider(
    policy: ScoringPolicy,
) -> Callable[[AsyncSession], ModerationService]:
    def factory(session: AsyncSession) -> ModerationService:
        return ModerationService(session, policy)

    return factory
