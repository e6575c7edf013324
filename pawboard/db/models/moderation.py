from __future__ import annotations

from datetime import datetime
from typing import Any, Final

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pawboard.db.base import Base, utcnow

QUEUE_URGENT: Final[str] = "urgent"
QUEUE_REVIEW: Final[str] = "review"
QUEUE_MONITOR: Final[str] = "monitor"

QUEUE_STATUS_PENDING: Final[str] = "pending"
QUEUE_STATUS_IN_REVIEW: Final[str] = "in_review"
QUEUE_STATUS_RESOLVED: Final[str] = "resolved"


class ModerationQueueItem(Base):
    __tablename__ = "moderation_queue"

    id: Mapped[int] = mapped_column(primary_key=True)
    content_type: Mapped[str] = mapped_column(String(32), index=True)
    content_id: Mapped[str] = mapped_column(String(64), index=True)
    queue_type: Mapped[str] = mapped_column(String(16), default=QUEUE_REVIEW)
    priority: Mapped[int] = mapped_column(Integer, default=5)
    status: Mapped[str] = mapped_column(String(16), default=QUEUE_STATUS_PENDING, index=True)
    added_reason: Mapped[str] = mapped_column(String(255))
    added_by: Mapped[str] = mapped_column(String(64))
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )


class ContentQualityScore(Base):
    __tablename__ = "content_quality_scores"
    __table_args__ = (UniqueConstraint("content_type", "content_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    content_type: Mapped[str] = mapped_column(String(32), index=True)
    content_id: Mapped[str] = mapped_column(String(64))
    quality_score: Mapped[int] = mapped_column(Integer)
    spam_likelihood: Mapped[int] = mapped_column(Integer)
    toxicity_score: Mapped[int] = mapped_column(Integer)
    readability_score: Mapped[int] = mapped_column(Integer)
    overall_score: Mapped[int] = mapped_column(Integer)
    confidence: Mapped[float] = mapped_column(Float)
    recommendation: Mapped[str] = mapped_column(String(16))
    flags: Mapped[list[str]] = mapped_column(JSON, default=list)
    analysis_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    last_analyzed: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )


class ModerationFeedback(Base):
    """Moderator verdicts on automated decisions, kept as an audit trail."""

    __tablename__ = "moderation_feedback"

    id: Mapped[int] = mapped_column(primary_key=True)
    content_type: Mapped[str] = mapped_column(String(32), index=True)
    content_id: Mapped[str] = mapped_column(String(64), index=True)
    moderator_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    original_action: Mapped[str | None] = mapped_column(String(16), nullable=True)
    actual_action: Mapped[str] = mapped_column(String(16))
    was_accurate: Mapped[bool] = mapped_column(Boolean)
    moderator_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
