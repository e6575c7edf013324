from __future__ import annotations

from datetime import datetime
from typing import Final

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pawboard.db.base import Base, utcnow

STATUS_ACTIVE: Final[str] = "active"
STATUS_FLAGGED: Final[str] = "flagged"
STATUS_PENDING_REVIEW: Final[str] = "pending_review"
STATUS_DUPLICATE: Final[str] = "duplicate"

ALGORITHM_JACCARD: Final[str] = "jaccard_heuristic"
ALGORITHM_MANUAL: Final[str] = "manual_review"


class CommunityQuestion(Base):
    __tablename__ = "community_questions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(300))
    content: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(64), default="general", index=True)
    status: Mapped[str] = mapped_column(String(32), default=STATUS_ACTIVE, index=True)
    duplicate_of_id: Mapped[int | None] = mapped_column(
        ForeignKey("community_questions.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )

    tag_links: Mapped[list[QuestionTag]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]


class QuestionTag(Base):
    __tablename__ = "question_tags"
    __table_args__ = (UniqueConstraint("question_id", "tag"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("community_questions.id", ondelete="CASCADE"), index=True
    )
    tag: Mapped[str] = mapped_column(String(64), index=True)

    question: Mapped[CommunityQuestion] = relationship(back_populates="tag_links")


class QuestionSimilarity(Base):
    __tablename__ = "question_similarities"
    __table_args__ = (UniqueConstraint("question_id", "similar_question_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("community_questions.id", ondelete="CASCADE"), index=True
    )
    similar_question_id: Mapped[int] = mapped_column(
        ForeignKey("community_questions.id", ondelete="CASCADE"), index=True
    )
    similarity_score: Mapped[float] = mapped_column(Float)
    algorithm_used: Mapped[str] = mapped_column(String(32), default=ALGORITHM_JACCARD)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
