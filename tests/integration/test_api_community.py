"""Integration tests for community question API endpoints.

Covers posting with automated screening, duplicate detection and duplicate review.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import TokenFactory
from pawboard.api.schemas import (
    CreateQuestionResponse,
    DuplicateCheckResponse,
    DuplicateMarkResponse,
    QuestionQualityResponse,
    QuestionResponse,
)
from pawboard.db.models.moderation import ModerationQueueItem
from pawboard.db.models.question import CommunityQuestion, QuestionSimilarity

SENIOR_DOG_TITLE = "Best food for a senior dog"
SENIOR_DOG_CONTENT = (
    "My dog is eleven years old and has started losing weight. "
    "Which food helps older dogs keep muscle?"
)
SIMILAR_TITLE = "Which food helps an older dog"
SIMILAR_CONTENT = "My senior dog is losing muscle and weight. What should I feed him to help?"


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _post_question(
    client: AsyncClient,
    token: str,
    title: str = SENIOR_DOG_TITLE,
    content: str = SENIOR_DOG_CONTENT,
    **extra: Any,
) -> CreateQuestionResponse:
    response = await client.post(
        "/api/community/questions",
        json={"title": title, "content": content, **extra},
        headers=_auth(token),
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return CreateQuestionResponse.model_validate(response.json())


class TestCreateQuestion:
    """Test posting questions through automated moderation."""

    @pytest.mark.asyncio
    async def test_clean_question_is_active(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        # Act
        created = await _post_question(
            async_http_client, member_token, category="nutrition", tags=["Senior", " food "]
        )

        # Assert
        assert created.recommendation.value == "approve"
        assert created.question.status == "active"
        assert created.question.category == "nutrition"
        assert sorted(created.question.tags) == ["food", "senior"]

    @pytest.mark.asyncio
    async def test_response_uses_camel_case(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        response = await async_http_client.post(
            "/api/community/questions",
            json={"title": SENIOR_DOG_TITLE, "content": SENIOR_DOG_CONTENT},
            headers=_auth(member_token),
        )

        question = response.json()["question"]
        assert {"userId", "duplicateOfId", "createdAt"} <= set(question)

    @pytest.mark.asyncio
    async def test_spam_question_is_blocked_and_not_stored(
        self, async_http_client: AsyncClient, member_token: str, db_session: AsyncSession
    ) -> None:
        # Act
        response = await async_http_client.post(
            "/api/community/questions",
            json={
                "title": "LIMITED OFFER!!! BUY NOW!!!",
                "content": "CALL NOW 9876543210 LIMITED OFFER BUY NOW",
            },
            headers=_auth(member_token),
        )

        # Assert
        assert response.status_code == status.HTTP_403_FORBIDDEN
        payload = response.json()
        assert payload["error"] == "content_blocked"
        assert payload["details"]["recommendation"] == "block"
        count = await db_session.scalar(select(func.count()).select_from(CommunityQuestion))
        assert count == 0

    @pytest.mark.asyncio
    async def test_thin_question_is_flagged_and_monitored(
        self, async_http_client: AsyncClient, member_token: str, db_session: AsyncSession
    ) -> None:
        # Act
        created = await _post_question(async_http_client, member_token, "ok", "ok ok")

        # Assert
        assert created.recommendation.value == "flag"
        assert created.question.status == "flagged"
        result = await db_session.execute(select(ModerationQueueItem))
        item = result.scalar_one()
        assert item.content_type == "question"
        assert item.content_id == str(created.question.id)
        assert item.queue_type == "monitor"
        assert item.priority == 5

    @pytest.mark.asyncio
    async def test_very_low_quality_question_awaits_review(
        self, async_http_client: AsyncClient, member_token: str, db_session: AsyncSession
    ) -> None:
        # Act
        created = await _post_question(async_http_client, member_token, "ok!!!!", "ok ok")

        # Assert
        assert created.recommendation.value == "review"
        assert created.question.status == "pending_review"
        result = await db_session.execute(select(ModerationQueueItem))
        item = result.scalar_one()
        assert item.queue_type == "review"
        assert item.priority == 7

    @pytest.mark.asyncio
    async def test_content_empty_after_sanitizing(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        response = await async_http_client.post(
            "/api/community/questions",
            json={"title": "Dog question", "content": "\x00\x01"},
            headers=_auth(member_token),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "invalid_content"

    @pytest.mark.asyncio
    async def test_missing_title_is_a_validation_error(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        response = await async_http_client.post(
            "/api/community/questions",
            json={"content": SENIOR_DOG_CONTENT},
            headers=_auth(member_token),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.post(
            "/api/community/questions",
            json={"title": SENIOR_DOG_TITLE, "content": SENIOR_DOG_CONTENT},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


    @pytest.mark.asyncio
    async def test_close_match_is_recorded_as_jaccard_similarity(
        self, async_http_client: AsyncClient, member_token: str, db_session: AsyncSession
    ) -> None:
        # Arrange
        original = await _post_question(async_http_client, member_token)

        # Act
        repeat = await _post_question(async_http_client, member_token)

        # Assert: identical text without tags scores 0.8 * 1.0
        similarity = (await db_session.execute(select(QuestionSimilarity))).scalar_one()
        assert similarity.question_id == repeat.question.id
        assert similarity.similar_question_id == original.question.id
        assert similarity.similarity_score == 0.8
        assert similarity.algorithm_used == "jaccard_heuristic"

    @pytest.mark.asyncio
    async def test_unrelated_question_records_no_similarity(
        self, async_http_client: AsyncClient, member_token: str, db_session: AsyncSession
    ) -> None:
        # Arrange
        await _post_question(async_http_client, member_token)

        # Act
        await _post_question(
            async_http_client,
            member_token,
            "Best clumping cat litter",
            "Which litter brand keeps odour down in a small apartment?",
        )

        # Assert
        count = await db_session.scalar(select(func.count()).select_from(QuestionSimilarity))
        assert count == 0


class TestGetQuestion:
    @pytest.mark.asyncio
    async def test_get_existing_question(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        created = await _post_question(async_http_client, member_token)

        response = await async_http_client.get(
            f"/api/community/questions/{created.question.id}", headers=_auth(member_token)
        )

        assert response.status_code == status.HTTP_200_OK
        assert QuestionResponse.model_validate(response.json()).title == SENIOR_DOG_TITLE

    @pytest.mark.asyncio
    async def test_get_missing_question(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        response = await async_http_client.get(
            "/api/community/questions/9999", headers=_auth(member_token)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {
            "error": "question_not_found",
            "message": "Question 9999 not found",
        }


class TestDuplicateCheck:
    """Test duplicate detection against active questions."""

    @pytest.mark.asyncio
    async def test_no_questions_yet(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        response = await async_http_client.post(
            "/api/community/duplicate-check",
            json={"title": SENIOR_DOG_TITLE, "content": SENIOR_DOG_CONTENT},
            headers=_auth(member_token),
        )

        assert response.status_code == status.HTTP_200_OK
        parsed = DuplicateCheckResponse.model_validate(response.json())
        assert parsed.similar_questions == []
        assert parsed.likely_duplicate is False
        assert parsed.duplicate_threshold == 0.7
        assert parsed.recommendations[0] == "Your question appears to be unique"

    @pytest.mark.asyncio
    async def test_identical_question_is_a_likely_duplicate(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        # Arrange
        created = await _post_question(async_http_client, member_token, tags=["food"])

        # Act
        response = await async_http_client.post(
            "/api/community/duplicate-check",
            json={"title": SENIOR_DOG_TITLE, "content": SENIOR_DOG_CONTENT, "tags": ["food"]},
            headers=_auth(member_token),
        )

        # Assert
        parsed = DuplicateCheckResponse.model_validate(response.json())
        assert parsed.likely_duplicate is True
        assert len(parsed.similar_questions) == 1
        match = parsed.similar_questions[0]
        assert match.question.id == created.question.id
        assert match.overall_similarity == 1.0
        assert match.title_similarity == 1.0
        assert "Consider reviewing similar questions before posting" in parsed.recommendations

    @pytest.mark.asyncio
    async def test_scores_are_rounded(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        await _post_question(async_http_client, member_token)

        response = await async_http_client.post(
            "/api/community/duplicate-check",
            json={"title": SIMILAR_TITLE, "content": SIMILAR_CONTENT},
            headers=_auth(member_token),
        )

        for match in response.json()["similarQuestions"]:
            for key in ("titleSimilarity", "contentSimilarity", "overallSimilarity"):
                assert match[key] == round(match[key], 2)

    @pytest.mark.asyncio
    async def test_pool_is_filtered_by_category_and_tags(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        # Arrange
        await _post_question(async_http_client, member_token, category="nutrition", tags=["food"])
        body = {"title": SENIOR_DOG_TITLE, "content": SENIOR_DOG_CONTENT}

        # Act
        other_category = await async_http_client.post(
            "/api/community/duplicate-check",
            json={**body, "category": "training"},
            headers=_auth(member_token),
        )
        other_tags = await async_http_client.post(
            "/api/community/duplicate-check",
            json={**body, "tags": ["grooming"]},
            headers=_auth(member_token),
        )
        same_category = await async_http_client.post(
            "/api/community/duplicate-check",
            json={**body, "category": "nutrition"},
            headers=_auth(member_token),
        )

        # Assert
        assert other_category.json()["similarQuestions"] == []
        assert other_tags.json()["similarQuestions"] == []
        assert len(same_category.json()["similarQuestions"]) == 1

    @pytest.mark.asyncio
    async def test_flagged_questions_are_not_candidates(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        await _post_question(async_http_client, member_token, "ok", "ok ok")

        response = await async_http_client.post(
            "/api/community/duplicate-check",
            json={"title": "ok", "content": "ok ok"},
            headers=_auth(member_token),
        )

        assert response.json()["similarQuestions"] == []


    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{}, {"title": SENIOR_DOG_TITLE}, {"content": SENIOR_DOG_CONTENT}, {"title": "", "content": "x"}],
        ids=["empty", "no_content", "no_title", "blank_title"],
    )
    async def test_title_and_content_are_required(
        self, async_http_client: AsyncClient, member_token: str, body: dict[str, Any]
    ) -> None:
        response = await async_http_client.post(
            "/api/community/duplicate-check", json=body, headers=_auth(member_token)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "validation_error"


class TestDuplicateMark:
    """Test manual duplicate review by partners and moderators."""

    @pytest.mark.asyncio
    async def test_member_cannot_mark_duplicates(
        self, async_http_client: AsyncClient, member_token: str
    ) -> None:
        response = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={"questionId": 1, "duplicateOfId": 2, "action": "mark_duplicate"},
            headers=_auth(member_token),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_moderator_marks_and_clears_duplicate(
        self,
        async_http_client: AsyncClient,
        member_token: str,
        moderator_token: str,
        db_session: AsyncSession,
    ) -> None:
        # Arrange
        original = await _post_question(async_http_client, member_token)
        repeat = await _post_question(
            async_http_client, member_token, SIMILAR_TITLE, SIMILAR_CONTENT
        )

        # Act
        marked = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={
                "questionId": repeat.question.id,
                "duplicateOfId": original.question.id,
                "action": "mark_duplicate",
            },
            headers=_auth(moderator_token),
        )

        # Assert
        assert marked.status_code == status.HTTP_200_OK
        parsed = DuplicateMarkResponse.model_validate(marked.json())
        assert parsed.question.status == "duplicate"
        assert parsed.question.duplicate_of_id == original.question.id
        result = await db_session.execute(select(QuestionSimilarity))
        similarity = result.scalar_one()
        assert similarity.similarity_score == 1.0
        assert similarity.algorithm_used == "manual_review"

        # Act
        cleared = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={"questionId": repeat.question.id, "action": "not_duplicate"},
            headers=_auth(moderator_token),
        )

        # Assert
        assert cleared.status_code == status.HTTP_200_OK
        cleared_question = DuplicateMarkResponse.model_validate(cleared.json()).question
        assert cleared_question.status == "active"
        assert cleared_question.duplicate_of_id is None

    @pytest.mark.asyncio
    async def test_marking_twice_keeps_one_similarity_record(
        self,
        async_http_client: AsyncClient,
        member_token: str,
        user_token_factory: TokenFactory,
        db_session: AsyncSession,
    ) -> None:
        # Arrange
        partner_token = await user_token_factory("partner@example.com", "partner")
        original = await _post_question(async_http_client, member_token)
        repeat = await _post_question(
            async_http_client, member_token, SIMILAR_TITLE, SIMILAR_CONTENT
        )
        body = {
            "questionId": repeat.question.id,
            "duplicateOfId": original.question.id,
            "action": "mark_duplicate",
        }

        # Act
        for _ in range(2):
            response = await async_http_client.put(
                "/api/community/duplicate-mark", json=body, headers=_auth(partner_token)
            )
            assert response.status_code == status.HTTP_200_OK

        # Assert
        count = await db_session.scalar(select(func.count()).select_from(QuestionSimilarity))
        assert count == 1

    @pytest.mark.asyncio
    async def test_question_cannot_duplicate_itself(
        self, async_http_client: AsyncClient, member_token: str, moderator_token: str
    ) -> None:
        created = await _post_question(async_http_client, member_token)

        response = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={
                "questionId": created.question.id,
                "duplicateOfId": created.question.id,
                "action": "mark_duplicate",
            },
            headers=_auth(moderator_token),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "invalid_duplicate_link"

    @pytest.mark.asyncio
    async def test_mark_requires_duplicate_target(
        self, async_http_client: AsyncClient, moderator_token: str
    ) -> None:
        response = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={"questionId": 1, "action": "mark_duplicate"},
            headers=_auth(moderator_token),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_missing_question(
        self, async_http_client: AsyncClient, member_token: str, moderator_token: str
    ) -> None:
        created = await _post_question(async_http_client, member_token)

        response = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={
                "questionId": 9999,
                "duplicateOfId": created.question.id,
                "action": "mark_duplicate",
            },
            headers=_auth(moderator_token),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "question_not_found"

    @pytest.mark.asyncio
    async def test_category_mismatch(
        self, async_http_client: AsyncClient, member_token: str, moderator_token: str
    ) -> None:
        original = await _post_question(async_http_client, member_token, category="nutrition")
        repeat = await _post_question(
            async_http_client, member_token, SIMILAR_TITLE, SIMILAR_CONTENT, category="health"
        )

        response = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={
                "questionId": repeat.question.id,
                "duplicateOfId": original.question.id,
                "action": "mark_duplicate",
            },
            headers=_auth(moderator_token),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "category_mismatch"


    @pytest.mark.asyncio
    async def test_clearing_does_not_release_held_question(
        self,
        async_http_client: AsyncClient,
        member_token: str,
        user_token_factory: TokenFactory,
        db_session: AsyncSession,
    ) -> None:
        # Arrange
        partner_token = await user_token_factory("partner@example.com", "partner")
        flagged = await _post_question(async_http_client, member_token, "ok", "ok ok")
        assert flagged.question.status == "flagged"

        # Act
        response = await async_http_client.put(
            "/api/community/duplicate-mark",
            json={"questionId": flagged.question.id, "action": "not_duplicate"},
            headers=_auth(partner_token),
        )

        # Assert
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "error": "invalid_duplicate_link",
            "message": "Question is not marked as a duplicate",
        }
        stored = await db_session.get(CommunityQuestion, flagged.question.id)
        assert stored is not None
        assert stored.status == "flagged"
        item = (await db_session.execute(select(ModerationQueueItem))).scalar_one()
        assert item.status == "pending"


class TestQuestionQuality:
    @pytest.mark.asyncio
    async def test_scores_draft_without_authentication(
        self, async_http_client: AsyncClient
    ) -> None:
        response = await async_http_client.post(
            "/api/community/question-quality", json={"title": "Dog?", "content": ""}
        )

        assert response.status_code == status.HTTP_200_OK
        parsed = QuestionQualityResponse.model_validate(response.json())
        assert parsed.score == 70
        assert parsed.intent.type == "explicit_question"
        assert "isQuestion" in response.json()["intent"]

    @pytest.mark.asyncio
    async def test_hinglish_draft(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.post(
            "/api/community/question-quality",
            json={
                "title": "Dog not eating",
                "content": "Mera dog khana nahi kha raha, kya karna chahiye",
            },
        )

        parsed = QuestionQualityResponse.model_validate(response.json())
        assert parsed.intent.is_question is True
        assert parsed.intent.type == "hinglish_question"
