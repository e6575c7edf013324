from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from pawboard.api.dependencies import UnitOfWork, get_current_user, get_uow, require_roles
from pawboard.api.openapi_responses import (
    ErrorExample,
    error_responses,
    forbidden_response,
    rate_limited_response,
    unauthorized_response,
    validation_error_example,
)
from pawboard.api.schemas import (
    CreateQuestionRequest,
    CreateQuestionResponse,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    DuplicateMarkRequest,
    DuplicateMarkResponse,
    QuestionQualityRequest,
    QuestionQualityResponse,
    QuestionResponse,
    SimilarQuestion,
)
from pawboard.core.auth import DUPLICATE_REVIEWER_ROLES
from pawboard.core.config import settings
from pawboard.core.content_sanitizer import ContentValidationError
from pawboard.core.errors import build_http_error, http_error_from_service
from pawboard.core.rate_limit import (
    DUPLICATE_CHECK_RATE_LIMIT,
    QUESTION_CREATE_RATE_LIMIT,
    QUESTION_QUALITY_RATE_LIMIT,
    limit,
    rate_limit_ip_key,
    rate_limit_user_or_ip_key,
)
from pawboard.db.models.user import User
from pawboard.scoring.intent import score_question_quality
from pawboard.scoring.similarity import recommendations_for
from pawboard.services.question_service import QuestionServiceError

router = APIRouter()


def _similarity(value: float) -> float:
    return round(value, 2)


@router.post(
    "/questions",
    summary="Post a question",
    description=(
        "Screen a new question with automated moderation and store it. Blocked content is "
        "rejected; content needing review or monitoring is stored and queued for moderators."
    ),
    response_model=CreateQuestionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **error_responses(
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="invalid_content",
                message="Content must include text after sanitization.",
                description="Content rejected",
            ),
            validation_error_example("title"),
            ErrorExample(
                status_code=status.HTTP_403_FORBIDDEN,
                error="content_blocked",
                message="Content blocked by automated moderation",
                description="Content blocked",
                details={"recommendation": "block", "flags": ["phone_numbers"], "overallScore": 32},
            ),
        ),
        **unauthorized_response(),
        **rate_limited_response(),
    },
)
@limit(QUESTION_CREATE_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def create_question(
    request: Request,
    request_data: CreateQuestionRequest,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> CreateQuestionResponse:
    """Create a community question."""
    try:
        question, analysis = await uow.question_service.create_question(
            user_id=current_user.id,
            title=request_data.title,
            content=request_data.content,
            category=request_data.category,
            tags=request_data.tags,
        )
    except ContentValidationError as exc:
        raise build_http_error(
            status_code=status.HTTP_400_BAD_REQUEST,
            error=exc.error_code,
            message=str(exc),
        ) from exc
    except QuestionServiceError as exc:
        raise http_error_from_service(exc) from exc

    return CreateQuestionResponse(
        question=QuestionResponse.model_validate(question),
        recommendation=analysis.recommendation,
        flags=analysis.flags,
    )


@router.get(
    "/questions/{question_id}",
    summary="Get a question",
    response_model=QuestionResponse,
    responses={
        **error_responses(
            ErrorExample(
                status_code=status.HTTP_404_NOT_FOUND,
                error="question_not_found",
                message="Question 42 not found",
                description="Question not found",
            )
        ),
        **unauthorized_response(),
    },
)
async def get_question(
    question_id: int,
    _current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> QuestionResponse:
    try:
        question = await uow.question_service.get_question(question_id)
    except QuestionServiceError as exc:
        raise http_error_from_service(exc) from exc
    return QuestionResponse.model_validate(question)


@router.post(
    "/duplicate-check",
    summary="Find similar questions",
    description=(
        "Compare a draft question with recent active questions and report the closest "
        "matches by word overlap."
    ),
    response_model=DuplicateCheckResponse,
    responses={
        **error_responses(validation_error_example("title")),
        **unauthorized_response(),
        **rate_limited_response(),
    },
)
@limit(DUPLICATE_CHECK_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def duplicate_check(
    request: Request,
    request_data: DuplicateCheckRequest,
    _current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> DuplicateCheckResponse:
    result = await uow.question_service.check_duplicates(
        title=request_data.title,
        content=request_data.content,
        category=request_data.category,
        tags=request_data.tags,
    )
    return DuplicateCheckResponse(
        similar_questions=[
            SimilarQuestion(
                question=QuestionResponse.model_validate(match.question),
                title_similarity=_similarity(match.score.title_similarity),
                content_similarity=_similarity(match.score.content_similarity),
                overall_similarity=_similarity(match.score.overall_similarity),
            )
            for match in result.matches
        ],
        likely_duplicate=result.likely_duplicate,
        duplicate_threshold=result.duplicate_threshold,
        recommendations=recommendations_for(result.likely_duplicate),
    )


@router.put(
    "/duplicate-mark",
    summary="Mark or unmark a duplicate",
    description="Link a question to the question it repeats, or clear that link.",
    response_model=DuplicateMarkResponse,
    responses={
        **error_responses(
            validation_error_example("duplicateOfId"),
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="invalid_duplicate_link",
                message="A question cannot be a duplicate of itself",
                description="Invalid duplicate link",
            ),
            ErrorExample(
                status_code=status.HTTP_404_NOT_FOUND,
                error="question_not_found",
                message="Question 42 not found",
                description="Question not found",
            ),
            ErrorExample(
                status_code=status.HTTP_409_CONFLICT,
                error="category_mismatch",
                message="A question can only duplicate a question in the same category",
                description="Questions are in different categories",
            ),
        ),
        **unauthorized_response(),
        **forbidden_response("Only partners and moderators can mark duplicates"),
    },
)
async def duplicate_mark(
    request_data: DuplicateMarkRequest,
    current_user: User = Depends(
        require_roles(
            DUPLICATE_REVIEWER_ROLES, "Only partners and moderators can mark duplicates"
        )
    ),
    uow: UnitOfWork = Depends(get_uow),
) -> DuplicateMarkResponse:
    service = uow.question_service
    try:
        if request_data.action == "mark_duplicate" and request_data.duplicate_of_id is not None:
            question = await service.mark_duplicate(
                request_data.question_id, request_data.duplicate_of_id
            )
            message = "Question marked as duplicate"
        else:
            question = await service.clear_duplicate(request_data.question_id)
            message = "Question marked as not duplicate"
    except QuestionServiceError as exc:
        raise http_error_from_service(exc) from exc
    return DuplicateMarkResponse(message=message, question=QuestionResponse.model_validate(question))


@router.post(
    "/question-quality",
    summary="Score a draft question",
    description="Writer-facing guidance on a draft question. Nothing is stored or enforced.",
    response_model=QuestionQualityResponse,
    responses={**rate_limited_response()},
)
@limit(QUESTION_QUALITY_RATE_LIMIT, key_func=rate_limit_ip_key)
def question_quality(
    request: Request,
    request_data: QuestionQualityRequest,
) -> QuestionQualityResponse:
    quality = score_question_quality(
        request_data.title, request_data.content, settings.scoring.intent
    )
    return QuestionQualityResponse(
        score=quality.score, suggestions=quality.suggestions, intent=quality.intent
    )
