from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from pawboard.api.dependencies import (
    UnitOfWork,
    ensure_role,
    get_current_user,
    get_uow,
    require_roles,
)
from pawboard.api.openapi_responses import (
    ErrorExample,
    error_responses,
    forbidden_response,
    rate_limited_response,
    unauthorized_response,
    validation_error_example,
)
from pawboard.api.schemas import (
    AnalyzeContentRequest,
    AutoProcessRequest,
    BlockedContentDetails,
    DecisionLogEntry,
    FeedbackResponse,
    ProcessResponse,
    QueueItemResponse,
)
from pawboard.core.auth import MODERATOR_ROLES
from pawboard.core.content_sanitizer import ContentValidationError
from pawboard.core.errors import build_http_error, error_json_response, http_error_from_service
from pawboard.core.rate_limit import (
    MODERATION_ANALYZE_RATE_LIMIT,
    MODERATION_PROCESS_RATE_LIMIT,
    limit,
    rate_limit_user_or_ip_key,
)
from pawboard.db.models.user import User
from pawboard.scoring.schemas import ComprehensiveAnalysis, Recommendation
from pawboard.services.moderation_service import (
    ESTIMATED_REVIEW_TIME,
    ModerationServiceError,
    ProcessOutcome,
)

router = APIRouter()

_OUTCOME_MESSAGES: dict[Recommendation, str] = {
    Recommendation.APPROVE: "Content approved",
    Recommendation.FLAG: "Content posted but flagged for monitoring",
    Recommendation.REVIEW: "Content submitted for review",
}


def _content_error(exc: ContentValidationError) -> HTTPException:
    return build_http_error(
        status_code=status.HTTP_400_BAD_REQUEST,
        error=exc.error_code,
        message=str(exc),
    )


def _blocked_response(outcome: ProcessOutcome) -> JSONResponse:
    # Returned rather than raised so the queue entry and decision log still commit.
    decision = outcome.decision
    details = BlockedContentDetails(
        reason=", ".join(decision.reasons),
        confidence=decision.confidence,
        auto_actions=decision.auto_actions,
    )
    return error_json_response(
        status.HTTP_403_FORBIDDEN,
        "content_blocked",
        "Content blocked by automated moderation",
        details.model_dump(mode="json", by_alias=True),
    )


def _process_response(outcome: ProcessOutcome, previous_action: str | None = None) -> ProcessResponse:
    decision = outcome.decision
    is_review = decision.action is Recommendation.REVIEW
    if previous_action is not None:
        message = f"Content reprocessed - new action: {decision.action.value}"
    else:
        message = _OUTCOME_MESSAGES[decision.action]
    return ProcessResponse(
        action=decision.action,
        message=message,
        content_id=outcome.content_id,
        reasons=decision.reasons,
        confidence=decision.confidence,
        auto_actions=decision.auto_actions,
        processing_time=outcome.analysis.processing_time,
        queue_position=outcome.queue_position if is_review else None,
        estimated_review_time=ESTIMATED_REVIEW_TIME if is_review else None,
        previous_action=previous_action,
    )


@router.post(
    "/analyze",
    summary="Analyze content",
    description=(
        "Score content for spam, quality and toxicity and recommend a moderation action. "
        "Scores are stored when a content id is supplied."
    ),
    response_model=ComprehensiveAnalysis,
    responses={
        **error_responses(
            validation_error_example("content"),
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="invalid_content",
                message="Content must include text after sanitization.",
                description="Content rejected",
            ),
        ),
        **unauthorized_response(),
        **rate_limited_response(),
    },
)
@limit(MODERATION_ANALYZE_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def analyze_content(
    request: Request,
    request_data: AnalyzeContentRequest,
    _current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ComprehensiveAnalysis:
    try:
        return await uow.moderation_service.analyze(
            request_data.content, request_data.content_type, request_data.content_id
        )
    except ContentValidationError as exc:
        raise _content_error(exc) from exc


@router.post(
    "/auto-process",
    summary="Run automated moderation",
    description=(
        "`process` scores and decides on new content. `feedback` records a moderator's "
        "verdict on an earlier decision. `reprocess` reruns the decision for known content."
    ),
    response_model=ProcessResponse | FeedbackResponse,
    responses={
        **error_responses(
            validation_error_example("contentType"),
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="missing_fields",
                message="Feedback requires contentId, wasAccurate, and actualAction",
                description="Action-specific fields missing",
            ),
            ErrorExample(
                status_code=status.HTTP_403_FORBIDDEN,
                error="content_blocked",
                message="Content blocked by automated moderation",
                description="Content blocked",
                details={
                    "reason": "High toxicity or spam score",
                    "confidence": 0.95,
                    "autoActions": [],
                    "canAppeal": True,
                },
            ),
            ErrorExample(
                status_code=status.HTTP_403_FORBIDDEN,
                error="forbidden",
                message="Only moderators can provide feedback",
                description="Moderator role required",
            ),
        ),
        **unauthorized_response(),
        **rate_limited_response(),
    },
)
@limit(MODERATION_PROCESS_RATE_LIMIT, key_func=rate_limit_user_or_ip_key)
async def auto_process(
    request: Request,
    request_data: AutoProcessRequest,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ProcessResponse | FeedbackResponse | JSONResponse:
    service = uow.moderation_service
    try:
        if request_data.action == "feedback":
            ensure_role(current_user, MODERATOR_ROLES, "Only moderators can provide feedback")
            feedback = await service.record_feedback(
                moderator_id=current_user.id,
                content_type=request_data.content_type,
                content_id=request_data.content_id,
                was_accurate=request_data.was_accurate,
                actual_action=(
                    request_data.actual_action.value if request_data.actual_action else None
                ),
                moderator_notes=request_data.moderator_notes,
            )
            return FeedbackResponse(
                message="Feedback recorded",
                content_id=feedback.content_id,
                original_action=feedback.original_action,
                actual_action=feedback.actual_action,
                was_accurate=feedback.was_accurate,
            )

        if request_data.action == "reprocess":
            ensure_role(current_user, MODERATOR_ROLES, "Only moderators can reprocess content")
            outcome, previous_action = await service.reprocess(
                current_user.id,
                request_data.content,
                request_data.content_type,
                request_data.content_id,
            )
            return _process_response(outcome, previous_action)

        outcome = await service.process(
            current_user.id,
            request_data.content,
            request_data.content_type,
            request_data.content_id,
        )
    except ContentValidationError as exc:
        raise _content_error(exc) from exc
    except ModerationServiceError as exc:
        raise http_error_from_service(exc) from exc

    if outcome.decision.action is Recommendation.BLOCK:
        return _blocked_response(outcome)
    return _process_response(outcome)


@router.get(
    "/queue",
    summary="List the moderation queue",
    description="Pending queue items, oldest first.",
    response_model=list[QueueItemResponse],
    responses={
        **unauthorized_response(),
        **forbidden_response("Only moderators can view the moderation queue"),
    },
)
async def moderation_queue(
    queue_type: Literal["urgent", "review", "monitor"] | None = Query(None, alias="queueType"),
    limit_: int = Query(50, ge=1, le=200, alias="limit"),
    _moderator: User = Depends(
        require_roles(MODERATOR_ROLES, "Only moderators can view the moderation queue")
    ),
    uow: UnitOfWork = Depends(get_uow),
) -> list[QueueItemResponse]:
    items = await uow.moderation_service.list_queue(queue_type, limit_)
    return [QueueItemResponse.model_validate(item) for item in items]


@router.get(
    "/decisions",
    summary="List my automated decisions",
    description="Automated moderation decisions on the caller's content, newest first.",
    response_model=list[DecisionLogEntry],
    responses={**unauthorized_response()},
)
async def my_decisions(
    limit_: int = Query(50, ge=1, le=200, alias="limit"),
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> list[DecisionLogEntry]:
    records = await uow.moderation_service.list_decisions(current_user.id, limit_)
    return [
        DecisionLogEntry(key=record.key, decision=record.value, updated_at=record.updated_at)
        for record in records
    ]
