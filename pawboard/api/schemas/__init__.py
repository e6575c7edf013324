"""API request and response schemas.

Import request/response models from the submodules (e.g. auth_request_models,
community_response_models) or from this package for a single entry point.
"""

from __future__ import annotations

from pawboard.api.schemas.auth_request_models import LoginUserRequest, RegisterUserRequest
from pawboard.api.schemas.auth_response_models import (
    AccessTokenResponse,
    DeleteUserResponse,
    UserResponse,
)
from pawboard.api.schemas.community_request_models import (
    CreateQuestionRequest,
    DuplicateCheckRequest,
    DuplicateMarkRequest,
    QuestionQualityRequest,
)
from pawboard.api.schemas.community_response_models import (
    CreateQuestionResponse,
    DuplicateCheckResponse,
    DuplicateMarkResponse,
    QuestionQualityResponse,
    QuestionResponse,
    SimilarQuestion,
)
from pawboard.api.schemas.meta_response_models import HealthResponse
from pawboard.api.schemas.moderation_request_models import (
    AnalyzeContentRequest,
    AutoProcessRequest,
)
from pawboard.api.schemas.moderation_response_models import (
    BlockedContentDetails,
    DecisionLogEntry,
    FeedbackResponse,
    ProcessResponse,
    QueueItemResponse,
)

__all__ = [
    "AccessTokenResponse",
    "AnalyzeContentRequest",
    "AutoProcessRequest",
    "BlockedContentDetails",
    "CreateQuestionRequest",
    "CreateQuestionResponse",
    "DecisionLogEntry",
    "DeleteUserResponse",
    "DuplicateCheckRequest",
    "DuplicateCheckResponse",
    "DuplicateMarkRequest",
    "DuplicateMarkResponse",
    "FeedbackResponse",
    "HealthResponse",
    "LoginUserRequest",
    "ProcessResponse",
    "QueueItemResponse",
    "QuestionQualityRequest",
    "QuestionQualityResponse",
    "QuestionResponse",
    "RegisterUserRequest",
    "SimilarQuestion",
    "UserResponse",
]
