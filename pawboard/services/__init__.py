from pawboard.services.auth_service import (
    AuthenticationError,
    AuthService,
    InvalidCredentialsError,
    PasswordTooLongError,
    UserAlreadyExistsError,
)
from pawboard.services.moderation_service import ModerationService, ModerationServiceError
from pawboard.services.question_service import QuestionService, QuestionServiceError

__all__ = [
    "AuthService",
    "AuthenticationError",
    "InvalidCredentialsError",
    "ModerationService",
    "ModerationServiceError",
    "PasswordTooLongError",
    "QuestionService",
    "QuestionServiceError",
    "UserAlreadyExistsError",
]
