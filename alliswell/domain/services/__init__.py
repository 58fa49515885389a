"""Domain services."""

from alliswell.domain.services.assessment_scorer import (
    InvalidAssessmentError,
    resources_for_score,
    score,
)
from alliswell.domain.services.assessments import AssessmentService
from alliswell.domain.services.auth_service import (
    AuthService,
    InvalidCredentialsError,
    LogoutError,
    SessionUnavailableError,
    UnauthorizedError,
    UserExistsError,
)
from alliswell.domain.services.chat_relay import (
    ChatRelay,
    ChatReply,
    ChatUnavailableError,
    InvalidChatRequestError,
)
from alliswell.domain.services.conversation import Conversation, ConversationOutcome
from alliswell.domain.services.crisis import CrisisCheck, CrisisInterceptor, CrisisResponse

__all__ = [
    "AssessmentService",
    "AuthService",
    "ChatRelay",
    "ChatReply",
    "ChatUnavailableError",
    "Conversation",
    "ConversationOutcome",
    "CrisisCheck",
    "CrisisInterceptor",
    "CrisisResponse",
    "InvalidAssessmentError",
    "InvalidChatRequestError",
    "InvalidCredentialsError",
    "LogoutError",
    "SessionUnavailableError",
    "UnauthorizedError",
    "UserExistsError",
    "resources_for_score",
    "score",
]
