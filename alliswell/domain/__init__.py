from alliswell.domain.models import (
    AssessmentAnswer,
    AssessmentResult,
    ChatRole,
    ChatTurn,
    RequestContext,
    SessionRecord,
    User,
)

__all__ = [
    "AssessmentAnswer",
    "AssessmentResult",
    "ChatRole",
    "ChatTurn",
    "RequestContext",
    "SessionRecord",
    "User",
]
