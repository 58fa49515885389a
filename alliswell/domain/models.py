from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


@dataclass(slots=True)
class User:
    """Represents an authenticated account holder."""

    user_id: str
    name: str
    email: str = ""


@dataclass(slots=True, frozen=True)
class SessionRecord:
    """Server-held proof of authentication referenced by the browser cookie."""

    session_id: str
    user_id: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at


@dataclass(slots=True)
class RequestContext:
    """Per-request view of who is calling, passed explicitly to handlers."""

    user: User | None = None
    session_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(slots=True, frozen=True)
class ChatTurn:
    """One message of a conversation, replayed in order on every relay call."""

    role: ChatRole
    text: str


@dataclass(slots=True, frozen=True)
class AssessmentAnswer:
    question_index: int
    value: int


@dataclass(slots=True)
class AssessmentResult:
    """Outcome of scoring a completed questionnaire."""

    score: int
    max_score: int
    category: str
    description: str
    suggestions: list[str] = field(default_factory=list)
