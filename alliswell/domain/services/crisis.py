"""Crisis interception: divert self-harm disclosures away from the chat relay.

Matching is a plain case-insensitive substring test against a fixed phrase
list. A single hit intercepts the message. There is no scoring and no negation
handling, so "I would never kill myself" is intercepted as well.

The check is synchronous and local so it keeps working when the AI service
is unreachable.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from alliswell.domain.reference_data import (
    CRISIS_PHRASES,
    CRISIS_RESOURCES,
    CRISIS_SUPPORT_MESSAGE,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class CrisisCheck:
    """Result of scanning one outgoing chat message."""

    intercepted: bool
    matched_phrases: tuple[str, ...] = ()


@dataclass(frozen=True)
class CrisisResponse:
    """What the user sees instead of an AI reply."""

    message: str = CRISIS_SUPPORT_MESSAGE
    resources: list[dict[str, str]] = field(default_factory=lambda: list(CRISIS_RESOURCES))

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message, "resources": self.resources}


class CrisisInterceptor:
    """Case-insensitive phrase matcher run before any relay call."""

    def __init__(self, phrases: Iterable[str] | None = None) -> None:
        source = CRISIS_PHRASES if phrases is None else phrases
        self.phrases: tuple[str, ...] = tuple(
            phrase.strip().lower() for phrase in source if phrase and phrase.strip()
        )

    def check(self, message: str) -> CrisisCheck:
        lowered = message.lower()
        matched = tuple(phrase for phrase in self.phrases if phrase in lowered)
        if matched:
            # Log which phrases hit, never the message itself
            logger.warning("crisis_intercepted", matched_phrases=list(matched))
        return CrisisCheck(intercepted=bool(matched), matched_phrases=matched)

    def is_crisis(self, message: str) -> bool:
        return self.check(message).intercepted

    def response(self) -> CrisisResponse:
        return CrisisResponse()
