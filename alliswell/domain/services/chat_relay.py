"""
Chat relay.

Forwards one user message plus the caller's conversation history to the
chat-completions API and returns the reply. Nothing is stored: the caller
keeps the history and resends it on every call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from alliswell.core.config import get_settings
from alliswell.domain import ChatRole, ChatTurn, User
from alliswell.libs.completions import ChatCompletionsClient, CompletionClient, CompletionError

logger = structlog.get_logger()


class ChatRelayError(Exception):
    """Base exception for chat relay errors."""


class InvalidChatRequestError(ChatRelayError):
    """Raised when the message is missing or empty."""


class ChatUnavailableError(ChatRelayError):
    """Raised when the external chat service fails for any reason."""

    def __init__(self, message: str = "Unable to process chat message") -> None:
        super().__init__(message)


@dataclass(slots=True)
class ChatReply:
    message: str
    timestamp: datetime

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "timestamp": self.timestamp.isoformat()}


class ChatRelay:
    """Stateless pass-through to the conversational AI service."""

    def __init__(
        self,
        client: CompletionClient | None = None,
        *,
        max_output_tokens: int | None = None,
        system_prompt: str | None = None,
    ) -> None:
        settings = get_settings()
        self.client = client or ChatCompletionsClient()
        self.max_output_tokens = (
            max_output_tokens
            if max_output_tokens is not None
            else settings.chat_max_output_tokens
        )
        self.system_prompt = (
            system_prompt if system_prompt is not None else settings.chat_system_prompt
        )

    def build_messages(self, message: str, history: Sequence[ChatTurn]) -> list[dict[str, str]]:
        """Map history plus the new message to chat API turns, preserving order."""
        messages: list[dict[str, str]] = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        for turn in history:
            messages.append({"role": ChatRole(turn.role).value, "content": turn.text})
        messages.append({"role": ChatRole.USER.value, "content": message})
        return messages

    async def send(
        self,
        message: str,
        history: Sequence[ChatTurn] = (),
        *,
        user: User,
    ) -> ChatReply:
        """
        Relay a message for an authenticated user.

        Raises:
            InvalidChatRequestError: empty message
            ChatUnavailableError: the external call failed
        """
        if not message or not message.strip():
            raise InvalidChatRequestError("Message is required")

        messages = self.build_messages(message, history)

        try:
            completion = await self.client.complete(messages, max_tokens=self.max_output_tokens)
        except CompletionError as exc:
            await logger.aerror(
                "chat_relay_failed",
                user_id=user.user_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise ChatUnavailableError() from exc

        reply = completion.text.strip()
        if not reply:
            await logger.aerror("chat_relay_empty_reply", user_id=user.user_id)
            raise ChatUnavailableError()

        await logger.ainfo(
            "chat_relay_success",
            user_id=user.user_id,
            history_turns=len(history),
            latency_ms=completion.latency_ms,
            completion_tokens=completion.completion_tokens,
        )
        return ChatReply(message=reply, timestamp=datetime.now(UTC))
