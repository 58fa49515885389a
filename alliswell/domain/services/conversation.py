"""Client-side conversation state with crisis interception ahead of the relay."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from alliswell.domain import ChatRole, ChatTurn
from alliswell.domain.services.chat_relay import InvalidChatRequestError
from alliswell.domain.services.crisis import CrisisInterceptor


@dataclass(slots=True)
class ConversationOutcome:
    reply: str
    intercepted: bool = False
    resources: list[dict[str, str]] = field(default_factory=list)


# Sends (message, relayable history) and returns the server's outcome.
SendFn = Callable[[str, Sequence[ChatTurn]], Awaitable[ConversationOutcome]]


class Conversation:
    """Transcript kept by the caller; the server holds no chat state.

    Every outgoing message is checked for crisis phrases before ``send`` is
    awaited. An intercepted exchange is shown in ``turns`` but kept out of
    ``history``, so it is never replayed to the relay on later messages.
    The same applies when the server answers with a crisis response.
    """

    def __init__(self, interceptor: CrisisInterceptor | None = None) -> None:
        self.interceptor = interceptor or CrisisInterceptor()
        self.turns: list[ChatTurn] = []
        self._relayable: list[ChatTurn] = []

    @property
    def history(self) -> list[ChatTurn]:
        return list(self._relayable)

    def history_payload(self) -> list[dict[str, Any]]:
        return [{"role": turn.role.value, "text": turn.text} for turn in self._relayable]

    async def submit(self, text: str, send: SendFn) -> ConversationOutcome:
        message = text.strip()
        if not message:
            raise InvalidChatRequestError("Message is required")

        user_turn = ChatTurn(role=ChatRole.USER, text=message)
        self.turns.append(user_turn)

        check = self.interceptor.check(message)
        if check.intercepted:
            crisis = self.interceptor.response()
            self.turns.append(ChatTurn(role=ChatRole.ASSISTANT, text=crisis.message))
            return ConversationOutcome(
                reply=crisis.message, intercepted=True, resources=crisis.resources
            )

        outcome = await send(message, self.history)
        reply_turn = ChatTurn(role=ChatRole.ASSISTANT, text=outcome.reply)
        self.turns.append(reply_turn)
        if not outcome.intercepted:
            self._relayable.extend((user_turn, reply_turn))
        return outcome
