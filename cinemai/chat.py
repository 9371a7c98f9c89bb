"""Conversational assistant transcript."""

from __future__ import annotations

import logging

from .discovery import AICompletionClient
from .models import ChatMessage

logger = logging.getLogger(__name__)

GREETING = (
    "Hi! I'm CinemAI 🎬. Tell me your mood or a movie you love, "
    "and I'll find your next binge!"
)
FALLBACK_REPLY = (
    "I'm having a bit of trouble connecting to the mainframe right now. "
    "Try again in a moment! 🤖"
)


class AssistantChat:
    """Keep the running conversation with the assistant."""

    def __init__(self, ai: AICompletionClient, *, greeting: str = GREETING):
        self._ai = ai
        self._messages: list[ChatMessage] = [ChatMessage(role="model", text=greeting)]

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    async def send(self, message: str) -> ChatMessage | None:
        """Send ``message`` and return the assistant's reply.

        Blank messages are ignored and return ``None``.
        """

        if not message.strip():
            return None

        history = list(self._messages)
        self._messages.append(ChatMessage(role="user", text=message))
        try:
            text = await self._ai.chat(history, message)
        except Exception as exc:
            logger.warning("Assistant chat failed: %s", exc)
            text = FALLBACK_REPLY
        reply = ChatMessage(role="model", text=text or FALLBACK_REPLY)
        self._messages.append(reply)
        return reply
