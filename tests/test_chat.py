"""Tests for the assistant chat transcript."""

from __future__ import annotations

import asyncio
from typing import Sequence

from cinemai.chat import FALLBACK_REPLY, GREETING, AssistantChat
from cinemai.exceptions import AICompletionError
from cinemai.models import ChatMessage


class _EchoAI:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[list[str], str]] = []

    async def chat(self, history: Sequence[ChatMessage], message: str) -> str:
        self.calls.append(([turn.text for turn in history], message))
        if self.fail:
            raise AICompletionError("offline")
        return f"echo: {message}"


def test_chat_starts_with_greeting() -> None:
    chat = AssistantChat(_EchoAI())  # type: ignore[arg-type]

    assert [message.text for message in chat.messages] == [GREETING]
    assert chat.messages[0].role == "model"


def test_send_appends_user_turn_and_reply() -> None:
    ai = _EchoAI()
    chat = AssistantChat(ai)  # type: ignore[arg-type]

    reply = asyncio.run(chat.send("something spooky"))

    assert reply is not None
    assert reply.text == "echo: something spooky"
    assert [message.role for message in chat.messages] == ["model", "user", "model"]
    assert ai.calls == [([GREETING], "something spooky")]


def test_blank_messages_are_ignored() -> None:
    ai = _EchoAI()
    chat = AssistantChat(ai)  # type: ignore[arg-type]

    assert asyncio.run(chat.send("   ")) is None
    assert len(chat.messages) == 1
    assert ai.calls == []


def test_failures_produce_apology() -> None:
    chat = AssistantChat(_EchoAI(fail=True))  # type: ignore[arg-type]

    reply = asyncio.run(chat.send("hello"))

    assert reply is not None
    assert reply.text == FALLBACK_REPLY
