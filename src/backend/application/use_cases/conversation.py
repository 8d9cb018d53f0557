"""Conversation state — the transcript and the send state machine.

``ConversationState`` is the single owner of the chat transcript.  A send
moves it ``Idle → Sending → Idle``; a second send while one is in flight is
silently rejected, so two exchanges can never interleave.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import Enum

from loguru import logger

from application.use_cases.chat import ChatUseCase
from domain.models import FALLBACK_MESSAGE, ChatMessage


class SendState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


class ConversationState:
    """Append-only transcript plus the in-flight guard for one chat session.

    Parameters
    ----------
    chat_use_case:
        Runs selection, composition and generation for one query.
    """

    def __init__(self, chat_use_case: ChatUseCase) -> None:
        self.chat_use_case = chat_use_case
        self.pending_input = ""
        self.state = SendState.IDLE
        self._messages: list[ChatMessage] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    @property
    def messages(self) -> Sequence[ChatMessage]:
        """Read-only snapshot of the transcript, oldest first."""
        return tuple(self._messages)

    @property
    def is_sending(self) -> bool:
        return self.state is SendState.SENDING

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def update_input(self, text: str) -> None:
        """Store the draft the user is typing."""
        self.pending_input = text

    async def send(self, query: str | None = None) -> ChatMessage | None:
        """Submit *query* (or the pending draft) and append the reply.

        Returns:
            The appended assistant message, or ``None`` if the send was
            rejected because the query is blank or another send is in flight.
        """
        text = self.pending_input if query is None else query
        if not text.strip():
            return None
        if self.is_sending:
            logger.debug("Send rejected: a reply is still pending")
            return None

        # Guard is set before the first await so a concurrent send sees it.
        self.state = SendState.SENDING
        self._messages.append(ChatMessage(role="user", content=text))
        self.pending_input = ""

        try:
            result = await self.chat_use_case.execute(text)
            reply = ChatMessage(role="assistant", content=result.answer)
        except asyncio.CancelledError:
            self._messages.append(ChatMessage(role="assistant", content=FALLBACK_MESSAGE))
            self.state = SendState.IDLE
            raise
        except Exception:
            logger.exception("Chat turn failed; replying with fallback message")
            reply = ChatMessage(role="assistant", content=FALLBACK_MESSAGE)

        self._messages.append(reply)
        self.state = SendState.IDLE
        return reply
