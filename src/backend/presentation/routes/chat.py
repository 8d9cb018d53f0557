"""Chat routes — health, send, and transcript endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger

from application.use_cases.conversation import ConversationState
from presentation.dependencies import get_conversation
from presentation.schemas import ChatRequest, ChatResponse, TranscriptResponse

router = APIRouter(tags=["chat"])


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
async def health():
    """Simple liveness / readiness check."""
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    conversation: ConversationState = Depends(get_conversation),
):
    """Send a message and receive a grounded answer.

    Blank messages, and messages sent while a previous reply is still being
    generated, are not an error: they are ignored and ``accepted`` is false.
    """
    logger.info("POST /chat | msg={}", request.message[:60])

    reply = await conversation.send(request.message)
    return ChatResponse(
        accepted=reply is not None,
        answer=reply.content if reply else None,
        messages=list(conversation.messages),
    )


@router.get("/chat/messages", response_model=TranscriptResponse)
async def get_messages(conversation: ConversationState = Depends(get_conversation)):
    """The transcript so far, oldest first."""
    return TranscriptResponse(sending=conversation.is_sending, messages=list(conversation.messages))
