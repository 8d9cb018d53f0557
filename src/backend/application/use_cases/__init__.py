"""Use-case layer — business logic decoupled from the HTTP transport."""

from application.use_cases.chat import ChatResult, ChatUseCase
from application.use_cases.conversation import ConversationState, SendState
from application.use_cases.dashboard import DashboardView, build_dashboard

__all__ = [
    "ChatResult",
    "ChatUseCase",
    "ConversationState",
    "DashboardView",
    "SendState",
    "build_dashboard",
]
