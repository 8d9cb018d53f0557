"""FastAPI dependencies that hand loaded application state to the routes.

When the startup load failed the app is in the *unavailable* state: these
dependencies raise ``DatasetsUnavailableError``, which ``main`` maps to 503.
"""

from __future__ import annotations

from fastapi import Request

from application.exceptions import DatasetsUnavailableError
from application.use_cases.conversation import ConversationState
from domain.models import Datasets


def _unavailable(request: Request) -> DatasetsUnavailableError:
    load_error = getattr(request.app.state, "load_error", None)
    detail = str(load_error) if load_error else "Datasets have not been loaded"
    return DatasetsUnavailableError(detail)


async def get_datasets(request: Request) -> Datasets:
    """FastAPI dependency: the loaded dataset group."""
    datasets: Datasets | None = getattr(request.app.state, "datasets", None)
    if datasets is None:
        raise _unavailable(request)
    return datasets


async def get_conversation(request: Request) -> ConversationState:
    """FastAPI dependency: the session's conversation state."""
    conversation: ConversationState | None = getattr(request.app.state, "conversation", None)
    if conversation is None:
        raise _unavailable(request)
    return conversation
