"""HTTP request/response schemas (Pydantic models) for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from domain.models import AnalysisMetrics, ChatMessage, Issue, Recommendation

# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    message: str = Field(description="The new user message")


class ChatResponse(BaseModel):
    """Response body from POST /chat."""

    accepted: bool = Field(
        description="False when the message was blank or another reply is still pending"
    )
    answer: str | None = Field(default=None, description="The assistant reply for this turn")
    messages: list[ChatMessage] = Field(
        default_factory=list, description="The full transcript after this turn"
    )


class TranscriptResponse(BaseModel):
    """Response body from GET /chat/messages."""

    sending: bool
    messages: list[ChatMessage] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class ChartPointResponse(BaseModel):
    date: str
    sentiment: float
    positive: int
    negative: int
    neutral: int


class DashboardResponse(BaseModel):
    """Everything the dashboard page renders outside of the chat panel."""

    last_analyzed: str
    total_interactions: int
    chart: list[ChartPointResponse]
    key_issues: list[Issue]
    recommendations: list[Recommendation]
    analysis_model: str | None = None
    metrics: AnalysisMetrics | None = None
