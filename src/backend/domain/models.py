"""Domain entities and value objects.

These are the core data structures of the customer-service insights domain,
independent of any infrastructure or framework concerns.  Dataset records are
frozen pydantic models so that shape validation happens once, at the load
boundary, and nothing downstream can mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Period keys
# ---------------------------------------------------------------------------

_PERIOD_FORMATS = ("%Y-%m", "%Y-%m-%d", "%Y/%m", "%B %Y", "%b %Y")


def parse_period(key: str) -> date:
    """Parse a sentiment period key (``2020-03``, ``2020-03-01``, ...) into a date.

    Raises:
        ValueError: If the key matches none of the supported formats.
    """
    text = key.strip()
    for fmt in _PERIOD_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError(f"Unrecognised sentiment period key: {key!r}") from None


# ---------------------------------------------------------------------------
# Dataset 1: interaction log
# ---------------------------------------------------------------------------


class InteractionRecord(BaseModel):
    """One row of the customer-service interaction log."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True, extra="ignore")

    tweet_id: int | str
    author_id: int | str
    inbound: bool
    created_at: str
    text: str
    response_tweet_id: int | str | None = None

    @property
    def speaker(self) -> str:
        """Display name for the side of the conversation this record came from."""
        return "Customer" if self.inbound else "Amazon"


# ---------------------------------------------------------------------------
# Dataset 2: monthly sentiment
# ---------------------------------------------------------------------------


class SentimentPeriod(BaseModel):
    """Aggregated sentiment for one period (month)."""

    model_config = ConfigDict(frozen=True)

    period: str
    average_score: float
    positive: int = Field(ge=0)
    negative: int = Field(ge=0)
    neutral: int = Field(ge=0)

    @field_validator("period")
    @classmethod
    def _period_must_parse(cls, value: str) -> str:
        parse_period(value)
        return value

    @property
    def period_date(self) -> date:
        return parse_period(self.period)


class SentimentAggregate(BaseModel):
    """Raw per-period values as they appear in the sentiment document."""

    average_score: float
    positive: int
    negative: int
    neutral: int


class SentimentDocument(BaseModel):
    """``{"monthly_sentiment": {<period>: {...}}}``"""

    monthly_sentiment: dict[str, SentimentAggregate]

    def to_periods(self) -> dict[str, SentimentPeriod]:
        return {
            key: SentimentPeriod(period=key, **agg.model_dump())
            for key, agg in self.monthly_sentiment.items()
        }


# ---------------------------------------------------------------------------
# Dataset 3: analysis report
# ---------------------------------------------------------------------------


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | str
    title: str
    description: str


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | str
    title: str
    description: str


class AnalysisMetrics(BaseModel):
    """Run statistics recorded by the model that produced the report."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_duration: str | None = Field(default=None, alias="totalDuration")
    prompt_eval_count: int | None = Field(default=None, alias="promptEvalCount")
    eval_count: int | None = Field(default=None, alias="evalCount")


class AnalysisReport(BaseModel):
    """Pre-computed issues and recommendations for the support channel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str
    key_issues: tuple[Issue, ...] = Field(alias="keyIssues")
    recommendations: tuple[Recommendation, ...]
    model: str | None = None
    metrics: AnalysisMetrics | None = None


class AnalysisDocument(BaseModel):
    """``{"analysisData": {...}}``"""

    analysis_data: AnalysisReport = Field(alias="analysisData")


# ---------------------------------------------------------------------------
# Loaded dataset group
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Datasets:
    """The three datasets, only ever constructed as a complete group."""

    interactions: tuple[InteractionRecord, ...]
    sentiment: dict[str, SentimentPeriod]
    report: AnalysisReport


# ---------------------------------------------------------------------------
# Relevance selection result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SentimentSummary:
    """Chronological sentiment context, independent of the user query."""

    earliest: SentimentPeriod | None
    latest: SentimentPeriod | None
    trend: tuple[SentimentPeriod, ...] = ()


@dataclass(frozen=True)
class Selection:
    """Subsets of each dataset relevant to one query."""

    matching_interactions: tuple[InteractionRecord, ...]
    matching_issues: tuple[Issue, ...]
    matching_recommendations: tuple[Recommendation, ...]
    sentiment_summary: SentimentSummary = field(
        default_factory=lambda: SentimentSummary(earliest=None, latest=None)
    )


# ---------------------------------------------------------------------------
# Shared DTO (used by both use-case and presentation layers)
# ---------------------------------------------------------------------------

# Assistant reply shown whenever a turn cannot be answered.
FALLBACK_MESSAGE = "Sorry, I encountered an error processing your request. Please try again."


class ChatMessage(BaseModel):
    """A single message in the conversation transcript."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")
