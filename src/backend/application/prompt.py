"""Builds the grounded prompt sent to the local model.

``compose`` is a pure function: identical inputs always produce a
byte-identical prompt.  Every dataset section is always present; when a
section has no evidence it says so explicitly instead of disappearing.
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.models import Datasets, InteractionRecord, Selection, SentimentPeriod

INSTRUCTIONS_MARKER = "INSTRUCTIONS:"
QUESTION_MARKER = "User Question:"

# The model must stop rather than continue writing a new prompt section.
STOP_SEQUENCES: tuple[str, ...] = (QUESTION_MARKER, INSTRUCTIONS_MARKER)

PREAMBLE = """\
You are a data analysis assistant working with Amazon customer service data. \
You have access to these three data sources:

AVAILABLE DATA SOURCES:"""

INSTRUCTIONS = f"""\
{INSTRUCTIONS_MARKER}
1. Only use data from these three sources
2. If information isn't in these sources, state that explicitly
3. Keep responses focused on the actual data
4. Please summarize the key information without extra details
5. Give me the most relevant fact, no additional context"""

CLOSING = "Based on ONLY the above data sources, provide an evidence-based response:"

NO_INTERACTIONS = "  * No interactions in the dataset match this query."
NO_SENTIMENT = "  * Sentiment data is not available."
NO_ISSUES = "  * No key issues match this query."
NO_RECOMMENDATIONS = "  * No recommendations match this query."


@dataclass(frozen=True)
class PromptContext:
    """Dataset-level facts the prompt reports regardless of the query."""

    total_interactions: int
    report_timestamp: str

    @classmethod
    def from_datasets(cls, datasets: Datasets) -> PromptContext:
        return cls(
            total_interactions=len(datasets.interactions),
            report_timestamp=datasets.report.timestamp,
        )


# ---------------------------------------------------------------------------
# Line renderers
# ---------------------------------------------------------------------------


def render_interaction(record: InteractionRecord) -> str:
    return f'  * [{record.created_at}] {record.speaker}: "{record.text}"'


def render_period(period: SentimentPeriod) -> str:
    return (
        f"  * {period.period}: Score={period.average_score:.2f} "
        f"({period.positive} positive, {period.negative} negative, {period.neutral} neutral)"
    )


def _lines(rendered: list[str], empty: str) -> str:
    return "\n".join(rendered) if rendered else empty


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _interactions_section(selection: Selection, context: PromptContext) -> str:
    examples = _lines([render_interaction(r) for r in selection.matching_interactions], NO_INTERACTIONS)
    return (
        "1. amazonhelp_tweets.csv - Customer Service Interactions:\n"
        f"- Total tweets in dataset: {context.total_interactions}\n"
        "- Tweet fields: tweet_id, author_id, inbound, created_at, text, response_tweet_id\n"
        "- Relevant examples for this query:\n"
        f"{examples}"
    )


def _sentiment_section(selection: Selection) -> str:
    summary = selection.sentiment_summary
    if summary.earliest is None or summary.latest is None:
        time_range = "not available"
    else:
        time_range = f"{summary.earliest.period} to {summary.latest.period}"
    trend = _lines([render_period(p) for p in summary.trend], NO_SENTIMENT)
    return (
        "2. amazon_monthly_sentiment.json - Sentiment Analysis:\n"
        f"- Time range: {time_range}\n"
        "- Recent trends:\n"
        f"{trend}"
    )


def _report_section(selection: Selection, context: PromptContext) -> str:
    issues = _lines(
        [f"  * {i.title}: {i.description}" for i in selection.matching_issues], NO_ISSUES
    )
    recommendations = _lines(
        [f"  * {r.title}: {r.description}" for r in selection.matching_recommendations],
        NO_RECOMMENDATIONS,
    )
    return (
        "3. amazonhelp_analysis.json - Service Analysis:\n"
        f"- Analysis timestamp: {context.report_timestamp}\n"
        "- Relevant Key Issues:\n"
        f"{issues}\n"
        "- Relevant Recommendations:\n"
        f"{recommendations}"
    )


def compose(query: str, selection: Selection, context: PromptContext) -> str:
    """Assemble the full prompt for one user question."""
    return "\n\n".join(
        [
            PREAMBLE,
            _interactions_section(selection, context),
            _sentiment_section(selection),
            _report_section(selection, context),
            INSTRUCTIONS,
            f"{QUESTION_MARKER} {query}",
            CLOSING,
        ]
    )
