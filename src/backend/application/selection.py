"""Keyword-overlap relevance selection over the loaded datasets.

This is a filter, not a ranker: a record matches when its text contains any
query token as a substring, and matches keep their original dataset order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TypeVar

from domain.models import (
    Datasets,
    InteractionRecord,
    Issue,
    Recommendation,
    Selection,
    SentimentPeriod,
    SentimentSummary,
)

DEFAULT_INTERACTION_LIMIT = 5
DEFAULT_TREND_PERIODS = 3

ReportItem = TypeVar("ReportItem", Issue, Recommendation)


def tokenize(query: str) -> list[str]:
    """Lower-cased whitespace tokens; an empty or blank query yields none."""
    return query.lower().split()


def _contains_any(text: str, tokens: list[str]) -> bool:
    haystack = text.lower()
    return any(token in haystack for token in tokens)


def find_interactions(
    interactions: Iterable[InteractionRecord], tokens: list[str], limit: int
) -> tuple[InteractionRecord, ...]:
    """First ``limit`` records whose text contains any token."""
    if not tokens or limit <= 0:
        return ()
    matches: list[InteractionRecord] = []
    for record in interactions:
        if _contains_any(record.text, tokens):
            matches.append(record)
            if len(matches) >= limit:
                break
    return tuple(matches)


def find_report_items(items: Iterable[ReportItem], tokens: list[str]) -> tuple[ReportItem, ...]:
    """Issues or recommendations whose title or description contains any token."""
    if not tokens:
        return ()
    return tuple(
        item
        for item in items
        if _contains_any(item.title, tokens) or _contains_any(item.description, tokens)
    )


def summarize_sentiment(
    sentiment: Mapping[str, SentimentPeriod], trend_periods: int = DEFAULT_TREND_PERIODS
) -> SentimentSummary:
    """Earliest, latest and the last ``trend_periods`` periods in chronological order."""
    ordered = sorted(sentiment.values(), key=lambda period: period.period_date)
    if not ordered:
        return SentimentSummary(earliest=None, latest=None)
    trend = tuple(ordered[-trend_periods:]) if trend_periods > 0 else ()
    return SentimentSummary(earliest=ordered[0], latest=ordered[-1], trend=trend)


def select(
    query: str,
    datasets: Datasets,
    *,
    interaction_limit: int = DEFAULT_INTERACTION_LIMIT,
    trend_periods: int = DEFAULT_TREND_PERIODS,
) -> Selection:
    """Extract the query-relevant subset of every dataset.

    The sentiment summary never depends on the query so that the prompt always
    carries temporal trend context.
    """
    tokens = tokenize(query)
    return Selection(
        matching_interactions=find_interactions(datasets.interactions, tokens, interaction_limit),
        matching_issues=find_report_items(datasets.report.key_issues, tokens),
        matching_recommendations=find_report_items(datasets.report.recommendations, tokens),
        sentiment_summary=summarize_sentiment(datasets.sentiment, trend_periods),
    )
