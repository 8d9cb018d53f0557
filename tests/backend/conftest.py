"""Shared fixtures for backend tests."""

import sys
from pathlib import Path

# Add src/backend to sys.path so imports like `from domain.models import ...` work.
_BACKEND_SRC = str(Path(__file__).resolve().parent.parent.parent / "src" / "backend")
if _BACKEND_SRC not in sys.path:
    sys.path.insert(0, _BACKEND_SRC)

import json

import pytest

from domain.models import AnalysisReport, Datasets, InteractionRecord, Issue, Recommendation, SentimentPeriod


def pytest_configure(config):
    """Set pytest-asyncio mode to auto so async test functions work without markers."""
    config.option.asyncio_mode = "auto"


ANALYSIS_DOC = {
    "analysisData": {
        "timestamp": "2024-11-20T14:32:10.000Z",
        "model": "llama3.1",
        "keyIssues": [
            {"id": 1, "title": "Delayed deliveries", "description": "Packages arrive after the promised date."},
            {"id": 2, "title": "Refund processing", "description": "Refunds take too long to post."},
        ],
        "recommendations": [
            {"id": 1, "title": "Proactive delay notices", "description": "Notify customers when shipments slip."},
            {"id": 2, "title": "Refund status tracking", "description": "Show refund progress on the order page."},
        ],
        "metrics": {"totalDuration": "41.2s", "promptEvalCount": 2048, "evalCount": 512},
    }
}

SENTIMENT_DOC = {
    "monthly_sentiment": {
        "2017-11": {"average_score": 0.05, "positive": 380, "negative": 300, "neutral": 320},
        "2017-09": {"average_score": 0.18, "positive": 450, "negative": 180, "neutral": 370},
        "2017-12": {"average_score": -0.02, "positive": 330, "negative": 360, "neutral": 310},
        "2017-10": {"average_score": 0.123, "positive": 410, "negative": 220, "neutral": 370},
    }
}

INTERACTIONS_CSV = """\
tweet_id,author_id,inbound,created_at,text,response_tweet_id
1001,115712,True,2017-10-31 22:10:47,my package is three days late,1002
1002,AmazonHelp,False,2017-10-31 22:12:03,Sorry for the delay! Please DM us your order number.,

1003,115713,True,2017-11-01 09:45:12,still waiting on my refund for the headphones,1004
"""


@pytest.fixture()
def interactions() -> tuple[InteractionRecord, ...]:
    return (
        InteractionRecord(
            tweet_id=1, author_id=115712, inbound=True, created_at="T1", text="My package is three days late"
        ),
        InteractionRecord(
            tweet_id=2, author_id="AmazonHelp", inbound=False, created_at="T2", text="Sorry about the late package!"
        ),
        InteractionRecord(
            tweet_id=3, author_id=115713, inbound=True, created_at="T3", text="Please refund my order"
        ),
        InteractionRecord(
            tweet_id=4, author_id=115714, inbound=True, created_at="T4", text="Cannot log in to my account"
        ),
    )


@pytest.fixture()
def report() -> AnalysisReport:
    return AnalysisReport(
        timestamp="2024-11-20T14:32:10.000Z",
        key_issues=(
            Issue(id=1, title="Delayed deliveries", description="Packages arrive after the promised date."),
            Issue(id=2, title="Refund processing", description="Refunds take too long to post."),
        ),
        recommendations=(
            Recommendation(id=1, title="Proactive delay notices", description="Notify customers when shipments slip."),
            Recommendation(id=2, title="Refund status tracking", description="Show refund progress on the order page."),
        ),
    )


@pytest.fixture()
def sentiment() -> dict[str, SentimentPeriod]:
    raw = SENTIMENT_DOC["monthly_sentiment"]
    return {key: SentimentPeriod(period=key, **values) for key, values in raw.items()}


@pytest.fixture()
def datasets(interactions, sentiment, report) -> Datasets:
    return Datasets(interactions=interactions, sentiment=sentiment, report=report)


@pytest.fixture()
def data_files(tmp_path: Path) -> dict[str, Path]:
    """The three dataset files written to a temp directory."""
    analysis = tmp_path / "amazonhelp_analysis.json"
    sentiment_path = tmp_path / "amazon_monthly_sentiment.json"
    tweets = tmp_path / "amazonhelp_tweets.csv"
    analysis.write_text(json.dumps(ANALYSIS_DOC), encoding="utf-8")
    sentiment_path.write_text(json.dumps(SENTIMENT_DOC), encoding="utf-8")
    tweets.write_text(INTERACTIONS_CSV, encoding="utf-8")
    return {"analysis": analysis, "sentiment": sentiment_path, "interactions": tweets}
