"""Dashboard view-model built from the loaded datasets."""

from __future__ import annotations

from dataclasses import dataclass, field

from domain.models import AnalysisMetrics, Datasets, Issue, Recommendation


@dataclass(frozen=True)
class ChartPoint:
    """One point of the sentiment line chart."""

    date: str
    sentiment: float
    positive: int
    negative: int
    neutral: int


@dataclass(frozen=True)
class DashboardView:
    last_analyzed: str
    total_interactions: int
    chart: list[ChartPoint] = field(default_factory=list)
    key_issues: list[Issue] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    analysis_model: str | None = None
    metrics: AnalysisMetrics | None = None


def build_dashboard(datasets: Datasets) -> DashboardView:
    """Chart series in chronological order plus the full report sidebar."""
    periods = sorted(datasets.sentiment.values(), key=lambda p: p.period_date)
    report = datasets.report
    return DashboardView(
        last_analyzed=report.timestamp,
        total_interactions=len(datasets.interactions),
        chart=[
            ChartPoint(
                date=p.period,
                sentiment=p.average_score,
                positive=p.positive,
                negative=p.negative,
                neutral=p.neutral,
            )
            for p in periods
        ],
        key_issues=list(report.key_issues),
        recommendations=list(report.recommendations),
        analysis_model=report.model,
        metrics=report.metrics,
    )
