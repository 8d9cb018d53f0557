"""Dashboard route — sentiment chart series and the analysis report sidebar."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from application.use_cases.dashboard import build_dashboard
from domain.models import Datasets
from presentation.dependencies import get_datasets
from presentation.schemas import ChartPointResponse, DashboardResponse

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(datasets: Datasets = Depends(get_datasets)):
    """Everything the dashboard renders besides the chat panel."""
    view = build_dashboard(datasets)
    return DashboardResponse(
        last_analyzed=view.last_analyzed,
        total_interactions=view.total_interactions,
        chart=[
            ChartPointResponse(
                date=p.date,
                sentiment=p.sentiment,
                positive=p.positive,
                negative=p.negative,
                neutral=p.neutral,
            )
            for p in view.chart
        ],
        key_issues=view.key_issues,
        recommendations=view.recommendations,
        analysis_model=view.analysis_model,
        metrics=view.metrics,
    )
