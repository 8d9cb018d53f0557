"""Chat use case — one selection, composition and generation round-trip.

This module contains the business logic for answering a single question
against the loaded datasets.  It has **no dependency on FastAPI** and can be
invoked from any transport layer (HTTP, CLI, tests, ...).
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from loguru import logger

from application.prompt import PromptContext, compose
from application.selection import DEFAULT_INTERACTION_LIMIT, DEFAULT_TREND_PERIODS, select
from domain.models import Datasets, Selection
from domain.protocols import IGenerationClient

# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass
class ChatResult:
    """Result of a single chat turn, including evidence counts for diagnostics."""

    answer: str
    model: str | None = None
    latency_ms: int = 0
    matched_interactions: int = 0
    matched_issues: int = 0
    matched_recommendations: int = 0


# ---------------------------------------------------------------------------
# Use case
# ---------------------------------------------------------------------------


class ChatUseCase:
    """Answers one question from the three datasets.

    Parameters
    ----------
    datasets:
        The fully loaded dataset group.
    generation_client:
        Backend that turns the composed prompt into text.
    interaction_limit:
        Maximum number of example interactions placed in the prompt.
    trend_periods:
        Number of most recent sentiment periods placed in the prompt.
    """

    def __init__(
        self,
        datasets: Datasets,
        generation_client: IGenerationClient,
        *,
        interaction_limit: int = DEFAULT_INTERACTION_LIMIT,
        trend_periods: int = DEFAULT_TREND_PERIODS,
    ) -> None:
        self.datasets = datasets
        self.generation_client = generation_client
        self.interaction_limit = interaction_limit
        self.trend_periods = trend_periods
        self._context = PromptContext.from_datasets(datasets)

    def build_prompt(self, query: str) -> tuple[str, Selection]:
        """Select the relevant evidence for *query* and compose the prompt around it."""
        selection = select(
            query,
            self.datasets,
            interaction_limit=self.interaction_limit,
            trend_periods=self.trend_periods,
        )
        logger.debug(
            "Selection | interactions={} issues={} recommendations={}",
            len(selection.matching_interactions),
            len(selection.matching_issues),
            len(selection.matching_recommendations),
        )
        return compose(query, selection, self._context), selection

    async def execute(self, query: str) -> ChatResult:
        """Run a chat turn and return the answer (reply or fallback text)."""
        prompt, selection = self.build_prompt(query)

        t0 = time.perf_counter()
        answer = await self.generation_client.generate(prompt)
        latency = int((time.perf_counter() - t0) * 1000)

        logger.info(
            "Chat completed | latency={}ms | interactions={} | issues={} | recommendations={}",
            latency,
            len(selection.matching_interactions),
            len(selection.matching_issues),
            len(selection.matching_recommendations),
        )

        return ChatResult(
            answer=answer,
            model=self.generation_client.model,
            latency_ms=latency,
            matched_interactions=len(selection.matching_interactions),
            matched_issues=len(selection.matching_issues),
            matched_recommendations=len(selection.matching_recommendations),
        )
