"""Loader for the three dashboard datasets (report, sentiment, interaction log).

Sources may be local file paths or ``http(s)://`` URLs.  All three are fetched
concurrently and validated at this boundary; any failure raises ``LoadError``
naming the source, and no partial result is ever returned.
"""

from __future__ import annotations

import asyncio
import csv
import io
import json
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import ValidationError

from application.exceptions import LoadError
from domain.models import (
    AnalysisDocument,
    AnalysisReport,
    Datasets,
    InteractionRecord,
    SentimentDocument,
    SentimentPeriod,
)

ANALYSIS = "analysis report"
SENTIMENT = "sentiment summary"
INTERACTIONS = "interaction log"

T = TypeVar("T")

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")


# ---------------------------------------------------------------------------
# Parsing helpers (pure, no I/O)
# ---------------------------------------------------------------------------


def coerce_cell(value: str | None) -> int | float | str | None:
    """Turn a raw CSV cell into ``int``/``float`` when it looks numeric.

    Empty cells become ``None``; everything else stays text.
    """
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        return None
    if _INT_RE.match(stripped):
        return int(stripped)
    if _FLOAT_RE.match(stripped):
        return float(stripped)
    return value


def parse_interactions(text: str) -> tuple[InteractionRecord, ...]:
    """Parse the delimited interaction log (header row + one record per line)."""
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        return ()

    records: list[InteractionRecord] = []
    for row in reader:
        # Blank lines and rows of empty cells carry no record
        if not any((cell or "").strip() for cell in row.values() if isinstance(cell, str)):
            continue
        values = {key: coerce_cell(cell) for key, cell in row.items() if key is not None}
        # Message text is kept verbatim even when it looks numeric
        values["text"] = row.get("text") or ""
        records.append(InteractionRecord.model_validate(values))
    return tuple(records)


def parse_sentiment(raw: Any) -> dict[str, SentimentPeriod]:
    """Validate the sentiment document and key it by period."""
    return SentimentDocument.model_validate(raw).to_periods()


def parse_report(raw: Any) -> AnalysisReport:
    """Validate the analysis document and return its report body."""
    return AnalysisDocument.model_validate(raw).analysis_data


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class DatasetLoader:
    """Fetches and parses the three datasets as one atomic group.

    Parameters
    ----------
    client:
        Optional ``httpx.AsyncClient`` used for URL sources.  When omitted a
        short-lived client is created per load.
    timeout:
        Per-request timeout (seconds) for URL sources.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0) -> None:
        self.client = client
        self.timeout = timeout

    async def load(
        self,
        analysis_source: str | Path,
        sentiment_source: str | Path,
        interactions_source: str | Path,
    ) -> Datasets:
        """Load all three datasets concurrently.

        Raises:
            LoadError: If any source cannot be fetched, decoded, or validated.
        """
        if self.client is None:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await self._load_all(client, analysis_source, sentiment_source, interactions_source)
        return await self._load_all(self.client, analysis_source, sentiment_source, interactions_source)

    async def _load_all(
        self,
        client: httpx.AsyncClient,
        analysis_source: str | Path,
        sentiment_source: str | Path,
        interactions_source: str | Path,
    ) -> Datasets:
        # The task group cancels the remaining fetches as soon as one fails.
        try:
            async with asyncio.TaskGroup() as tg:
                analysis_task = tg.create_task(self._fetch(client, ANALYSIS, analysis_source))
                sentiment_task = tg.create_task(self._fetch(client, SENTIMENT, sentiment_source))
                interactions_task = tg.create_task(
                    self._fetch(client, INTERACTIONS, interactions_source)
                )
        except ExceptionGroup as group:
            first = next((exc for exc in group.exceptions if isinstance(exc, LoadError)), None)
            if first is None:
                raise
            raise first

        analysis_text = analysis_task.result()
        sentiment_text = sentiment_task.result()
        interactions_text = interactions_task.result()

        report = self._parse(ANALYSIS, lambda: parse_report(json.loads(analysis_text)))
        sentiment = self._parse(SENTIMENT, lambda: parse_sentiment(json.loads(sentiment_text)))
        interactions = self._parse(INTERACTIONS, lambda: parse_interactions(interactions_text))

        logger.info(
            "Datasets loaded | interactions={} periods={} issues={} recommendations={}",
            len(interactions),
            len(sentiment),
            len(report.key_issues),
            len(report.recommendations),
        )
        return Datasets(interactions=interactions, sentiment=sentiment, report=report)

    async def _fetch(self, client: httpx.AsyncClient, name: str, source: str | Path) -> str:
        """Return the raw text of one source."""
        try:
            if _is_url(source):
                response = await client.get(str(source))
                response.raise_for_status()
                return response.text
            return await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
        except (httpx.HTTPError, httpx.InvalidURL, OSError, UnicodeDecodeError) as exc:
            logger.error("Could not fetch {} from {}: {}", name, source, exc)
            raise LoadError(name, str(exc)) from exc

    @staticmethod
    def _parse(name: str, parse: Callable[[], T]) -> T:
        try:
            return parse()
        except (json.JSONDecodeError, ValidationError, ValueError, csv.Error) as exc:
            logger.error("Could not parse {}: {}", name, exc)
            raise LoadError(name, str(exc)) from exc
