"""Tests for the dataset loader — parsing, validation and atomic loading."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from application.exceptions import LoadError
from domain.infrastructure.dataset_loader import (
    ANALYSIS,
    INTERACTIONS,
    SENTIMENT,
    DatasetLoader,
    coerce_cell,
    parse_interactions,
    parse_report,
    parse_sentiment,
)

from conftest import ANALYSIS_DOC, INTERACTIONS_CSV, SENTIMENT_DOC


class TestCoerceCell:
    def test_integer(self):
        assert coerce_cell("1001") == 1001

    def test_float(self):
        assert coerce_cell("0.25") == 0.25

    def test_text_stays_text(self):
        assert coerce_cell("AmazonHelp") == "AmazonHelp"

    def test_empty_is_none(self):
        assert coerce_cell("") is None
        assert coerce_cell("   ") is None
        assert coerce_cell(None) is None


class TestParseInteractions:
    def test_rows_become_records(self):
        records = parse_interactions(INTERACTIONS_CSV)
        assert [r.tweet_id for r in records] == [1001, 1002, 1003]

    def test_blank_lines_skipped(self):
        records = parse_interactions(INTERACTIONS_CSV)
        assert len(records) == 3

    def test_numeric_fields_coerced(self):
        first = parse_interactions(INTERACTIONS_CSV)[0]
        assert first.tweet_id == 1001
        assert first.author_id == 115712
        assert first.response_tweet_id == 1002

    def test_text_fields_stay_text(self):
        second = parse_interactions(INTERACTIONS_CSV)[1]
        assert second.author_id == "AmazonHelp"
        assert second.created_at == "2017-10-31 22:12:03"

    def test_inbound_flag_parsed(self):
        records = parse_interactions(INTERACTIONS_CSV)
        assert records[0].inbound is True
        assert records[1].inbound is False

    def test_empty_reply_link_is_none(self):
        assert parse_interactions(INTERACTIONS_CSV)[1].response_tweet_id is None

    def test_numeric_looking_text_kept_verbatim(self):
        csv_text = "tweet_id,author_id,inbound,created_at,text\n1,2,True,T,007\n"
        assert parse_interactions(csv_text)[0].text == "007"

    def test_header_only(self):
        assert parse_interactions("tweet_id,author_id,inbound,created_at,text\n") == ()

    def test_empty_input(self):
        assert parse_interactions("") == ()

    def test_missing_required_field_raises(self):
        with pytest.raises(ValueError):
            parse_interactions("tweet_id,text\n1,hello\n")


class TestParseDocuments:
    def test_sentiment_keyed_by_period(self):
        periods = parse_sentiment(SENTIMENT_DOC)
        assert set(periods) == {"2017-09", "2017-10", "2017-11", "2017-12"}
        assert periods["2017-10"].positive == 410

    def test_sentiment_rejects_unparseable_period(self):
        bad = {"monthly_sentiment": {"someday": {"average_score": 0, "positive": 0, "negative": 0, "neutral": 0}}}
        with pytest.raises(ValueError):
            parse_sentiment(bad)

    def test_report_fields(self):
        report = parse_report(ANALYSIS_DOC)
        assert report.timestamp == "2024-11-20T14:32:10.000Z"
        assert [i.title for i in report.key_issues] == ["Delayed deliveries", "Refund processing"]
        assert report.model == "llama3.1"
        assert report.metrics is not None
        assert report.metrics.prompt_eval_count == 2048

    def test_report_requires_wrapper(self):
        with pytest.raises(ValueError):
            parse_report(ANALYSIS_DOC["analysisData"])


class TestDatasetLoaderFiles:
    async def test_loads_all_three(self, data_files: dict[str, Path]):
        datasets = await DatasetLoader().load(
            data_files["analysis"], data_files["sentiment"], data_files["interactions"]
        )
        assert len(datasets.interactions) == 3
        assert len(datasets.sentiment) == 4
        assert len(datasets.report.recommendations) == 2

    async def test_missing_file_names_source(self, data_files: dict[str, Path], tmp_path: Path):
        with pytest.raises(LoadError) as exc_info:
            await DatasetLoader().load(
                data_files["analysis"], tmp_path / "nope.json", data_files["interactions"]
            )
        assert exc_info.value.source == SENTIMENT

    async def test_invalid_json_names_source(self, data_files: dict[str, Path]):
        data_files["analysis"].write_text("{not json", encoding="utf-8")
        with pytest.raises(LoadError) as exc_info:
            await DatasetLoader().load(
                data_files["analysis"], data_files["sentiment"], data_files["interactions"]
            )
        assert exc_info.value.source == ANALYSIS

    async def test_shape_mismatch_names_source(self, data_files: dict[str, Path]):
        data_files["interactions"].write_text("id,body\n1,hello\n", encoding="utf-8")
        with pytest.raises(LoadError) as exc_info:
            await DatasetLoader().load(
                data_files["analysis"], data_files["sentiment"], data_files["interactions"]
            )
        assert exc_info.value.source == INTERACTIONS

    async def test_load_error_is_value_error(self):
        assert issubclass(LoadError, ValueError)


class TestDatasetLoaderUrls:
    @staticmethod
    def _client(status: int = 200) -> httpx.AsyncClient:
        bodies = {
            "/analysis.json": json.dumps(ANALYSIS_DOC),
            "/sentiment.json": json.dumps(SENTIMENT_DOC),
            "/tweets.csv": INTERACTIONS_CSV,
        }

        def handler(request: httpx.Request) -> httpx.Response:
            if status != 200 and request.url.path == "/tweets.csv":
                return httpx.Response(status)
            return httpx.Response(200, text=bodies[request.url.path])

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    async def test_fetches_over_http(self):
        async with self._client() as client:
            datasets = await DatasetLoader(client=client).load(
                "http://data.test/analysis.json",
                "http://data.test/sentiment.json",
                "http://data.test/tweets.csv",
            )
        assert len(datasets.interactions) == 3

    async def test_http_error_names_source(self):
        async with self._client(status=404) as client:
            with pytest.raises(LoadError) as exc_info:
                await DatasetLoader(client=client).load(
                    "http://data.test/analysis.json",
                    "http://data.test/sentiment.json",
                    "http://data.test/tweets.csv",
                )
        assert exc_info.value.source == INTERACTIONS

    async def test_malformed_url_names_source(self, data_files: dict[str, Path]):
        async with self._client() as client:
            with pytest.raises(LoadError) as exc_info:
                await DatasetLoader(client=client).load(
                    "http://data.test:notaport/analysis.json",
                    data_files["sentiment"],
                    data_files["interactions"],
                )
        assert exc_info.value.source == ANALYSIS

    async def test_failure_cancels_other_fetches(self, data_files: dict[str, Path], tmp_path: Path):
        completed: list[str] = []

        async def slow_handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.2)
            completed.append(request.url.path)
            return httpx.Response(200, text=json.dumps(ANALYSIS_DOC))

        async with httpx.AsyncClient(transport=httpx.MockTransport(slow_handler)) as client:
            with pytest.raises(LoadError) as exc_info:
                await DatasetLoader(client=client).load(
                    "http://data.test/analysis.json",
                    tmp_path / "missing.json",
                    data_files["interactions"],
                )

            pending = [
                task
                for task in asyncio.all_tasks()
                if not task.done() and "_fetch" in task.get_coro().__qualname__
            ]
            assert pending == []

            await asyncio.sleep(0.3)

        assert exc_info.value.source == SENTIMENT
        assert completed == []


def test_loader_satisfies_protocol():
    from domain.protocols import IDatasetLoader

    assert isinstance(DatasetLoader(), IDatasetLoader)
