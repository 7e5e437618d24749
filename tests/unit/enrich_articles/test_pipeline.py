"""End-to-end tests for enrich_articles.pipeline."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from enrich_articles.clients.news_api import EverythingResponse
from enrich_articles.config import parse_config
from enrich_articles.enrich import EnrichmentServices
from enrich_articles.models import CategoryKeyword, Coordinates, RawArticle
from enrich_articles.pipeline import process_categories, run_enrichment
from enrich_articles.timing import TimingRecorder

CONFIG = parse_config({
    "api_urls": {
        "category_keywords_url": "http://keywords",
        "articles_url": "http://articles",
    },
})

WESTMINSTER = Coordinates(lat=Decimal("51.5007416"), lng=Decimal("-0.1246254"))


class FakeCompletions:
    """Answers the location prompt from a description -> location map."""

    def __init__(self, locations: dict[str, str]) -> None:
        self.locations = locations

    def complete(self, prompt: str, max_tokens: int, temperature: float = 0.7, top_p: float = 1.0):
        if prompt.startswith("Extract the location"):
            for description, location in self.locations.items():
                if prompt.endswith(description):
                    return location
            return ""
        if prompt.startswith("Extract the main content"):
            return "Main content."
        return "Summary."


class FakeGeocoder:
    def __init__(self, known: dict[str, Coordinates]) -> None:
        self.known = known

    def geocode(self, location: str) -> Coordinates | None:
        return self.known.get(location)


class FakeSearch:
    def __init__(self, responses: dict[str, EverythingResponse | Exception]) -> None:
        self.responses = responses
        self.queries: list[str] = []

    def get_everything(self, request):
        self.queries.append(request.q)
        response = self.responses[request.q]
        if isinstance(response, Exception):
            raise response
        return response


def ok(*articles: RawArticle) -> EverythingResponse:
    return EverythingResponse(status="ok", total_results=len(articles), articles=list(articles))


def make_services(store: MagicMock) -> EnrichmentServices:
    return EnrichmentServices(
        completions=FakeCompletions({"Thames flooding near Parliament": "Westminster, London"}),
        geocoder=FakeGeocoder({"Westminster, London": WESTMINSTER}),
        store=store,
    )


SEARCH_LABELS = ("Search for keyword", "Exception while searching for keyword")


def article_entries(recorder: TimingRecorder) -> list[str]:
    return [r.task_name for r in recorder.records if not r.task_name.startswith(SEARCH_LABELS)]


class TestProcessCategories:
    def test_one_located_one_skipped(self, tmp_path: Path) -> None:
        store = MagicMock()
        store.save.return_value = True
        search = FakeSearch({
            "flood": ok(
                RawArticle(title="Thames floods", description="Thames flooding near Parliament"),
                RawArticle(title="Rain continues", description="More rain expected"),
            ),
        })
        recorder = TimingRecorder(tmp_path / "times.txt")

        records = process_categories(
            [CategoryKeyword(id=1, category="flood", keyword="flood")],
            search,
            CONFIG.news_api,
            make_services(store),
            recorder,
        )

        assert len(records) == 1
        assert records[0].lat == Decimal("51.50074")
        assert records[0].lng == Decimal("-0.12463")
        assert records[0].disruption_type == "flood"
        store.save.assert_called_once_with(records[0])
        assert article_entries(recorder) == [
            "Processing article 'Thames floods'",
            "Skipping article 'Rain continues' due to unknown location",
        ]

    def test_refused_record_is_not_returned(self, tmp_path: Path) -> None:
        store = MagicMock()
        store.save.return_value = False
        search = FakeSearch({
            "flood": ok(RawArticle(title="Thames floods", description="Thames flooding near Parliament")),
        })
        recorder = TimingRecorder(tmp_path / "times.txt")

        records = process_categories(
            [CategoryKeyword(id=1, category="flood", keyword="flood")],
            search,
            CONFIG.news_api,
            make_services(store),
            recorder,
        )

        assert records == []
        store.save.assert_called_once()
        assert article_entries(recorder) == ["Processing article 'Thames floods'"]

    def test_search_failure_does_not_stop_later_categories(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        store = MagicMock()
        search = FakeSearch({
            "earthquake": ConnectionError("search service down"),
            "flood": ok(RawArticle(title="Thames floods", description="Thames flooding near Parliament")),
        })
        recorder = TimingRecorder(tmp_path / "times.txt")

        records = process_categories(
            [
                CategoryKeyword(id=1, category="earthquake", keyword="quake"),
                CategoryKeyword(id=2, category="flood", keyword="flood"),
            ],
            search,
            CONFIG.news_api,
            make_services(store),
            recorder,
        )

        assert search.queries == ["earthquake", "flood"]
        assert [r.disruption_type for r in records] == ["flood"]
        assert "search service down" in caplog.text
        assert article_entries(recorder) == ["Processing article 'Thames floods'"]
        assert recorder.records[0].task_name == (
            "Exception while searching for keyword 'earthquake': search service down"
        )

    def test_one_entry_per_article_regardless_of_outcome(self, tmp_path: Path) -> None:
        store = MagicMock()
        store.save.side_effect = [True, RuntimeError("socket closed")]
        articles = [
            RawArticle(title="A", description="Thames flooding near Parliament"),
            RawArticle(title="B", description="nowhere in particular"),
            RawArticle(title="C", description="Thames flooding near Parliament"),
        ]
        search = FakeSearch({"flood": ok(*articles)})
        recorder = TimingRecorder(tmp_path / "times.txt")

        process_categories(
            [CategoryKeyword(id=1, category="flood", keyword="flood")],
            search,
            CONFIG.news_api,
            make_services(store),
            recorder,
        )

        entries = article_entries(recorder)
        assert len(entries) == len(articles)
        assert entries[2] == "Exception while processing article 'C': socket closed"


@patch("enrich_articles.fetch_keywords.requests.get")
class TestRunEnrichment:
    def test_empty_keyword_body_writes_empty_timing_file(self, mock_get, tmp_path: Path) -> None:
        response = MagicMock()
        response.text = ""
        mock_get.return_value = response
        search = FakeSearch({})
        path = tmp_path / "StopwatchRecords.txt"

        records = run_enrichment(CONFIG, search, make_services(MagicMock()), TimingRecorder(path))

        assert records == []
        assert search.queries == []
        assert path.exists()
        assert path.read_text() == ""

    def test_full_run_flushes_entries(self, mock_get, tmp_path: Path) -> None:
        body = json.dumps({"$values": [{"id": 1, "category": "flood", "keyword": "flood"}]})
        response = MagicMock()
        response.text = body
        response.json.return_value = json.loads(body)
        mock_get.return_value = response
        store = MagicMock()
        store.save.return_value = True
        search = FakeSearch({
            "flood": ok(
                RawArticle(title="Thames floods", description="Thames flooding near Parliament"),
                RawArticle(title="Rain continues", description="More rain expected"),
            ),
        })
        path = tmp_path / "StopwatchRecords.txt"

        records = run_enrichment(CONFIG, search, make_services(store), TimingRecorder(path))

        assert len(records) == 1
        assert store.save.call_count == 1
        lines = path.read_text().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("Search for keyword 'flood',")
        assert lines[1].startswith("Processing article 'Thames floods',")
        assert lines[2].startswith("Skipping article 'Rain continues' due to unknown location,")

    def test_flushes_even_when_interrupted(self, mock_get, tmp_path: Path) -> None:
        body = json.dumps({"$values": [{"id": 1, "category": "flood", "keyword": "flood"}]})
        response = MagicMock()
        response.text = body
        response.json.return_value = json.loads(body)
        mock_get.return_value = response
        search = MagicMock()
        search.get_everything.side_effect = KeyboardInterrupt
        path = tmp_path / "StopwatchRecords.txt"

        with pytest.raises(KeyboardInterrupt):
            run_enrichment(CONFIG, search, make_services(MagicMock()), TimingRecorder(path))

        assert path.exists()
