"""
Tests for openFDA and RSS collectors (network calls mocked).
"""
from unittest.mock import Mock, patch

import feedparser
import requests

from collectors import OpenFDACollector, RSSCollector
from tests.conftest import utc

START = utc(2024, 1, 3)
END = utc(2024, 1, 10)


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    return response


class TestOpenFDACollector:

    @patch("collectors.openfda_collector.requests.get")
    def test_fetch_builds_date_query(self, mock_get):
        mock_get.return_value = _response(payload={"results": [
            {"recall_number": "F-1", "recalling_firm": "Acme Foods", "recall_initiation_date": "20240105"},
        ]})

        collector = OpenFDACollector(endpoints=["food/enforcement"], limit=50, api_key="secret")
        records = collector.fetch(START, END)

        assert [r.id for r in records] == ["openfda:F-1"]
        assert records[0].source_endpoint == "food/enforcement"
        args, kwargs = mock_get.call_args
        assert args[0] == "https://api.fda.gov/food/enforcement.json"
        assert kwargs["params"] == {
            "search": "recall_initiation_date:[20240103 TO 20240110]",
            "limit": 50,
            "api_key": "secret",
        }

    @patch.dict("os.environ", {}, clear=True)
    @patch("collectors.openfda_collector.requests.get")
    def test_failed_endpoint_does_not_abort_others(self, mock_get):
        mock_get.side_effect = [
            requests.ConnectionError("down"),
            _response(status_code=404),
            _response(payload={"results": [{"recall_number": "D-7", "recall_initiation_date": "20240104"}]}),
        ]

        collector = OpenFDACollector()
        grouped = collector.fetch_grouped(START, END)

        assert grouped["food/enforcement"] == []
        assert grouped["drug/enforcement"] == []
        assert [r.recall_number for r in grouped["device/enforcement"]] == ["D-7"]
        assert "api_key" not in mock_get.call_args.kwargs["params"]

    @patch("collectors.openfda_collector.requests.get")
    def test_server_error_yields_empty(self, mock_get):
        mock_get.return_value = _response(status_code=500)
        assert OpenFDACollector(endpoints=["food/enforcement"]).fetch(START, END) == []

    @patch("collectors.openfda_collector.requests.get")
    def test_fetch_flattens_in_endpoint_order(self, mock_get):
        mock_get.side_effect = [
            _response(payload={"results": [{"recall_number": "D-1"}]}),
            _response(payload={"results": [{"recall_number": "F-1"}]}),
        ]
        collector = OpenFDACollector(endpoints=["drug/enforcement", "food/enforcement"])
        assert [r.recall_number for r in collector.fetch(START, END)] == ["D-1", "F-1"]


class TestRSSCollector:

    FEED = {"name": "USDA FSIS", "url": "https://example.org/rss.xml", "category": "Food Safety"}

    def _feed(self, entries, bozo=0):
        return feedparser.FeedParserDict(bozo=bozo, entries=entries)

    @patch("collectors.rss_collector.feedparser.parse")
    def test_parses_and_cleans_entries(self, mock_parse):
        mock_parse.return_value = self._feed([{
            "title": "Listeria alert",
            "summary": "<p>Ready-to-eat   <b>meat</b> products</p>",
            "link": "https://example.org/a",
            "published_parsed": utc(2024, 1, 8, 12).timetuple(),
        }])

        items = RSSCollector([self.FEED]).fetch(START, END)

        assert len(items) == 1
        item = items[0]
        assert item.title == "Listeria alert"
        assert item.description == "Ready-to-eat meat products"
        assert item.publication_date == utc(2024, 1, 8, 12)
        assert item.source_name == "USDA FSIS"
        assert item.category == "Food Safety"
        mock_parse.assert_called_once_with("https://example.org/rss.xml")

    @patch("collectors.rss_collector.feedparser.parse")
    def test_filters_by_window_and_keeps_undated(self, mock_parse):
        mock_parse.return_value = self._feed([
            {"title": "old", "link": "https://example.org/old", "published_parsed": utc(2023, 12, 1).timetuple()},
            {"title": "undated", "link": "https://example.org/undated"},
            {"title": "string date", "link": "https://example.org/s", "published": "Fri, 05 Jan 2024 10:00:00 GMT"},
        ], bozo=1)

        items = RSSCollector([self.FEED]).fetch(START, END)

        assert [i.title for i in items] == ["undated", "string date"]
        assert items[0].publication_date is None
        assert items[1].publication_date == utc(2024, 1, 5, 10)

    @patch("collectors.rss_collector.feedparser.parse")
    def test_multiple_feeds(self, mock_parse):
        mock_parse.side_effect = [
            self._feed([{"title": "a", "link": "https://example.org/a"}]),
            self._feed([{"title": "b", "link": "https://example.org/b"}]),
        ]
        feeds = [self.FEED, {"name": "CDC", "url": "https://example.org/cdc.xml"}]

        items = RSSCollector(feeds).fetch(START, END)

        assert [(i.title, i.source_name) for i in items] == [("a", "USDA FSIS"), ("b", "CDC")]

    @patch("collectors.rss_collector.feedparser.parse")
    def test_feed_without_url_is_skipped(self, mock_parse, caplog):
        mock_parse.return_value = self._feed([{"title": "b", "link": "https://example.org/b"}])
        feeds = [{"name": "Broken"}, self.FEED]

        items = RSSCollector(feeds).fetch(START, END)

        assert [i.title for i in items] == ["b"]
        mock_parse.assert_called_once_with("https://example.org/rss.xml")
        assert "Broken" in caplog.text
