"""
Tests for the CLI entry point and end-to-end pipeline wiring.
"""
import json
from datetime import datetime
from unittest.mock import patch

import pytest

import main
from correlation import CorrelationPipeline
from models import MatchType
from timeline import is_sorted_desc
from tests.conftest import utc


@pytest.fixture
def sources(make_record, make_item):
    records = [
        make_record(
            company_name="Acme Foods",
            recall_number="F-1234",
            classification="Class I",
            product_description="Ready-to-eat chicken salad",
            reason_for_recall="Possible Listeria monocytogenes contamination",
            initiation_date=utc(2024, 1, 10),
        ),
        make_record(
            product_description="frozen vegetable medley",
            classification="Class III",
            initiation_date=utc(2024, 1, 2),
        ),
    ]
    items = [
        make_item(
            title="Acme Foods recall alert",
            description="Listeria found in chicken salad",
            publication_date=utc(2024, 1, 11),
        ),
        make_item(
            title="FDA Announces Voluntary Recall of Blood Pressure Medication",
            description="Pharmaceutical company voluntarily recalls lots.",
            publication_date=utc(2024, 1, 20),
        ),
    ]
    return records, items


class TestCorrelationPipeline:

    def test_run_end_to_end(self, sources):
        records, items = sources

        report = CorrelationPipeline().run(records, items)

        assert len(report.timeline) == 4
        assert is_sorted_desc(report.timeline)
        assert len(report.cross_references) == 1
        ref = report.cross_references[0]
        assert ref.confidence_score == 1.0
        assert ref.match_type == MatchType.COMPANY
        linked = [e for e in report.timeline if e.correlation_ids]
        assert {e.id for e in linked} == {"fda-F-1234", f"rss-{items[0].id}"}
        assert report.summary.confirmed == 1
        assert report.summary.total == 1
        assert report.summary.timeline_events == 4

    def test_from_config(self):
        pipeline = CorrelationPipeline.from_config({
            "timeline": {"title_length": 20},
            "correlation": {"threshold": 0.5},
            "severity": {"high_keywords": ["botulism"]},
        })
        assert pipeline.builder.title_length == 20
        assert pipeline.matcher.threshold == 0.5
        assert pipeline.builder.classifier.high_keywords == ["botulism"]

    def test_mixed_naive_and_aware_dates(self, make_record, make_item):
        record = make_record(initiation_date=datetime(2024, 1, 10), reason_for_recall="Listeria")
        item = make_item(description="listeria outbreak", publication_date=utc(2024, 1, 11))

        report = CorrelationPipeline().run([record], [item])

        assert is_sorted_desc(report.timeline)
        [ref] = report.cross_references
        assert ref.confidence_score == pytest.approx(0.9)
        assert any(d.startswith("Timeline correlation") for d in ref.match_details)


class TestMain:

    def test_load_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("window_days: 30\ncorrelation:\n  threshold: 0.4\n", encoding="utf-8")

        config = main.load_config(str(path))

        assert config == {"window_days": 30, "correlation": {"threshold": 0.4}}

    def test_bundled_config_loads(self):
        config = main.load_config()
        assert config["correlation"]["threshold"] == 0.3
        assert config["window_days"] in (7, 30, 90)

    @patch("main.RSSCollector")
    @patch("main.OpenFDACollector")
    def test_run_pipeline(self, mock_fda, mock_rss, sources):
        records, items = sources
        mock_fda.return_value.fetch.return_value = records
        mock_rss.return_value.fetch.return_value = items

        report = main.run_pipeline({"window_days": 30}, verbose=True, workers=2)

        start, end = mock_fda.return_value.fetch.call_args.args
        assert (end - start).days == 30
        assert report.summary.total == 1

    @patch("main.RSSCollector")
    @patch("main.OpenFDACollector")
    def test_disabled_sources_are_skipped(self, mock_fda, mock_rss):
        config = {"feeds": {"openfda": {"enabled": False}, "rss": {"enabled": False}}}

        report = main.run_pipeline(config, days=7)

        mock_fda.assert_not_called()
        mock_rss.assert_not_called()
        assert report.timeline == []
        assert report.summary.total == 0

    @patch("main.RSSCollector")
    @patch("main.OpenFDACollector")
    def test_main_json_output(self, mock_fda, mock_rss, sources, tmp_path, capsys):
        records, items = sources
        mock_fda.return_value.fetch.return_value = records
        mock_rss.return_value.fetch.return_value = items
        path = tmp_path / "config.yaml"
        path.write_text("window_days: 7\n", encoding="utf-8")

        main.main(["--config", str(path), "--days", "90", "--json"])

        output = json.loads(capsys.readouterr().out)
        assert output["summary"]["total"] == 1
        assert output["cross_references"][0]["match_type"] == "company"
        assert output["cross_references"][0]["recall_number"] == "F-1234"
        assert len(output["timeline"]) == 4
        assert output["timeline"][0]["timestamp"] == "2024-01-20T00:00:00+00:00"

    def test_unsupported_window_rejected(self):
        with pytest.raises(SystemExit):
            main.main(["--days", "14"])
