"""Unit tests for aggregation and the pass/fail decision."""

import pytest

from applint.models.findings import Severity
from applint.models.reports import LintReport
from applint.orchestrator.aggregator import aggregate
from applint.orchestrator.decider import decide
from applint.reporting.markdown import outcome_title

from conftest import make_finding


def _stream(path, *severities):
    return [
        make_finding(id=f"rule-{i}", severity=severity, source_path=path)
        for i, severity in enumerate(severities)
    ]


class TestAggregate:
    """Test cases for aggregate()."""

    def test_counts_partition_findings(self):
        report = aggregate([
            _stream("a/umbrel-app.yml", Severity.ERROR, Severity.INFO),
            _stream("a/docker-compose.yml", Severity.WARNING, Severity.WARNING),
            [],
            _stream("a/", Severity.INFO),
        ])

        assert report.error_count == 1
        assert report.warning_count == 2
        assert report.info_count == 2
        assert report.error_count + report.warning_count + report.info_count == len(report)
        assert report.counts() == {"errors": 1, "warnings": 2, "infos": 2}

    def test_keeps_stream_order_and_duplicates(self):
        """Findings are neither reordered by severity nor deduplicated by id."""
        first = make_finding(id="same", severity=Severity.INFO, source_path="a/umbrel-app.yml")
        second = make_finding(id="same", severity=Severity.ERROR, source_path="b/umbrel-app.yml")
        third = make_finding(id="same", severity=Severity.INFO, source_path="a/umbrel-app.yml")

        report = aggregate([[first], [second, third]])

        assert list(report) == [first, second, third]
        assert [f.source_path for f in report] == ["a/umbrel-app.yml", "b/umbrel-app.yml", "a/umbrel-app.yml"]

    def test_empty(self):
        report = aggregate([])
        assert report.is_empty
        assert report.counts() == {"errors": 0, "warnings": 0, "infos": 0}

    def test_rejects_unattributed_findings(self):
        with pytest.raises(ValueError, match="not attributed"):
            aggregate([[make_finding()]])

    def test_report_validates_counts(self):
        with pytest.raises(ValueError, match="partition"):
            LintReport(findings=(make_finding(source_path="a"),), error_count=0)

    def test_annotated_only_includes_located_findings(self):
        located = make_finding(line=1, source_path="a/umbrel-app.yml")
        report = aggregate([[located, make_finding(source_path="a/umbrel-app.yml")]])
        assert report.annotated == [located]


class TestDecide:
    """Test cases for decide()."""

    @pytest.mark.parametrize("severities, failed", [
        ((), False),
        ((Severity.INFO, Severity.INFO), False),
        ((Severity.WARNING,), False),
        ((Severity.ERROR,), True),
        ((Severity.WARNING, Severity.ERROR, Severity.INFO), True),
    ])
    def test_failed_iff_errors(self, severities, failed):
        outcome = decide(aggregate([_stream("a/umbrel-app.yml", *severities)]))
        assert outcome.failed is failed
        assert outcome.conclusion == ("failure" if failed else "success")

    def test_info_only_is_success(self):
        outcome = decide(aggregate([_stream("a/", Severity.INFO)]))
        assert outcome.title == "🎉 Linting finished with no errors or warnings 🎉"
        assert outcome.info_count == 1


class TestOutcomeTitle:
    """Test cases for outcome titles."""

    @pytest.mark.parametrize("errors, warnings, title", [
        (0, 0, "🎉 Linting finished with no errors or warnings 🎉"),
        (1, 1, "❌ Linting failed with 1 error and 1 warning ❌"),
        (2, 3, "❌ Linting failed with 2 errors and 3 warnings ❌"),
        (1, 0, "❌ Linting failed with 1 error ❌"),
        (4, 0, "❌ Linting failed with 4 errors ❌"),
        (0, 1, "⚠️ Linting finished with 1 warning ⚠️"),
        (0, 2, "⚠️ Linting finished with 2 warnings ⚠️"),
    ])
    def test_titles(self, errors, warnings, title):
        assert outcome_title(errors, warnings) == title
